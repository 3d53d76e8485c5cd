"""Tests for finance entries and the finance summary."""
from datetime import date
from decimal import Decimal

import pytest
from taskboard_core import crud, models, schemas
from taskboard_core.errors import NotFoundError, ValidationError
from taskboard_core.models import FinanceEntryType


@pytest.fixture
def book(db, org):
    """Factory booking a finance entry in the org."""

    def factory(entry_type, amount, on=date(2025, 3, 1), project=None, task=None, description="Entry"):
        return crud.create_finance_entry(
            db,
            org.id,
            schemas.FinanceEntryCreate(
                type=entry_type,
                amount=amount,
                description=description,
                date=on,
                project_id=project.id if project else None,
                task_id=task.id if task else None,
            ),
        )

    return factory


class TestCreateEntry:
    """Test booking entries against projects and tasks."""

    def test_entry_linked_to_project_task(self, db, org, project, make_task, book):
        task = make_task(project, "Hosting")

        entry = book(FinanceEntryType.EXPENSE, 120.5, project=project, task=task)

        assert entry.amount == Decimal("120.50")
        assert entry.project_id == project.id
        assert entry.task_id == task.id
        assert entry.project.title == "Website"

    def test_project_of_other_org_rejected(self, db, other_org, project):
        with pytest.raises(NotFoundError):
            crud.create_finance_entry(
                db,
                other_org.id,
                schemas.FinanceEntryCreate(
                    type="income", amount=10, description="x", date=date(2025, 3, 1), project_id=project.id
                ),
            )

    def test_task_must_belong_to_project(self, db, org, project, other_project, make_task, book):
        foreign_task = make_task(other_project, "Elsewhere")

        with pytest.raises(NotFoundError):
            book(FinanceEntryType.EXPENSE, 10, project=project, task=foreign_task)
        assert db.query(models.FinanceEntry).count() == 0

    def test_task_without_project_rejected(self, project, make_task):
        task = make_task(project, "Hosting")

        with pytest.raises(ValueError):
            schemas.FinanceEntryCreate(
                type="expense", amount=5, description="x", date=date(2025, 3, 1), task_id=task.id
            )

    def test_amount_must_be_positive(self):
        with pytest.raises(ValueError):
            schemas.FinanceEntryCreate(type="income", amount=0, description="x", date=date(2025, 3, 1))

    def test_deleting_task_keeps_entry(self, db, org, project, make_task, book):
        task = make_task(project, "Hosting")
        entry = book(FinanceEntryType.EXPENSE, 30, project=project, task=task)

        crud.delete_task(db, org.id, project.id, task.id)

        db.expire_all()
        assert entry.task_id is None
        assert entry.project_id == project.id


class TestSummary:
    """Test income, expense and balance totals."""

    def test_organization_totals(self, db, org, project, book):
        book(FinanceEntryType.INCOME, 1000)
        book(FinanceEntryType.INCOME, 250.25, project=project)
        book(FinanceEntryType.EXPENSE, 400.75, project=project)

        summary = crud.get_finance_summary(db, org.id)

        assert summary["total_income"] == Decimal("1250.25")
        assert summary["total_expenses"] == Decimal("400.75")
        assert summary["balance"] == Decimal("849.50")

    def test_project_totals(self, db, org, project, other_project, book):
        book(FinanceEntryType.INCOME, 1000)
        book(FinanceEntryType.EXPENSE, 400, project=project)
        book(FinanceEntryType.EXPENSE, 75, project=other_project)

        summary = crud.get_finance_summary(db, org.id, project.id)

        assert summary["total_income"] == 0
        assert summary["total_expenses"] == Decimal("400")
        assert summary["balance"] == Decimal("-400")

    def test_empty_organization(self, db, org):
        summary = crud.get_finance_summary(db, org.id)
        assert (summary["total_income"], summary["total_expenses"], summary["balance"]) == (0, 0, 0)

    def test_project_of_other_org(self, db, other_org, project):
        with pytest.raises(NotFoundError):
            crud.get_finance_summary(db, other_org.id, project.id)


class TestListEntries:
    """Test entry listing, filtering and sorting."""

    def test_newest_first_by_default(self, db, org, book):
        book(FinanceEntryType.INCOME, 1, on=date(2025, 1, 5), description="Jan")
        book(FinanceEntryType.INCOME, 2, on=date(2025, 3, 5), description="Mar")
        book(FinanceEntryType.INCOME, 3, on=date(2025, 2, 5), description="Feb")

        entries, total = crud.get_finance_entries(db, org.id)

        assert total == 3
        assert [e.description for e in entries] == ["Mar", "Feb", "Jan"]

    def test_filter_by_project_and_sort_by_amount(self, db, org, project, other_project, book):
        book(FinanceEntryType.EXPENSE, 50, project=project, description="small")
        book(FinanceEntryType.EXPENSE, 500, project=project, description="large")
        book(FinanceEntryType.EXPENSE, 5, project=other_project, description="other")

        entries, total = crud.get_finance_entries(db, org.id, project_id=project.id, sort_by="amount", sort_order="asc")

        assert total == 2
        assert [e.description for e in entries] == ["small", "large"]

    def test_pagination(self, db, org, book):
        for day in range(1, 6):
            book(FinanceEntryType.INCOME, day, on=date(2025, 3, day))

        entries, total = crud.get_finance_entries(db, org.id, skip=2, limit=2)

        assert total == 5
        assert [e.date.day for e in entries] == [3, 2]

    def test_unknown_sort_field(self, db, org):
        with pytest.raises(ValidationError):
            crud.get_finance_entries(db, org.id, sort_by="description")
