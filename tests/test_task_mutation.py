"""Tests for the task update flow."""
import logging
from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest
from sqlalchemy.exc import OperationalError

from taskboard_core import models
from taskboard_core.errors import NotFoundError, PermissionDeniedError, ValidationError
from taskboard_core.models import MemberRole, NotificationType, TaskStatus
from taskboard_core.task_mutation import (
    TaskChange,
    diff_assignees,
    parse_calendar_date,
    update_task,
)


def notifications_for(db, user):
    return db.query(models.Notification).filter(models.Notification.user_id == user.id).all()


class TestDiffAssignees:
    """Test assignee set comparison."""

    def test_added_and_removed(self):
        a, b, c = uuid4(), uuid4(), uuid4()
        added, removed = diff_assignees({a, b}, {b, c})
        assert added == (c,)
        assert removed == (a,)

    def test_unchanged_set(self):
        a = uuid4()
        assert diff_assignees([a], [a]) == ((), ())


class TestParseCalendarDate:
    """Test calendar date parsing."""

    def test_iso_string(self):
        assert parse_calendar_date("2025-02-28", "end_date") == date(2025, 2, 28)

    def test_date_passthrough(self):
        assert parse_calendar_date(date(2025, 1, 1), "start_date") == date(2025, 1, 1)

    @pytest.mark.parametrize("value", ["2025-02-30", "tomorrow", 20250101, None])
    def test_invalid_values(self, value):
        with pytest.raises(ValidationError) as exc_info:
            parse_calendar_date(value, "end_date")
        assert exc_info.value.field == "end_date"


class TestTaskChange:
    def test_has_changes(self):
        assert not TaskChange(False, TaskStatus.PLANNED, TaskStatus.PLANNED).has_changes
        assert TaskChange(True, TaskStatus.PLANNED, TaskStatus.STUCK).has_changes
        assert TaskChange(False, TaskStatus.PLANNED, TaskStatus.PLANNED, assignees_removed=(uuid4(),)).has_changes


class TestAssigneePermissions:
    """Test what a plain assignee may change."""

    def test_assignee_cannot_change_title(self, db, org, project, alice, make_task):
        task = make_task(project, "Design", assignees=[alice])

        with pytest.raises(PermissionDeniedError) as exc_info:
            update_task(db, org.id, project.id, task.id, alice.id, MemberRole.EMPLOYEE, {"title": "Renamed"})

        assert exc_info.value.fields == ["title"]
        db.refresh(task)
        assert task.title == "Design"

    def test_assignee_can_change_status(self, db, org, project, alice, make_task):
        task = make_task(project, "Design", assignees=[alice])

        result = update_task(
            db, org.id, project.id, task.id, alice.id, MemberRole.EMPLOYEE,
            {"status": TaskStatus.IN_PROGRESS},
        )

        assert result.task.status == TaskStatus.IN_PROGRESS
        assert result.change.status_changed
        assert result.change.old_status == TaskStatus.PLANNED
        assert result.change.new_status == TaskStatus.IN_PROGRESS

    def test_non_assignee_employee_denied(self, db, org, project, alice, bob, make_task):
        task = make_task(project, "Design", assignees=[alice])

        with pytest.raises(PermissionDeniedError):
            update_task(db, org.id, project.id, task.id, bob.id, MemberRole.EMPLOYEE, {"status": "completed"})

    def test_team_leader_of_another_project_denied(self, db, org, project, other_lead, make_task):
        task = make_task(project, "Design")

        with pytest.raises(PermissionDeniedError):
            update_task(db, org.id, project.id, task.id, other_lead.id, MemberRole.TEAM_LEADER, {"title": "Mine"})


class TestManagerUpdates:
    """Test updates by admins and the project's team leads."""

    def test_lead_reassigns_everyone(self, db, org, project, lead, alice, bob, carol, make_task):
        task = make_task(project, "Build", assignees=[alice, bob])

        result = update_task(
            db, org.id, project.id, task.id, lead.id, MemberRole.TEAM_LEADER,
            {"assignee_ids": [carol.id], "title": "Build v2", "color": "#ff0000"},
        )

        assert result.task.assignee_ids == {carol.id}
        assert result.task.title == "Build v2"
        assert result.task.color == "#ff0000"
        assert set(result.change.assignees_removed) == {alice.id, bob.id}
        assert result.change.assignees_added == (carol.id,)

    def test_admin_updates_scalars(self, db, org, project, admin, make_task):
        task = make_task(project, "Budget")

        result = update_task(
            db, org.id, project.id, task.id, admin.id, MemberRole.ADMIN,
            {"expense": 1250.5, "end_date": "2025-03-31", "description": "Q1", "display_order": 7},
        )

        assert result.task.expense == Decimal("1250.50")
        assert result.task.end_date == date(2025, 3, 31)
        assert result.task.description == "Q1"
        assert result.task.display_order == 7
        assert not result.change.has_changes

    def test_description_may_be_cleared(self, db, org, project, admin, make_task):
        task = make_task(project, "Budget")
        update_task(db, org.id, project.id, task.id, admin.id, MemberRole.ADMIN, {"description": "x"})

        result = update_task(db, org.id, project.id, task.id, admin.id, MemberRole.ADMIN, {"description": None})
        assert result.task.description is None

    def test_empty_assignee_list_unassigns_all(self, db, org, project, admin, alice, make_task):
        task = make_task(project, "Cleanup", assignees=[alice])

        result = update_task(db, org.id, project.id, task.id, admin.id, MemberRole.ADMIN, {"assignee_ids": []})

        assert result.task.assignee_ids == set()
        assert result.change.assignees_removed == (alice.id,)

    def test_overlapping_reassignment_keeps_shared_assignee(self, db, org, project, admin, alice, bob, make_task):
        task = make_task(project, "Cleanup", assignees=[alice])

        result = update_task(
            db, org.id, project.id, task.id, admin.id, MemberRole.ADMIN, {"assignee_ids": [alice.id, bob.id]}
        )

        db.expire_all()
        assert task.assignee_ids == {alice.id, bob.id}
        assert result.change.assignees_added == (bob.id,)
        assert result.change.assignees_removed == ()


class TestStoreFailure:
    """Test that a failed commit leaves the task as it was."""

    def test_failed_commit_rolls_back_once(self, db, org, project, admin, alice, bob, make_task, monkeypatch, caplog):
        task = make_task(project, "Ship", assignees=[alice])

        def failing_commit():
            raise OperationalError("COMMIT", {}, Exception("disk I/O error"))

        with monkeypatch.context() as patched:
            patched.setattr(db, "commit", failing_commit)
            with caplog.at_level(logging.ERROR, logger="taskboard-core"):
                with pytest.raises(OperationalError):
                    update_task(
                        db, org.id, project.id, task.id, admin.id, MemberRole.ADMIN,
                        {"assignee_ids": [bob.id], "title": "Shipped"},
                    )

        errors = [r for r in caplog.records if r.levelno >= logging.ERROR]
        assert len(errors) == 1
        db.expire_all()
        assert task.assignee_ids == {alice.id}
        assert task.title == "Ship"


class TestValidation:
    """Test that invalid updates are rejected before any write."""

    def test_invalid_assignee_leaves_task_unchanged(self, db, org, project, admin, alice, outsider, make_task):
        task = make_task(project, "Ship", assignees=[alice])

        with pytest.raises(ValidationError) as exc_info:
            update_task(
                db, org.id, project.id, task.id, admin.id, MemberRole.ADMIN,
                {"assignee_ids": [alice.id, outsider.id], "title": "Ship it"},
            )

        assert exc_info.value.invalid_ids == [str(outsider.id)]
        assert exc_info.value.field == "assignee_ids"
        db.expire_all()
        assert task.assignee_ids == {alice.id}
        assert task.title == "Ship"

    def test_empty_change_set(self, db, org, project, admin, make_task):
        task = make_task(project, "Ship")

        with pytest.raises(ValidationError):
            update_task(db, org.id, project.id, task.id, admin.id, MemberRole.ADMIN, {})

    def test_end_before_start(self, db, org, project, admin, make_task):
        task = make_task(project, "Ship")

        with pytest.raises(ValidationError) as exc_info:
            update_task(db, org.id, project.id, task.id, admin.id, MemberRole.ADMIN, {"end_date": date(2025, 2, 1)})

        assert exc_info.value.field == "end_date"
        db.expire_all()
        assert task.end_date == date(2025, 3, 10)

    @pytest.mark.parametrize("field", ["title", "status", "start_date", "end_date", "color"])
    def test_required_fields_cannot_be_cleared(self, db, org, project, admin, make_task, field):
        task = make_task(project, "Ship")

        with pytest.raises(ValidationError) as exc_info:
            update_task(db, org.id, project.id, task.id, admin.id, MemberRole.ADMIN, {field: None})
        assert exc_info.value.field == field

    def test_invalid_status(self, db, org, project, admin, make_task):
        task = make_task(project, "Ship")

        with pytest.raises(ValidationError):
            update_task(db, org.id, project.id, task.id, admin.id, MemberRole.ADMIN, {"status": "done"})

    def test_negative_expense(self, db, org, project, admin, make_task):
        task = make_task(project, "Ship")

        with pytest.raises(ValidationError):
            update_task(db, org.id, project.id, task.id, admin.id, MemberRole.ADMIN, {"expense": -1})


class TestScoping:
    """Test that tasks are only reachable through their own project and organization."""

    def test_task_from_other_project(self, db, org, project, other_project, admin, make_task):
        task = make_task(other_project, "Elsewhere")

        with pytest.raises(NotFoundError):
            update_task(db, org.id, project.id, task.id, admin.id, MemberRole.ADMIN, {"title": "x"})

    def test_project_from_other_org(self, db, other_org, project, outsider, make_task):
        task = make_task(project, "Private")

        with pytest.raises(NotFoundError):
            update_task(db, other_org.id, project.id, task.id, outsider.id, MemberRole.ADMIN, {"title": "x"})

    def test_missing_task(self, db, org, project, admin):
        with pytest.raises(NotFoundError):
            update_task(db, org.id, project.id, uuid4(), admin.id, MemberRole.ADMIN, {"title": "x"})


class TestUpdateNotifications:
    """Test the notification fan-out triggered by updates."""

    def test_reassignment_notifies_added_and_removed_only(
        self, db, org, project, lead, alice, bob, carol, make_task, notifier
    ):
        task = make_task(project, "Launch", assignees=[alice, bob])

        update_task(
            db, org.id, project.id, task.id, lead.id, MemberRole.TEAM_LEADER,
            {"assignee_ids": [bob.id, carol.id]}, notifier=notifier,
        )

        [removed] = notifications_for(db, alice)
        [added] = notifications_for(db, carol)
        assert notifications_for(db, bob) == []
        assert removed.type == NotificationType.ASSIGNMENT
        assert "unassigned" in removed.text
        assert added.type == NotificationType.ASSIGNMENT
        assert added.text == 'You have been assigned to task "Launch" in project "Website".'
        assert added.link == f"/projects/{project.id}/tasks/{task.id}"

    def test_status_change_excludes_actor(self, db, org, project, lead, alice, bob, make_task, notifier):
        task = make_task(project, "Launch", assignees=[alice, bob])

        result = update_task(
            db, org.id, project.id, task.id, alice.id, MemberRole.EMPLOYEE,
            {"status": "stuck"}, notifier=notifier,
        )

        assert notifications_for(db, alice) == []
        assert {n.user_id for n in result.notifications} == {bob.id, lead.id}
        [for_bob] = notifications_for(db, bob)
        assert for_bob.type == NotificationType.STATUS_CHANGE
        assert for_bob.text == 'Task "Launch" status changed from "planned" to "stuck" in project "Website".'

    def test_same_status_sends_nothing(self, db, org, project, alice, make_task, notifier, channel):
        task = make_task(project, "Launch", assignees=[alice])

        result = update_task(
            db, org.id, project.id, task.id, alice.id, MemberRole.EMPLOYEE,
            {"status": "planned"}, notifier=notifier,
        )

        assert not result.change.has_changes
        assert result.notifications == []
        assert db.query(models.Notification).count() == 0
        assert channel.pushed == []
