"""Shared fixtures: an in-memory database and a small seeded organization."""
from datetime import date

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from taskboard_core import crud, models, schemas
from taskboard_core.database import configure_sqlite
from taskboard_core.notifications import NotificationService


class RecordingChannel:
    """Real-time channel that records pushes, or fails on demand."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.pushed: list[tuple] = []

    def push(self, user_id, payload):
        if self.fail:
            raise ConnectionError("socket closed")
        self.pushed.append((user_id, payload))


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    configure_sqlite(engine)
    models.Base.metadata.create_all(engine)
    yield engine
    models.Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    yield session
    session.close()


@pytest.fixture
def channel():
    return RecordingChannel()


@pytest.fixture
def notifier(channel):
    return NotificationService(realtime=channel)


def add_member(db, org, email, role=models.MemberRole.EMPLOYEE, full_name=None):
    user = crud.create_user(db, email=email, full_name=full_name)
    crud.add_organization_member(db, org.id, user.id, role)
    return user


def add_task(db, org, project, title, assignees=(), status=models.TaskStatus.PLANNED):
    task = crud.create_task(
        db,
        org.id,
        project.id,
        schemas.TaskCreate(
            title=title,
            assignee_ids=[u.id for u in assignees],
            start_date=date(2025, 3, 1),
            end_date=date(2025, 3, 10),
            color="#3366ff",
        ),
    )
    if status != models.TaskStatus.PLANNED:
        task.status = status
        db.commit()
        db.refresh(task)
    return task


@pytest.fixture
def org(db):
    return crud.create_organization(db, name="Acme")


@pytest.fixture
def other_org(db):
    return crud.create_organization(db, name="Globex")


@pytest.fixture
def admin(db, org):
    return add_member(db, org, "admin@acme.test", models.MemberRole.ADMIN, "Ada Admin")


@pytest.fixture
def lead(db, org):
    return add_member(db, org, "lead@acme.test", models.MemberRole.TEAM_LEADER, "Lee Lead")


@pytest.fixture
def other_lead(db, org):
    return add_member(db, org, "other-lead@acme.test", models.MemberRole.TEAM_LEADER, "Oli Other")


@pytest.fixture
def alice(db, org):
    return add_member(db, org, "alice@acme.test", full_name="Alice")


@pytest.fixture
def bob(db, org):
    return add_member(db, org, "bob@acme.test", full_name="Bob")


@pytest.fixture
def carol(db, org):
    return add_member(db, org, "carol@acme.test", full_name="Carol")


@pytest.fixture
def outsider(db, other_org):
    return add_member(db, other_org, "outsider@globex.test", models.MemberRole.ADMIN)


@pytest.fixture
def project(db, org, admin, lead):
    return crud.create_project(
        db,
        org.id,
        schemas.ProjectCreate(title="Website", team_lead_ids=[lead.id]),
        user_id=admin.id,
    )


@pytest.fixture
def other_project(db, org, admin, other_lead):
    return crud.create_project(
        db,
        org.id,
        schemas.ProjectCreate(title="Mobile", team_lead_ids=[other_lead.id]),
        user_id=admin.id,
    )


@pytest.fixture
def make_task(db, org):
    """Factory creating a task in one of the org's projects."""

    def factory(project, title, assignees=(), status=models.TaskStatus.PLANNED):
        return add_task(db, org, project, title, assignees=assignees, status=status)

    return factory


@pytest.fixture
def make_member(db, org):
    """Factory creating a user who is a member of the org."""

    def factory(email, role=models.MemberRole.EMPLOYEE, full_name=None):
        return add_member(db, org, email, role=role, full_name=full_name)

    return factory


@pytest.fixture
def failing_notifier():
    """Notification service whose real-time channel always fails."""
    return NotificationService(realtime=RecordingChannel(fail=True))


@pytest.fixture
def make_team(db, org):
    """Factory creating a team in the org."""

    def factory(name, leads=(), members=()):
        return crud.create_team(
            db,
            org.id,
            schemas.TeamCreate(name=name, lead_ids=[u.id for u in leads], member_ids=[u.id for u in members]),
        )

    return factory
