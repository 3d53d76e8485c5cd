"""Tests for teams and team-based project visibility."""
import pytest
from taskboard_core import crud, models, schemas
from taskboard_core.errors import NotFoundError, ValidationError
from taskboard_core.models import MemberRole


def visible_titles(db, org, user, role):
    projects, _ = crud.get_projects(db, org.id, user.id, role)
    return sorted(p.title for p in projects)


class TestTeamCrud:
    """Test team creation, update and deletion."""

    def test_create_with_leads_and_members(self, db, org, lead, alice, bob, make_team):
        team = make_team("Frontend", leads=[lead], members=[alice, bob])

        assert team.name == "Frontend"
        assert team.lead_ids == {lead.id}
        assert team.member_ids == {alice.id, bob.id}

    def test_create_rejects_outsider(self, db, org, alice, outsider):
        with pytest.raises(ValidationError) as exc_info:
            crud.create_team(
                db, org.id, schemas.TeamCreate(name="Mixed", member_ids=[alice.id, outsider.id])
            )

        assert exc_info.value.field == "member_ids"
        assert exc_info.value.invalid_ids == [str(outsider.id)]
        assert db.query(models.Team).count() == 0

    def test_update_replaces_given_sets_only(self, db, org, lead, other_lead, alice, bob, make_team):
        team = make_team("Frontend", leads=[lead], members=[alice])

        updated = crud.update_team(db, org.id, team.id, schemas.TeamUpdate(member_ids=[bob.id]))

        assert updated.name == "Frontend"
        assert updated.lead_ids == {lead.id}
        assert updated.member_ids == {bob.id}

        renamed = crud.update_team(db, org.id, team.id, schemas.TeamUpdate(name="Web", lead_ids=[other_lead.id]))
        assert renamed.name == "Web"
        assert renamed.lead_ids == {other_lead.id}
        assert renamed.member_ids == {bob.id}

    def test_update_team_of_other_org(self, db, other_org, make_team):
        team = make_team("Frontend")

        with pytest.raises(NotFoundError):
            crud.update_team(db, other_org.id, team.id, schemas.TeamUpdate(name="Stolen"))

    def test_delete_keeps_projects(self, db, org, admin, alice, make_team):
        team = make_team("Frontend", members=[alice])
        project = crud.create_project(db, org.id, schemas.ProjectCreate(title="Site", team_ids=[team.id]), admin.id)

        crud.delete_team(db, org.id, team.id)

        db.expire_all()
        assert db.query(models.Team).count() == 0
        assert project.team_ids == set()
        assert crud.get_project_in_org(db, org.id, project.id).title == "Site"


class TestTeamListing:
    """Test which teams each role sees."""

    def test_admin_sees_all(self, db, org, admin, alice, make_team):
        make_team("Frontend", members=[alice])
        make_team("Backend")

        teams, total = crud.get_teams(db, org.id, admin.id, MemberRole.ADMIN)
        assert total == 2
        assert [t.name for t in teams] == ["Backend", "Frontend"]

    def test_employee_sees_own_teams(self, db, org, lead, alice, make_team):
        make_team("Frontend", members=[alice])
        make_team("Backend", leads=[lead])

        alice_teams, _ = crud.get_teams(db, org.id, alice.id, MemberRole.EMPLOYEE)
        lead_teams, _ = crud.get_teams(db, org.id, lead.id, MemberRole.TEAM_LEADER)

        assert [t.name for t in alice_teams] == ["Frontend"]
        assert [t.name for t in lead_teams] == ["Backend"]


class TestTeamProjectVisibility:
    """Test project visibility through team membership."""

    def test_team_member_sees_team_projects(self, db, org, admin, alice, bob, project, other_project, make_team):
        team = make_team("Mobile crew", members=[alice])
        crud.update_project(db, org.id, other_project.id, schemas.ProjectUpdate(team_ids=[team.id]))

        assert visible_titles(db, org, alice, MemberRole.EMPLOYEE) == ["Mobile"]
        assert visible_titles(db, org, bob, MemberRole.EMPLOYEE) == []

    def test_team_lead_sees_team_projects(self, db, org, other_lead, project, other_project, make_team):
        team = make_team("Web crew", leads=[other_lead])
        crud.update_project(db, org.id, project.id, schemas.ProjectUpdate(team_ids=[team.id]))

        # other_lead also leads "Mobile" directly
        assert visible_titles(db, org, other_lead, MemberRole.TEAM_LEADER) == ["Mobile", "Website"]

    def test_assignment_alone_does_not_grant_visibility(self, db, org, alice, project, make_task):
        make_task(project, "Assigned", assignees=[alice])

        assert visible_titles(db, org, alice, MemberRole.EMPLOYEE) == []

    def test_foreign_team_rejected_on_project(self, db, org, other_org, admin, project):
        foreign = crud.create_team(db, other_org.id, schemas.TeamCreate(name="Globex crew"))

        with pytest.raises(ValidationError) as exc_info:
            crud.update_project(db, org.id, project.id, schemas.ProjectUpdate(team_ids=[foreign.id]))

        assert exc_info.value.field == "team_ids"
        db.expire_all()
        assert project.team_ids == set()

    def test_update_replaces_team_set(self, db, org, admin, project, make_team):
        first, second = make_team("One"), make_team("Two")
        crud.update_project(db, org.id, project.id, schemas.ProjectUpdate(team_ids=[first.id]))

        updated = crud.update_project(db, org.id, project.id, schemas.ProjectUpdate(team_ids=[second.id]))

        assert updated.team_ids == {second.id}
