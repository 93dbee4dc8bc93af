import pytest
from app.models.household_membership import HouseholdMembership
from app.models.role import HouseholdRole
from tests.conftest import headers_for


class TestCreateHousehold:
    """Tests for POST /api/households"""

    def test_create_household_makes_creator_admin(self, client, db_session, auth_headers):
        """Creator becomes the first ADMIN"""
        response = client.post(
            "/api/households",
            headers=auth_headers,
            json={"name": "Smith Family", "description": "Shared calendar"},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["name"] == "Smith Family"
        assert data["description"] == "Shared calendar"
        assert data["invite_code"]

        membership = db_session.query(HouseholdMembership).filter_by(household_id=data["id"]).one()
        assert membership.role == HouseholdRole.ADMIN
        assert membership.user_id == data["created_by"]

    def test_invite_codes_are_unique(self, client, auth_headers):
        codes = {
            client.post("/api/households", headers=auth_headers, json={"name": f"H{i}"}).json()["invite_code"]
            for i in range(5)
        }
        assert len(codes) == 5

    def test_create_household_requires_name(self, client, auth_headers):
        response = client.post("/api/households", headers=auth_headers, json={"name": ""})
        assert response.status_code == 422


class TestListUserHouseholds:
    """Tests for GET /api/households"""

    def test_lists_households_with_role(self, client, household, viewer_headers):
        response = client.get("/api/households", headers=viewer_headers)

        assert response.status_code == 200
        households = response.json()
        assert len(households) == 1
        assert households[0]["id"] == household.id
        assert households[0]["role"] == HouseholdRole.VIEWER
        assert households[0]["member_count"] == 3

    def test_outsider_sees_no_households(self, client, household, outsider_headers):
        response = client.get("/api/households", headers=outsider_headers)
        assert response.status_code == 200
        assert response.json() == []


class TestGetHousehold:
    """Tests for GET /api/households/{id}"""

    def test_member_can_view_household(self, client, household, member_headers):
        response = client.get(f"/api/households/{household.id}", headers=member_headers)
        assert response.status_code == 200
        assert response.json()["name"] == "Test Household"

    def test_non_member_forbidden(self, client, household, outsider_headers):
        response = client.get(f"/api/households/{household.id}", headers=outsider_headers)
        assert response.status_code == 403

    def test_missing_household_not_found(self, client, auth_headers):
        response = client.get("/api/households/9999", headers=auth_headers)
        assert response.status_code == 404


class TestJoinHousehold:
    """Tests for POST /api/households/join"""

    def test_join_with_invite_code(self, client, household, outsider_headers):
        response = client.post(
            "/api/households/join",
            headers=outsider_headers,
            json={"invite_code": "test-invite-code"},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["auth_user_id"] == "outsider-user"
        assert data["role"] == HouseholdRole.MEMBER

        # Membership now grants access
        response = client.get(f"/api/households/{household.id}", headers=outsider_headers)
        assert response.status_code == 200

    def test_join_with_unknown_code(self, client, household, outsider_headers):
        response = client.post(
            "/api/households/join",
            headers=outsider_headers,
            json={"invite_code": "nope"},
        )
        assert response.status_code == 404

    def test_join_twice_rejected(self, client, household, member_headers):
        response = client.post(
            "/api/households/join",
            headers=member_headers,
            json={"invite_code": "test-invite-code"},
        )
        assert response.status_code == 400
        assert "already" in response.json()["detail"].lower()


class TestMembers:
    """Tests for member listing and role changes"""

    def test_list_members(self, client, household, viewer_headers):
        response = client.get(f"/api/households/{household.id}/members", headers=viewer_headers)

        assert response.status_code == 200
        roles = {member["auth_user_id"]: member["role"] for member in response.json()}
        assert roles == {
            "admin-user": HouseholdRole.ADMIN,
            "member-user": HouseholdRole.MEMBER,
            "viewer-user": HouseholdRole.VIEWER,
        }

    def test_admin_changes_role(self, client, household, admin_headers, viewer_user):
        response = client.patch(
            f"/api/households/{household.id}/members/{viewer_user.id}",
            headers=admin_headers,
            json={"role": "member"},
        )

        assert response.status_code == 200
        assert response.json()["role"] == HouseholdRole.MEMBER

    @pytest.mark.parametrize("headers_fixture", ["member_headers", "viewer_headers"])
    def test_non_admin_cannot_change_roles(
        self, request, client, household, viewer_user, headers_fixture
    ):
        headers = request.getfixturevalue(headers_fixture)
        response = client.patch(
            f"/api/households/{household.id}/members/{viewer_user.id}",
            headers=headers,
            json={"role": "admin"},
        )
        assert response.status_code == 403

    def test_admin_cannot_change_own_role(self, client, household, admin_headers, admin_user):
        response = client.patch(
            f"/api/households/{household.id}/members/{admin_user.id}",
            headers=admin_headers,
            json={"role": "viewer"},
        )
        assert response.status_code == 403

    def test_change_role_of_non_member(self, client, household, admin_headers, outsider_user):
        response = client.patch(
            f"/api/households/{household.id}/members/{outsider_user.id}",
            headers=admin_headers,
            json={"role": "viewer"},
        )
        assert response.status_code == 404

    def test_invalid_role_rejected(self, client, household, admin_headers, viewer_user):
        response = client.patch(
            f"/api/households/{household.id}/members/{viewer_user.id}",
            headers=admin_headers,
            json={"role": "owner"},
        )
        assert response.status_code == 422

    def test_role_change_takes_effect_on_events(
        self, client, household, admin_headers, viewer_user
    ):
        """Promoted viewer gains the member's tag-derived access"""
        event = client.post(
            f"/api/households/{household.id}/events",
            headers=admin_headers,
            json={
                "title": "Dinner",
                "start_time": "2026-03-01T18:00:00",
                "end_time": "2026-03-01T20:00:00",
                "tags": [{"name": "friends"}],
            },
        ).json()
        url = f"/api/households/{household.id}/events/{event['id']}/permission"
        viewer_headers = headers_for(viewer_user.auth_user_id)

        assert client.get(url, headers=viewer_headers).json()["level"] == "view"

        client.patch(
            f"/api/households/{household.id}/members/{viewer_user.id}",
            headers=admin_headers,
            json={"role": "member"},
        )
        assert client.get(url, headers=viewer_headers).json()["level"] == "edit"
