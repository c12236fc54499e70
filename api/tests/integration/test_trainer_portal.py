import pytest
from fastapi import status

from gym_api.models.orm import Notification
from gym_api.routers.admin import create_notification

from test_admin_api import member_payload


def notifications(client, admin_headers, **params):
    response = client.get("/api/admin/notifications", params=params, headers=admin_headers)
    assert response.status_code == status.HTTP_200_OK
    return response.json()


class TestTrainerMemberActions:
    """
    Trainer member operations and the admin notifications they produce
    """

    def test_add_member_notifies_admin(self, client, trainer_headers, admin_headers, accounts):
        created = client.post("/api/trainers/members", json=member_payload(name="Jane Doe"), headers=trainer_headers)

        assert created.status_code == status.HTTP_201_CREATED

        feed = notifications(client, admin_headers)
        assert feed["unread_count"] == 1
        note = feed["notifications"][0]
        assert note["type"] == "member_added"
        assert note["message"] == "Tom Trainer added a new member: Jane Doe"
        assert note["trainer_id"] == accounts["trainer"].id
        assert note["member_id"] == created.json()["id"]
        assert note["is_read"] is False

    def test_update_member_by_query_id(self, client, trainer_headers, admin_headers):
        member = client.post("/api/trainers/members", json=member_payload(), headers=trainer_headers).json()

        response = client.put(
            "/api/trainers/members",
            params={"id": member["id"]},
            json={"phone": "555-0199"},
            headers=trainer_headers
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["phone"] == "555-0199"
        assert notifications(client, admin_headers)["notifications"][0]["type"] == "member_updated"

    def test_delete_member_keeps_name_in_notification(self, client, trainer_headers, admin_headers):
        member = client.post("/api/trainers/members", json=member_payload(name="Gone Soon"), headers=trainer_headers).json()

        response = client.delete("/api/trainers/members", params={"id": member["id"]}, headers=trainer_headers)

        assert response.json() == {"success": True}
        note = notifications(client, admin_headers)["notifications"][0]
        assert note["type"] == "member_deleted"
        assert note["member_name"] == "Gone Soon"
        assert note["message"] == "Tom Trainer deleted member: Gone Soon"

    def test_update_without_id(self, client, trainer_headers):
        response = client.put("/api/trainers/members", json={"phone": "1"}, headers=trainer_headers)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"] == "Member id required"

    def test_delete_unknown_member(self, client, trainer_headers, admin_headers):
        response = client.delete("/api/trainers/members", params={"id": "missing"}, headers=trainer_headers)

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert notifications(client, admin_headers)["unread_count"] == 0

    def test_trainer_lists_all_members(self, client, trainer_headers, admin_headers):
        client.post("/api/members", json=member_payload(name="Admin Added"), headers=admin_headers)

        response = client.get("/api/trainers/members", headers=trainer_headers)

        assert [m["name"] for m in response.json()] == ["Admin Added"]

    def test_admin_token_rejected_by_portal(self, client, admin_headers):
        response = client.get("/api/trainers/members", headers=admin_headers)

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json()["error"] == "trainer role required"

    def test_portal_requires_credentials(self, client):
        response = client.get("/api/trainers/members")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


class TestNotificationFeed:
    """
    Admin notification listing and housekeeping
    """

    @pytest.fixture
    def seeded(self, db_session, accounts):
        trainer = accounts["trainer"]
        first = create_notification(db_session, "member_added", trainer.id, trainer.name, "m-1", "Ann")
        second = create_notification(db_session, "member_updated", trainer.id, trainer.name, "m-1", "Ann")
        return [first.id, second.id]

    def test_unread_only_filter(self, client, admin_headers, seeded, db_session):
        db_session.get(Notification, seeded[0]).is_read = True
        db_session.commit()

        everything = notifications(client, admin_headers)
        unread = notifications(client, admin_headers, unread_only="true")

        assert len(everything["notifications"]) == 2
        assert [n["id"] for n in unread["notifications"]] == [seeded[1]]
        assert unread["unread_count"] == 1

    def test_mark_one_read(self, client, admin_headers, seeded):
        response = client.patch("/api/admin/notifications", json={"id": seeded[0]}, headers=admin_headers)

        assert response.json() == {"success": True, "updated": 1}
        assert notifications(client, admin_headers)["unread_count"] == 1

    def test_mark_all_read(self, client, admin_headers, seeded):
        response = client.patch("/api/admin/notifications", json={"all": True}, headers=admin_headers)

        assert response.json() == {"success": True, "updated": 2}
        assert notifications(client, admin_headers)["unread_count"] == 0

    def test_mark_read_needs_target(self, client, admin_headers, seeded):
        response = client.patch("/api/admin/notifications", json={}, headers=admin_headers)

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_mark_unknown_notification(self, client, admin_headers, seeded):
        response = client.patch("/api/admin/notifications", json={"id": "missing"}, headers=admin_headers)

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["error"] == "Notification not found"

    def test_delete_notification(self, client, admin_headers, seeded):
        deleted = client.delete("/api/admin/notifications", params={"id": seeded[0]}, headers=admin_headers)
        again = client.delete("/api/admin/notifications", params={"id": seeded[0]}, headers=admin_headers)

        assert deleted.json() == {"success": True}
        assert again.status_code == status.HTTP_404_NOT_FOUND
        assert len(notifications(client, admin_headers)["notifications"]) == 1

    def test_newest_first(self, client, admin_headers, seeded):
        feed = notifications(client, admin_headers)

        assert [n["id"] for n in feed["notifications"]][0] == seeded[1]
