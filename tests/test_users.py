import pytest

from parkshare.domain.users.service import UserService
from parkshare.shared.exceptions import (
    InvalidStateError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)

NEW_SPOT = {
    "name": "Corner Bay",
    "address": "9 High Street",
    "city": "Leeds",
    "pricePerHour": 2.5,
    "days": ["Monday"],
    "timeSlots": [{"start": "09:00", "end": "12:00"}],
}


class TestChooseRole:
    def test_new_user_can_become_space_owner_once(self, db, driver):
        service = UserService(db)

        user = service.choose_role(driver, "space_owner")

        assert user.role == "space_owner"
        assert user.role_selected is True
        with pytest.raises(InvalidStateError):
            service.choose_role(driver, "driver")

    def test_admin_cannot_be_self_assigned(self, db, driver):
        with pytest.raises(ValidationError):
            UserService(db).choose_role(driver, "admin")

    def test_admin_cannot_downgrade_through_self_service(self, db, admin):
        with pytest.raises(InvalidStateError):
            UserService(db).choose_role(admin, "driver")


class TestAdminRoleManagement:
    def test_admin_sets_role(self, db, admin, driver):
        user = UserService(db).set_role(admin, driver.id, "admin")
        assert user.role == "admin"

    def test_non_admin_cannot_set_roles(self, db, owner, driver):
        with pytest.raises(UnauthorizedError):
            UserService(db).set_role(owner, driver.id, "space_owner")

    def test_unknown_role_and_user(self, db, admin, driver):
        service = UserService(db)
        with pytest.raises(ValidationError):
            service.set_role(admin, driver.id, "superuser")
        with pytest.raises(NotFoundError):
            service.set_role(admin, 999, "driver")

    def test_admin_cannot_demote_themselves(self, db, admin):
        with pytest.raises(InvalidStateError):
            UserService(db).set_role(admin, admin.id, "driver")

    def test_list_users_filters_by_role(self, db, admin, driver, owner):
        service = UserService(db)
        assert [u.id for u in service.list_users(admin, "space_owner")] == [owner.id]
        with pytest.raises(UnauthorizedError):
            service.list_users(driver)

    def test_operator_sets_role_by_email(self, db, driver):
        user = UserService(db).set_role_by_email(" Driver@Example.com ", "admin")
        assert user.id == driver.id
        assert user.role == "admin"

    def test_operator_needs_existing_user(self, db):
        with pytest.raises(NotFoundError):
            UserService(db).set_role_by_email("nobody@example.com", "admin")


def test_driver_becomes_owner_and_reaches_request_workflow(client, driver, admin):
    api = client.login(driver)
    assert api.post("/spot-requests/new-spot", json=NEW_SPOT).status_code == 403

    chosen = api.put("/users/me/role", json={"role": "Space_Owner"})
    assert chosen.status_code == 200
    assert chosen.json()["role"] == "space_owner"
    assert chosen.json()["roleSelected"] is True

    submitted = api.post("/spot-requests/new-spot", json=NEW_SPOT)
    assert submitted.status_code == 201

    approved = client.login(admin).post(f"/spot-requests/{submitted.json()['id']}/approve")
    assert approved.status_code == 200


def test_second_self_service_choice_is_409(client, driver):
    api = client.login(driver)
    assert api.put("/users/me/role", json={"role": "driver"}).status_code == 200
    assert api.put("/users/me/role", json={"role": "space_owner"}).status_code == 409


def test_admin_role_endpoint(client, admin, driver):
    assert client.login(driver).put(f"/users/{driver.id}/role", json={"role": "admin"}).status_code == 403

    response = client.login(admin).put(f"/users/{driver.id}/role", json={"role": "space_owner"})

    assert response.status_code == 200
    assert response.json()["role"] == "space_owner"
    assert client.login(driver).get("/users/me").json()["role"] == "space_owner"
