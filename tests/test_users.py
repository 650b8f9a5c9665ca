from healthconnect.core.security import UserRole

USERS = "/api/v1/users"

class TestProfile:

    def test_get_profile(self, client, patient, auth_headers):
        response = client.get(f"{USERS}/profile", headers=auth_headers(patient))
        assert response.status_code == 200
        user = response.json()["user"]
        assert user["id"] == patient.id
        assert user["role"] == "patient"

    def test_update_profile(self, client, patient, auth_headers):
        response = client.put(f"{USERS}/profile", json={"first_name": "Patricia"}, headers=auth_headers(patient))
        assert response.status_code == 200
        user = response.json()["user"]
        assert user["first_name"] == "Patricia"
        assert user["last_name"] == "Ient"

    def test_change_password(self, client, patient, auth_headers):
        response = client.put(
            f"{USERS}/change-password",
            json={"current_password": "TestPassword123", "new_password": "NewPassword123"},
            headers=auth_headers(patient),
        )
        assert response.status_code == 200

        login = client.post("/api/v1/auth/login", json={"email": patient.email, "password": "NewPassword123"})
        assert login.status_code == 200

    def test_change_password_wrong_current(self, client, patient, auth_headers):
        response = client.put(
            f"{USERS}/change-password",
            json={"current_password": "WrongPassword1", "new_password": "NewPassword123"},
            headers=auth_headers(patient),
        )
        assert response.status_code == 400

    def test_change_password_weak_new(self, client, patient, auth_headers):
        response = client.put(
            f"{USERS}/change-password",
            json={"current_password": "TestPassword123", "new_password": "short"},
            headers=auth_headers(patient),
        )
        assert response.status_code == 400

class TestDirectory:

    def test_list_doctors(self, client, patient, doctor, other_doctor, make_user, auth_headers):
        make_user(UserRole.DOCTOR, is_active=False)

        response = client.get(f"{USERS}/doctors", headers=auth_headers(patient))
        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 2
        assert {d["id"] for d in data["doctors"]} == {doctor.id, other_doctor.id}

    def test_list_all_requires_admin(self, client, doctor, auth_headers):
        response = client.get(f"{USERS}/all", headers=auth_headers(doctor))
        assert response.status_code == 403

    def test_admin_lists_users(self, client, admin, patient, doctor, auth_headers):
        response = client.get(f"{USERS}/all", params={"limit": 2}, headers=auth_headers(admin))
        assert response.status_code == 200
        assert response.json()["count"] == 2

    def test_admin_deactivates_user(self, client, admin, patient, auth_headers):
        response = client.patch(
            f"{USERS}/{patient.id}/status", params={"is_active": False}, headers=auth_headers(admin)
        )
        assert response.status_code == 200
        assert response.json()["message"] == "User deactivated successfully"

        # Existing tokens stop working for a deactivated account
        assert client.get(f"{USERS}/profile", headers=auth_headers(patient)).status_code == 401

    def test_status_of_unknown_user(self, client, admin, auth_headers):
        response = client.patch(f"{USERS}/9999/status", params={"is_active": True}, headers=auth_headers(admin))
        assert response.status_code == 404
