"""
Integration tests for mentor management and the workload override.
"""

import pytest

pytestmark = [pytest.mark.integration, pytest.mark.api]


class TestMentors:
    def test_admin_creates_mentor_with_zero_workload(self, api, admin_headers):
        mentor = api.create_mentor(admin_headers)

        assert mentor["workload"] == 0
        assert mentor["jobTitle"] == "Senior Engineer"

    def test_employee_cannot_create_mentor(self, client, employee_headers):
        response = client.post(
            "/api/mentors",
            json={"name": "M", "jobTitle": "Lead", "email": "m@corp.com"},
            headers=employee_headers,
        )
        assert response.status_code == 403

    def test_invalid_email(self, client, admin_headers):
        response = client.post(
            "/api/mentors",
            json={"name": "M", "jobTitle": "Lead", "email": "not-an-email"},
            headers=admin_headers,
        )
        assert response.status_code == 400

    def test_available_filter(self, api, client, admin_headers, employee_headers):
        free = api.create_mentor(admin_headers, name="Free", email="free@corp.com")
        busy = api.create_mentor(admin_headers, name="Busy", email="busy@corp.com")
        client.put(
            f"/api/mentors/{busy['id']}",
            json={"name": "Busy", "jobTitle": "Lead", "email": "busy@corp.com", "workload": 5},
            headers=admin_headers,
        )

        available = client.get(
            "/api/mentors?available=true", headers=employee_headers
        ).get_json()
        everyone = client.get("/api/mentors", headers=employee_headers).get_json()

        assert [m["id"] for m in available] == [free["id"]]
        assert len(everyone) == 2

    def test_workload_override_out_of_range(self, api, client, admin_headers):
        mentor = api.create_mentor(admin_headers)

        response = client.put(
            f"/api/mentors/{mentor['id']}",
            json={"name": "M", "jobTitle": "Lead", "email": "m@corp.com", "workload": 6},
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert response.get_json() == {"error": "workload must be between 0 and 5"}

    def test_delete_unused_mentor(self, api, client, admin_headers):
        mentor = api.create_mentor(admin_headers)

        response = client.delete(f"/api/mentors/{mentor['id']}", headers=admin_headers)

        assert response.status_code == 200
        assert client.get(f"/api/mentors/{mentor['id']}", headers=admin_headers).status_code == 404
