"""HTTP tests for /contracts and the profile_id identity header."""

import pytest


class TestIdentityHeader:

    def test_missing_header(self, client):
        response = client.get("/contracts")
        assert response.status_code == 401
        assert response.json()["error"] == "AUTHENTICATION_REQUIRED"

    def test_malformed_header(self, client):
        response = client.get("/contracts", headers={"profile_id": "abc"})
        assert response.status_code == 401

    def test_unknown_profile(self, client, as_profile):
        response = client.get("/contracts", headers=as_profile(999))
        assert response.status_code == 401
        assert "999" in response.json()["message"]

    def test_request_id_echoed(self, client, as_profile):
        headers = {**as_profile(1), "X-Request-ID": "req-42"}
        response = client.get("/contracts", headers=headers)
        assert response.headers["X-Request-ID"] == "req-42"


class TestGetContract:

    def test_party_reads_contract(self, client, as_profile):
        response = client.get("/contracts/1", headers=as_profile(1))

        assert response.status_code == 200
        assert response.json() == {
            "id": 1,
            "terms": "bla bla bla",
            "status": "terminated",
            "ClientId": 1,
            "ContractorId": 5,
        }

    def test_contractor_reads_contract(self, client, as_profile):
        assert client.get("/contracts/1", headers=as_profile(5)).status_code == 200

    def test_non_party_forbidden(self, client, as_profile):
        response = client.get("/contracts/1", headers=as_profile(3))
        assert response.status_code == 403
        assert response.json()["error"] == "NOT_CONTRACT_PARTY"

    def test_missing_contract(self, client, as_profile):
        response = client.get("/contracts/999", headers=as_profile(1))
        assert response.status_code == 404
        assert response.json()["error"] == "CONTRACT_NOT_FOUND"

    def test_non_numeric_id(self, client, as_profile):
        response = client.get("/contracts/abc", headers=as_profile(1))
        assert response.status_code == 400
        assert response.json()["error"] == "VALIDATION_ERROR"

    def test_zero_id_is_not_found(self, client, as_profile):
        response = client.get("/contracts/0", headers=as_profile(1))
        assert response.status_code == 404
        assert response.json()["error"] == "CONTRACT_NOT_FOUND"


class TestListContracts:

    @pytest.mark.parametrize(
        "profile_id, expected",
        [(1, [2]), (3, [5, 6]), (6, [2, 3, 8]), (7, [4, 6, 7])],
    )
    def test_non_terminated_contracts(self, client, as_profile, profile_id, expected):
        response = client.get("/contracts", headers=as_profile(profile_id))

        assert response.status_code == 200
        body = response.json()
        assert [c["id"] for c in body] == expected
        assert all(c["status"] != "terminated" for c in body)
