"""
Test suite for companies.

Tests cover:
- Company repository (create, find_all with filters, get, update, remove)
- Company endpoints and their admin-only writes
"""

import pytest

from jobly.core.exceptions import BadRequestError, ConflictError, NotFoundError
from jobly.crud import company as company_crud
from jobly.models.company import Company
from jobly.schemas.company import CompanyCreateRequest

API = "/api/v1/companies"

NEW_COMPANY = {
    "handle": "new",
    "name": "New",
    "description": "New Description",
    "numEmployees": 1,
    "logoUrl": "http://new.img",
}


def handles(companies):
    return [c.handle for c in companies]


class TestCompanyRepository:
    """Tests for jobly.crud.company"""

    def test_create(self, db_session, seed_data):
        company = company_crud.create(db_session, CompanyCreateRequest(**NEW_COMPANY))

        assert company.handle == "new"
        assert company.num_employees == 1
        assert db_session.get(Company, "new").logo_url == "http://new.img"

    def test_create_duplicate(self, db_session, seed_data):
        company_crud.create(db_session, CompanyCreateRequest(**NEW_COMPANY))

        with pytest.raises(ConflictError, match="Duplicate company"):
            company_crud.create(db_session, CompanyCreateRequest(**NEW_COMPANY))

    def test_find_all_no_filter(self, db_session, seed_data):
        assert handles(company_crud.find_all(db_session)) == ["c1", "c2", "c3"]
        assert handles(company_crud.find_all(db_session, {})) == ["c1", "c2", "c3"]

    def test_find_all_by_name_is_case_insensitive_substring(self, db_session, seed_data):
        assert handles(company_crud.find_all(db_session, {"name": "c"})) == ["c1", "c2", "c3"]
        assert handles(company_crud.find_all(db_session, {"name": "2"})) == ["c2"]

    def test_find_all_employee_bounds(self, db_session, seed_data):
        """Bounds are exclusive and share the num_employees column"""
        companies = company_crud.find_all(db_session, {"minEmployees": 1, "maxEmployees": 3})

        assert handles(companies) == ["c2"]

    def test_find_all_all_filters(self, db_session, seed_data):
        companies = company_crud.find_all(db_session, {"name": "C", "minEmployees": 2, "maxEmployees": 10})

        assert handles(companies) == ["c3"]

    def test_find_all_no_match(self, db_session, seed_data):
        assert company_crud.find_all(db_session, {"name": "nope"}) == []

    def test_find_all_leaves_filters_alone(self, db_session, seed_data):
        filters = {"name": "c1"}

        company_crud.find_all(db_session, filters)

        assert filters == {"name": "c1"}

    def test_get(self, db_session, seed_data):
        company = company_crud.get(db_session, "c1")

        assert company.name == "C1"
        assert [job.title for job in company.jobs] == ["j1"]

    def test_get_not_found(self, db_session, seed_data):
        with pytest.raises(NotFoundError, match="No company: nope"):
            company_crud.get(db_session, "nope")

    def test_update(self, db_session, seed_data):
        company = company_crud.update(db_session, "c1", {
            "name": "New",
            "description": "New Description",
            "numEmployees": 10,
            "logoUrl": "http://new.img",
        })

        assert company.handle == "c1"
        assert company.name == "New"
        assert company.num_employees == 10
        assert company.logo_url == "http://new.img"

    def test_update_null_fields(self, db_session, seed_data):
        company = company_crud.update(db_session, "c1", {"numEmployees": None, "logoUrl": None})

        assert company.num_employees is None
        assert company.logo_url is None

    def test_update_name_taken(self, db_session, seed_data):
        with pytest.raises(ConflictError, match="C2"):
            company_crud.update(db_session, "c1", {"name": "C2"})

        assert company_crud.get(db_session, "c1").name == "C1"

    def test_update_keeps_own_name(self, db_session, seed_data):
        company = company_crud.update(db_session, "c1", {"name": "C1", "numEmployees": 5})

        assert company.name == "C1"
        assert company.num_employees == 5

    def test_update_not_found(self, db_session, seed_data):
        with pytest.raises(NotFoundError):
            company_crud.update(db_session, "nope", {"name": "test"})

    def test_update_no_data(self, db_session, seed_data):
        with pytest.raises(BadRequestError):
            company_crud.update(db_session, "c1", {})

    def test_remove(self, db_session, seed_data):
        company_crud.remove(db_session, "c1")

        assert db_session.get(Company, "c1") is None
        assert handles(company_crud.find_all(db_session)) == ["c2", "c3"]

    def test_remove_not_found(self, db_session, seed_data):
        with pytest.raises(NotFoundError):
            company_crud.remove(db_session, "nope")


class TestCreateCompanyEndpoint:
    """Tests for POST /companies"""

    def test_ok_for_admin(self, client, seed_data, admin_headers):
        response = client.post(f"{API}/", json=NEW_COMPANY, headers=admin_headers)

        assert response.status_code == 201
        assert response.json() == NEW_COMPANY

    def test_unauth_for_non_admin(self, client, seed_data, user_headers):
        response = client.post(f"{API}/", json=NEW_COMPANY, headers=user_headers)
        assert response.status_code == 401

    def test_unauth_for_anon(self, client, seed_data):
        response = client.post(f"{API}/", json=NEW_COMPANY)
        assert response.status_code == 401

    def test_duplicate(self, client, seed_data, admin_headers):
        response = client.post(f"{API}/", json={**NEW_COMPANY, "handle": "c1"}, headers=admin_headers)

        assert response.status_code == 400
        assert "duplicate" in response.json()["detail"].lower()

    def test_missing_data(self, client, seed_data, admin_headers):
        response = client.post(f"{API}/", json={"handle": "new", "numEmployees": 10}, headers=admin_headers)
        assert response.status_code == 400

    def test_invalid_data(self, client, seed_data, admin_headers):
        response = client.post(f"{API}/", json={**NEW_COMPANY, "numEmployees": "lots"}, headers=admin_headers)
        assert response.status_code == 400


class TestListCompaniesEndpoint:
    """Tests for GET /companies"""

    def test_ok_for_anon(self, client, seed_data):
        response = client.get(f"{API}/")

        assert response.status_code == 200
        assert response.json() == [
            {"handle": "c1", "name": "C1", "description": "Desc1", "numEmployees": 1, "logoUrl": "http://c1.img"},
            {"handle": "c2", "name": "C2", "description": "Desc2", "numEmployees": 2, "logoUrl": "http://c2.img"},
            {"handle": "c3", "name": "C3", "description": "Desc3", "numEmployees": 3, "logoUrl": "http://c3.img"},
        ]

    def test_filters(self, client, seed_data):
        response = client.get(f"{API}/", params={"name": "c", "minEmployees": 1, "maxEmployees": 3})

        assert response.status_code == 200
        assert [c["handle"] for c in response.json()] == ["c2"]

    def test_no_match_is_empty_list(self, client, seed_data):
        response = client.get(f"{API}/", params={"minEmployees": 100})

        assert response.status_code == 200
        assert response.json() == []

    def test_min_greater_than_max(self, client, seed_data):
        response = client.get(f"{API}/", params={"minEmployees": 5, "maxEmployees": 1})

        assert response.status_code == 400
        assert "minEmployees" in response.json()["detail"]

    def test_unknown_filter(self, client, seed_data):
        response = client.get(f"{API}/", params={"color": "red"})
        assert response.status_code == 400

    def test_invalid_filter_value(self, client, seed_data):
        response = client.get(f"{API}/", params={"minEmployees": "many"})
        assert response.status_code == 400


class TestGetCompanyEndpoint:
    """Tests for GET /companies/{handle}"""

    def test_includes_jobs(self, client, seed_data):
        response = client.get(f"{API}/c1")

        assert response.status_code == 200
        data = response.json()
        assert data["handle"] == "c1"
        assert data["numEmployees"] == 1
        assert data["jobs"] == [
            {"id": seed_data["j1"], "title": "j1", "salary": 10000, "equity": 0.01},
        ]

    def test_not_found(self, client, seed_data):
        response = client.get(f"{API}/nope")

        assert response.status_code == 404
        assert response.json()["detail"] == "No company: nope"


class TestUpdateCompanyEndpoint:
    """Tests for PATCH /companies/{handle}"""

    def test_ok_for_admin(self, client, seed_data, admin_headers):
        response = client.patch(f"{API}/c1", json={"name": "C1-new", "numEmployees": 7}, headers=admin_headers)

        assert response.status_code == 200
        assert response.json() == {
            "handle": "c1",
            "name": "C1-new",
            "description": "Desc1",
            "numEmployees": 7,
            "logoUrl": "http://c1.img",
        }

    def test_unauth_for_non_admin(self, client, seed_data, user_headers):
        response = client.patch(f"{API}/c1", json={"name": "C1-new"}, headers=user_headers)
        assert response.status_code == 401

    def test_not_found(self, client, seed_data, admin_headers):
        response = client.patch(f"{API}/nope", json={"name": "new nope"}, headers=admin_headers)
        assert response.status_code == 404

    def test_handle_change_rejected(self, client, seed_data, admin_headers):
        response = client.patch(f"{API}/c1", json={"handle": "c1-new"}, headers=admin_headers)
        assert response.status_code == 400

    def test_empty_body(self, client, seed_data, admin_headers):
        response = client.patch(f"{API}/c1", json={}, headers=admin_headers)

        assert response.status_code == 400
        assert response.json()["detail"] == "No data"

    def test_null_name_rejected(self, client, seed_data, admin_headers):
        """A null name is invalid input, not a naming conflict"""
        response = client.patch(f"{API}/c1", json={"name": None}, headers=admin_headers)

        assert response.status_code == 400
        assert "duplicate" not in str(response.json()["detail"]).lower()

    def test_null_description_rejected(self, client, seed_data, admin_headers):
        response = client.patch(f"{API}/c1", json={"description": None}, headers=admin_headers)
        assert response.status_code == 400

    def test_name_taken(self, client, seed_data, admin_headers):
        response = client.patch(f"{API}/c1", json={"name": "C2"}, headers=admin_headers)

        assert response.status_code == 400
        assert "duplicate" in response.json()["detail"].lower()


class TestDeleteCompanyEndpoint:
    """Tests for DELETE /companies/{handle}"""

    def test_ok_for_admin(self, client, seed_data, admin_headers):
        response = client.delete(f"{API}/c1", headers=admin_headers)

        assert response.status_code == 200
        assert response.json() == {"deleted": "c1"}
        assert client.get(f"{API}/c1").status_code == 404

    def test_unauth_for_anon(self, client, seed_data):
        assert client.delete(f"{API}/c1").status_code == 401

    def test_not_found(self, client, seed_data, admin_headers):
        assert client.delete(f"{API}/nope", headers=admin_headers).status_code == 404
