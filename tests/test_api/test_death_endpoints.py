"""Tests for death analytics API endpoints."""

import pytest


class TestDeathsByDemographic:
    """Tests for GET /api/deaths-by-pathogen-demographic."""

    def test_race(self, client):
        response = client.get(
            "/api/deaths-by-pathogen-demographic",
            params={"pathogen": "Flu", "year": 2023, "race": "Black"},
        )
        assert response.status_code == 200

        data = response.json()
        assert data["race"] == "Black"
        assert data["sex"] is None
        assert data["demographicType"] == "Race/Ethnicity"
        assert data["totalDeaths"] == 40
        assert data["sumOfTotalDeaths"] == 100
        assert data["percentDeaths"] == pytest.approx(40.0)

    def test_age_group(self, client):
        response = client.get(
            "/api/deaths-by-pathogen-demographic",
            params={"pathogen": "Flu", "year": 2023, "ageGroup": "0-17 years"},
        )
        assert response.status_code == 200
        assert response.json()["percentDeaths"] == pytest.approx(10.0)

    def test_requires_exactly_one_dimension(self, client):
        none = client.get("/api/deaths-by-pathogen-demographic", params={"pathogen": "Flu", "year": 2023})
        both = client.get(
            "/api/deaths-by-pathogen-demographic",
            params={"pathogen": "Flu", "year": 2023, "race": "White", "sex": "Male"},
        )

        assert none.status_code == 400
        assert both.status_code == 400

    def test_unknown_value(self, client):
        response = client.get(
            "/api/deaths-by-pathogen-demographic",
            params={"pathogen": "Flu", "year": 2023, "sex": "Other"},
        )
        assert response.status_code == 404


class TestEstimatedDeaths:
    """Tests for GET /api/estimated-deaths-by-state."""

    def test_estimate(self, client):
        response = client.get(
            "/api/estimated-deaths-by-state",
            params={"pathogen": "Flu", "year": 2023, "state": "Beta"},
        )
        assert response.status_code == 200

        data = response.json()
        assert data == {
            "state": "Beta",
            "year": 2023,
            "pathogen": "Flu",
            "populationYear": 2023,
            "estimatedDeaths": 69,
        }

    def test_unknown_state(self, client):
        response = client.get(
            "/api/estimated-deaths-by-state",
            params={"pathogen": "Flu", "year": 2023, "state": "Atlantis"},
        )
        assert response.status_code == 404


class TestBelowNational:
    """Tests for GET /api/states-below-national-all-races."""

    def test_below_national(self, client):
        response = client.get(
            "/api/states-below-national-all-races",
            params={"diseaseName": "Flu", "year": 2023},
        )
        assert response.status_code == 200
        assert response.json() == [{"stateName": "Alpha"}]
