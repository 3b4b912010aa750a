"""Tests for GET /api/stats/aggregate."""

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from soundscape.analytics.breakdowns import BREAKDOWNS
from soundscape.api.stats import parse_include_duplicates
from soundscape.config.settings import Settings
from soundscape.db.session import get_session_factory


class TestParseIncludeDuplicates:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [(None, True), ("true", True), ("", True), ("False", True), ("0", True), ("false", False)],
    )
    def test_only_literal_false_excludes(self, raw, expected) -> None:
        assert parse_include_duplicates(raw) is expected


class TestAggregate:
    async def test_empty_store(self, client: AsyncClient) -> None:
        response = await client.get("/api/stats/aggregate")
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        data = body["data"]
        assert data["totalSubmissions"] == 0
        assert data["averageHeadphoneFreq"] == "N/A"
        assert data["topOccupation"] == "N/A"
        assert data["failedBreakdowns"] == []
        for b in BREAKDOWNS:
            assert data[b.key] == []

    async def test_counts_and_headlines(self, client: AsyncClient, add_submissions) -> None:
        await add_submissions(
            {"occupation": "Student", "headphone_freq": 4, "locations": ["Home", "Commute"]},
            {"occupation": "Working professional", "headphone_freq": 6},
            {"occupation": "Student", "headphone_freq": 8, "is_duplicate": True},
        )
        data = (await client.get("/api/stats/aggregate")).json()["data"]

        assert data["totalSubmissions"] == 3
        assert data["averageHeadphoneFreq"] == "6.0"
        assert data["topOccupation"] == "Student"
        assert data["occupationData"] == [
            {"name": "Student", "count": 2},
            {"name": "Working professional", "count": 1},
        ]
        assert sorted(e["name"] for e in data["noiseLocationData"]) == ["Commute", "Home"]
        assert data["headphoneFreqDistribution"] == [
            {"name": 4, "count": 1},
            {"name": 6, "count": 1},
            {"name": 8, "count": 1},
        ]

    async def test_include_duplicates_false(self, client: AsyncClient, add_submissions) -> None:
        await add_submissions(
            {"headphone_freq": 4},
            {"headphone_freq": 8, "is_duplicate": True},
        )
        data = (
            await client.get("/api/stats/aggregate", params={"includeDuplicates": "false"})
        ).json()["data"]
        assert data["totalSubmissions"] == 1
        assert data["averageHeadphoneFreq"] == "4.0"

    async def test_unrecognised_flag_keeps_duplicates(self, client: AsyncClient, add_submissions) -> None:
        await add_submissions({}, {"is_duplicate": True})
        data = (
            await client.get("/api/stats/aggregate", params={"includeDuplicates": "no"})
        ).json()["data"]
        assert data["totalSubmissions"] == 2

    async def test_unreachable_store_is_500(self, client: AsyncClient, tmp_path) -> None:
        from soundscape.api.main import app

        eng = create_async_engine(
            f"sqlite+aiosqlite:///{tmp_path / 'gone' / 'db.sqlite'}",
            poolclass=NullPool,
        )
        broken = async_sessionmaker(bind=eng, class_=AsyncSession)
        app.dependency_overrides[get_session_factory] = lambda: broken
        try:
            response = await client.get("/api/stats/aggregate")
        finally:
            await eng.dispose()

        assert response.status_code == 500
        assert response.json() == {
            "success": False,
            "message": "Server error while fetching aggregated stats",
        }


class TestDashboardAuth:
    @pytest.fixture
    def settings(self) -> Settings:
        return Settings(BASIC_AUTH_USER="admin", BASIC_AUTH_PASS="s3cret")

    async def test_missing_credentials_challenged(self, client: AsyncClient) -> None:
        response = await client.get("/api/stats/aggregate")
        assert response.status_code == 401
        assert response.headers["www-authenticate"] == 'Basic realm="Secure Area"'
        assert response.json()["success"] is False

    async def test_wrong_password_challenged(self, client: AsyncClient) -> None:
        response = await client.get("/api/stats/aggregate", auth=("admin", "nope"))
        assert response.status_code == 401

    async def test_valid_credentials_pass(self, client: AsyncClient) -> None:
        response = await client.get("/api/stats/aggregate", auth=("admin", "s3cret"))
        assert response.status_code == 200
        assert response.json()["success"] is True

    async def test_submit_is_not_gated(self, client: AsyncClient, valid_submission) -> None:
        response = await client.post("/api/submit", json=valid_submission)
        assert response.status_code == 201
