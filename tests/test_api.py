"""
API Endpoint Tests

Run: pytest tests/test_api.py -v
"""

import pytest


class TestHealthEndpoints:
    """Tests for health check endpoints."""

    @pytest.mark.asyncio
    async def test_root(self, client):
        response = await client.get("/")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    @pytest.mark.asyncio
    async def test_health(self, client):
        response = await client.get("/health")
        data = response.json()

        assert response.status_code == 200
        assert data["components"]["evaluator"] is True
        assert data["languages"] == ["en", "es", "fr", "de", "pt", "it"]
        assert "pattern_cache" in data

    @pytest.mark.asyncio
    async def test_languages(self, client):
        response = await client.get("/languages")
        languages = {item["code"]: item for item in response.json()}

        assert len(languages) == 6
        assert languages["es"]["speech_tag"] == "es-ES"
        assert languages["pt"]["locale"] == "pt-BR"


class TestCalculatorEndpoints:
    """Tests for normalize, evaluate and calculate."""

    @pytest.mark.asyncio
    async def test_normalize(self, client):
        response = await client.post("/normalize", json={"text": "twenty plus five"})
        data = response.json()

        assert response.status_code == 200
        assert data["normalized"] == "20 + 5"
        assert data["language"] == "en"
        assert data["valid"] is True
        assert data["steps"]

    @pytest.mark.asyncio
    async def test_evaluate(self, client):
        response = await client.post("/evaluate", json={"expression": "2 + 2"})
        data = response.json()

        assert data["result"] == "4"
        assert data["ok"] is True
        assert data["error"] is None

    @pytest.mark.asyncio
    async def test_evaluate_error_is_not_http_error(self, client):
        response = await client.post("/evaluate", json={"expression": "5 +"})
        data = response.json()

        assert response.status_code == 200
        assert data["result"] == "MATH_ERROR"
        assert data["ok"] is False
        assert data["error"] == "incomplete_expression"

    @pytest.mark.asyncio
    async def test_evaluate_speech_bare_number(self, client):
        response = await client.post("/evaluate", json={"expression": "3", "source": "speech"})
        assert response.json()["error"] == "ambiguous_voice_number"

    @pytest.mark.asyncio
    async def test_evaluate_display(self, client):
        response = await client.post(
            "/evaluate", json={"expression": "1000 + 234.5", "language": "de"}
        )
        data = response.json()
        assert data["result"] == "1234.5"
        assert data["display"] == "1.234,5"

    @pytest.mark.asyncio
    async def test_evaluate_rejects_unknown_source(self, client):
        response = await client.post("/evaluate", json={"expression": "1 + 1", "source": "telepathy"})
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_calculate(self, client):
        response = await client.post("/calculate", json={"text": "cinco por tres", "language": "es-MX"})
        data = response.json()

        assert data["equation"] == "5 * 3"
        assert data["result"] == "15"
        assert data["language"] == "es"


class TestHistoryEndpoints:
    """Tests for the calculation history."""

    @pytest.mark.asyncio
    async def test_successful_results_are_recorded(self, client):
        await client.post("/calculate", json={"text": "two plus two"})
        await client.post("/evaluate", json={"expression": "5 +"})
        await client.post("/evaluate", json={"expression": "3 * 3"})

        response = await client.get("/history")
        data = response.json()

        assert data["count"] == 2
        assert data["entries"][0]["equation"] == "3 * 3"
        assert data["entries"][0]["source"] == "keypad"
        assert data["entries"][1]["source"] == "speech"
        assert data["entries"][1]["transcript"] == "two plus two"

    @pytest.mark.asyncio
    async def test_limit(self, client):
        for n in range(3):
            await client.post("/evaluate", json={"expression": f"{n} + 1"})

        response = await client.get("/history", params={"limit": 2})
        assert response.json()["count"] == 2

    @pytest.mark.asyncio
    async def test_clear(self, client):
        await client.post("/evaluate", json={"expression": "1 + 1"})

        response = await client.delete("/history")
        assert response.json() == {"success": True, "removed": 1}

        response = await client.get("/history")
        assert response.json()["count"] == 0
