"""Tests for the HTTP API."""

import asyncio
import base64
import io
from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from lookbook.api.app import create_app, parse_cors_origins
from lookbook.api.dependencies import AppState, get_app_state
from lookbook.providers.groq_provider import GroqAPIError
from tests.mocks.providers import MockSuggestionProvider


def jpeg_b64(size: tuple[int, int] = (64, 48)) -> str:
    buffer = io.BytesIO()
    Image.new("RGB", size, color="olive").save(buffer, format="JPEG")
    return base64.b64encode(buffer.getvalue()).decode("utf-8")


@pytest.fixture
def provider() -> MockSuggestionProvider:
    return MockSuggestionProvider()


@pytest.fixture
def client(provider: MockSuggestionProvider) -> Iterator[TestClient]:
    """API client whose app state already holds the mock provider."""
    state = get_app_state()
    asyncio.run(state.shutdown())
    asyncio.run(state.initialize(suggestion_provider=provider))
    with TestClient(create_app()) as test_client:
        yield test_client
    asyncio.run(state.shutdown())


@pytest.fixture
def unconfigured_client(monkeypatch: pytest.MonkeyPatch) -> Iterator[TestClient]:
    """API client started without a GROQ_API_KEY."""
    monkeypatch.delenv("GROQ_API_KEY", raising=False)
    state = get_app_state()
    asyncio.run(state.shutdown())
    with TestClient(create_app()) as test_client:
        yield test_client
    asyncio.run(state.shutdown())


class TestAppState:
    def test_initial_state(self) -> None:
        assert AppState().is_initialized is False

    def test_provider_raises_before_init(self) -> None:
        with pytest.raises(RuntimeError, match="App state not initialized"):
            _ = AppState().suggestion_provider

    def test_initialize_without_key_leaves_provider_empty(self) -> None:
        state = AppState()
        asyncio.run(state.initialize(groq_api_key=None))
        assert state.is_initialized
        assert state.suggestion_provider is None

    def test_initialize_is_idempotent(self) -> None:
        first, second = MockSuggestionProvider(), MockSuggestionProvider()
        state = AppState()
        asyncio.run(state.initialize(suggestion_provider=first))
        asyncio.run(state.initialize(suggestion_provider=second))
        assert state.suggestion_provider is first


class TestCreateApp:
    def test_defaults(self) -> None:
        app = create_app()
        assert app.title == "lookbook API"
        assert app.version

    def test_routes(self) -> None:
        paths = create_app().openapi()["paths"]
        assert {"/suggest", "/health", "/ready", "/live"} <= set(paths)
        assert "post" in paths["/suggest"]

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("*", ["*"]),
            ("https://a.example, https://b.example", ["https://a.example", "https://b.example"]),
            ("https://a.example,,", ["https://a.example"]),
        ],
    )
    def test_parse_cors_origins(self, value: str, expected: list[str]) -> None:
        assert parse_cors_origins(value) == expected

    def test_cors_preflight(self) -> None:
        app = create_app(cors_origins=["https://lookbook.example"])
        with TestClient(app) as test_client:
            response = test_client.options(
                "/suggest",
                headers={
                    "Origin": "https://lookbook.example",
                    "Access-Control-Request-Method": "POST",
                    "Access-Control-Request-Headers": "content-type,authorization",
                },
            )
        asyncio.run(get_app_state().shutdown())
        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "https://lookbook.example"
        assert response.headers["access-control-allow-credentials"] == "true"


class TestSuggest:
    def test_returns_suggestion(self, client: TestClient, provider) -> None:
        response = client.post(
            "/suggest", json={"imageBase64": jpeg_b64(), "mediaType": "image/jpeg"}
        )
        assert response.status_code == 200
        assert response.json() == {
            "name": "Faded Indigo Straight Leg",
            "description": "Soft mid-wash denim with honest wear at the knees.",
            "suggested_size": "32x30",
        }
        assert provider.call_count == 1
        assert provider.last_media_type == "image/jpeg"

    def test_sends_compressed_jpeg(self, client: TestClient, provider) -> None:
        buffer = io.BytesIO()
        Image.new("RGBA", (2048, 1024), color=(0, 0, 255, 255)).save(buffer, format="PNG")
        png = base64.b64encode(buffer.getvalue()).decode("utf-8")

        response = client.post("/suggest", json={"imageBase64": png, "mediaType": "image/png"})
        assert response.status_code == 200

        sent = Image.open(io.BytesIO(base64.b64decode(provider.last_image)))
        assert sent.format == "JPEG"
        assert sent.size == (1024, 512)

    def test_accepts_data_url(self, client: TestClient, provider) -> None:
        response = client.post(
            "/suggest",
            json={"imageBase64": f"data:image/jpeg;base64,{jpeg_b64()}", "mediaType": "image/jpeg"},
        )
        assert response.status_code == 200
        assert provider.call_count == 1

    @pytest.mark.parametrize(
        "body",
        [
            {"imageBase64": "QUJD"},
            {"mediaType": "image/jpeg"},
            {"imageBase64": "", "mediaType": "image/jpeg"},
            {},
        ],
    )
    def test_missing_field_is_rejected(self, client: TestClient, provider, body) -> None:
        response = client.post("/suggest", json=body)
        assert response.status_code == 400
        assert response.json()["detail"] == "imageBase64 and mediaType are required"
        assert provider.call_count == 0

    def test_unreadable_image(self, client: TestClient, provider) -> None:
        garbage = base64.b64encode(b"not a photo").decode()
        response = client.post(
            "/suggest", json={"imageBase64": garbage, "mediaType": "image/jpeg"}
        )
        assert response.status_code == 400
        assert response.json()["detail"] == "imageBase64 is not a readable image"
        assert provider.call_count == 0

    def test_oversized_image_is_rejected(
        self, client: TestClient, provider, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        # 64x48 is more than twice this limit, so Pillow refuses to open it
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 1000)
        response = client.post(
            "/suggest", json={"imageBase64": jpeg_b64(), "mediaType": "image/jpeg"}
        )
        assert response.status_code == 400
        assert response.json()["detail"] == "imageBase64 is not a readable image"
        assert provider.call_count == 0

    @pytest.mark.parametrize(
        ("error", "status"),
        [
            (GroqAPIError("Groq API error 503: Service Unavailable", status=503), 503),
            (GroqAPIError("Groq API error 429: rate limit", status=429), 503),
            (GroqAPIError("Groq request timed out after 30.0s"), 503),
            (GroqAPIError("Groq API error 401: Invalid API Key", status=401), 502),
            (GroqAPIError("Groq returned JSON that is not an object"), 502),
        ],
    )
    def test_upstream_failures(
        self, client: TestClient, provider, error: GroqAPIError, status: int
    ) -> None:
        provider.error = error
        response = client.post(
            "/suggest", json={"imageBase64": jpeg_b64(), "mediaType": "image/jpeg"}
        )
        assert response.status_code == status
        assert response.json()["detail"] == str(error)

    def test_without_api_key(self, unconfigured_client: TestClient) -> None:
        response = unconfigured_client.post(
            "/suggest", json={"imageBase64": jpeg_b64(), "mediaType": "image/jpeg"}
        )
        assert response.status_code == 500
        assert response.json()["detail"] == "GROQ_API_KEY not configured"


class TestHealthRoutes:
    def test_health_with_provider(self, client: TestClient) -> None:
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["checks"][0]["name"] == "groq"

    def test_ready_with_provider(self, client: TestClient) -> None:
        response = client.get("/ready")
        assert response.status_code == 200
        assert response.json() == {
            "ready": True,
            "status": "healthy",
            "suggestions_enabled": True,
        }

    def test_live(self, client: TestClient) -> None:
        assert client.get("/live").json() == {"alive": True}

    def test_degraded_without_api_key(self, unconfigured_client: TestClient) -> None:
        health = unconfigured_client.get("/health")
        assert health.status_code == 503
        assert health.json()["status"] == "degraded"

        ready = unconfigured_client.get("/ready")
        assert ready.status_code == 200
        assert ready.json()["suggestions_enabled"] is False
