"""
Integration tests for the render API endpoints.

The rendering service is replaced through FastAPI dependency overrides so
the endpoints are tested without a render engine.
"""

from datetime import datetime, timezone
from typing import AsyncGenerator, List

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from newsreel.api import render as render_api
from newsreel.api.deps import get_rendering_service
from newsreel.main import app
from newsreel.schemas.render import (
    RenderMetadata,
    RenderOptions,
    RenderRequest,
    RenderResult,
    RenderStatus,
    SetupVerificationResult,
)
from newsreel.services.rendering import VideoRenderingService


class FakeRenderingService:
    """Records render calls and returns canned results."""

    def __init__(self, status: RenderStatus = None):
        self.status = status or RenderStatus()
        self.calls: List[tuple] = []

    def get_status(self) -> RenderStatus:
        return self.status.model_copy(deep=True)

    async def verify_remotion_setup(self, composition_id=None) -> SetupVerificationResult:
        return SetupVerificationResult(
            is_valid=False,
            remotion_dir_exists=True,
            errors=["Composition 'AINewsShort' not found"],
            warnings=["FFmpeg not found in PATH (rendering may be affected)"],
        )

    async def render_video(self, request: RenderRequest, options: RenderOptions) -> RenderResult:
        self.calls.append((request, options))
        now = datetime.now(timezone.utc)
        return RenderResult(
            success=True,
            video_path=f"/videos/video_{request.video_id}.mp4",
            metadata=RenderMetadata(
                composition_id="AINewsShort",
                resolution="1080x1920",
                fps=30,
                codec="h264",
                crf=18,
                total_frames=1500,
                started_at=now,
                completed_at=now,
                attempts=1,
            ),
        )


@pytest.fixture
def fake_service() -> FakeRenderingService:
    return FakeRenderingService()


@pytest_asyncio.fixture(scope="function")
async def async_client(fake_service) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client against the app with the fake service injected."""
    app.dependency_overrides[get_rendering_service] = lambda: fake_service

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


def job_body(video_id: str = "abc123") -> dict:
    return {
        "request": {
            "videoId": video_id,
            "title": "Titular",
            "script": "Hola. Esto es una prueba.",
            "audioPath": "/tmp/audio.mp3",
            "audioDuration": 10,
        },
        "options": {"quality": "high", "usePreview": True},
    }


class TestRootEndpoints:
    @pytest.mark.asyncio
    async def test_root(self, async_client):
        response = await async_client.get("/")

        assert response.status_code == 200
        assert response.json()["docs"] == "/docs"

    @pytest.mark.asyncio
    async def test_health(self, async_client):
        response = await async_client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}


class TestStatusEndpoint:
    @pytest.mark.asyncio
    async def test_idle_status(self, async_client):
        response = await async_client.get("/api/render/status")

        assert response.status_code == 200
        assert response.json() == {
            "isRendering": False,
            "currentVideoId": None,
            "progress": 0,
            "phase": "idle",
            "message": "Ready",
            "elapsedTime": 0,
        }


class TestSetupEndpoint:
    @pytest.mark.asyncio
    async def test_setup_report(self, async_client):
        response = await async_client.get("/api/render/setup")

        assert response.status_code == 200
        data = response.json()
        assert data["isValid"] is False
        assert data["remotionDirExists"] is True
        assert data["errors"] == ["Composition 'AINewsShort' not found"]
        assert len(data["warnings"]) == 1


class TestStartRender:
    """Tests for POST /api/render."""

    @pytest.mark.asyncio
    async def test_accepted(self, async_client, fake_service):
        response = await async_client.post("/api/render", json=job_body())

        assert response.status_code == 202
        assert response.json() == {"videoId": "abc123", "status": "accepted"}
        # The background job has run once the response is complete
        request, options = fake_service.calls[0]
        assert request.video_id == "abc123"
        assert request.audio_duration == 10
        assert options.quality == "high"
        assert options.use_preview is True
        assert not render_api._render_lock.locked()

    @pytest.mark.asyncio
    async def test_default_options(self, async_client, fake_service):
        body = job_body()
        del body["options"]

        response = await async_client.post("/api/render", json=body)

        assert response.status_code == 202
        assert fake_service.calls[0][1] == RenderOptions()

    @pytest.mark.asyncio
    async def test_invalid_request(self, async_client, fake_service):
        body = job_body()
        del body["request"]["script"]

        response = await async_client.post("/api/render", json=body)

        assert response.status_code == 422
        assert fake_service.calls == []

    @pytest.mark.asyncio
    async def test_conflict_while_service_busy(self, async_client, fake_service):
        fake_service.status = RenderStatus(
            is_rendering=True, current_video_id="busy1", phase="rendering", progress=60
        )

        response = await async_client.post("/api/render", json=job_body())

        assert response.status_code == 409
        assert response.json() == {
            "error": "conflict",
            "message": "Render already in progress",
            "current_video_id": "busy1",
        }
        assert fake_service.calls == []

    @pytest.mark.asyncio
    async def test_conflict_while_job_pending(self, async_client, fake_service):
        await render_api._render_lock.acquire()
        try:
            response = await async_client.post("/api/render", json=job_body())
        finally:
            render_api._render_lock.release()

        assert response.status_code == 409
        assert fake_service.calls == []

    @pytest.mark.asyncio
    async def test_conflict_documented_in_openapi(self, async_client):
        response = await async_client.get("/openapi.json")

        responses = response.json()["paths"]["/api/render"]["post"]["responses"]
        assert responses["409"]["content"]["application/json"]["schema"] == {
            "$ref": "#/components/schemas/RenderConflictResponse"
        }


class TestSetupEndpointWithEngine:
    @pytest.mark.asyncio
    async def test_unreadable_registry_is_reported(self, settings, engine_project):
        """A broken Root.tsx shows up as a setup error, not a server error."""
        (engine_project / "src" / "Root.tsx").write_bytes(b"\xff\xfe\x80")
        app.dependency_overrides[get_rendering_service] = lambda: VideoRenderingService(settings)
        try:
            async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
                response = await client.get("/api/render/setup")
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 200
        assert response.json()["isValid"] is False
