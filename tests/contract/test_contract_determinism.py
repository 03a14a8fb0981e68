"""
Tests that building the data contract twice from the same inputs produces
byte-identical JSON, apart from meta.generatedAt.

The engine caches on data.json content, so any non-determinism (dict
ordering, float formatting, timestamps leaking into other fields) would
force needless re-renders.
"""

import json
from datetime import datetime, timezone

import pytest

from newsreel.core.config import Settings
from newsreel.schemas.contract import RenderDataContract
from newsreel.schemas.render import RenderRequest
from newsreel.services.assets import StagedAssets
from newsreel.services.contract_builder import build_data_contract
from newsreel.services.sections import generate_sections
from newsreel.services.subtitles import generate_subtitles
from tests.conftest import SAMPLE_SCRIPT

REQUEST = RenderRequest(
    video_id="det001",
    title="Titular determinista",
    script=SAMPLE_SCRIPT,
    audio_path="narration.mp3",
    image_path="hero.jpg",
    audio_duration=37.4,
    topic="IA",
    news_source="Fuente",
    company="Anthropic",
)

ASSETS = StagedAssets(
    audio_path="audio_det001.mp3",
    hero_image="hero_det001.jpg",
    context_image="hero_det001.jpg",
    outro_image="sintaxis-logo.png",
)


def build_contract(generated_at: datetime) -> RenderDataContract:
    settings = Settings()
    subtitles = generate_subtitles(REQUEST.script, REQUEST.audio_duration, settings.fps)
    sections = generate_sections(
        REQUEST.script, REQUEST.title, REQUEST.audio_duration, settings.fps,
        image=REQUEST.image_path,
    )
    return build_data_contract(REQUEST, ASSETS, subtitles, sections, settings, generated_at)


class TestContractDeterminism:
    def test_identical_json(self):
        at = datetime(2026, 3, 1, 9, 30, tzinfo=timezone.utc)

        assert build_contract(at).to_json() == build_contract(at).to_json()

    def test_only_generated_at_differs(self):
        first = json.loads(build_contract(datetime(2026, 3, 1, tzinfo=timezone.utc)).to_json())
        second = json.loads(build_contract(datetime(2026, 3, 2, tzinfo=timezone.utc)).to_json())

        assert first["meta"].pop("generatedAt") != second["meta"].pop("generatedAt")
        assert first == second

    def test_round_trips_through_schema(self):
        """data.json parses back into the same contract."""
        contract = build_contract(datetime(2026, 3, 1, tzinfo=timezone.utc))

        reparsed = RenderDataContract.model_validate_json(contract.to_json())

        assert reparsed.to_json() == contract.to_json()

    @pytest.mark.parametrize("duration", [12.3, 37.4, 58])
    def test_subtitles_stay_inside_timeline(self, duration):
        settings = Settings()
        words = generate_subtitles(REQUEST.script, duration, settings.fps)
        total = generate_sections(REQUEST.script, REQUEST.title, duration, settings.fps)[-1].end_frame

        assert words[-1].end_frame <= total
        assert all(w.start_frame <= w.end_frame for w in words)
