"""
Shared test fixtures for the render core.

Provides:
- Settings pointing every directory at tmp_path
- A minimal render engine project (package.json + src/Root.tsx)
- Sample narration audio and hero image files
- A fake render engine executable (a Python script) for runner/service tests
"""

import json
import sys
import textwrap
from pathlib import Path
from typing import Callable

import pytest

from newsreel.core.config import Settings
from newsreel.schemas.render import RenderRequest

SAMPLE_SCRIPT = (
    "OpenAI lanza un nuevo modelo de razonamiento. "
    "El sistema resuelve problemas de matemáticas con más precisión que sus predecesores. "
    "Según la compañía, el modelo ya está disponible para desarrolladores. "
    "Esto podría cambiar la forma en que trabajamos con la IA. "
    "Síguenos para más noticias."
)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings with all paths under tmp_path and fast retries."""
    engine_dir = tmp_path / "engine"
    return Settings(
        working_dir=engine_dir,
        output_dir=tmp_path / "output",
        staging_dir=engine_dir / "public",
        temp_dir=tmp_path / "temp",
        retry_delay_ms=50,
        timeout_ms=10_000,
        max_retries=2,
        gpu_enabled=False,
    )


@pytest.fixture
def engine_project(settings: Settings) -> Path:
    """Create a render engine project that passes the setup checks."""
    root = Path(settings.working_dir)
    (root / "src").mkdir(parents=True)
    (root / "package.json").write_text(
        json.dumps({"name": "engine", "dependencies": {"remotion": "4.0.0"}})
    )
    (root / "src" / "Root.tsx").write_text(
        f'<Composition id="{settings.composition_id}" />\n'
        f'<Composition id="{settings.preview_composition_id}" />\n'
    )
    return root


@pytest.fixture
def audio_file(tmp_path: Path) -> Path:
    path = tmp_path / "inputs" / "narration.mp3"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"ID3" + b"\x00" * 512)
    return path


@pytest.fixture
def image_file(tmp_path: Path) -> Path:
    path = tmp_path / "inputs" / "hero.jpg"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"\xff\xd8\xff" + b"\x00" * 256)
    return path


@pytest.fixture
def render_request(audio_file: Path, image_file: Path) -> RenderRequest:
    return RenderRequest(
        video_id="abc123",
        title="OpenAI lanza un nuevo modelo",
        script=SAMPLE_SCRIPT,
        audio_path=str(audio_file),
        image_path=str(image_file),
        audio_duration=50,
        topic="OpenAI",
        news_source="TechCrunch",
        company="OpenAI",
        news_type="product-launch",
    )


@pytest.fixture
def make_fake_engine(tmp_path: Path) -> Callable[[str], list]:
    """
    Factory writing a fake engine script and returning its command prefix.

    The script receives the same arguments as the real CLI
    (composition, output path, --flags...). The body passed in runs with
    `output` (Path) and `args` (list) already defined.
    """

    def factory(body: str, name: str = "fake_engine.py") -> list:
        script = tmp_path / name
        script.write_text(
            "import sys, time\n"
            "from pathlib import Path\n"
            "args = sys.argv[1:]\n"
            "output = Path(args[1])\n"
            + textwrap.dedent(body)
        )
        return [sys.executable, str(script)]

    return factory
