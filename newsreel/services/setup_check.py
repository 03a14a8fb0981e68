"""
Render engine pre-flight checks.

Required: engine project directory, package.json declaring the remotion
dependency, and the composition id registered in src/Root.tsx.
FFmpeg on PATH is only reported as a warning.
"""

import json
import logging
from pathlib import Path
from typing import Optional

from ..core.config import Settings
from ..schemas.render import SetupVerificationResult

logger = logging.getLogger(__name__)


class SetupError(Exception):
    """Raised when the render engine installation is unusable."""

    pass


def verify_remotion_setup(
    settings: Settings,
    ffmpeg_available: bool,
    composition_id: Optional[str] = None,
) -> SetupVerificationResult:
    """
    Inspect the render engine project on disk.

    Args:
        settings: Render settings (working_dir is the engine project)
        ffmpeg_available: Result of the FFmpeg probe
        composition_id: Composition to look for (defaults to the production one)

    Returns:
        SetupVerificationResult with per-check flags, errors and warnings
    """
    composition_id = composition_id or settings.composition_id
    working_dir = Path(settings.working_dir)
    errors = []
    warnings = []

    remotion_dir_exists = working_dir.is_dir()
    if not remotion_dir_exists:
        errors.append(f"Render engine directory does not exist: {working_dir}")

    remotion_installed = False
    package_json = working_dir / "package.json"
    if remotion_dir_exists and not package_json.is_file():
        errors.append(f"package.json not found in {working_dir}")
    elif package_json.is_file():
        try:
            package = json.loads(package_json.read_text(encoding="utf-8"))
            remotion_installed = bool(
                package.get("dependencies", {}).get("remotion")
                or package.get("devDependencies", {}).get("remotion")
            )
            if not remotion_installed:
                errors.append(f"remotion is not a dependency in {package_json}")
        except (OSError, ValueError, AttributeError) as e:
            errors.append(f"Could not read {package_json}: {e}")

    composition_exists = False
    root_tsx = working_dir / "src" / "Root.tsx"
    if remotion_dir_exists and not root_tsx.is_file():
        errors.append(f"Composition registry not found: {root_tsx}")
    elif root_tsx.is_file():
        try:
            composition_exists = composition_id in root_tsx.read_text(encoding="utf-8")
            if not composition_exists:
                errors.append(f"Composition '{composition_id}' not found in {root_tsx}")
        except (OSError, ValueError) as e:
            errors.append(f"Could not read {root_tsx}: {e}")

    if not ffmpeg_available:
        warnings.append("FFmpeg not found in PATH (rendering may be affected)")

    result = SetupVerificationResult(
        is_valid=not errors,
        remotion_installed=remotion_installed,
        ffmpeg_available=ffmpeg_available,
        remotion_dir_exists=remotion_dir_exists,
        composition_exists=composition_exists,
        errors=errors,
        warnings=warnings,
    )

    for warning in warnings:
        logger.warning(warning)
    if errors:
        logger.error(f"Render engine setup invalid: {'; '.join(errors)}")

    return result
