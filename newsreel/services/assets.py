"""
Asset Stager

Copies or downloads the narration audio and hero image into the render
engine's public directory, under names derived from the video id:

    audio_<video_id>.mp3
    hero_<video_id>.jpg

References handed to the engine are file names relative to that directory.
Audio is required; a missing or unreachable hero image only logs a warning
and leaves the engine to draw its placeholder.
"""

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import httpx

from ..core.config import Settings
from ..schemas.render import RenderRequest

logger = logging.getLogger(__name__)

REDIRECT_STATUSES = {301, 302, 303, 307, 308}


class AssetError(Exception):
    """Raised when a required asset cannot be staged."""

    pass


@dataclass
class StagedAssets:
    """Engine-relative references to the staged media."""

    audio_path: str
    hero_image: str
    context_image: str
    outro_image: str
    hero_staged: bool = True


def is_remote(reference: str) -> bool:
    return reference.startswith(("http://", "https://"))


class AssetStager:
    """
    Stages request media into settings.staging_dir.

    Usage::

        stager = AssetStager(settings)
        assets = await stager.stage(request)
    """

    def __init__(self, settings: Settings, client: Optional[httpx.AsyncClient] = None) -> None:
        self.settings = settings
        self._client = client

    async def stage(self, request: RenderRequest) -> StagedAssets:
        """
        Stage audio and hero image for one request.

        Raises:
            AssetError: If the audio cannot be copied or downloaded
        """
        staging_dir = Path(self.settings.staging_dir)
        staging_dir.mkdir(parents=True, exist_ok=True)

        audio_name = f"audio_{request.video_id}.mp3"
        await self._stage_one(request.audio_path, staging_dir / audio_name, "Audio")
        logger.info(f"Audio staged: {audio_name}")

        hero_name = f"hero_{request.video_id}.jpg"
        hero_staged = True
        try:
            await self._stage_one(request.image_path, staging_dir / hero_name, "Image")
            logger.info(f"Hero image staged: {hero_name}")
        except AssetError as e:
            hero_staged = False
            logger.warning(f"Hero image unavailable, using placeholder: {e}")

        return StagedAssets(
            audio_path=audio_name,
            hero_image=hero_name,
            context_image=hero_name,
            outro_image=self.settings.outro_image,
            hero_staged=hero_staged,
        )

    async def _stage_one(self, source: str, dest: Path, label: str) -> None:
        if source and is_remote(source):
            await self.download_file(source, dest)
        elif source and Path(source).is_file():
            try:
                shutil.copyfile(source, dest)
            except OSError as e:
                _remove_partial(dest)
                raise AssetError(f"{label} copy failed ({source}): {e}") from e
        else:
            raise AssetError(f"{label} not found: {source!r}")

    async def download_file(self, url: str, dest: Path) -> None:
        """
        Download url to dest, following at most one redirect.

        The partially written file is removed on any failure.

        Raises:
            AssetError: On transport errors, non-2xx status or a second redirect
        """
        if self._client is not None:
            await self._download(self._client, url, dest)
            return

        async with httpx.AsyncClient(timeout=self.settings.download_timeout_seconds) as client:
            await self._download(client, url, dest)

    async def _download(self, client: httpx.AsyncClient, url: str, dest: Path) -> None:
        try:
            target = url
            for hop in range(2):
                async with client.stream("GET", target, follow_redirects=False) as response:
                    if response.status_code in REDIRECT_STATUSES and "location" in response.headers:
                        if hop == 1:
                            raise AssetError(f"Too many redirects downloading {url}")
                        target = str(response.url.join(response.headers["location"]))
                        logger.debug(f"Following redirect to {target}")
                        continue

                    if not response.is_success:
                        raise AssetError(f"HTTP {response.status_code} downloading {target}")

                    with open(dest, "wb") as f:
                        async for chunk in response.aiter_bytes():
                            f.write(chunk)
                    return
        except AssetError:
            _remove_partial(dest)
            raise
        except (httpx.HTTPError, httpx.InvalidURL, OSError) as e:
            _remove_partial(dest)
            raise AssetError(f"Download failed for {url}: {e}") from e


def _remove_partial(path: Path) -> None:
    path.unlink(missing_ok=True)
