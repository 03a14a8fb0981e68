#!/usr/bin/env python3
"""
render_video: operator CLI for the render core.

Usage:
    python scripts/render_video.py verify
    python scripts/render_video.py render request.json [--quality high] [--preview]

request.json holds a RenderRequest in camelCase (videoId, title, script,
audioPath, imagePath, audioDuration, ...).
"""
from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from newsreel.core.config import get_settings
from newsreel.schemas.render import RenderOptions, RenderRequest
from newsreel.services.rendering import VideoRenderingService


def cmd_verify() -> int:
    """Print the setup report. Returns 0 when the setup is valid."""
    service = VideoRenderingService(get_settings())
    result = asyncio.run(service.verify_remotion_setup())
    print(result.model_dump_json(by_alias=True, indent=2))
    if not result.is_valid:
        print("ERROR: render setup invalid", file=sys.stderr)
        return 1
    print("OK: render setup verified")
    return 0


def cmd_render(request_path: Path, quality: str | None, preview: bool) -> int:
    """Render one request file. Returns 0 on success."""
    try:
        request = RenderRequest.model_validate_json(request_path.read_text(encoding="utf-8"))
    except (OSError, ValidationError) as exc:
        print(f"ERROR: could not load {request_path}: {exc}", file=sys.stderr)
        return 2

    service = VideoRenderingService(get_settings())
    options = RenderOptions(quality=quality, use_preview=preview)
    result = asyncio.run(service.render_video(request, options))
    print(json.dumps(result.model_dump(mode="json", by_alias=True), indent=2))
    return 0 if result.success else 1


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )

    parser = argparse.ArgumentParser(description="Render core operator CLI")
    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("verify", help="Check the render engine installation")
    render_parser = sub.add_parser("render", help="Render a video from a request file")
    render_parser.add_argument("request", type=Path, help="Path to a RenderRequest JSON file")
    render_parser.add_argument(
        "--quality", choices=["low", "medium", "high", "ultra"], default=None,
        help="Quality preset (default: configured CRF)",
    )
    render_parser.add_argument(
        "--preview", action="store_true",
        help="Render the preview composition",
    )
    args = parser.parse_args()

    if args.command == "verify":
        sys.exit(cmd_verify())
    if args.command == "render":
        sys.exit(cmd_render(args.request, args.quality, args.preview))


if __name__ == "__main__":
    main()
