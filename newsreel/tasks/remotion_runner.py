"""
Render Engine Runner with Timeout Enforcement

Runs the render engine CLI with:
- Progress tracking by parsing "NN%" markers from stdout
- Strict wall-clock timeout enforcement
- Process group management for clean termination
- Detailed error reporting

This is the only place a render engine process is started.
"""

import asyncio
import logging
import os
import re
import shutil
import signal
import time
from pathlib import Path
from typing import Callable, List, Optional

from ..core.config import Settings

logger = logging.getLogger(__name__)

# Truncate captured engine output in error messages
MAX_ERROR_OUTPUT = 2000

_PERCENT_PATTERN = re.compile(r"(\d+)%")
_TRAILING_DIGITS = re.compile(r"\d+\Z")


class RenderError(Exception):
    """Raised when the render engine fails with a non-zero exit code."""

    pass


class RenderTimeout(RenderError):
    """Raised when the render engine exceeds the allowed timeout."""

    pass


def build_render_command(
    settings: Settings,
    composition_id: str,
    output_path: Path,
    props_path: Path,
    crf: int,
) -> List[str]:
    """
    Build the engine CLI invocation.

    Arguments are passed as a list (no shell), so paths with spaces need
    no quoting.

    Returns:
        List of command arguments for the subprocess
    """
    cmd = list(settings.engine_command) + [
        composition_id,
        str(output_path),
        f"--props={props_path}",
        f"--codec={settings.codec}",
        f"--crf={crf}",
        f"--pixel-format={settings.pixel_format}",
    ]

    if settings.gpu_enabled:
        cmd.append("--gl=angle")

    if settings.concurrency:
        cmd.append(f"--concurrency={settings.concurrency}")

    return cmd


def parse_progress(text: str) -> Optional[int]:
    """
    Return the last percentage found in a chunk of engine output.

    Example:
        >>> parse_progress("Rendered 120/1500, 8%  Rendered 135/1500, 9%")
        9
    """
    matches = _PERCENT_PATTERN.findall(text)
    if not matches:
        return None
    return min(100, int(matches[-1]))


async def run_render_with_progress(
    cmd: List[str],
    cwd: Path,
    progress_callback: Callable[[int, str], None],
    timeout_seconds: float,
) -> None:
    """
    Run the engine command with progress tracking and timeout enforcement.

    This function:
    1. Starts the engine in its own session/process group
    2. Reads stdout incrementally and reports "NN%" markers
    3. Collects stderr for error reporting
    4. Kills the whole process group when the timeout expires

    Args:
        cmd: Command as list of arguments
        cwd: Working directory (the engine project)
        progress_callback: Called with (percent, message)
        timeout_seconds: Maximum allowed runtime in seconds

    Raises:
        RenderTimeout: If the engine exceeds the timeout
        RenderError: If the engine cannot start or exits non-zero
    """
    logger.info(f"Starting render engine with timeout={timeout_seconds:g}s")
    logger.info(f"Render command: {' '.join(cmd)}")

    try:
        process = await asyncio.create_subprocess_exec(
            *cmd,
            cwd=str(cwd),
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            start_new_session=True,
        )
    except OSError as e:
        raise RenderError(f"Could not start render engine ({cmd[0]}): {e}") from e

    start_time = time.monotonic()
    stdout_chunks: List[str] = []
    stderr_chunks: List[str] = []

    async def read_stdout() -> None:
        last_percent = -1
        # Digits at the end of a read may be the start of a marker split across reads
        carry = ""
        while True:
            chunk = await process.stdout.read(4096)
            if not chunk:
                break
            text = chunk.decode("utf-8", errors="replace")
            stdout_chunks.append(text)
            window = carry + text
            tail = _TRAILING_DIGITS.search(window)
            carry = tail.group(0) if tail else ""
            percent = parse_progress(window)
            if percent is not None and percent != last_percent:
                last_percent = percent
                progress_callback(percent, f"Rendering: {percent}%")

    async def read_stderr() -> None:
        while True:
            chunk = await process.stderr.read(4096)
            if not chunk:
                break
            stderr_chunks.append(chunk.decode("utf-8", errors="replace"))

    async def communicate() -> int:
        await asyncio.gather(read_stdout(), read_stderr())
        return await process.wait()

    try:
        return_code = await asyncio.wait_for(communicate(), timeout=timeout_seconds)
    except asyncio.TimeoutError:
        elapsed = time.monotonic() - start_time
        logger.warning(f"Render timeout after {elapsed:.1f}s (limit: {timeout_seconds:g}s)")
        await _kill_process_group(process)
        raise RenderTimeout(f"Render timed out after {timeout_seconds:g}s")
    except BaseException:
        # Cancellation or an unexpected error must not leave the engine running
        await _kill_process_group(process)
        raise

    if return_code != 0:
        output = "".join(stderr_chunks) or "".join(stdout_chunks)
        if len(output) > MAX_ERROR_OUTPUT:
            output = output[-MAX_ERROR_OUTPUT:]
        error_msg = f"Render engine failed with code {return_code}"
        if output.strip():
            error_msg += f": {output.strip()}"
        logger.error(error_msg)
        raise RenderError(error_msg)

    elapsed = time.monotonic() - start_time
    logger.info(f"Render engine completed successfully in {elapsed:.1f}s")


async def _kill_process_group(process: asyncio.subprocess.Process) -> None:
    """
    Kill the engine process and its entire process group.

    Uses SIGKILL to ensure immediate termination; the engine spawns browser
    and encoder children that would otherwise keep running.
    """
    if process.returncode is not None:
        return
    try:
        pgid = os.getpgid(process.pid)
        logger.info(f"Killing render process group {pgid}")
        os.killpg(pgid, signal.SIGKILL)
    except ProcessLookupError:
        logger.debug("Process already terminated")
    except OSError as e:
        logger.warning(f"Error killing process group: {e}")
        try:
            process.kill()
        except ProcessLookupError:
            pass
    await process.wait()


async def check_ffmpeg_available() -> bool:
    """
    Check if FFmpeg is available and working.

    Returns:
        True if FFmpeg is available, False otherwise
    """
    if shutil.which("ffmpeg") is None:
        return False
    try:
        process = await asyncio.create_subprocess_exec(
            "ffmpeg",
            "-version",
            stdout=asyncio.subprocess.DEVNULL,
            stderr=asyncio.subprocess.DEVNULL,
        )
        return await asyncio.wait_for(process.wait(), timeout=5) == 0
    except asyncio.TimeoutError:
        logger.warning("FFmpeg -version did not answer within 5s")
        process.kill()
        await process.wait()
        return False
    except OSError as e:
        logger.warning(f"FFmpeg not available: {e}")
        return False
