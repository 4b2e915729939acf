"""
ffmpeg rendering of a TransformPlan.

Filter chain: one rubberband pitch shift, then one atempo per tempo stage,
applied in order. The last atempo stage is written with two decimals.
"""
import subprocess
from pathlib import Path

import structlog

from keyshift.core.errors import RenderError
from keyshift.core.planner import TransformPlan
from keyshift.core.tempo import format_stage

log = structlog.get_logger()


def build_filters(plan: TransformPlan) -> list[str]:
    *bounding, last = plan.tempo_stages
    filters = [f"rubberband=pitch={plan.pitch_factor}"]
    filters += [f"atempo={stage}" for stage in bounding]
    filters.append(f"atempo={format_stage(last)}")
    return filters


def output_filename(target_key: str, target_tempo: int, extension: str) -> str:
    """'c# minor', 128, '.mp3' -> 'processed_c#_minor_128.mp3'"""
    return f"processed_{target_key.replace(' ', '_', 1)}_{target_tempo}{extension}"


def build_command(input_path: Path, output_path: Path, plan: TransformPlan, binary: str = "ffmpeg") -> list[str]:
    return [
        binary, "-y", "-hide_banner", "-loglevel", "error",
        "-i", str(input_path),
        "-af", ",".join(build_filters(plan)),
        str(output_path),
    ]


def render(input_path: Path, output_path: Path, plan: TransformPlan, settings=None) -> Path:
    """
    Run ffmpeg synchronously. Blocks until the process exits, so call it from
    a worker thread in async code.

    Raises RenderError if ffmpeg is missing, times out or exits non-zero.
    """
    if settings is None:
        from keyshift.config import settings

    command = build_command(input_path, output_path, plan, settings.FFMPEG_BINARY)
    log.info("render_start", input=str(input_path), output=str(output_path), filters=command[-2])

    try:
        result = subprocess.run(
            command,
            capture_output=True,
            text=True,
            timeout=settings.RENDER_TIMEOUT_SEC,
            check=False,
        )
    except FileNotFoundError as e:
        raise RenderError(f"ffmpeg not found: {settings.FFMPEG_BINARY}") from e
    except subprocess.TimeoutExpired as e:
        raise RenderError(f"ffmpeg timed out after {settings.RENDER_TIMEOUT_SEC}s") from e

    if result.returncode != 0:
        log.error("render_failed", returncode=result.returncode, stderr=result.stderr.strip()[-500:])
        raise RenderError(
            f"ffmpeg failed with exit {result.returncode}: {result.stderr.strip() or result.stdout.strip()}"
        )

    log.info("render_complete", output=str(output_path))
    return output_path


def ffmpeg_available(binary: str = "ffmpeg") -> bool:
    try:
        subprocess.run([binary, "-version"], capture_output=True, check=True, timeout=10)
        return True
    except (subprocess.CalledProcessError, subprocess.TimeoutExpired, FileNotFoundError):
        return False
