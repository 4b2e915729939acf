"""
Transform API:

Upload → read key/BPM from the filename → plan → ffmpeg in a worker thread
→ return the rendered file, then remove both temp files.
Planning errors are rejected before anything touches disk.
"""
import os

import structlog
from fastapi import APIRouter, File, Form, HTTPException, UploadFile, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import FileResponse
from starlette.background import BackgroundTask

from keyshift.config import settings
from keyshift.core import keys, metadata, planner, render
from keyshift.core.errors import RenderError, TransformError
from keyshift.core.storage import storage_client
from keyshift.schemas.transform import KeyListResponse, PlanRequest, PlanResponse, SourceMetadata

router = APIRouter()
log    = structlog.get_logger()

INVALID_INPUT = "Invalid key or BPM in filename or target key/BPM."


def _validate(file: UploadFile) -> str:
    ext = os.path.splitext(file.filename or "")[1].lower()
    if file.content_type not in settings.ALLOWED_AUDIO_TYPES or ext not in settings.ALLOWED_EXTENSIONS:
        raise HTTPException(400, detail="Only .mp3 and .wav files are allowed!")
    return ext


def _plan(filename: str, target_key: str, target_bpm: int) -> tuple[metadata.TrackMetadata, planner.TransformPlan]:
    source = metadata.extract(filename)
    request = planner.TransformRequest.from_metadata(
        source, keys.normalize_signature(target_key), target_bpm,
    )
    try:
        return source, planner.plan(request)
    except TransformError as e:
        log.info("plan_rejected", filename=filename, target_key=target_key, target_bpm=target_bpm, error=str(e))
        raise HTTPException(400, detail=f"{INVALID_INPUT} {e}") from e


# ── Endpoints ──────────────────────────────────────────────────────────────

@router.get("/keys", response_model=KeyListResponse)
async def list_keys():
    return KeyListResponse(keys=keys.known_keys())


@router.post("/plan", response_model=PlanResponse)
async def plan_transform(request: PlanRequest):
    """Räknar ut pitch-faktor och atempo-kedja utan att rendera något."""
    source, plan = _plan(request.filename, request.target_key, request.target_bpm)
    return PlanResponse(
        source=SourceMetadata(key=source.key, bpm=source.tempo),
        target_key=keys.normalize_signature(request.target_key),
        target_bpm=request.target_bpm,
        semitones=plan.semitones,
        pitch_factor=plan.pitch_factor,
        tempo_ratio=plan.tempo_ratio,
        tempo_stages=list(plan.tempo_stages),
        filters=render.build_filters(plan),
    )


@router.post("/process")
async def process_audio(
    audio_file: UploadFile = File(..., alias="audioFile"),
    target_key: str = Form(..., alias="targetKey"),
    target_bpm: int = Form(..., alias="targetBpm"),
):
    ext = _validate(audio_file)
    _, plan = _plan(audio_file.filename, target_key, target_bpm)

    raw = await audio_file.read()
    if len(raw) > settings.MAX_UPLOAD_SIZE_MB * 1024 * 1024:
        raise HTTPException(status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail="File too large")

    download_name = render.output_filename(keys.normalize_signature(target_key), target_bpm, ext)
    input_path  = storage_client.save_upload(raw, ext)
    output_path = storage_client.output_path(download_name)

    try:
        await run_in_threadpool(render.render, input_path, output_path, plan)
    except RenderError as e:
        storage_client.cleanup(input_path, output_path)
        log.error("process_failed", filename=audio_file.filename, error=str(e))
        raise HTTPException(500, detail=f"Error processing audio: {e}") from e

    log.info("process_complete", filename=audio_file.filename, output=download_name)
    return FileResponse(
        output_path,
        media_type=audio_file.content_type,
        filename=download_name,
        background=BackgroundTask(storage_client.cleanup, input_path, output_path),
    )
