"""
routes.py — Chunk Splitter REST API Endpoints
================================================
Exposes the chunk splitting pipeline for files under the data directory:
  Plan:   stat file → initial restriction → split into pieces
  Chunks: restriction → tracker → claim/extract → (optional) checkpoint

Endpoints:
    POST /files/plan    — Chunk layout and initial split of a file
    POST /files/chunks  — Extract the chunks of one restriction
    GET  /health        — Health check
"""

import base64
import hashlib
import logging
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, HTTPException

from chunk_splitter.api.schemas import (
    ChunkResponse,
    ChunksRequest,
    ChunksResponse,
    HealthResponse,
    PlanRequest,
    PlanResponse,
    RestrictionModel,
)
from chunk_splitter.config import settings
from chunk_splitter.core.chunk_range import Restriction
from chunk_splitter.core.extractor import ChunkExtractionError, ChunkExtractor
from chunk_splitter.services.local_runner import LocalRunner
from chunk_splitter.services.readable_file import LocalReadableFile

logger = logging.getLogger(__name__)

router = APIRouter()

# ── Service Instances (initialized lazily) ─────────────
_runner: Optional[LocalRunner] = None


def get_runner() -> LocalRunner:
    """Get or create the runner singleton."""
    global _runner
    if _runner is None:
        _runner = LocalRunner(
            extractor=ChunkExtractor(settings.CHUNK_SIZE),
            max_workers=settings.MAX_WORKERS,
        )
    return _runner


def open_file(path: str) -> LocalReadableFile:
    """Resolve a request path inside the data directory."""
    data_dir = Path(settings.DATA_DIR).resolve()
    full_path = (data_dir / path).resolve()
    if not full_path.is_relative_to(data_dir):
        raise HTTPException(
            status_code=400, detail=f"Path escapes the data directory: {path}"
        )
    if not full_path.is_file():
        raise HTTPException(status_code=404, detail=f"File not found: {path}")
    return LocalReadableFile(str(full_path), file_id=path)


def to_model(restriction: Restriction) -> RestrictionModel:
    return RestrictionModel(start=restriction.start, stop=restriction.stop)


# ── Plan Endpoint ──────────────────────────────────────

@router.post("/files/plan", response_model=PlanResponse)
async def plan_file(request: PlanRequest):
    """
    Compute the chunk layout of a file.

    Returns the whole-file restriction and the independent pieces an
    engine can hand to separate workers.
    """
    file = open_file(request.path)
    runner = get_runner()

    restriction = runner.extractor.initial_restriction(file)
    splits = runner.extractor.split_restriction(file, restriction)

    return PlanResponse(
        file_id=file.file_id,
        size_bytes=file.size_bytes,
        chunk_size=runner.extractor.chunk_size,
        chunk_count=len(restriction),
        restriction=to_model(restriction),
        splits=[to_model(s) for s in splits],
    )


# ── Chunks Endpoint ────────────────────────────────────

@router.post("/files/chunks", response_model=ChunksResponse)
async def extract_chunks(request: ChunksRequest):
    """
    Extract the chunks of one restriction of a file.

    start/stop default to the whole-file restriction. With max_chunks
    set, processing checkpoints after that many chunks and the
    unprocessed rest is returned as the residual.
    """
    file = open_file(request.path)
    runner = get_runner()

    whole = runner.extractor.initial_restriction(file)
    try:
        restriction = Restriction(
            request.start if request.start is not None else whole.start,
            request.stop if request.stop is not None else whole.stop,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if restriction.start < whole.start or restriction.stop > whole.stop:
        raise HTTPException(
            status_code=400,
            detail=f"Restriction {restriction} is outside the file's chunks {whole}",
        )

    logger.info("Chunks request: `%s` %s", file.file_id, restriction)
    try:
        result = runner.process_restriction(
            file, restriction, max_chunks=request.max_chunks
        )
    except ChunkExtractionError as e:
        raise HTTPException(status_code=500, detail=str(e))

    chunks = [
        ChunkResponse(
            index=chunk.index,
            offset=chunk.offset,
            size=len(chunk),
            sha256=hashlib.sha256(chunk.data).hexdigest(),
            data=base64.b64encode(chunk.data).decode("utf-8"),
        )
        for chunk in result.chunks
    ]
    return ChunksResponse(
        file_id=file.file_id,
        restriction=to_model(restriction),
        chunks=chunks,
        residual=to_model(result.residual) if result.residual is not None else None,
    )


# ── Health Endpoint ────────────────────────────────────

@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Service health check."""
    return HealthResponse(
        status="healthy",
        service="chunk-splitter",
        chunk_size=get_runner().extractor.chunk_size,
    )
