"""
schemas.py — Pydantic Request/Response Models
=================================================
Data models for the chunk splitter REST API.
"""

from typing import List, Optional

from pydantic import BaseModel, Field


class RestrictionModel(BaseModel):
    """Half-open range [start, stop) of 1-based chunk indices."""

    start: int
    stop: int


class PlanRequest(BaseModel):
    """File to plan, relative to the data directory."""

    path: str


class PlanResponse(BaseModel):
    """Chunk layout of a file and its initial work split."""

    file_id: str
    size_bytes: int
    chunk_size: int
    chunk_count: int                    # Chunk indices in the restriction
    restriction: RestrictionModel       # Whole-file restriction
    splits: List[RestrictionModel]      # Independent pieces


class ChunksRequest(BaseModel):
    """Process one restriction of a file."""

    path: str
    start: Optional[int] = None         # Defaults to the first chunk
    stop: Optional[int] = None          # Defaults to the end of the file
    max_chunks: Optional[int] = Field(default=None, ge=0)


class ChunkResponse(BaseModel):
    """A single extracted chunk."""

    index: int
    offset: int
    size: int
    sha256: str
    data: str                           # Base64-encoded chunk bytes


class ChunksResponse(BaseModel):
    """Chunks emitted for a restriction."""

    file_id: str
    restriction: RestrictionModel
    chunks: List[ChunkResponse]
    residual: Optional[RestrictionModel] = None


class HealthResponse(BaseModel):
    """Service health check response."""

    status: str
    service: str
    chunk_size: int
