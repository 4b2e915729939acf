"""Pydantic-scheman för request/response."""
from typing import List, Optional
from pydantic import BaseModel, Field


class PlanRequest(BaseModel):
    filename: str = Field(..., min_length=1, examples=["Song_Cmajor_128.mp3"])
    target_key: str = Field(..., examples=["a minor"])
    target_bpm: int = Field(..., gt=0, le=999, examples=[90])


class SourceMetadata(BaseModel):
    key: Optional[str] = None
    bpm: Optional[int] = None


class PlanResponse(BaseModel):
    source: SourceMetadata
    target_key: str
    target_bpm: int
    semitones: int
    pitch_factor: float
    tempo_ratio: float
    tempo_stages: List[float]
    filters: List[str]


class KeyListResponse(BaseModel):
    keys: List[str]
