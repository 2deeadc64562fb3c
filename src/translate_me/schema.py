from __future__ import annotations

from typing import Dict, List

from pydantic import BaseModel


class MatchDTO(BaseModel):
    path: str
    literal: str
    start_line: int
    start_col: int
    end_line: int
    end_col: int
    widget: str
    parameter: str = ""


class ReadFailureDTO(BaseModel):
    path: str
    error: str


class ScanResponseDTO(BaseModel):
    matches: List[MatchDTO]
    failures: List[ReadFailureDTO] = []
    stats: Dict[str, int]


class ClassifyResponseDTO(BaseModel):
    content: str
    keep: bool
    step: str = ""
