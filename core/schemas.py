from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime

from services.math.evaluator import EvaluationSource


class NormalizeRequest(BaseModel):
    text: str = Field(..., description="Spoken transcript to normalize")
    language: Optional[str] = Field(None, description="Language code, e.g. 'en' or 'es-MX'")


class NormalizeResponse(BaseModel):
    normalized: str
    language: str
    valid: bool
    steps: List[str] = []
    errors: List[str] = []


class EvaluateRequest(BaseModel):
    expression: str = Field(..., description="Canonical arithmetic expression")
    source: EvaluationSource = Field(EvaluationSource.KEYPAD, description="Where the expression came from")
    language: Optional[str] = Field(None, description="Language code used for the display string")


class EvaluateResponse(BaseModel):
    result: str
    display: Optional[str] = None
    ok: bool
    error: Optional[str] = None
    detail: Optional[str] = None


class CalculateRequest(BaseModel):
    text: str = Field(..., description="Spoken transcript")
    language: Optional[str] = Field(None, description="Language code")


class CalculateResponse(EvaluateResponse):
    equation: str
    language: str


class LanguageInfo(BaseModel):
    code: str
    name: str
    speech_tag: str
    locale: str


class HistoryEntryResponse(BaseModel):
    equation: str
    result: str
    display: str
    source: str
    language: str
    transcript: Optional[str] = None
    timestamp: datetime


class HistoryResponse(BaseModel):
    entries: List[HistoryEntryResponse]
    count: int

