from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field, validator


class Severity(str, Enum):
    MILD = "Mild"
    MODERATE = "Moderate"
    SEVERE = "Severe"


class CandidatePrediction(BaseModel):
    disease: str
    confidence: float = Field(..., ge=0.0, le=1.0)
    severity: Severity

    class Config:
        frozen = True
        use_enum_values = True

    @validator("disease")
    def validate_disease(cls, v: str):
        v = v.strip()
        if len(v) == 0:
            raise ValueError("disease name must not be empty")
        return v


class CatalogEntry(BaseModel):
    name: str
    symptoms: Optional[str] = None
    causes: Optional[str] = None
    treatment: Optional[str] = None
    prevention: Optional[str] = None
    severity: Optional[str] = None

    class Config:
        frozen = True
        extra = "allow"


class EnrichedResult(CandidatePrediction):
    details: CatalogEntry


class ResponseEnvelope(BaseModel):
    predictions: List[EnrichedResult]
    timestamp: str
    confidence_threshold: float

    class Config:
        frozen = True
