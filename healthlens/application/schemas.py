from typing import Optional
from pydantic import BaseModel


class SkinAnalysisRequest(BaseModel):
    image: Optional[str] = None


class ErrorResponse(BaseModel):
    error: str
    message: Optional[str] = None
    timestamp: Optional[str] = None


class HealthResponse(BaseModel):
    status: str  # always "ok" while the process is serving
    mongodb: str  # "connected" | "disconnected"
