"""
Shared response schemas.
"""
from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: str
    version: str
    timestamp: str
    uptime_seconds: float
    database: str
    llm_available: bool


class MessageResponse(BaseModel):
    success: bool = True
    message: str
