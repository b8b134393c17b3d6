"""
Chatbot and entity-extraction schemas.
"""
from typing import Optional

from pydantic import BaseModel, Field


class ChatRequest(BaseModel):
    message: str = Field("", max_length=4000)


class ChatResponse(BaseModel):
    response: str


class ExtractEntitiesRequest(BaseModel):
    text: Optional[str] = None
    file_id: Optional[int] = None
