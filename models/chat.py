# models/chat.py
from sqlmodel import Field
from typing import Optional, List, Any

from models.base import ApiModel


class ChatRequest(ApiModel):
    query: str = Field(min_length=1)
    session_id: Optional[str] = Field(default=None, alias="sessionId")


class ChatSource(ApiModel):
    entity_type: str = Field(alias="entityType")
    entity_id: str = Field(alias="entityId")
    text: str = ""
    score: float = 0.0
    citation: str = ""


class ChatMetadata(ApiModel):
    processing_time: float = Field(default=0.0, alias="processingTime")
    steps_executed: List[str] = Field(default_factory=list, alias="stepsExecuted")
    retrieved_documents: int = Field(default=0, alias="retrievedDocuments")
    query_classification: str = Field(default="", alias="queryClassification")
    from_cache: bool = Field(default=False, alias="fromCache")
    function_calls: List[Any] = Field(default_factory=list, alias="functionCalls")


class ChatResponse(ApiModel):
    answer: str
    sources: List[ChatSource] = Field(default_factory=list)
    confidence: float = 0.0
    session_id: str = Field(alias="sessionId")
    # "metadata" is taken by SQLModel itself
    meta: ChatMetadata = Field(default_factory=ChatMetadata, alias="metadata")
