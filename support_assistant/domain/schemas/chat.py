from datetime import datetime
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator


class MessageRequest(BaseModel):
    """Schema for a new user utterance"""
    message: str = Field(..., description="User message text")

    @field_validator("message")
    @classmethod
    def message_not_empty(cls, v):
        if not v or not v.strip():
            raise ValueError("Message content cannot be empty")
        return v


class DisambiguationRequest(BaseModel):
    """Schema for the user's choice among candidate intents"""
    intent_id: str = Field(..., min_length=1, description="Chosen intent ID")
    message: Optional[str] = Field(None, description="Utterance to learn from when the session holds none")


class SelectionRequest(BaseModel):
    """Schema for picking a quick suggestion"""
    intent_id: str = Field(..., min_length=1, description="Selected intent ID")


class LearnRequest(BaseModel):
    """Schema for the admin learning endpoint"""
    message: str = Field(..., min_length=1, description="Utterance to learn")
    intent_id: str = Field(..., min_length=1, description="Intent the utterance belongs to")


class CandidateSchema(BaseModel):
    id: str
    title: str


class AnsweredResponse(BaseModel):
    """Resolved turn"""
    ambiguous: Literal[False] = False
    answer: str = Field(..., description="Bot answer")
    score: float = Field(..., ge=0.0, le=1.0, description="Classifier confidence")
    intent_id: str = Field(..., description="Resolved intent ID, empty when unknown")


class AmbiguousResponse(BaseModel):
    """Turn waiting for disambiguation"""
    ambiguous: Literal[True] = True
    candidates: List[CandidateSchema] = Field(..., description="Candidate intents, best first")


ResolveResponse = Union[AnsweredResponse, AmbiguousResponse]


class ConfirmationResponse(BaseModel):
    answer: str
    intent_id: str
    learned: bool


class IntentSummary(BaseModel):
    id: str
    title: str
    description: str


class SuggestionResponse(BaseModel):
    """Quick suggestions for the chat widget"""
    items: List[IntentSummary]
    has_more: bool = Field(..., description="Whether more matches than shown exist")


class TranscriptMessage(BaseModel):
    role: Literal["user", "bot"]
    text: str
    created_at: datetime


class TranscriptResponse(BaseModel):
    session_id: str
    state: str
    pending_correction: Optional[str] = None
    messages: List[TranscriptMessage]


class LearnResponse(BaseModel):
    message: str = "Aprendizaje completado"
    intent_id: str
    generation: int
    variants: List[str]


class CatalogRefreshResponse(BaseModel):
    num_intents: int
    num_samples: int
    num_classes: int
    generation: int
