"""
State definitions for the legal intake assistant.
"""
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional, TypedDict

from pydantic import BaseModel, Field, field_validator


class CaseType(str, Enum):
    """Fixed set of legal case categories."""
    CRIMINAL = "criminal"
    PERSONAL_INJURY = "personal_injury"


CONFIDENCE_FIELDS = ("county", "state", "case_type")


class Confidence(BaseModel):
    """Per-field confidence, each in [0, 1]."""
    county: float = 0.0
    state: float = 0.0
    case_type: float = 0.0

    @field_validator("county", "state", "case_type", mode="before")
    @classmethod
    def clamp(cls, v):
        """Coerce missing values to zero and clamp into [0, 1]."""
        if v is None:
            return 0.0
        return min(1.0, max(0.0, float(v)))


class ConversationState(BaseModel):
    """
    Belief state for one chat session: where the user needs a lawyer and
    what kind of case they have.
    """
    county: Optional[str] = None
    state: Optional[str] = None
    case_type: Optional[CaseType] = None
    confidence: Confidence = Field(default_factory=Confidence)
    # Confidence reported for the values held right now. Unlike `confidence`
    # this drops when a value is replaced by a less certain one.
    value_confidence: Confidence = Field(default_factory=Confidence)
    is_complete: bool = False
    last_updated: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def to_json_dict(self) -> Dict[str, Any]:
        """Return the JSON-serializable blob stored per session."""
        return self.model_dump(mode="json")

    def same_beliefs(self, other: "ConversationState") -> bool:
        """Compare two states ignoring the timestamp."""
        exclude = {"last_updated"}
        return self.model_dump(exclude=exclude) == other.model_dump(exclude=exclude)


class TurnState(TypedDict, total=False):
    """
    Represents the state of the per-turn conversation graph.
    """
    # Input
    utterance: str
    session_id: str

    # Parsing
    current_state: ConversationState
    parsed_query: Any  # ParsedQuery
    parse_source: str  # "ai" | "fallback" | "none"
    parse_error: Optional[str]

    # Output
    merged_state: ConversationState
    should_search: bool
    annotated_message: str
    search_location_label: Optional[str]

    # Metadata about the turn
    metadata: Dict[str, Any]
