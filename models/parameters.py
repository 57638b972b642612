"""
Models for structured facts extracted from a single user utterance.
"""
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from models.state import CaseType, Confidence


class LocationKind(str, Enum):
    """Which directory column a location token belongs to."""
    COUNTY = "county"
    STATE = "state"


class ParsedQuery(BaseModel):
    """Facts extracted from one utterance by the AI parser or the fallback extractor."""
    county: Optional[str] = None
    state: Optional[str] = None
    case_type: Optional[CaseType] = None
    confidence: Confidence = Field(default_factory=Confidence)

    @field_validator("county", "state", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        """Treat empty strings as absent."""
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v

    def is_empty(self) -> bool:
        return self.county is None and self.state is None and self.case_type is None


class AIConfidence(BaseModel):
    """Confidence block as reported by the model."""
    county: Optional[float] = 0.0
    state: Optional[float] = 0.0
    caseType: Optional[float] = 0.0


class AIParseResult(BaseModel):
    """
    Shape the query parser model is instructed to return. Validated at the
    boundary so malformed upstream JSON is rejected in one place.
    """
    county: Optional[str] = None
    state: Optional[str] = None
    caseType: Optional[CaseType] = None
    confidence: Optional[AIConfidence] = None

    @field_validator("county", "state", "caseType", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    def to_parsed_query(self) -> ParsedQuery:
        confidence = self.confidence or AIConfidence()
        return ParsedQuery(
            county=self.county,
            state=self.state,
            case_type=self.caseType,
            confidence=Confidence(
                county=confidence.county,
                state=confidence.state,
                case_type=confidence.caseType,
            ),
        )


class DirectorySuggestion(BaseModel):
    """Ranked location suggestion returned by the directory."""
    location: str
    location_type: Optional[str] = None
    similarity_score: float = 0.0

    @field_validator("similarity_score", mode="before")
    @classmethod
    def validate_score(cls, v):
        """Ensure scores fall within [0, 1]."""
        if v is None:
            return 0.0
        return min(1.0, max(0.0, float(v)))
