"""
Lawyer record as returned to the chat UI.
"""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class LawyerRecord(BaseModel):
    """
    A directory row plus display fields synthesized for the UI. The display
    fields are presentation fallbacks, not facts from the legal directory.
    """
    model_config = ConfigDict(populate_by_name=True)

    id: str
    state: Optional[str] = None
    county: Optional[str] = None
    city: Optional[str] = None
    law_firm: str = ""
    phone_number: str = ""
    email: Optional[str] = None
    website: Optional[str] = None
    type: Optional[str] = None
    created_at: Optional[str] = None
    relevance_score: Optional[float] = None

    # Synthesized display fields
    name: str = "Legal Professional"
    specialty: str = ""
    description: str = ""
    practice_areas: List[str] = Field(default_factory=list)
