"""
Builds the annotated message handed to the downstream responder.
"""
from typing import Optional

from models.state import CaseType, ConversationState

CASE_TYPE_LABELS = {
    CaseType.CRIMINAL: "criminal defense",
    CaseType.PERSONAL_INJURY: "personal injury",
}


def search_location_label(state: ConversationState) -> Optional[str]:
    """
    "County, State" when both are known, the state alone otherwise. A county
    without a state is not a usable location.
    """
    if not state.state:
        return None
    if state.county:
        return f"{state.county}, {state.state}"
    return state.state


def annotate_message(utterance: str, state: ConversationState) -> str:
    """
    Append the resolved location and case type as bracketed metadata. The
    user's own wording is kept verbatim in front.
    """
    if not (state.state or state.county or state.case_type):
        return utterance

    location = search_location_label(state) or state.county or "unspecified"
    case_type = CASE_TYPE_LABELS.get(state.case_type, "unspecified")
    return f"{utterance} [LOCATION: {location}] [CASE_TYPE: {case_type}]"
