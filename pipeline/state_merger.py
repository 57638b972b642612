"""
Reconciles freshly parsed facts with the stored conversation state.
"""
import logging
from datetime import datetime, timezone
from typing import Optional

from models.parameters import LocationKind, ParsedQuery
from models.state import ConversationState

logger = logging.getLogger(__name__)

CONFIDENCE_GATED = "confidence_gated"
OVERWRITE = "overwrite"
MERGE_POLICIES = (CONFIDENCE_GATED, OVERWRITE)


def is_search_ready(state: ConversationState) -> bool:
    """A search needs a state and a case type; county is optional."""
    return bool(state.state) and state.case_type is not None


def _accepts(current_value, held_confidence: float, new_confidence: float, policy: str) -> bool:
    if policy == OVERWRITE or current_value is None:
        return True
    return new_confidence >= held_confidence


async def merge_state(current: ConversationState,
                      parsed: ParsedQuery,
                      corrector=None,
                      policy: str = OVERWRITE) -> ConversationState:
    """
    Merge parsed facts into the current state.

    A present parsed field replaces the stored one; absent fields leave the
    stored value alone. Under "confidence_gated" the replacement only happens
    when the new confidence is at least that of the value currently held.
    The aggregate confidence per field is the max of both sides. New
    county/state values go through the corrector once, before they are stored.

    Args:
        current: State loaded for the session
        parsed: Facts extracted from the latest utterance
        corrector: Optional LocationCorrector for new location values
        policy: "overwrite" or "confidence_gated"

    Returns:
        A new ConversationState
    """
    if policy not in MERGE_POLICIES:
        raise ValueError(f"Unknown merge policy: {policy}")

    merged = current.model_copy(deep=True)

    for kind in (LocationKind.COUNTY, LocationKind.STATE):
        field = kind.value
        incoming = getattr(parsed, field)
        if incoming is None:
            continue

        stored = getattr(current, field)
        held_confidence = getattr(current.value_confidence, field)
        incoming_confidence = getattr(parsed.confidence, field)

        if not _accepts(stored, held_confidence, incoming_confidence, policy):
            logger.info(f"Keeping {field} '{stored}' ({held_confidence:.2f}) over "
                        f"'{incoming}' ({incoming_confidence:.2f})")
            continue

        if stored and stored.strip().lower() == incoming.strip().lower():
            value = stored
        elif corrector is not None:
            value = await corrector.correct(incoming, kind)
        else:
            value = incoming

        logger.info(f"Setting {field}: '{stored}' -> '{value}'")
        setattr(merged, field, value)
        setattr(merged.value_confidence, field, incoming_confidence)

    if parsed.case_type is not None:
        if _accepts(current.case_type, current.value_confidence.case_type,
                    parsed.confidence.case_type, policy):
            merged.case_type = parsed.case_type
            merged.value_confidence.case_type = parsed.confidence.case_type
        else:
            logger.info(f"Keeping case_type '{current.case_type.value}' over '{parsed.case_type.value}'")

    for field in ("county", "state", "case_type"):
        setattr(merged.confidence, field,
                max(getattr(current.confidence, field), getattr(parsed.confidence, field)))

    merged.is_complete = is_search_ready(merged)
    merged.last_updated = datetime.now(timezone.utc)
    return merged


def empty_state(now: Optional[datetime] = None) -> ConversationState:
    """Fresh state for a session with no stored beliefs."""
    return ConversationState(last_updated=now or datetime.now(timezone.utc))
