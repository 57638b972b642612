"""
Location normalization: turns free-text state/county tokens into the
candidate spellings the directory may store them under.
"""
import logging
import re
from typing import List, Optional, Union

from data.locations import (
    ABBREVIATIONS_LOWER,
    COUNTY_SUFFIX,
    STATE_NAMES_LOWER,
    US_STATES,
)
from models.parameters import LocationKind

logger = logging.getLogger(__name__)

# First letter of each word, of each hyphenated part and after an O' style prefix
WORD_START_PATTERN = re.compile(r"(?:^|(?<=[\s-])|(?<=\b[a-z]'))[a-z]")


def _clean(raw: Optional[str]) -> str:
    return " ".join((raw or "").lower().split()).strip(" .,")


def canonical_state(raw: Optional[str]) -> Optional[str]:
    """
    Map a full state name (any case) or postal abbreviation to its canonical
    full name, e.g. "ny" -> "New York". Returns None for unknown input.
    """
    cleaned = _clean(raw)
    if cleaned in STATE_NAMES_LOWER:
        return STATE_NAMES_LOWER[cleaned]
    if cleaned in ABBREVIATIONS_LOWER:
        return ABBREVIATIONS_LOWER[cleaned]
    return None


def state_candidates(raw: str) -> List[str]:
    """Candidates for a state token: the input, then full name or abbreviation."""
    cleaned = _clean(raw)
    candidates = [cleaned]

    state = canonical_state(cleaned)
    if state is None:
        return candidates

    for variant in (state.lower(), US_STATES[state].lower()):
        if variant not in candidates:
            candidates.append(variant)
    return candidates


def county_candidates(raw: str) -> List[str]:
    """Candidates for a county token: the input, then with/without the "County" suffix."""
    cleaned = _clean(raw)
    candidates = [cleaned]
    if not cleaned:
        return candidates

    if cleaned.endswith(COUNTY_SUFFIX):
        bare = cleaned[: -len(COUNTY_SUFFIX)].strip()
        if bare:
            candidates.append(bare)
    elif cleaned != COUNTY_SUFFIX.strip():
        candidates.append(f"{cleaned}{COUNTY_SUFFIX}")
    return candidates


def normalize(raw: str, kind: Union[LocationKind, str]) -> List[str]:
    """
    Return an ordered, de-duplicated list of lowercase candidate spellings,
    cheapest first. Unknown input comes back as its own sole candidate.

    Args:
        raw: Free-text location token
        kind: "county" or "state"

    Returns:
        Candidate spellings to try against the directory
    """
    kind = LocationKind(kind)
    if kind is LocationKind.STATE:
        candidates = state_candidates(raw)
    else:
        candidates = county_candidates(raw)

    logger.debug(f"Normalized {kind.value} '{raw}' -> {candidates}")
    return candidates


def county_search_token(county: Optional[str]) -> Optional[str]:
    """County name without the suffix, for partial matching against the directory."""
    if not county:
        return None
    cleaned = _clean(county)
    if cleaned.endswith(COUNTY_SUFFIX):
        return cleaned[: -len(COUNTY_SUFFIX)].strip() or cleaned
    return cleaned


def title_case(value: str) -> str:
    """Title-case a lowercase location token, including hyphenated parts ("Miami-Dade")."""
    return WORD_START_PATTERN.sub(lambda m: m.group(0).upper(), " ".join(value.split()))
