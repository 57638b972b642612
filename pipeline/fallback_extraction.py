"""
Deterministic extraction of location and case type from one utterance.

Used whenever the AI query parser is unavailable or returns something
unusable, so it must work with no external dependencies at all.
"""
import difflib
import logging
import re
from typing import List, Optional

from data.locations import (
    ABBREVIATION_COLLISIONS,
    ABBREVIATIONS_LOWER,
    CITY_COUNTIES,
    COUNTY_LEADING_NOISE,
    NON_LOCATION_WORDS,
    STATE_NAMES_LOWER,
)
from models.parameters import ParsedQuery
from models.state import Confidence
from pipeline.case_classification import classify
from pipeline.location_normalizer import canonical_state, title_case

logger = logging.getLogger(__name__)

# Fixed confidences for rule-based matches
STATE_CONFIDENCE = 0.8
COUNTY_CONFIDENCE = 0.7
CASE_TYPE_CONFIDENCE = 0.8

# Minimum difflib ratio for a comma-qualified token to count as a misspelt state
NEAR_MISS_CUTOFF = 0.75
MIN_COUNTY_LENGTH = 3
MAX_COUNTY_WORDS = 3

_ABBREVIATION_ALT = "|".join(sorted(ABBREVIATIONS_LOWER))
_STATE_NAME_ALT = "|".join(
    re.escape(name) for name in sorted(STATE_NAMES_LOWER, key=len, reverse=True)
)

END_ABBREVIATION_PATTERN = re.compile(rf"(?:^|[\s,])({_ABBREVIATION_ALT})[\s.!?]*$")
PREPOSITION_COMMA_PATTERN = re.compile(r"\b(?:in|at|from)\s+([a-z][a-z .'-]*?)\s*,\s*([a-z][a-z .'-]*)")
FULL_STATE_PATTERN = re.compile(rf"\b({_STATE_NAME_ALT})\b")
ABBREVIATION_PATTERN = re.compile(rf"\b({_ABBREVIATION_ALT})\b")
DC_PATTERN = re.compile(r"\bwashington,?\s*d\.?\s?c\b")
COUNTY_PATTERN = re.compile(r"\bcounty\b")
COUNTY_WORD_PATTERN = re.compile(r"^[a-z][a-z.'-]*$")


def extract(utterance: str) -> ParsedQuery:
    """
    Extract county, state and case type from a single utterance.

    Args:
        utterance: Raw user text

    Returns:
        ParsedQuery with fixed rule-based confidences
    """
    text = " ".join(utterance.lower().split())

    state = _find_state(text, utterance)
    county = _find_county(text)

    if county is None:
        county, city_state = _find_city_county(text)
        if state is None:
            state = city_state

    case_type = classify(text)

    logger.info(f"Fallback extraction for '{utterance[:100]}': "
                f"county={county}, state={state}, case_type={case_type.value if case_type else None}")

    return ParsedQuery(
        county=county,
        state=state,
        case_type=case_type,
        confidence=Confidence(
            county=COUNTY_CONFIDENCE if county else 0.0,
            state=STATE_CONFIDENCE if state else 0.0,
            case_type=CASE_TYPE_CONFIDENCE if case_type else 0.0,
        ),
    )


def _find_state(text: str, utterance: str) -> Optional[str]:
    """Try each state rule in priority order; first hit wins."""
    # 1. Abbreviation closing the message: "... in monroe ny"
    match = END_ABBREVIATION_PATTERN.search(text)
    if match and _trusted_end_abbreviation(match, text, utterance):
        state = ABBREVIATIONS_LOWER[match.group(1)]
        logger.debug(f"End-of-text abbreviation '{match.group(1)}' -> {state}")
        return state

    # 2. "in/at/from <place>, <state>"
    for match in PREPOSITION_COMMA_PATTERN.finditer(text):
        state = _state_from_qualifier(match.group(2))
        if state:
            logger.debug(f"Comma-qualified location '{match.group(0)}' -> {state}")
            return state

    # 3. Full state name anywhere
    if DC_PATTERN.search(text):
        return "District of Columbia"
    match = FULL_STATE_PATTERN.search(text)
    if match:
        return STATE_NAMES_LOWER[match.group(1)]

    # 4. Bare abbreviation anywhere, skipping ones that double as words
    for match in ABBREVIATION_PATTERN.finditer(text):
        token = match.group(1)
        if token not in ABBREVIATION_COLLISIONS:
            logger.debug(f"Bare abbreviation '{token}' -> {ABBREVIATIONS_LOWER[token]}")
            return ABBREVIATIONS_LOWER[token]

    return None


def _trusted_end_abbreviation(match, text: str, utterance: str) -> bool:
    """
    A closing abbreviation that doubles as a word ("... help me") is only read
    as a state when typed in capitals or set off by a comma.
    """
    token = match.group(1)
    if token not in ABBREVIATION_COLLISIONS:
        return True
    if text[: match.start(1)].rstrip().endswith(","):
        return True
    return re.search(rf"\b{token.upper()}[\s.!?]*$", utterance.strip()) is not None


def _state_from_qualifier(tail: str) -> Optional[str]:
    """
    Read the state from the text following a comma. Known names and
    abbreviations are canonicalized; a near miss of a state name is returned
    as typed so the location corrector can repair it.
    """
    words = tail.strip(" .'-").split()
    if not words:
        return None

    for size in (3, 2, 1):
        if len(words) >= size:
            # "me", "or", "in"... only count when nothing follows them
            if size == 1 and words[0] in ABBREVIATION_COLLISIONS and len(words) > 1:
                continue
            state = canonical_state(" ".join(words[:size]))
            if state:
                return state

    for size in (2, 1):
        if len(words) < size:
            continue
        candidate = " ".join(words[:size]).strip(".'-")
        if len(candidate) < 4 or candidate in NON_LOCATION_WORDS:
            continue
        if difflib.get_close_matches(candidate, list(STATE_NAMES_LOWER), n=1, cutoff=NEAR_MISS_CUTOFF):
            logger.debug(f"'{candidate}' looks like a misspelt state, keeping it for correction")
            return title_case(candidate)

    return None


def _find_county(text: str) -> Optional[str]:
    """Find "<word(s)> county", walking back from the suffix to the first noise word."""
    for match in COUNTY_PATTERN.finditer(text):
        preceding = text[: match.start()].split()[-MAX_COUNTY_WORDS:]
        words: List[str] = []
        for word in reversed(preceding):
            if not COUNTY_WORD_PATTERN.match(word):
                break
            if word in COUNTY_LEADING_NOISE or word in NON_LOCATION_WORDS:
                break
            words.insert(0, word)

        candidate = " ".join(words)
        if len(candidate) < MIN_COUNTY_LENGTH:
            logger.debug(f"Rejected county candidate near '{text[max(0, match.start() - 30):match.end()]}'")
            continue
        return f"{title_case(candidate)} County"

    return None


def _find_city_county(text: str):
    """Consolidated city-counties such as Honolulu imply both county and state."""
    for city, state in CITY_COUNTIES.items():
        if re.search(rf"\b{re.escape(city)}\b", text):
            logger.debug(f"City-county '{city}' mentioned, implying {state}")
            return f"{title_case(city)} County", state
    return None, None
