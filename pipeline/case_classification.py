"""
Case category classification for user utterances.
"""
import logging
import re
from typing import Dict, Optional, Tuple

from models.state import CaseType

logger = logging.getLogger(__name__)

# Impaired-driving language always means a criminal matter
IMPAIRED_DRIVING_PATTERN = re.compile(r"\b(dui|dwi|owi|drunk driving|driving under the influence)\b")

# Declaration order is the tie-break: criminal wins over personal injury
CASE_TYPE_KEYWORDS: Dict[CaseType, Tuple[str, ...]] = {
    CaseType.CRIMINAL: (
        "arrest", "arrested", "arrests", "criminal", "court", "courts", "police",
        "jail", "jailed", "citation", "citations", "ticket", "tickets",
        "pulled over", "charged", "charges", "offense", "offenses", "felony",
        "felonies", "misdemeanor", "misdemeanors", "killed", "murder", "murdered",
        "assault", "assaulted", "theft", "stole", "stolen", "stealing",
        "probation", "warrant", "warrants",
    ),
    CaseType.PERSONAL_INJURY: (
        "accident", "accidents", "crash", "crashed", "crashes", "injury",
        "injuries", "injured", "hurt", "damages", "medical", "collision",
        "collisions", "hit by", "personal injury", "compensation",
        "slip and fall", "whiplash",
    ),
}

# Whole words only: "court" must not match "courtesy"
_KEYWORD_PATTERNS = {
    case_type: re.compile(r"\b(" + "|".join(re.escape(k) for k in keywords) + r")\b")
    for case_type, keywords in CASE_TYPE_KEYWORDS.items()
}


def classify(utterance_lower: str) -> Optional[CaseType]:
    """
    Classify an utterance into a case category.

    Args:
        utterance_lower: The lowercased user utterance

    Returns:
        The matching case type, or None when no keyword matches
    """
    text = utterance_lower.lower()

    if IMPAIRED_DRIVING_PATTERN.search(text):
        logger.debug("Impaired-driving keyword found, classifying as criminal")
        return CaseType.CRIMINAL

    for case_type, pattern in _KEYWORD_PATTERNS.items():
        match = pattern.search(text)
        if match:
            logger.debug(f"Keyword '{match.group(1)}' classified as {case_type.value}")
            return case_type

    return None


def case_type_from_text(value: Optional[str]) -> Optional[CaseType]:
    """
    Loose mapping of a caller-supplied case type string ("DUI", "car accident",
    "personal_injury") onto the fixed categories.
    """
    if not value:
        return None
    lowered = value.lower()
    if "criminal" in lowered or "dui" in lowered or "dwi" in lowered:
        return CaseType.CRIMINAL
    if "injury" in lowered or "accident" in lowered:
        return CaseType.PERSONAL_INJURY
    return None
