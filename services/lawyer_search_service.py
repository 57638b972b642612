"""
Lawyer search: turns a finished conversation state into directory queries.
"""
import logging
import re
from typing import Any, Dict, List, Optional

from models.lawyer import LawyerRecord
from models.state import CaseType, ConversationState
from pipeline.case_classification import case_type_from_text
from pipeline.location_normalizer import county_search_token
from utils.errors import DirectoryError, PersistenceError

logger = logging.getLogger(__name__)

# Directory "type" column values per case category
CASE_TYPE_TAGS = {
    CaseType.CRIMINAL: "Criminal",
    CaseType.PERSONAL_INJURY: "Personal Injury",
}

SPECIALTY_LABELS = {
    CaseType.CRIMINAL: "Criminal Defense",
    CaseType.PERSONAL_INJURY: "Personal Injury",
}

PRACTICE_AREAS = {
    CaseType.CRIMINAL: ["Criminal Defense", "DUI Defense", "Court Representation"],
    CaseType.PERSONAL_INJURY: ["Personal Injury", "Car Accidents", "Insurance Claims"],
}


class LawyerSearchService:
    """Tiered lawyer lookup: ranked search, filtered scan, then state-only scan."""

    def __init__(self, directory, store=None, monitor=None):
        """
        Initialize the search service.

        Args:
            directory: DirectoryService
            store: ConversationStateStore, needed for search_for_session
            monitor: Optional ConversationMonitor
        """
        logger.info("Initializing lawyer search service")
        self.directory = directory
        self.store = store
        self.monitor = monitor

    async def search(self, state: ConversationState) -> List[LawyerRecord]:
        """
        Find lawyers for a conversation state.

        Args:
            state: Conversation state; its state field is required

        Returns:
            Lawyer records, empty when there is no state or every tier is empty
        """
        if not state.state:
            logger.info("No state provided, returning empty results")
            return []

        case_type = state.case_type
        type_tag = CASE_TYPE_TAGS.get(case_type)
        county_token = county_search_token(state.county)

        tiers = [
            ("ranked", lambda: self.directory.search_ranked(
                state.state, county=state.county, case_type=case_type.value if case_type else None)),
            ("filtered", lambda: self.directory.scan(state.state, county=county_token, type_tag=type_tag)),
        ]
        if county_token:
            tiers.append(("state_only", lambda: self.directory.scan(state.state, type_tag=type_tag)))

        for tier, run in tiers:
            try:
                rows = await run()
                records = [format_lawyer(row, case_type) for row in rows]
            except DirectoryError as e:
                logger.warning(f"Lawyer search tier '{tier}' failed: {str(e)}")
                continue
            except (AttributeError, TypeError, ValueError) as e:
                logger.warning(f"Lawyer search tier '{tier}' returned malformed rows: {str(e)}")
                continue

            if records:
                logger.info(f"Lawyer search tier '{tier}' found {len(records)} lawyers "
                            f"for {state.county or '-'}, {state.state}")
                self._log_search(tier, len(records))
                return records

            logger.info(f"Lawyer search tier '{tier}' returned no results")

        self._log_search(None, 0)
        return []

    async def search_for_session(self, session_id: str, case_type_override: Optional[str] = None) -> List[LawyerRecord]:
        """
        Search using the stored state of a session.

        Args:
            session_id: Chat session identifier
            case_type_override: Loose case type text that replaces the stored one

        Returns:
            Lawyer records; empty if the session has no usable state
        """
        if self.store is None:
            raise RuntimeError("search_for_session requires a state store")

        try:
            state = await self.store.get(session_id)
        except PersistenceError as e:
            logger.error(f"Could not load state for session {session_id}: {str(e)}")
            return []

        if state is None:
            logger.info(f"No state for session {session_id}, returning empty results")
            return []

        override = case_type_from_text(case_type_override)
        if override is not None:
            state = state.model_copy(update={"case_type": override})

        return await self.search(state)

    def _log_search(self, tier: Optional[str], count: int):
        if self.monitor is not None:
            self.monitor.log_search(tier, count)


def display_name(law_firm: str) -> str:
    """Derive a person-style display name from a firm name."""
    if not law_firm:
        return "Legal Professional"
    if "Law Offices of" in law_firm:
        return law_firm.replace("Law Offices of", "").strip() or law_firm
    if "&" in law_firm:
        return law_firm.split("&")[0].split(",")[0].strip() or law_firm
    if "Law Firm" in law_firm:
        return law_firm.replace("Law Firm", "").strip() or law_firm
    return re.split(r"\s+", law_firm.strip())[0]


def format_lawyer(raw: Dict[str, Any], case_type: Optional[CaseType] = None) -> LawyerRecord:
    """
    Convert a directory row (table scan or ranked search shape) into a
    LawyerRecord with synthesized display fields.
    """
    law_firm = raw.get("Law Firm") or raw.get("law_firm") or ""
    state = raw.get("state") or ""
    location = f"{raw.get('county') or raw.get('city') or 'Local'}, {state}"

    practice_areas = list(PRACTICE_AREAS.get(case_type, ["Legal Consultation"]))
    practice_areas.append(f"{state} Law")
    if raw.get("type"):
        practice_areas.insert(0, raw["type"])

    label = SPECIALTY_LABELS.get(case_type, "Legal")
    practice = label.lower() if case_type else "legal"

    return LawyerRecord(
        id=str(raw.get("id", "")),
        state=raw.get("state"),
        county=raw.get("county"),
        city=raw.get("city"),
        law_firm=law_firm,
        phone_number=raw.get("Phone Number") or raw.get("phone_number") or "",
        email=raw.get("email"),
        website=raw.get("website"),
        type=raw.get("type"),
        created_at=raw.get("created_at"),
        relevance_score=raw.get("relevance_score"),
        name=display_name(law_firm),
        specialty=f"{label} Specialist in {location}",
        description=(f"Experienced {practice} professional serving {location}. "
                     f"We provide comprehensive legal services with a focus on "
                     f"achieving the best outcomes for our clients."),
        practice_areas=practice_areas,
    )
