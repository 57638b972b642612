"""
Typo correction of location tokens against the lawyer directory.
"""
import logging
from typing import Union

from models.parameters import LocationKind
from pipeline.location_normalizer import normalize
from utils.errors import CorrectionError

logger = logging.getLogger(__name__)


class LocationCorrector:
    """Resolve raw county/state tokens to the spelling the directory uses."""

    def __init__(self, directory, similarity_threshold: float = 0.5):
        """
        Initialize the corrector.

        Args:
            directory: DirectoryService (or compatible) used for lookups
            similarity_threshold: Minimum score for an untyped suggestion
        """
        self.directory = directory
        self.similarity_threshold = similarity_threshold

    async def correct(self, raw: str, kind: Union[LocationKind, str]) -> str:
        """
        Return the canonical directory spelling of a location, or the input
        unchanged when nothing good enough is found. Never raises.

        Args:
            raw: Location token as extracted from the utterance
            kind: "county" or "state"

        Returns:
            Corrected location string
        """
        kind = LocationKind(kind)
        if not raw or not raw.strip():
            return raw

        try:
            return await self._resolve(raw, kind)
        except CorrectionError as e:
            logger.warning(f"Location lookup failed for {kind.value} '{raw}', keeping input: {str(e)}")
        except Exception as e:
            logger.error(f"Unexpected error correcting {kind.value} '{raw}': {str(e)}")
        return raw

    async def _resolve(self, raw: str, kind: LocationKind) -> str:
        # Tier 1: trust the directory's own spelling
        for candidate in normalize(raw, kind):
            exact = await self.directory.find_exact(kind, candidate)
            if exact:
                logger.info(f"Exact {kind.value} match '{raw}' = '{exact}'")
                return exact

        suggestions = await self.directory.location_suggestions(raw.strip())
        if not suggestions:
            logger.info(f"No {kind.value} suggestions for '{raw}'")
            return raw

        # Tier 2: best suggestion of the requested kind
        typed = [s for s in suggestions if s.location_type == kind.value]
        if typed:
            best = typed[0]
            logger.info(f"Corrected {kind.value} '{raw}' -> '{best.location}' "
                        f"(similarity: {best.similarity_score:.2f})")
            return best.location

        # Tier 3: best suggestion of any kind, if it is close enough
        best = suggestions[0]
        if best.similarity_score > self.similarity_threshold:
            logger.info(f"General correction '{raw}' -> '{best.location}' "
                        f"(similarity: {best.similarity_score:.2f})")
            return best.location

        logger.info(f"No good {kind.value} match for '{raw}', keeping input")
        return raw
