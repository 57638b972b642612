"""
Conversation orchestrator: the per-utterance entry point.
"""
import logging
import time
from typing import Optional

from pydantic import BaseModel

from models.state import ConversationState, TurnState
from pipeline.graph import build_conversation_graph
from pipeline.state_merger import OVERWRITE, empty_state

logger = logging.getLogger(__name__)


class ProcessResult(BaseModel):
    """Outcome of one processed utterance."""
    state: ConversationState
    should_search: bool = False
    annotated_message: str
    search_location_label: Optional[str] = None
    parse_source: str = "none"


class ConversationOrchestrator:
    """Runs the turn graph and guarantees a result for every utterance."""

    def __init__(self, store, corrector, parser=None,
                 merge_policy: str = OVERWRITE,
                 monitor=None):
        """
        Initialize the orchestrator.

        Args:
            store: ConversationStateStore
            corrector: LocationCorrector
            parser: QueryParser, or None to use rule-based extraction only
            merge_policy: State merge policy
            monitor: Optional ConversationMonitor
        """
        logger.info("Initializing conversation orchestrator")
        self.store = store
        self.monitor = monitor
        self.graph = build_conversation_graph(store, corrector, parser=parser, merge_policy=merge_policy)

    async def process(self, utterance: str, session_id: str) -> ProcessResult:
        """
        Process one user utterance.

        Never raises: any failure yields an empty state, no search and the
        utterance passed through unannotated.

        Args:
            utterance: Raw user text
            session_id: Chat session identifier

        Returns:
            ProcessResult for the turn
        """
        logger.info(f"Processing message for session {session_id}: '{utterance[:100]}'")
        start_time = time.time()

        initial_state = TurnState(
            utterance=utterance,
            session_id=session_id,
            parse_error=None,
            parse_source="none",
            metadata={"turn_timestamp": start_time},
        )

        error = None
        try:
            turn = await self.graph.ainvoke(initial_state)
            result = ProcessResult(
                state=turn["merged_state"],
                should_search=turn["should_search"],
                annotated_message=turn["annotated_message"],
                search_location_label=turn.get("search_location_label"),
                parse_source=turn.get("parse_source") or "none",
            )
        except Exception as e:
            error = str(e)
            logger.error(f"Error processing message for session {session_id}: {error}")
            result = ProcessResult(
                state=empty_state(),
                should_search=False,
                annotated_message=utterance,
            )

        execution_time = time.time() - start_time
        logger.info(f"Turn completed in {execution_time:.2f}s, "
                    f"source={result.parse_source}, should_search={result.should_search}")

        if self.monitor is not None:
            self.monitor.log_turn(result.model_dump(), execution_time, error=error)

        return result
