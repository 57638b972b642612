"""
Graph structure for the per-turn LangGraph conversation pipeline.
"""
import logging
from typing import Any, Dict

from langgraph.graph import StateGraph, END

from models.state import TurnState
from pipeline.annotation import annotate_message, search_location_label
from pipeline.fallback_extraction import extract
from pipeline.state_merger import OVERWRITE, empty_state, is_search_ready, merge_state
from utils.errors import ParseError

logger = logging.getLogger(__name__)


def build_conversation_graph(store, corrector, parser=None, merge_policy: str = OVERWRITE):
    """
    Create the LangGraph for one conversation turn.

    load_state -> parse_with_ai -> (fallback_extract) -> merge_state
    -> persist_state -> annotate -> END

    Args:
        store: ConversationStateStore
        corrector: LocationCorrector applied to new location values
        parser: QueryParser, or None to always use fallback extraction
        merge_policy: Policy passed to merge_state

    Returns:
        Compiled graph; run it with ``await graph.ainvoke(turn_state)``
    """

    async def load_state(state: TurnState) -> Dict[str, Any]:
        current = await store.get(state["session_id"])
        if current is None:
            logger.info(f"No existing state for session {state['session_id']}, starting fresh")
            current = empty_state()
        return {"current_state": current}

    async def parse_with_ai(state: TurnState) -> Dict[str, Any]:
        if parser is None:
            return {"parse_error": "AI_PARSER_DISABLED"}
        try:
            parsed = await parser.parse(state["utterance"])
        except ParseError as e:
            logger.warning(f"AI parsing failed, falling back to rule-based extraction: {str(e)}")
            return {"parse_error": str(e)}
        return {"parsed_query": parsed, "parse_source": "ai", "parse_error": None}

    def fallback_extract(state: TurnState) -> Dict[str, Any]:
        return {"parsed_query": extract(state["utterance"]), "parse_source": "fallback"}

    async def merge(state: TurnState) -> Dict[str, Any]:
        merged = await merge_state(
            state["current_state"],
            state["parsed_query"],
            corrector=corrector,
            policy=merge_policy,
        )
        logger.info(f"Updated state: county={merged.county}, state={merged.state}, "
                    f"case_type={merged.case_type.value if merged.case_type else None}")
        return {"merged_state": merged}

    async def persist_state(state: TurnState) -> Dict[str, Any]:
        await store.save(state["session_id"], state["merged_state"])
        return {"metadata": {**(state.get("metadata") or {}), "persisted": True}}

    def annotate(state: TurnState) -> Dict[str, Any]:
        merged = state["merged_state"]
        return {
            "should_search": is_search_ready(merged),
            "annotated_message": annotate_message(state["utterance"], merged),
            "search_location_label": search_location_label(merged),
        }

    graph = StateGraph(TurnState)

    graph.add_node("load_state", load_state)
    graph.add_node("parse_with_ai", parse_with_ai)
    graph.add_node("fallback_extract", fallback_extract)
    graph.add_node("merge_state", merge)
    graph.add_node("persist_state", persist_state)
    graph.add_node("annotate", annotate)

    graph.add_edge("load_state", "parse_with_ai")

    def has_parse_error(state):
        return state.get("parse_error") is not None

    graph.add_conditional_edges(
        "parse_with_ai",
        has_parse_error,
        {True: "fallback_extract", False: "merge_state"}
    )

    graph.add_edge("fallback_extract", "merge_state")
    graph.add_edge("merge_state", "persist_state")
    graph.add_edge("persist_state", "annotate")
    graph.add_edge("annotate", END)

    graph.set_entry_point("load_state")

    logger.info("Conversation graph built successfully")
    return graph.compile()
