"""
Main entry point for the legal intake assistant.
"""
import asyncio
import logging
import uuid
from typing import Any, Dict, Optional

from config import get_config
from pipeline.location_correction import LocationCorrector
from pipeline.parameter_extraction import QueryParser
from services.conversation_service import ConversationStateStore
from services.directory_service import DirectoryService
from services.lawyer_search_service import LawyerSearchService
from services.orchestrator_service import ConversationOrchestrator
from utils.llm import get_llm
from utils.monitoring import ConversationMonitor

logger = logging.getLogger(__name__)


def build_assistant(config: Optional[Dict[str, Any]] = None, llm=None, directory=None, store=None) -> Dict[str, Any]:
    """
    Wire up the assistant components from configuration.

    Args:
        config: Configuration dictionary, defaults to get_config()
        llm: Chat model override for the query parser
        directory: DirectoryService override
        store: ConversationStateStore override

    Returns:
        Dictionary of initialized components
    """
    config = config or get_config()
    logger.info(f"Initializing legal intake assistant: LLM={config['llm']['model']}, "
                f"merge_policy={config['merge']['policy']}, features={config['features']}")

    monitor = ConversationMonitor()
    directory = directory or DirectoryService.from_config(config["directory"])
    store = store or ConversationStateStore.from_config(config["state_store"], config["redis"])
    corrector = LocationCorrector(directory, config["directory"]["similarity_threshold"])

    parser = None
    if config["features"]["use_ai_parser"]:
        parser = QueryParser(llm or get_llm(config["llm"]), timeout=config["llm"]["timeout"])
    else:
        logger.info("AI parser disabled, using rule-based extraction only")

    orchestrator = ConversationOrchestrator(
        store,
        corrector,
        parser=parser,
        merge_policy=config["merge"]["policy"],
        monitor=monitor,
    )
    lawyer_search = LawyerSearchService(directory, store=store, monitor=monitor)

    return {
        "orchestrator": orchestrator,
        "lawyer_search": lawyer_search,
        "directory": directory,
        "store": store,
        "monitor": monitor,
        "config": config,
    }


async def run_demo():
    """Walk through a short conversation and print what the assistant understood."""
    system = build_assistant()
    orchestrator = system["orchestrator"]
    lawyer_search = system["lawyer_search"]
    session_id = str(uuid.uuid4())

    conversation = [
        "I got a DUI in Los Angeles California",
        "Actually, I'm in Orange County",
    ]

    print("\n=== TESTING CONVERSATION FLOW ===")
    try:
        for idx, utterance in enumerate(conversation):
            result = await orchestrator.process(utterance, session_id)
            print(f"\nCONVERSATION STEP {idx + 1}: {utterance}")
            print(f"Parse source: {result.parse_source}")
            print(f"State: {result.state.model_dump(exclude={'last_updated'})}")
            print(f"Should search: {result.should_search}")
            print(f"Annotated: {result.annotated_message}")
            print("-" * 80)

            if result.should_search:
                lawyers = await lawyer_search.search(result.state)
                print(f"Found {len(lawyers)} lawyers")
                for lawyer in lawyers[:3]:
                    print(f"  {lawyer.name} - {lawyer.law_firm} ({lawyer.specialty})")
    finally:
        await system["directory"].aclose()

    print("\n=== SYSTEM HEALTH METRICS ===")
    for metric, value in system["monitor"].get_system_health().items():
        print(f"{metric}: {value}")
    print("-" * 80)


if __name__ == "__main__":
    # Configure logging
    logging.basicConfig(
        level=get_config()["app"]["log_level"],
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    asyncio.run(run_demo())
