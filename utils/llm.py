"""
LLM setup and utility functions.
"""
from langchain_google_genai import ChatGoogleGenerativeAI
from typing import Any, Dict, Optional
import logging

from config import LLM_CONFIG

logger = logging.getLogger(__name__)

def get_llm(config: Optional[Dict[str, Any]] = None) -> ChatGoogleGenerativeAI:
    """
    Initialize and return an LLM instance.

    Args:
        config: LLM settings, defaults to LLM_CONFIG

    Returns:
        ChatGoogleGenerativeAI: Configured LLM instance
    """
    config = config or LLM_CONFIG
    try:
        llm = ChatGoogleGenerativeAI(
            model=config["model"],
            temperature=config["temperature"],
            api_key=config["api_key"],
            max_output_tokens=config.get("max_output_tokens"),
            timeout=config.get("timeout"),
            max_retries=0,
        )
        return llm
    except Exception as e:
        logger.error(f"Failed to initialize LLM: {str(e)}")
        raise
