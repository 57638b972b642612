"""
AI query parsing: asks the language model for county, state and case type.
"""
import asyncio
import json
import logging
import re
from typing import Any, Optional

from pydantic import ValidationError

from models.parameters import AIParseResult, ParsedQuery
from utils.errors import ParseError
from utils.prompts import QUERY_PARSER_PROMPT

logger = logging.getLogger(__name__)

JSON_OBJECT_PATTERN = re.compile(r"\{.*\}", re.DOTALL)


class QueryParser:
    """Best-effort structured extraction backed by a chat model."""

    def __init__(self, llm: Any, timeout: Optional[float] = 10.0, prompt=QUERY_PARSER_PROMPT):
        """
        Initialize the parser.

        Args:
            llm: LangChain chat model (or anything composable with a prompt)
            timeout: Seconds to wait for the model before giving up
            prompt: Prompt template to use
        """
        self.chain = prompt | llm
        self.timeout = timeout

    async def parse(self, utterance: str) -> ParsedQuery:
        """
        Extract structured facts from an utterance.

        Args:
            utterance: Raw user text

        Returns:
            ParsedQuery built from the model output

        Raises:
            ParseError: on any call failure, timeout or unusable output
        """
        logger.info(f"Parsing with AI: '{utterance[:100]}'")

        try:
            response = await asyncio.wait_for(
                self.chain.ainvoke({"utterance": utterance}),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            raise ParseError(f"Query parser timed out after {self.timeout}s") from e
        except Exception as e:
            raise ParseError(f"Query parser call failed: {str(e)}") from e

        content = getattr(response, "content", None)
        if not isinstance(content, str) or not content.strip():
            raise ParseError("Query parser response is missing message content")

        logger.debug(f"Raw query parser content: {content}")
        return parse_model_output(content)


def parse_model_output(content: str) -> ParsedQuery:
    """
    Validate raw model output into a ParsedQuery.

    Args:
        content: Text returned by the model

    Returns:
        The parsed query

    Raises:
        ParseError: if no JSON object is present or it has the wrong shape
    """
    match = JSON_OBJECT_PATTERN.search(content)
    if not match:
        raise ParseError("No JSON object found in query parser output")

    try:
        raw = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise ParseError(f"Query parser output is not valid JSON: {str(e)}") from e

    if not isinstance(raw, dict):
        raise ParseError("Query parser output is not a JSON object")

    try:
        result = AIParseResult(**raw)
    except ValidationError as e:
        raise ParseError(f"Query parser output failed validation: {str(e)}") from e

    parsed = result.to_parsed_query()
    logger.info(f"AI parsed: county={parsed.county}, state={parsed.state}, "
                f"case_type={parsed.case_type.value if parsed.case_type else None}")
    return parsed
