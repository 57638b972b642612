"""
Integration tests for the assistant wiring and the HTTP API.
"""
import unittest
import sys
import os
from unittest.mock import AsyncMock, MagicMock
import logging
import json

from fastapi.testclient import TestClient

# Add parent directory to path to allow imports
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from langchain_core.language_models.fake_chat_models import FakeListChatModel

from api.main import create_app
from config import get_config
from main import build_assistant
from services.conversation_service import ConversationStateStore
from utils.errors import PersistenceError

# Disable logging during tests
logging.disable(logging.CRITICAL)

RANKED_ROW = {
    "id": "42",
    "state": "California",
    "county": "Orange County",
    "law_firm": "Smith & Jones",
    "phone_number": "(714) 555-0199",
    "type": "Criminal",
    "relevance_score": 0.93,
}

def _config(use_ai_parser=False):
    config = get_config()
    return {**config, "features": {**config["features"], "use_ai_parser": use_ai_parser}}

def _directory():
    directory = MagicMock()
    directory.find_exact = AsyncMock(return_value=None)
    directory.location_suggestions = AsyncMock(return_value=[])
    directory.search_ranked = AsyncMock(return_value=[RANKED_ROW])
    directory.scan = AsyncMock(return_value=[])
    directory.aclose = AsyncMock()
    return directory

class TestBuildAssistant(unittest.IsolatedAsyncioTestCase):
    """Tests for component wiring."""

    async def test_rule_based_only(self):
        system = build_assistant(_config(False), directory=_directory(), store=ConversationStateStore())

        self.assertEqual(
            set(system),
            {"orchestrator", "lawyer_search", "directory", "store", "monitor", "config"}
        )
        result = await system["orchestrator"].process("I got a DUI in Texas", "s1")
        self.assertEqual(result.parse_source, "fallback")

    async def test_with_ai_parser(self):
        response = json.dumps({"county": None, "state": "Texas", "caseType": "criminal",
                               "confidence": {"state": 0.9, "caseType": 0.9}})
        system = build_assistant(_config(True), llm=FakeListChatModel(responses=[response]),
                                 directory=_directory(), store=ConversationStateStore())

        result = await system["orchestrator"].process("DUI in TX", "s1")

        self.assertEqual(result.parse_source, "ai")
        self.assertEqual(result.state.state, "Texas")
        self.assertEqual(result.state.confidence.state, 0.9)

    async def test_end_to_end_search(self):
        directory = _directory()
        system = build_assistant(_config(False), directory=directory, store=ConversationStateStore())

        await system["orchestrator"].process("I got a DUI in Los Angeles California", "s1")
        result = await system["orchestrator"].process("Actually, I'm in Orange County", "s1")
        lawyers = await system["lawyer_search"].search(result.state)

        self.assertEqual(len(lawyers), 1)
        directory.search_ranked.assert_awaited_once_with(
            "California", county="Orange County", case_type="criminal")
        self.assertEqual(system["monitor"].searches_run, 1)


class TestChatAPI(unittest.TestCase):
    """Tests for the FastAPI routes."""

    def setUp(self):
        self.directory = _directory()
        self.system = build_assistant(_config(False), directory=self.directory, store=ConversationStateStore())
        self.client = TestClient(create_app(self.system))
        self.client.__enter__()

    def tearDown(self):
        self.client.__exit__(None, None, None)

    def test_root(self):
        response = self.client.get("/")
        self.assertEqual(response.status_code, 200)

    def test_process_message(self):
        response = self.client.post("/chat/s1/messages", json={"message": "I got a DUI in Los Angeles California"})

        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertTrue(data["should_search"])
        self.assertEqual(data["state"]["state"], "California")
        self.assertEqual(data["state"]["case_type"], "criminal")
        self.assertEqual(data["parse_source"], "fallback")
        self.assertEqual(data["search_location_label"], "California")

    def test_empty_message_rejected(self):
        response = self.client.post("/chat/s1/messages", json={"message": ""})
        self.assertEqual(response.status_code, 422)

    def test_get_state(self):
        self.client.post("/chat/s1/messages", json={"message": "Actually, I'm in Orange County"})

        response = self.client.get("/chat/s1/state")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["county"], "Orange County")
        self.assertFalse(response.json()["is_complete"])

    def test_get_state_missing(self):
        self.assertEqual(self.client.get("/chat/nobody/state").status_code, 404)

    def test_get_state_store_failure(self):
        self.system["store"].get = AsyncMock(side_effect=PersistenceError("redis down"))

        self.assertEqual(self.client.get("/chat/s1/state").status_code, 503)

    def test_find_lawyers(self):
        self.client.post("/chat/s1/messages", json={"message": "I got a DUI in Los Angeles California"})

        response = self.client.get("/chat/s1/lawyers")

        self.assertEqual(response.status_code, 200)
        lawyers = response.json()
        self.assertEqual(len(lawyers), 1)
        self.assertEqual(lawyers[0]["law_firm"], "Smith & Jones")
        self.assertEqual(lawyers[0]["name"], "Smith")

    def test_find_lawyers_with_override(self):
        self.client.post("/chat/s1/messages", json={"message": "I got a DUI in Los Angeles California"})

        self.client.get("/chat/s1/lawyers", params={"case_type": "car accident"})

        self.directory.search_ranked.assert_awaited_once_with(
            "California", county=None, case_type="personal_injury")

    def test_find_lawyers_unknown_session(self):
        response = self.client.get("/chat/nobody/lawyers")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), [])

    def test_clear_session(self):
        self.client.post("/chat/s1/messages", json={"message": "I got a DUI in Los Angeles California"})

        response = self.client.delete("/chat/s1")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(self.client.get("/chat/s1/state").status_code, 404)

    def test_health_and_metrics(self):
        self.client.post("/chat/s1/messages", json={"message": "I got a DUI in Los Angeles California"})

        health = self.client.get("/health").json()
        metrics = self.client.get("/metrics").json()

        self.assertEqual(health["status"], "healthy")
        self.assertEqual(health["turns_processed"], 1)
        self.assertEqual(metrics["parse_sources"]["fallback"]["turn_count"], 1)


if __name__ == '__main__':
    unittest.main()
