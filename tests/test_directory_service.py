"""
Tests for the lawyer directory client.
"""
import unittest
import json
import sys
import os
import logging

import httpx

# Add parent directory to path to allow imports
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from models.parameters import LocationKind
from services.directory_service import DirectoryService
from utils.errors import CorrectionError, SearchError

# Disable logging during tests
logging.disable(logging.CRITICAL)

class TestDirectoryService(unittest.IsolatedAsyncioTestCase):
    """Tests for DirectoryService against a mocked HTTP transport."""

    def _service(self, handler):
        self.requests = []

        def record(request):
            self.requests.append(request)
            return handler(request)

        client = httpx.AsyncClient(base_url="http://directory.test", transport=httpx.MockTransport(record))
        return DirectoryService(client, table="lawyers_real", page_size=15)

    async def test_find_exact(self):
        service = self._service(lambda request: httpx.Response(200, json=[{"state": "New York"}]))

        result = await service.find_exact(LocationKind.STATE, "new york")

        self.assertEqual(result, "New York")
        params = self.requests[0].url.params
        self.assertEqual(self.requests[0].url.path, "/rest/v1/lawyers_real")
        self.assertEqual(params["select"], "state")
        self.assertEqual(params["state"], "ilike.new york")
        self.assertEqual(params["limit"], "1")
        await service.aclose()

    async def test_find_exact_no_match(self):
        service = self._service(lambda request: httpx.Response(200, json=[]))

        self.assertIsNone(await service.find_exact("county", "narnia county"))

    async def test_find_exact_http_error(self):
        service = self._service(lambda request: httpx.Response(500, json={"message": "boom"}))

        with self.assertRaises(CorrectionError):
            await service.find_exact("state", "ohio")

    async def test_location_suggestions(self):
        rows = [
            {"location": "California", "location_type": "state", "similarity_score": 0.82},
            {"location": None, "location_type": "county", "similarity_score": 0.9},
            "garbage",
        ]
        service = self._service(lambda request: httpx.Response(200, json=rows))

        suggestions = await service.location_suggestions("Calfornia")

        self.assertEqual(len(suggestions), 1)
        self.assertEqual(suggestions[0].location, "California")
        self.assertEqual(suggestions[0].similarity_score, 0.82)
        request = self.requests[0]
        self.assertEqual(request.method, "POST")
        self.assertEqual(request.url.path, "/rest/v1/rpc/get_location_suggestions")
        self.assertEqual(json.loads(request.content), {"search_term": "Calfornia"})

    async def test_location_suggestions_bad_shape(self):
        service = self._service(lambda request: httpx.Response(200, json={"location": "Ohio"}))

        with self.assertRaises(CorrectionError):
            await service.location_suggestions("Ohio")

    async def test_search_ranked(self):
        rows = [{"id": 1, "law_firm": "Smith & Jones", "relevance_score": 0.9}]
        service = self._service(lambda request: httpx.Response(200, json=rows))

        result = await service.search_ranked("California", county="Orange County", case_type="criminal")

        self.assertEqual(result, rows)
        self.assertEqual(json.loads(self.requests[0].content), {
            "search_county": "Orange County",
            "search_state": "California",
            "search_case_type": "criminal",
        })

    async def test_search_ranked_null_body(self):
        service = self._service(lambda request: httpx.Response(200, content=b"null"))

        self.assertEqual(await service.search_ranked("Ohio"), [])

    async def test_scan_filters(self):
        service = self._service(lambda request: httpx.Response(200, json=[]))

        await service.scan("California", county="orange", type_tag="Criminal")

        params = self.requests[0].url.params
        self.assertEqual(params["state"], "ilike.California")
        self.assertEqual(params["county"], "ilike.*orange*")
        self.assertEqual(params["type"], "ilike.*Criminal*")
        self.assertEqual(params["order"], "created_at.desc")
        self.assertEqual(params["limit"], "15")

    async def test_scan_state_is_not_substring_match(self):
        service = self._service(lambda request: httpx.Response(200, json=[]))

        await service.scan("Virginia")

        self.assertEqual(self.requests[0].url.params["state"], "ilike.Virginia")

    async def test_scan_strips_filter_syntax(self):
        service = self._service(lambda request: httpx.Response(200, json=[]))

        await service.scan("Ohio),or(state.eq.x")

        self.assertEqual(self.requests[0].url.params["state"], "ilike.Ohioorstate.eq.x")
        self.assertNotIn("county", self.requests[0].url.params)

    async def test_scan_network_error(self):
        def fail(request):
            raise httpx.ConnectError("connection refused")

        service = self._service(fail)

        with self.assertRaises(SearchError):
            await service.scan("Ohio")


class TestDirectoryFromConfig(unittest.IsolatedAsyncioTestCase):
    """Tests for building the service from configuration."""

    async def test_auth_headers(self):
        service = DirectoryService.from_config({
            "base_url": "http://directory.test",
            "api_key": "secret",
            "table": "lawyers",
            "page_size": 5,
        })

        self.assertEqual(service.client.headers["apikey"], "secret")
        self.assertEqual(service.client.headers["Authorization"], "Bearer secret")
        self.assertEqual(service.table, "lawyers")
        self.assertEqual(service.page_size, 5)
        await service.aclose()


if __name__ == '__main__':
    unittest.main()
