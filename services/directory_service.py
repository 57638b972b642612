"""
Client for the lawyer directory (PostgREST-compatible HTTP API).
"""
import logging
from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError

from models.parameters import DirectorySuggestion, LocationKind
from utils.errors import CorrectionError, SearchError

logger = logging.getLogger(__name__)


class DirectoryService:
    """Lookup and search operations against the lawyer directory."""

    def __init__(self,
                 client: httpx.AsyncClient,
                 table: str = "lawyers_real",
                 page_size: int = 15):
        """
        Initialize the directory service.

        Args:
            client: HTTP client with base_url and auth headers already set
            table: Directory table holding lawyer rows
            page_size: Row limit for table scans
        """
        self.client = client
        self.table = table
        self.page_size = page_size

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "DirectoryService":
        """Build a service with its own HTTP client from DIRECTORY_CONFIG."""
        headers = {"Content-Type": "application/json"}
        if config.get("api_key"):
            headers["apikey"] = config["api_key"]
            headers["Authorization"] = f"Bearer {config['api_key']}"

        client = httpx.AsyncClient(
            base_url=config["base_url"],
            headers=headers,
            timeout=config.get("timeout", 10.0),
        )
        return cls(client, table=config.get("table", "lawyers_real"),
                   page_size=config.get("page_size", 15))

    async def aclose(self):
        await self.client.aclose()

    async def find_exact(self, kind: LocationKind, value: str) -> Optional[str]:
        """
        Case-insensitive exact match against the state or county column.

        Returns:
            The value as stored in the directory, or None
        """
        column = LocationKind(kind).value
        rows = await self._request(
            "GET",
            f"/rest/v1/{self.table}",
            CorrectionError,
            params={"select": column, column: f"ilike.{_escape(value)}", "limit": "1"},
        )
        if rows and rows[0].get(column):
            return rows[0][column]
        return None

    async def location_suggestions(self, search_term: str) -> List[DirectorySuggestion]:
        """Ranked fuzzy suggestions for a location token."""
        rows = await self._request(
            "POST",
            "/rest/v1/rpc/get_location_suggestions",
            CorrectionError,
            json={"search_term": search_term},
        )
        suggestions = []
        for row in rows:
            if not isinstance(row, dict) or not row.get("location"):
                continue
            try:
                suggestions.append(DirectorySuggestion(**row))
            except ValidationError as e:
                raise CorrectionError(f"Malformed location suggestion: {str(e)}") from e
        return suggestions

    async def search_ranked(self,
                            state: str,
                            county: Optional[str] = None,
                            case_type: Optional[str] = None) -> List[Dict[str, Any]]:
        """Server-side relevance-ranked search on county + state + case type."""
        return await self._request(
            "POST",
            "/rest/v1/rpc/search_lawyers_enhanced",
            SearchError,
            json={
                "search_county": county,
                "search_state": state,
                "search_case_type": case_type,
            },
        )

    async def scan(self,
                   state: str,
                   county: Optional[str] = None,
                   type_tag: Optional[str] = None,
                   limit: Optional[int] = None) -> List[Dict[str, Any]]:
        """
        Filtered table scan, newest first. State is a case-insensitive exact
        match ("Virginia" never pulls in West Virginia); county and type are
        partial matches.
        """
        params = {
            "select": "*",
            "state": f"ilike.{_escape(state)}",
            "order": "created_at.desc",
            "limit": str(limit or self.page_size),
        }
        if county:
            params["county"] = f"ilike.*{_escape(county)}*"
        if type_tag:
            params["type"] = f"ilike.*{_escape(type_tag)}*"

        return await self._request("GET", f"/rest/v1/{self.table}", SearchError, params=params)

    async def _request(self, method: str, path: str, error_cls, **kwargs) -> List[Dict[str, Any]]:
        try:
            response = await self.client.request(method, path, **kwargs)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            raise error_cls(f"Directory returned {e.response.status_code} for {path}") from e
        except (httpx.HTTPError, ValueError) as e:
            raise error_cls(f"Directory request to {path} failed: {str(e)}") from e

        if data is None:
            return []
        if not isinstance(data, list):
            raise error_cls(f"Unexpected directory response shape from {path}")
        return data


def _escape(value: str) -> str:
    """Strip characters with special meaning in PostgREST filters."""
    return "".join(ch for ch in value if ch not in "*,()%").strip()
