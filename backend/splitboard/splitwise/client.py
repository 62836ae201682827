"""
Splitwise API client.

Read-only: the dashboard never writes back to Splitwise.
Default base URL: https://secure.splitwise.com/api/v3.0
"""
import logging
import os
from typing import Any, Dict, List, Optional

import requests

from splitboard.errors import ConfigError, UpstreamError
from splitboard.splitwise.schemas import Expense, Group, SchemaError

logger = logging.getLogger(__name__)


class SplitwiseService:
    """
    Service for reading groups and expenses from the Splitwise API.

    Every call is attempted once. Non-2xx responses, transport failures,
    timeouts and payloads that fail validation all raise UpstreamError.
    """

    DEFAULT_BASE_URL = "https://secure.splitwise.com/api/v3.0"
    DEFAULT_TIMEOUT = 10.0

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize SplitwiseService.

        Args:
            api_key: Splitwise API key used as a bearer token.
                    Falls back to SPLITWISE_API_KEY env var. Checked when a
                    request is made, not here.
            base_url: API base URL. Falls back to SPLITWISE_BASE_URL env var.
            timeout: Per-request timeout in seconds.
            session: Optional requests.Session to reuse connections.
        """
        self.api_key = api_key or os.environ.get("SPLITWISE_API_KEY")
        self.base_url = (
            base_url
            or os.environ.get("SPLITWISE_BASE_URL")
            or self.DEFAULT_BASE_URL
        ).rstrip("/")
        self.timeout = timeout or self.DEFAULT_TIMEOUT
        self.session = session or requests.Session()

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "SplitwiseService":
        return cls(
            api_key=config.get("SPLITWISE_API_KEY"),
            base_url=config.get("SPLITWISE_BASE_URL"),
            timeout=config.get("UPSTREAM_TIMEOUT"),
        )

    def _headers(self) -> Dict[str, str]:
        """Get request headers with bearer authentication."""
        if not self.api_key:
            raise ConfigError("SPLITWISE_API_KEY is not set")
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    def _get(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Make an authenticated GET request to the Splitwise API.

        Args:
            endpoint: API endpoint path, e.g. "/get_groups"
            params: Query string parameters

        Returns:
            Parsed JSON response body
        """
        url = f"{self.base_url}{endpoint}"
        headers = self._headers()

        try:
            response = self.session.get(url, headers=headers, params=params, timeout=self.timeout)
        except requests.exceptions.Timeout as e:
            raise UpstreamError(f"Splitwise API timed out after {self.timeout}s") from e
        except requests.exceptions.RequestException as e:
            raise UpstreamError(f"Splitwise API request failed: {e}") from e

        if not response.ok:
            logger.warning("Splitwise API %s returned %s", endpoint, response.status_code)
            raise UpstreamError(f"Splitwise API Error: {response.status_code}", status=response.status_code)

        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamError("Splitwise API returned invalid JSON", status=response.status_code) from e
        if not isinstance(data, dict):
            raise UpstreamError("Splitwise API returned an unexpected body", status=response.status_code)
        return data

    # ==================== EXPENSES ====================

    def fetch_expenses(self, group_id: int, limit: int = 10) -> List[Expense]:
        """
        Get the most recent expenses of a group, newest first.

        Args:
            group_id: Splitwise group id
            limit: Maximum number of expenses to return

        Returns:
            Validated expenses in the order Splitwise returned them
        """
        data = self._get("/get_expenses", params={"group_id": group_id, "limit": limit})
        payloads = data.get("expenses")
        if not isinstance(payloads, list):
            raise UpstreamError("Splitwise API response has no 'expenses' list")

        try:
            expenses = [Expense.from_payload(p) for p in payloads]
        except SchemaError as e:
            raise UpstreamError(f"Unexpected expense payload: {e}") from e

        logger.debug("Fetched %d expenses for group %s", len(expenses), group_id)
        return expenses

    # ==================== GROUPS ====================

    def fetch_groups_raw(self) -> Dict[str, Any]:
        """Get the groups response verbatim, after checking it validates."""
        data = self._get("/get_groups")
        self._parse_groups(data)
        return data

    def fetch_groups(self) -> List[Group]:
        """Get the user's groups with per-member balances."""
        return self._parse_groups(self._get("/get_groups"))

    def fetch_group(self, group_id: int) -> Optional[Group]:
        for group in self.fetch_groups():
            if group.id == group_id:
                return group
        return None

    @staticmethod
    def _parse_groups(data: Dict[str, Any]) -> List[Group]:
        payloads = data.get("groups")
        if not isinstance(payloads, list):
            raise UpstreamError("Splitwise API response has no 'groups' list")
        try:
            return [Group.from_payload(p) for p in payloads]
        except SchemaError as e:
            raise UpstreamError(f"Unexpected group payload: {e}") from e
