"""Linear issue source"""

from typing import Any, Dict, List, Optional

import httpx

from sprout.constants import DEFAULT_LIMIT, LINEAR_API_URL, LINEAR_TIMEOUT_SECONDS
from sprout.exceptions import ProviderAuthError, ProviderFetchError
from sprout.models.candidate import LinearIssue
from sprout.logging_config import get_logger

logger = get_logger(__name__)

PROVIDER_NAME = "Linear"

ASSIGNED_ISSUES_QUERY = """
query AssignedIssues($first: Int!) {
  viewer {
    assignedIssues(
      filter: { state: { type: { nin: ["completed", "canceled"] } } }
      orderBy: updatedAt
      first: $first
    ) {
      nodes {
        identifier
        title
        branchName
        state { name }
        priorityLabel
      }
    }
  }
}
"""


def _is_auth_error(errors: List[Dict[str, Any]]) -> bool:
    return any(
        (error.get("extensions") or {}).get("code") == "AUTHENTICATION_ERROR"
        for error in errors
    )


def parse_issue(node: Dict[str, Any]) -> LinearIssue:
    state = node.get("state") or {}
    return LinearIssue(
        identifier=node["identifier"],
        title=node.get("title") or "",
        branch_name=node["branchName"],
        state_name=state.get("name") or "",
        priority_label=node.get("priorityLabel") or "",
    )


class LinearService:
    """Lists the viewer's open Linear issues through the GraphQL API."""

    def __init__(
        self,
        api_key: str,
        api_url: str = LINEAR_API_URL,
        http_client: Optional[httpx.Client] = None,
    ):
        self.api_key = api_key
        self.api_url = api_url
        self._http_client = http_client

    def _post(self, payload: Dict[str, Any]) -> httpx.Response:
        headers = {
            "Content-Type": "application/json",
            "Authorization": self.api_key,
        }
        if self._http_client is not None:
            return self._http_client.post(self.api_url, json=payload, headers=headers)
        return httpx.post(self.api_url, json=payload, headers=headers, timeout=LINEAR_TIMEOUT_SECONDS)

    def list_assigned_issues(self, limit: int = DEFAULT_LIMIT) -> List[LinearIssue]:
        """Issues assigned to the viewer that are not completed or canceled.

        Ordered by last update, at most ``limit`` of them.

        Raises:
            ProviderAuthError: If Linear rejects the API key
            ProviderFetchError: On any other HTTP or GraphQL failure
        """
        payload = {"query": ASSIGNED_ISSUES_QUERY, "variables": {"first": limit}}
        try:
            response = self._post(payload)
        except httpx.HTTPError as e:
            raise ProviderFetchError(PROVIDER_NAME, str(e)) from e

        if response.status_code == httpx.codes.UNAUTHORIZED:
            raise ProviderAuthError(PROVIDER_NAME, "API key was rejected")

        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            # Proxies may answer with null, a list or a bare string
            data = {}

        errors = data.get("errors") or []
        if errors:
            message = errors[0].get("message") or "unknown error"
            if _is_auth_error(errors):
                raise ProviderAuthError(PROVIDER_NAME, message)
            raise ProviderFetchError(PROVIDER_NAME, f"Linear API error: {message}")

        if not response.is_success:
            raise ProviderFetchError(
                PROVIDER_NAME,
                f"Linear API error: {response.status_code} {response.reason_phrase}",
            )

        nodes = (((data.get("data") or {}).get("viewer") or {}).get("assignedIssues") or {}).get("nodes") or []
        issues = [parse_issue(node) for node in nodes if node.get("branchName")]
        logger.debug(f"[Linear] Fetched {len(issues)} assigned issues")
        return issues
