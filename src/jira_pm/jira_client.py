"""Jira Cloud REST API v3 client for jira-pm.

Reference: https://developer.atlassian.com/cloud/jira/platform/rest/v3/intro/
"""

import base64
import http.client
import json
import logging
import urllib.error
import urllib.parse
import urllib.request
from typing import Any, Optional

from .config import JiraConfig
from .errors import (
    AuthenticationError,
    NotFoundError,
    PermissionDeniedError,
    RemoteError,
)

logger = logging.getLogger("jira_pm.client")

API_PREFIX = "/rest/api/3"
SEARCH_FIELDS = "key,summary,status,assignee,priority,created,updated,issuetype"


def _error_detail(payload: Any) -> Optional[str]:
    """Pull the human-readable part out of a Jira error body.

    Jira answers with ``{"errorMessages": [...], "errors": {field: msg}}``.
    """
    if not isinstance(payload, dict):
        return payload if isinstance(payload, str) and payload else None
    parts = list(payload.get("errorMessages") or [])
    parts.extend(f"{name}: {msg}" for name, msg in (payload.get("errors") or {}).items())
    return ", ".join(parts) or None


class JiraClient:
    """Client for the Jira REST API with Basic auth (email + API token)."""

    def __init__(self, config: JiraConfig):
        self.config = config
        credentials = f"{config.email}:{config.api_token}"
        self._auth_header = "Basic " + base64.b64encode(credentials.encode()).decode()

    def _request(
        self,
        method: str,
        path: str,
        params: Optional[dict] = None,
        body: Optional[dict] = None,
        resource: Optional[str] = None,
    ) -> Any:
        """Make a request and return the decoded JSON body (None if empty).

        Args:
            resource: What the request is about (e.g. an issue key), used in
                error messages.
        """
        url = f"{self.config.base_url}{API_PREFIX}{path}"
        if params:
            url = f"{url}?{urllib.parse.urlencode(params)}"

        headers = {
            "Authorization": self._auth_header,
            "Accept": "application/json",
        }
        data = None
        if body is not None:
            data = json.dumps(body).encode("utf-8")
            headers["Content-Type"] = "application/json"

        req = urllib.request.Request(url, data=data, headers=headers, method=method)
        logger.debug("jira_request", extra={"method": method, "path": path})

        try:
            with urllib.request.urlopen(req, timeout=self.config.timeout) as response:
                raw = response.read().decode("utf-8", errors="replace")
        except urllib.error.HTTPError as e:
            raise self._http_error(e, method, path, resource) from e
        except urllib.error.URLError as e:
            logger.error("jira_connection_error", extra={"path": path, "error": str(e.reason)})
            raise RemoteError(
                f"Could not reach Jira at {self.config.base_url}: {e.reason}",
                suggestions=["Verify network connectivity to Jira", "Check JIRA_BASE_URL"],
            ) from e
        except TimeoutError as e:
            logger.error("jira_timeout", extra={"path": path, "timeout": self.config.timeout})
            raise RemoteError(
                f"Jira did not answer within {self.config.timeout:g}s.",
                suggestions=["Retry, or raise JIRA_TIMEOUT"],
            ) from e
        except (http.client.HTTPException, OSError) as e:
            logger.error("jira_transport_error", extra={"path": path, "error": repr(e)})
            raise RemoteError(
                f"Connection to Jira failed: {e!r}",
                suggestions=["Verify network connectivity to Jira", "Retry the request"],
            ) from e

        if not raw:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            logger.error("jira_invalid_response", extra={"path": path, "body_length": len(raw)})
            raise RemoteError(
                "Jira returned a response that is not JSON.",
                payload=raw,
                suggestions=["Check JIRA_BASE_URL points at your Jira Cloud site"],
            ) from e

    def _http_error(
        self,
        error: urllib.error.HTTPError,
        method: str,
        path: str,
        resource: Optional[str],
    ) -> RemoteError:
        body = error.read().decode("utf-8", errors="replace")
        try:
            payload = json.loads(body) if body else None
        except json.JSONDecodeError:
            payload = body
        status = error.code
        subject = resource or path

        logger.error(
            "jira_http_error",
            extra={"method": method, "path": path, "status_code": status},
        )

        if status == 401:
            return AuthenticationError(
                "Authentication failed. Check your JIRA_EMAIL and JIRA_TOKEN.",
                status=status,
                payload=payload,
                suggestions=["Check JIRA credentials in .env file"],
            )
        if status == 403:
            return PermissionDeniedError(
                f"Access denied to {subject}. Check your permissions.",
                status=status,
                payload=payload,
                suggestions=["Ensure your Jira account has access to this project"],
            )
        if status == 404:
            return NotFoundError(
                f"{subject} not found.",
                status=status,
                payload=payload,
            )
        detail = _error_detail(payload) or error.reason
        return RemoteError(f"Jira API error ({status}): {detail}", status=status, payload=payload)

    def create_issue(self, fields: dict) -> dict:
        """Create an issue. Returns ``{"id", "key", "self"}``."""
        return self._request("POST", "/issue", body={"fields": fields})

    def get_issue(self, key: str, fields: Optional[str] = None) -> dict:
        """Get an issue with all (or the listed) fields."""
        params = {"fields": fields} if fields else None
        return self._request("GET", f"/issue/{key}", params=params, resource=f"Ticket {key}")

    def update_issue(self, key: str, payload: dict) -> None:
        """Edit an issue. ``payload`` holds ``fields`` and/or ``update``."""
        self._request("PUT", f"/issue/{key}", body=payload, resource=f"Ticket {key}")

    def search_issues(self, jql: str, max_results: int, fields: str = SEARCH_FIELDS) -> dict:
        """Run a JQL search (first page only)."""
        return self._request(
            "GET",
            "/search/jql",
            params={"jql": jql, "maxResults": max_results, "fields": fields},
        )

    def get_myself(self) -> dict:
        """Get the authenticated user."""
        return self._request("GET", "/myself")

    def browse_url(self, key: str) -> str:
        return self.config.browse_url(key)
