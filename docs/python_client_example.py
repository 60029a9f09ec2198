"""
LobbyRisk API Python client example.

Uses httpx.

Usage:
    from docs.python_client_example import LobbyRiskClient
    client = LobbyRiskClient("http://localhost:3000")
    result = client.get_user_profiles(["76561197960287930", "76561198000000000"])
    print(result["lobbyRisk"])
"""

from __future__ import annotations

from typing import Any

import httpx


class LobbyRiskClientError(Exception):
    """Raised when the API returns an error response."""

    def __init__(self, message: str, status_code: int | None = None, response: httpx.Response | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.response = response


class LobbyRiskClient:
    """Client for the LobbyRisk API."""

    def __init__(self, base_url: str = "http://localhost:3000", timeout: float = 180.0):
        self.base_url = base_url.rstrip("/")
        self._client = httpx.Client(base_url=self.base_url, timeout=timeout)

    def _request(self, method: str, path: str, *, json: Any = None) -> httpx.Response:
        resp = self._client.request(method, path, json=json)
        if resp.is_error:
            is_json = resp.headers.get("content-type", "").startswith("application/json")
            detail = resp.json().get("error", resp.text) if is_json else resp.text
            raise LobbyRiskClientError(
                f"API error: {detail}",
                status_code=resp.status_code,
                response=resp,
            )
        return resp

    def get_user_profiles(self, usernames: list[str]) -> dict[str, Any]:
        """Per-profile risk scores and the lobby risk for a list of Steam profile ids."""
        if not usernames:
            raise ValueError("usernames must be non-empty")
        return self._request("POST", "/getUserProfiles", json={"usernames": usernames}).json()

    def health(self) -> dict[str, Any]:
        return self._request("GET", "/health").json()

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> LobbyRiskClient:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
