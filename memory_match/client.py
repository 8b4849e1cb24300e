# memory_match/client.py
from __future__ import annotations
from typing import Any, Dict, Optional

import requests


class MatchClient:
    """Talks to a running memory_match server over HTTP."""

    def __init__(self, base_url: str = "http://127.0.0.1:5000", timeout: float = 2.0,
                 session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def _request(self, method: str, path: str, body: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        r = self.session.request(method, f"{self.base_url}{path}", json=body, timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def health(self) -> Dict[str, Any]:
        return self._request("GET", "/health")

    def new_game(self, **settings: Any) -> str:
        return self._request("POST", "/games", settings)["game_id"]

    def state(self, game_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/games/{game_id}")["state"]

    def pick(self, game_id: str, row: int, col: int) -> Dict[str, Any]:
        return self._request("POST", f"/games/{game_id}/pick", {"row": row, "col": col})

    def resolve(self, game_id: str) -> Dict[str, Any]:
        return self._request("POST", f"/games/{game_id}/resolve")

    def tick(self, game_id: str, seconds: int = 1) -> Dict[str, Any]:
        return self._request("POST", f"/games/{game_id}/tick", {"seconds": seconds})

    def reset(self, game_id: str) -> Dict[str, Any]:
        return self._request("POST", f"/games/{game_id}/reset")

    def delete(self, game_id: str) -> None:
        self._request("DELETE", f"/games/{game_id}")
