# internal/client/concourse.py

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List, Optional
from urllib.parse import quote

import httpx

from internal.errors import FetchFailure
from internal.models.volume import Volume, volumes_from_wire

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True)
class TeamInfo:
    id: Optional[int]
    name: str


class ConcourseClient:
    """Thin read-only client for the teams and volumes endpoints."""

    def __init__(
        self,
        api_url: str,
        token: Optional[str] = None,
        insecure: bool = False,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        self.api_url = api_url.rstrip("/")
        self._http = httpx.Client(
            base_url=self.api_url,
            headers=headers,
            timeout=timeout,
            verify=not insecure,
            transport=transport,
        )

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "ConcourseClient":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def get_json(self, path: str, not_found: Optional[str] = None) -> Any:
        logger.debug("GET %s%s", self.api_url, path)
        try:
            resp = self._http.get(path)
        except httpx.HTTPError as e:
            raise FetchFailure(f"request to {self.api_url}{path} failed: {e}") from e

        if resp.status_code == 401:
            raise FetchFailure("not authorized. run `fly login` or set VOLYARD_TOKEN")
        if resp.status_code == 404 and not_found:
            raise FetchFailure(not_found)
        if resp.status_code >= 400:
            raise FetchFailure(f"{path}: unexpected response code {resp.status_code}: {resp.text.strip()}")

        try:
            return resp.json()
        except ValueError as e:
            raise FetchFailure(f"{path}: response is not valid JSON") from e

    def list_teams(self) -> List[TeamInfo]:
        payload = self.get_json("/api/v1/teams")
        if not isinstance(payload, list):
            return []

        teams: List[TeamInfo] = []
        for t in payload:
            if not isinstance(t, dict) or not isinstance(t.get("name"), str):
                continue
            tid = t.get("id")
            teams.append(TeamInfo(id=tid if isinstance(tid, int) else None, name=t["name"]))
        return teams

    def team(self, name: str) -> "Team":
        return Team(client=self, name=name)


@dataclass(frozen=True)
class Team:
    client: ConcourseClient
    name: str

    def list_volumes(self) -> List[Volume]:
        payload = self.client.get_json(
            f"/api/v1/teams/{quote(self.name, safe='')}/volumes",
            not_found=f"team '{self.name}' does not exist",
        )
        volumes = volumes_from_wire(payload)
        logger.debug("team %s: %d volume(s)", self.name, len(volumes))
        return volumes
