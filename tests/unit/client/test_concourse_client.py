from __future__ import annotations

import httpx
import pytest

from internal.client.concourse import ConcourseClient, TeamInfo
from internal.errors import FetchFailure
from internal.models.volume import ContainerVolume


def test_list_teams(make_client, api_routes):
    api_routes["/api/v1/teams"] = [{"id": 1, "name": "main"}, {"id": 2, "name": "ops"}, {"bogus": True}]
    with make_client() as client:
        assert client.list_teams() == [TeamInfo(id=1, name="main"), TeamInfo(id=2, name="ops")]


def test_team_volumes_are_parsed(make_client, api_routes, container_wire):
    api_routes["/api/v1/teams/main/volumes"] = [container_wire]
    with make_client() as client:
        vols = client.team("main").list_volumes()
    assert len(vols) == 1
    assert isinstance(vols[0], ContainerVolume)
    assert vols[0].raw == container_wire


def test_bearer_token_is_sent():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["auth"] = request.headers.get("Authorization")
        return httpx.Response(200, json=[])

    with ConcourseClient("https://ci.example.com/", token="tok", transport=httpx.MockTransport(handler)) as client:
        assert client.list_teams() == []
    assert seen["auth"] == "Bearer tok"


def test_unauthorized(make_client, api_routes):
    api_routes["/api/v1/teams"] = httpx.Response(401)
    with make_client() as client, pytest.raises(FetchFailure, match="not authorized"):
        client.list_teams()


def test_unknown_team(make_client):
    with make_client() as client, pytest.raises(FetchFailure, match="team 'ghost' does not exist"):
        client.team("ghost").list_volumes()


def test_server_error(make_client, api_routes):
    api_routes["/api/v1/teams/main/volumes"] = httpx.Response(500, text="boom")
    with make_client() as client, pytest.raises(FetchFailure, match="500"):
        client.team("main").list_volumes()


def test_invalid_json(make_client, api_routes):
    api_routes["/api/v1/teams"] = httpx.Response(200, text="<html>")
    with make_client() as client, pytest.raises(FetchFailure, match="not valid JSON"):
        client.list_teams()


def test_transport_error_is_wrapped():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    with ConcourseClient("https://ci.example.com", transport=httpx.MockTransport(handler)) as client:
        with pytest.raises(FetchFailure) as exc:
            client.list_teams()
    assert isinstance(exc.value.__cause__, httpx.ConnectError)
