"""Shared fixtures: sample wire volumes and a mocked API transport."""

from __future__ import annotations

import json
from typing import Any, Callable, Dict, List

import httpx
import pytest

from internal.client.concourse import ConcourseClient

API = "https://ci.example.com"


@pytest.fixture
def container_wire() -> Dict[str, Any]:
    return {
        "id": "h1",
        "worker_name": "w1",
        "type": "container",
        "container_handle": "h1",
        "path": "/tmp/build/get",
        "parent_handle": "",
    }


@pytest.fixture
def task_cache_wire() -> Dict[str, Any]:
    return {
        "id": "h2",
        "worker_name": "w1",
        "type": "task-cache",
        "pipeline_name": "p",
        "job_name": "j",
        "step_name": "s",
    }


@pytest.fixture
def resource_wire() -> Dict[str, Any]:
    return {
        "id": "r1",
        "worker_name": "w0",
        "type": "resource",
        "resource_type": {
            "resource_type": {
                "base_resource_type": {"name": "docker-image", "version": "1.2"},
                "version": {"digest": "sha256:abc"},
            },
            "version": {"ref": "abc", "branch": "main"},
        },
    }


@pytest.fixture
def resource_type_wire() -> Dict[str, Any]:
    return {
        "id": "rt1",
        "worker_name": "w2",
        "type": "resource-type",
        "base_resource_type": {"name": "git", "version": {"ref": "x"}},
    }


@pytest.fixture
def api_routes() -> Dict[str, Any]:
    """Path -> JSON body (or httpx.Response). Tests mutate this before requesting."""
    return {}


@pytest.fixture
def request_log() -> List[str]:
    return []


@pytest.fixture
def make_client(api_routes: Dict[str, Any], request_log: List[str]) -> Callable[..., ConcourseClient]:
    def handler(request: httpx.Request) -> httpx.Response:
        request_log.append(request.url.path)
        route = api_routes.get(request.url.path)
        if route is None:
            return httpx.Response(404, text="not found")
        if isinstance(route, httpx.Response):
            return route
        return httpx.Response(200, content=json.dumps(route), headers={"Content-Type": "application/json"})

    def factory(*args: Any, **kwargs: Any) -> ConcourseClient:
        kwargs.setdefault("token", "secret")
        return ConcourseClient(API, transport=httpx.MockTransport(handler), **kwargs)

    return factory
