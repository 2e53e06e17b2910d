import json
from collections.abc import Callable

import httpx
import pytest

from bitbucket_server_client.config import Credentials
from bitbucket_server_client.services.bitbucket_client import BitbucketServerClient, ClientIdentity
from bitbucket_server_client.services.transport import Transport

BASE_URL = "https://scm.example"


class FakeServer:
    """Records every request and answers from queued or routed responses."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.routes: dict[str, list[httpx.Response]] = {}
        self.handler: Callable[[httpx.Request], httpx.Response] | None = None

    def add(self, path_and_query: str, status: int = 200, json_body=None, text: str | None = None) -> None:
        if text is None:
            text = json.dumps(json_body) if json_body is not None else ""
        self.routes.setdefault(path_and_query, []).append(httpx.Response(status, text=text))

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.handler is not None:
            return self.handler(request)
        key = request.url.raw_path.decode()
        queued = self.routes.get(key)
        if not queued:
            return httpx.Response(404, text=f"no route for {key}")
        return queued.pop(0) if len(queued) > 1 else queued[0]

    @property
    def urls(self) -> list[str]:
        return [str(request.url) for request in self.requests]


def page(values, is_last: bool = True, next_start: int | None = None, start: int = 0) -> dict:
    body = {"values": values, "isLastPage": is_last, "size": len(values), "limit": 25, "start": start}
    if next_start is not None:
        body["nextPageStart"] = next_start
    return body


def branch(name: str, commit: str = "0" * 40) -> dict:
    return {"id": f"refs/heads/{name}", "displayId": name, "type": "BRANCH", "latestCommit": commit}


def repository(slug: str, project: str = "proj1", public: bool = False) -> dict:
    return {
        "slug": slug,
        "id": 1,
        "name": slug,
        "scmId": "git",
        "state": "AVAILABLE",
        "public": public,
        "project": {"key": project, "id": 10, "name": project, "public": False, "type": "NORMAL"},
        "links": {
            "clone": [
                {"href": f"ssh://git@scm.example:7999/{project.lower()}/{slug}.git", "name": "ssh"},
                {"href": f"https://scm.example/scm/{project.lower()}/{slug}.git", "name": "http"},
            ]
        },
    }


def pull_request(pr_id: int, source_hash: str = "abc123", title: str = "Add feature") -> dict:
    return {
        "id": pr_id,
        "title": title,
        "state": "OPEN",
        "fromRef": {"id": "refs/heads/feature", "displayId": "feature", "latestCommit": source_hash},
        "toRef": {"id": "refs/heads/main", "displayId": "main", "latestCommit": "def456"},
    }


@pytest.fixture
def server() -> FakeServer:
    return FakeServer()


@pytest.fixture
def make_client(server: FakeServer):
    def _make(
        owner: str = "proj1",
        repository_name: str | None = "svc",
        user_centric: bool = False,
        credentials: Credentials | None = None,
        **kwargs,
    ) -> BitbucketServerClient:
        identity = ClientIdentity(
            base_url=BASE_URL,
            owner=owner,
            repository_name=repository_name,
            user_centric=user_centric,
            credentials=credentials,
        )
        transport = Transport(BASE_URL, credentials=credentials, http_transport=httpx.MockTransport(server))
        return BitbucketServerClient(identity, transport=transport, **kwargs)

    return _make


@pytest.fixture
def client(make_client) -> BitbucketServerClient:
    return make_client()
