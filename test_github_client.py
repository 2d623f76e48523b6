from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass
from typing import Any

import pytest
import requests

from github_manager.config import Settings
from github_manager.github.client import (
    GitHubClient,
    GitHubDecodeError,
    GitHubHTTPError,
    GitHubTransportError,
    GraphQLError,
)


@dataclass
class FakeResponse:
    status_code: int
    payload: Any = None
    raw: str | None = None

    @property
    def text(self) -> str:
        if self.raw is not None:
            return self.raw
        return json.dumps(self.payload)

    def json(self) -> Any:
        if self.raw is not None:
            return json.loads(self.raw)
        return self.payload


class FakeSession:
    def __init__(self, responses: list[Any]) -> None:
        self.responses = responses
        self.calls: list[dict[str, Any]] = []

    def request(self, **kwargs: Any) -> FakeResponse:
        self.calls.append(kwargs)
        if not self.responses:
            raise RuntimeError("No fake response left")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def close(self) -> None:
        pass


def make_client(responses: list[Any], token: str = "ghp_test") -> tuple[GitHubClient, FakeSession]:
    session = FakeSession(responses)
    settings = Settings(GITHUB_TOKEN="", GITHUB_USER_AGENT="UEGitHubManager")
    return GitHubClient(token=token, session=session, settings=settings), session


def test_build_request_attaches_auth_and_user_agent() -> None:
    client, _ = make_client([])
    request = client.build_request("https://api.github.com/user/repos", "GET")

    assert request.method == "GET"
    assert request.headers["Authorization"] == "Bearer ghp_test"
    assert request.headers["User-Agent"] == "UEGitHubManager"
    assert "Content-Type" not in request.headers


@pytest.mark.parametrize("verb", ["POST", "PATCH"])
def test_build_request_adds_content_type_for_body_verbs(verb: str) -> None:
    client, _ = make_client([])
    request = client.build_request("https://api.github.com/graphql", verb)
    assert request.headers["Content-Type"] == "application/json"


def test_build_request_keeps_header_with_empty_token() -> None:
    client, _ = make_client([], token="")
    request = client.build_request("https://api.github.com/user/repos", "GET")
    assert request.headers["Authorization"] == "Bearer "


def test_execute_query_posts_query_body_and_unwraps_data() -> None:
    client, session = make_client(
        [FakeResponse(200, {"data": {"viewer": {"login": "octocat"}}})]
    )

    data = asyncio.run(client.execute_query("query { viewer { login } }"))

    assert data == {"viewer": {"login": "octocat"}}
    call = session.calls[0]
    assert call["method"] == "POST"
    assert call["url"] == "https://api.github.com/graphql"
    assert json.loads(call["data"]) == {"query": "query { viewer { login } }"}
    assert call["headers"]["Content-Type"] == "application/json"


def test_execute_query_sends_variables() -> None:
    client, session = make_client([FakeResponse(200, {"data": {}})])

    asyncio.run(client.execute_query("query Q($id: ID!) { node(id: $id) { id } }", {"id": "P_1"}))

    assert json.loads(session.calls[0]["data"])["variables"] == {"id": "P_1"}


def test_graphql_errors_array_raises_with_each_message() -> None:
    client, _ = make_client(
        [
            FakeResponse(
                200,
                {"errors": [{"message": "first"}, {"message": "second"}], "data": None},
            )
        ]
    )

    with pytest.raises(GraphQLError) as exc_info:
        asyncio.run(client.execute_mutation("mutation { x }"))
    assert exc_info.value.messages == ["first", "second"]


def test_non_200_status_reports_code_and_body() -> None:
    client, _ = make_client([FakeResponse(401, raw='{"message": "Bad credentials"}')])

    with pytest.raises(GitHubHTTPError) as exc_info:
        asyncio.run(client.execute_query("query { viewer { login } }"))
    assert exc_info.value.status_code == 401
    assert "Bad credentials" in exc_info.value.body


def test_transport_failure_is_reported_without_response() -> None:
    client, _ = make_client([requests.ConnectionError("connection refused")])

    with pytest.raises(GitHubTransportError):
        asyncio.run(client.request_json("GET", "/user/repos"))


def test_request_json_rejects_unparseable_body() -> None:
    client, _ = make_client([FakeResponse(200, raw="<html>")])

    with pytest.raises(GitHubDecodeError):
        asyncio.run(client.request_json("GET", "/user/repos"))


def test_request_json_accepts_created_status_when_expected() -> None:
    client, session = make_client([FakeResponse(201, {"html_url": "https://github.com/p/1"})])

    payload = asyncio.run(
        client.request_json(
            "POST", "/repos/bar/foo/projects", payload={"name": "Board"}, expected_status=(200, 201)
        )
    )

    assert payload["html_url"] == "https://github.com/p/1"
    assert json.loads(session.calls[0]["data"]) == {"name": "Board"}
    assert session.calls[0]["url"] == "https://api.github.com/repos/bar/foo/projects"
