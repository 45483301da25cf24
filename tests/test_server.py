"""
Tests for the Flask webhook endpoint.
"""

import json

import httpx
import pytest
from flask import Flask
from flask.testing import FlaskClient

from lgtmbot.config import BotConfig
from lgtmbot.dispatcher import ApprovalDispatcher
from lgtmbot.server import build_dispatcher, create_app
from lgtmbot.testing import create_note_payload

HOOK = "/gitlab/hook"


class GitLabStub:
    """Stands in for the GitLab merge endpoint."""

    def __init__(self, status_code: int = 200) -> None:
        self.status_code = status_code
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, json={})


@pytest.fixture
def gitlab() -> GitLabStub:
    return GitLabStub()


@pytest.fixture
def dispatcher(bot_config: BotConfig, gitlab: GitLabStub) -> ApprovalDispatcher:
    return build_dispatcher(bot_config, transport=httpx.MockTransport(gitlab), background=False)


@pytest.fixture
def app(bot_config: BotConfig, dispatcher: ApprovalDispatcher) -> Flask:
    return create_app(bot_config, dispatcher=dispatcher)


@pytest.fixture
def client(app: Flask) -> FlaskClient:
    return app.test_client()


def _post(client: FlaskClient, payload: dict, **kwargs):
    return client.post(
        HOOK,
        data=json.dumps(payload),
        content_type=kwargs.pop("content_type", "application/json"),
        **kwargs,
    )


def test_two_approvals_trigger_merge(
    client: FlaskClient, dispatcher: ApprovalDispatcher, gitlab: GitLabStub
) -> None:
    payload = create_note_payload(merge_request_id=42, project_id=7)

    first = _post(client, payload)

    assert first.status_code == 200
    assert first.data == b"OK"
    assert dispatcher.tracker.count(42) == 1
    assert gitlab.requests == []

    second = _post(client, payload)

    assert second.status_code == 200
    assert dispatcher.tracker.count(42) == 2
    assert len(gitlab.requests) == 1
    assert gitlab.requests[0].url.path == "/api/v3/projects/7/merge_requests/42/merge"
    assert gitlab.requests[0].headers["PRIVATE-TOKEN"] == "test-private-token"


def test_non_note_event_is_ok_and_ignored(client: FlaskClient, dispatcher: ApprovalDispatcher) -> None:
    response = _post(client, create_note_payload(object_kind="issue"))

    assert response.status_code == 200
    assert response.data == b"OK"
    assert dispatcher.tracker.store.snapshot() == {}


def test_missing_content_type_is_rejected(client: FlaskClient, dispatcher: ApprovalDispatcher) -> None:
    response = client.post(HOOK, data=json.dumps(create_note_payload()))

    assert response.status_code == 400
    assert response.data == b"error occurs:invalid content type"
    assert response.mimetype == "text/plain"
    assert dispatcher.tracker.store.snapshot() == {}


def test_wrong_content_type_is_rejected(client: FlaskClient) -> None:
    response = _post(client, create_note_payload(), content_type="text/plain")

    assert response.status_code == 400
    assert b"invalid content type" in response.data


def test_content_type_parameters_are_tolerated(client: FlaskClient) -> None:
    response = _post(client, create_note_payload(), content_type="application/json; charset=utf-8")

    assert response.status_code == 200


@pytest.mark.parametrize("body", [b"", b"{not json", b"[1, 2]", b"null", b"\"LGTM\""])
def test_malformed_body_is_rejected(client: FlaskClient, dispatcher: ApprovalDispatcher, body: bytes) -> None:
    response = client.post(HOOK, data=body, content_type="application/json")

    assert response.status_code == 400
    assert response.data == b"error occurs:invalid request body"
    assert dispatcher.tracker.store.snapshot() == {}


def test_merge_conflict_does_not_affect_response(
    bot_config: BotConfig, caplog: pytest.LogCaptureFixture
) -> None:
    gitlab = GitLabStub(status_code=405)
    dispatcher = build_dispatcher(bot_config, transport=httpx.MockTransport(gitlab), background=False)
    client = create_app(bot_config, dispatcher=dispatcher).test_client()
    payload = create_note_payload()

    with caplog.at_level("WARNING", logger="lgtmbot"):
        _post(client, payload)
        response = _post(client, payload)

    assert response.status_code == 200
    assert response.data == b"OK"
    assert len(gitlab.requests) == 1
    assert "conflicts" in caplog.text


def test_transport_failure_does_not_affect_response(bot_config: BotConfig) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("unreachable", request=request)

    dispatcher = build_dispatcher(bot_config, transport=httpx.MockTransport(handler), background=False)
    client = create_app(bot_config, dispatcher=dispatcher).test_client()

    _post(client, create_note_payload())
    response = _post(client, create_note_payload())

    assert response.status_code == 200


def test_get_is_not_allowed(client: FlaskClient) -> None:
    assert client.get(HOOK).status_code == 405


def test_health(client: FlaskClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.get_json()["status"] == "ok"


def test_custom_hook_path(gitlab: GitLabStub) -> None:
    config = BotConfig(private_token="t", gitlab_url="https://gitlab.example.com", hook_path="/hooks/lgtm")
    dispatcher = build_dispatcher(config, transport=httpx.MockTransport(gitlab), background=False)
    client = create_app(config, dispatcher=dispatcher).test_client()

    assert client.post("/hooks/lgtm", json=create_note_payload()).status_code == 200
    assert client.post(HOOK, json=create_note_payload()).status_code == 404


class TestWebhookSecret:
    @pytest.fixture
    def client(self, gitlab: GitLabStub) -> FlaskClient:
        config = BotConfig(
            private_token="t",
            gitlab_url="https://gitlab.example.com",
            webhook_secret="hook-secret",
        )
        dispatcher = build_dispatcher(config, transport=httpx.MockTransport(gitlab), background=False)
        return create_app(config, dispatcher=dispatcher).test_client()

    def test_matching_token_is_accepted(self, client: FlaskClient) -> None:
        response = client.post(
            HOOK, json=create_note_payload(), headers={"X-Gitlab-Token": "hook-secret"}
        )

        assert response.status_code == 200

    @pytest.mark.parametrize("headers", [{}, {"X-Gitlab-Token": "wrong"}])
    def test_bad_token_is_rejected(self, client: FlaskClient, headers: dict) -> None:
        response = client.post(HOOK, json=create_note_payload(), headers=headers)

        assert response.status_code == 401
        assert response.data == b"error occurs:invalid webhook token"


def test_build_dispatcher_defaults(bot_config: BotConfig) -> None:
    dispatcher = build_dispatcher(bot_config)

    try:
        assert dispatcher.executor is not None
        assert dispatcher.tracker.threshold == 2
        assert dispatcher.classifier.keyword == "LGTM"
        assert not dispatcher.dedupe_merges
        assert not dispatcher.require_distinct_approvers
        assert dispatcher.trigger.client.transport.retry_config.max_retries == 0
    finally:
        dispatcher.executor.shutdown(wait=True)
