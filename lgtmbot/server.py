"""
Webhook server.

A Flask application receiving GitLab note hooks. Every well-formed JSON
request is answered with ``OK``, whether or not it counted as an approval;
the merge call, when one is due, runs on a worker thread.
"""

import hmac
from concurrent.futures import ThreadPoolExecutor

import httpx
from flask import Flask, Response, jsonify, request

from lgtmbot import __version__
from lgtmbot.classifier import EventClassifier
from lgtmbot.client import GitLabClient
from lgtmbot.config import BotConfig
from lgtmbot.dispatcher import ApprovalDispatcher
from lgtmbot.exceptions import (
    InvalidContentTypeError,
    InvalidRequestError,
    InvalidTokenError,
    RequestFormatError,
)
from lgtmbot.logging import get_logger
from lgtmbot.merge import MergeTrigger
from lgtmbot.quorum import QuorumTracker
from lgtmbot.store import create_store
from lgtmbot.transport import RetryConfig
from lgtmbot.types.events import ApprovalEvent

logger = get_logger()

WEBHOOK_TOKEN_HEADER = "X-Gitlab-Token"
EXTENSION_KEY = "lgtmbot"


def build_dispatcher(
    config: BotConfig,
    transport: httpx.BaseTransport | None = None,
    background: bool = True,
) -> ApprovalDispatcher:
    """
    Assemble the approval workflow from a configuration.

    Args:
        config: Validated bot configuration
        transport: Optional httpx transport for the GitLab client
        background: Run merge calls on a thread pool (False runs them inline)
    """
    client = GitLabClient(
        base_url=config.gitlab_url,
        private_token=config.private_token,
        api_version=config.api_version,
        timeout=config.timeout,
        retry_config=RetryConfig(max_retries=config.merge_retries),
        transport=transport,
    )
    tracker = QuorumTracker(
        store=create_store(shards=config.shards, max_targets=config.max_targets),
        threshold=config.quorum_threshold,
    )
    executor = None
    if background:
        executor = ThreadPoolExecutor(
            max_workers=config.merge_workers, thread_name_prefix="lgtmbot-merge"
        )

    return ApprovalDispatcher(
        tracker=tracker,
        trigger=MergeTrigger(client, config.remove_source_branch),
        classifier=EventClassifier(config.keyword),
        executor=executor,
        dedupe_merges=config.dedupe_merges,
        require_distinct_approvers=config.require_distinct_approvers,
    )


def create_app(
    config: BotConfig,
    dispatcher: ApprovalDispatcher | None = None,
) -> Flask:
    """
    Create the webhook application.

    Args:
        config: Validated bot configuration
        dispatcher: Pre-built dispatcher (default: built from ``config``)
    """
    app = Flask("lgtmbot")
    app.extensions[EXTENSION_KEY] = dispatcher or build_dispatcher(config)

    @app.errorhandler(RequestFormatError)
    def handle_request_format_error(error: RequestFormatError) -> Response:
        message = f"error occurs:{error.message}"
        logger.warning(message)
        return Response(message, status=error.status_code, mimetype="text/plain")

    @app.route(config.hook_path, methods=["POST"])
    def hook() -> Response:
        logger.info(
            "method:%s, remote_addr:%s, content_type:%s",
            request.method,
            request.remote_addr,
            request.content_type,
        )

        if config.webhook_secret is not None:
            token = request.headers.get(WEBHOOK_TOKEN_HEADER, "")
            if not hmac.compare_digest(token.encode(), config.webhook_secret.encode()):
                raise InvalidTokenError()

        if request.mimetype != "application/json":
            raise InvalidContentTypeError()

        payload = request.get_json(silent=True)
        if not isinstance(payload, dict):
            raise InvalidRequestError()

        event = ApprovalEvent.from_payload(payload)
        app.extensions[EXTENSION_KEY].handle(event)

        return Response("OK", status=200, mimetype="text/plain")

    @app.route("/health", methods=["GET"])
    def health() -> Response:
        return jsonify({"status": "ok", "version": __version__})

    return app
