"""GitLab resource clients."""

from lgtmbot.clients.merge_requests import MergeRequestsClient

__all__ = [
    "MergeRequestsClient",
]
