"""lgtmbot - merge GitLab merge requests once enough reviewers say LGTM."""

from lgtmbot.classifier import EventClassifier, classify
from lgtmbot.client import GitLabClient
from lgtmbot.config import BotConfig
from lgtmbot.dispatcher import ApprovalDispatcher, DispatchResult
from lgtmbot.exceptions import (
    APIValidationError,
    AuthenticationError,
    ConfigurationError,
    GitLabAPIError,
    InvalidContentTypeError,
    InvalidRequestError,
    InvalidTokenError,
    LGTMBotError,
    MergeConflictError,
    MergeNotAcceptableError,
    NotFoundError,
    RequestFormatError,
    ServerError,
)
from lgtmbot.logging import configure_logging, get_logger
from lgtmbot.merge import MergeTrigger, RemoveSourceBranchPolicy
from lgtmbot.quorum import QUORUM_THRESHOLD, QuorumTracker
from lgtmbot.store import (
    ApprovalStore,
    InMemoryApprovalStore,
    ShardedApprovalStore,
    create_store,
)
from lgtmbot.transport import HTTPTransport, RetryConfig
from lgtmbot.types import ApprovalEvent, MergeOutcome, MergeResult

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Workflow
    "ApprovalDispatcher",
    "DispatchResult",
    "EventClassifier",
    "classify",
    "QuorumTracker",
    "QUORUM_THRESHOLD",
    "MergeTrigger",
    "RemoveSourceBranchPolicy",
    # Stores
    "ApprovalStore",
    "InMemoryApprovalStore",
    "ShardedApprovalStore",
    "create_store",
    # GitLab API
    "GitLabClient",
    "HTTPTransport",
    "RetryConfig",
    # Types
    "ApprovalEvent",
    "MergeOutcome",
    "MergeResult",
    # Configuration
    "BotConfig",
    # Exceptions
    "LGTMBotError",
    "ConfigurationError",
    "RequestFormatError",
    "InvalidContentTypeError",
    "InvalidRequestError",
    "InvalidTokenError",
    "GitLabAPIError",
    "AuthenticationError",
    "NotFoundError",
    "MergeConflictError",
    "MergeNotAcceptableError",
    "APIValidationError",
    "ServerError",
    # Logging
    "configure_logging",
    "get_logger",
]
