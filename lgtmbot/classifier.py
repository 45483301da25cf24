"""Approval comment classification."""

from lgtmbot.types.events import (
    NOTEABLE_TYPE_MERGE_REQUEST,
    OBJECT_KIND_NOTE,
    ApprovalEvent,
)

DEFAULT_KEYWORD = "LGTM"


def classify(event: ApprovalEvent, keyword: str = DEFAULT_KEYWORD) -> bool:
    """
    Decide whether an event is an approval vote on a merge request.

    The comment must equal the keyword exactly once both are upper-cased;
    surrounding whitespace or punctuation disqualifies it.

    Args:
        event: The inbound comment event
        keyword: The approval keyword (default: "LGTM")

    Returns:
        True if the event counts as one approval
    """
    if event.kind != OBJECT_KIND_NOTE:
        return False

    if event.target_kind != NOTEABLE_TYPE_MERGE_REQUEST:
        return False

    return event.comment_text.upper() == keyword.upper()


class EventClassifier:
    """Classifier bound to a configured approval keyword."""

    def __init__(self, keyword: str = DEFAULT_KEYWORD) -> None:
        self.keyword = keyword

    def qualifies(self, event: ApprovalEvent) -> bool:
        return classify(event, self.keyword)
