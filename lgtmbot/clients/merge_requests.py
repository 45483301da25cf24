"""Merge requests resource client."""

from typing import TYPE_CHECKING

from lgtmbot.types.merge import MergeOutcome, MergeResult

if TYPE_CHECKING:
    from lgtmbot.transport import HTTPTransport


class MergeRequestsClient:
    """Client for merge request operations."""

    def __init__(self, transport: "HTTPTransport", api_version: str = "v3") -> None:
        """
        Initialize the merge requests client.

        Args:
            transport: HTTP transport for making requests
            api_version: GitLab REST API version segment ("v3" or "v4")
        """
        self.transport = transport
        self.api_version = api_version

    def merge_path(self, project_id: int, merge_request_id: int) -> str:
        return (
            f"/api/{self.api_version}/projects/{project_id}"
            f"/merge_requests/{merge_request_id}/merge"
        )

    def accept(
        self,
        project_id: int,
        merge_request_id: int,
        should_remove_source_branch: bool = True,
    ) -> MergeResult:
        """
        Accept (merge) a merge request.

        The flag is sent as the string "true"/"false", which is what the
        GitLab merge endpoint has always accepted.

        Args:
            project_id: The owning project id
            merge_request_id: The merge request id
            should_remove_source_branch: Remove the source branch after merging

        Returns:
            MergeResult with outcome MERGED

        Raises:
            MergeConflictError: If the merge request has conflicts (405)
            MergeNotAcceptableError: If it is already merged or closed (406)
            AuthenticationError: If the private token is rejected
            ServerError: On 5xx responses and connection failures
        """
        response = self.transport.request(
            method="PUT",
            path=self.merge_path(project_id, merge_request_id),
            body={
                "should_remove_source_branch": "true" if should_remove_source_branch else "false",
            },
        )

        detail = ""
        try:
            data = response.json()
        except ValueError:
            data = None
        if isinstance(data, dict) and data.get("state"):
            detail = f"state={data['state']}"

        return MergeResult(
            project_id=project_id,
            target_id=merge_request_id,
            outcome=MergeOutcome.MERGED,
            status_code=response.status_code,
            detail=detail,
        )
