"""Request payload models for the GitLab issues API."""

from datetime import datetime
from enum import Enum
from typing import Annotated, Any
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, field_validator

from glp.guard import not_empty

# GitLab takes label lists as a single "a,b,c" string, not a JSON array
CommaSeparated = Annotated[list[str], PlainSerializer(lambda v: ",".join(v), return_type=str)]


class UpdatedIssueState(str, Enum):
    """state_event values: an action on the issue, not its current state."""

    CLOSE = "close"
    REOPEN = "reopen"


class UpdateIssueRequest(BaseModel):
    """Body of PUT /projects/:id/issues/:issue_iid.

    Built right before a single update call, serialized once, then dropped.
    Only project_id and issue_id are required; everything else is mutable.
    """

    model_config = ConfigDict(validate_assignment=True)

    project_id: str = Field(frozen=True, serialization_alias="id")  # ID or URL-encoded path
    issue_id: int = Field(frozen=True, strict=True, serialization_alias="issue_iid")  # project-scoped iid
    title: str | None = None
    description: str | None = None
    confidential: bool = False
    assignees: list[int] = Field(default=[], serialization_alias="assignee_ids")
    milestone_id: int | None = None
    labels: CommaSeparated = []
    state: UpdatedIssueState | None = Field(default=None, serialization_alias="state_event")
    updated_at: datetime | None = None  # requires admin or project owner rights
    due_date: str | None = None  # YYYY-MM-DD, passed through as-is

    def __init__(self, project_id: str | int, issue_id: int, **data: Any) -> None:
        super().__init__(project_id=project_id, issue_id=issue_id, **data)

    @field_validator("project_id", mode="before")
    @classmethod
    def _project_id_not_empty(cls, value: Any) -> Any:
        not_empty(value, "project_id")
        # numeric project IDs are sent as text like paths
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @property
    def resource_path(self) -> str:
        """Endpoint relative to the API root, e.g. projects/group%2Fapp/issues/7."""
        return f"projects/{quote(self.project_id, safe='')}/issues/{self.issue_id}"

    def to_payload(self, exclude_none: bool = False) -> dict[str, Any]:
        """JSON-ready body keyed by GitLab field names, in declaration order."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=exclude_none)

    def to_json(self, exclude_none: bool = False) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=exclude_none)
