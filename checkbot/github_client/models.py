"""Pydantic models for the parts of GitHub issues the bot reads.

API Reference: https://docs.github.com/en/rest/issues/issues
"""

from datetime import datetime

from pydantic import BaseModel, Field


class GitHubUser(BaseModel):
    """Author of an issue."""

    login: str = Field(..., description="GitHub login")
    id: int = Field(..., description="Numeric user id")


class GitHubIssue(BaseModel):
    """Issue as returned by the REST API, reduced to tracking fields."""

    number: int = Field(..., description="Issue number within the repository")
    title: str = Field(..., description="Issue title, used to match tracking issues")
    body: str | None = Field(
        None, description="Markdown body holding the persisted checklist"
    )
    state: str = Field(..., description="'open' or 'closed'")
    user: GitHubUser = Field(..., description="Author of the issue")
    labels: list[str] = Field(default_factory=list, description="Label names")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")

    @property
    def is_open(self) -> bool:
        return self.state == "open"
