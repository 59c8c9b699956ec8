"""Data models shared by the reconciliation engine."""

import re
from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, Field

CODE_PATTERN = re.compile(r"\[([EWS])(\d{3})\]")


class Severity(str, Enum):
    """Severity class encoded in the leading letter of a finding code."""

    ERROR = "E"
    WARNING = "W"
    SUGGESTION = "S"


class LifecycleState(str, Enum):
    """State of one tracked item relative to the previous run."""

    NEW = "new"
    OPEN = "open"
    REOPENED = "reopened"
    RESOLVED = "resolved"


class SubjectKind(str, Enum):
    """What a tracking issue is about."""

    CHECKER = "checker"
    PROMOTION_ADD = "promotion-add"
    PROMOTION_UPDATE = "promotion-update"


def severity_of(key: str) -> Severity | None:
    """Return the severity of the first finding code in ``key``."""
    match = CODE_PATTERN.search(key)
    if not match:
        return None
    return Severity(match.group(1))


class Subject(BaseModel):
    """Repository (and tracking kind) a reconciliation pass works on."""

    owner: str = Field(..., description="Repository owner (user or organization)")
    repo: str = Field(..., description="Repository name, e.g. 'ioBroker.admin'")
    kind: SubjectKind = Field(SubjectKind.CHECKER, description="Tracking domain")

    @property
    def key(self) -> str:
        return f"{self.owner}/{self.repo}#{self.kind.value}"

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"

    @property
    def url(self) -> str:
        return f"https://github.com/{self.owner}/{self.repo}"

    @property
    def adapter(self) -> str:
        """Adapter name without the 'ioBroker.' prefix."""
        return self.repo.split(".", 1)[1] if "." in self.repo else self.repo


class TrackingIssue(BaseModel):
    """External issue holding the persisted state for one subject."""

    id: int = Field(..., description="Issue number within the repository")
    subject_key: str = Field(..., description="Subject the issue tracks")
    title: str = Field(..., description="Issue title")
    body: str = Field("", description="Issue body in markdown")
    is_open: bool = Field(True, description="Whether the issue is still open")
    labels: list[str] = Field(default_factory=list, description="Label names")

    def has_label(self, name: str) -> bool:
        return any(label.lower() == name.lower() for label in self.labels)


@dataclass(frozen=True)
class TrackedItem:
    """One line item of a tracking issue after classification."""

    key: str
    state: LifecycleState
    previously_checked: bool = False

    @property
    def present(self) -> bool:
        """Whether the item was detected in the current run."""
        return self.state != LifecycleState.RESOLVED

    @property
    def changed(self) -> bool:
        """Whether the item differs from what the issue currently shows."""
        if self.state in (LifecycleState.NEW, LifecycleState.REOPENED):
            return True
        return self.state == LifecycleState.RESOLVED and not self.previously_checked

    @property
    def severity(self) -> Severity | None:
        return severity_of(self.key)
