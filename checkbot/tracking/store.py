"""Issue tracker contract used by the reconciliation engine."""

from collections.abc import Callable
from typing import Protocol

from .models import Subject, TrackingIssue

TitleMatcher = Callable[[str], bool]


class IssueStore(Protocol):
    """Asynchronous issue tracker operations for one repository subject.

    Single operations are not assumed to be idempotent; the decision engine
    provides idempotence across runs.
    """

    async def list_open(
        self, subject: Subject, title_matcher: TitleMatcher
    ) -> list[TrackingIssue]: ...

    async def get(self, subject: Subject, issue_id: int) -> TrackingIssue: ...

    async def create(self, subject: Subject, title: str, body: str) -> int: ...

    async def update(
        self, subject: Subject, issue_id: int, title: str, body: str
    ) -> None: ...

    async def comment(self, subject: Subject, issue_id: int, text: str) -> None: ...

    async def close(self, subject: Subject, issue_id: int) -> None: ...
