"""Test configuration and fixtures."""

from datetime import UTC, datetime

import pytest

from checkbot.errors import TrackingStoreError
from checkbot.tracking.encoding import RenderContext
from checkbot.tracking.models import Subject, SubjectKind, TrackingIssue
from checkbot.tracking.store import TitleMatcher

NOW = datetime(2024, 6, 1, 12, 0, 0, tzinfo=UTC)


class FakeIssueStore:
    """In-memory issue tracker recording every call."""

    def __init__(self, next_id: int = 100):
        self.issues: dict[tuple[str, int], TrackingIssue] = {}
        self.comments: dict[int, list[str]] = {}
        self.calls: list[tuple[str, int | None]] = []
        self.next_id = next_id
        self.fail_on: set[str] = set()

    def add(
        self,
        subject: Subject,
        issue_id: int,
        title: str,
        body: str = "",
        labels: list[str] | None = None,
    ) -> TrackingIssue:
        issue = TrackingIssue(
            id=issue_id,
            subject_key=subject.key,
            title=title,
            body=body,
            labels=labels or [],
        )
        self.issues[(subject.full_name, issue_id)] = issue
        return issue

    def open_issues(self, subject: Subject) -> list[TrackingIssue]:
        return sorted(
            (
                issue
                for (name, _), issue in self.issues.items()
                if name == subject.full_name and issue.is_open
            ),
            key=lambda issue: issue.id,
        )

    @property
    def mutations(self) -> list[tuple[str, int | None]]:
        return [call for call in self.calls if call[0] not in ("list_open", "get")]

    def _check(self, operation: str) -> None:
        if operation in self.fail_on:
            raise TrackingStoreError(operation, "fake", "simulated failure")

    async def list_open(
        self, subject: Subject, title_matcher: TitleMatcher
    ) -> list[TrackingIssue]:
        self.calls.append(("list_open", None))
        return [
            issue for issue in self.open_issues(subject) if title_matcher(issue.title)
        ]

    async def get(self, subject: Subject, issue_id: int) -> TrackingIssue:
        self.calls.append(("get", issue_id))
        return self.issues[(subject.full_name, issue_id)]

    async def create(self, subject: Subject, title: str, body: str) -> int:
        self._check("create")
        issue_id = self.next_id
        self.next_id += 1
        self.calls.append(("create", issue_id))
        self.add(subject, issue_id, title, body)
        return issue_id

    async def update(
        self, subject: Subject, issue_id: int, title: str, body: str
    ) -> None:
        self._check("update")
        self.calls.append(("update", issue_id))
        issue = self.issues[(subject.full_name, issue_id)]
        issue.title = title
        issue.body = body

    async def comment(self, subject: Subject, issue_id: int, text: str) -> None:
        self._check("comment")
        self.calls.append(("comment", issue_id))
        self.comments.setdefault(issue_id, []).append(text)

    async def close(self, subject: Subject, issue_id: int) -> None:
        self._check("close")
        self.calls.append(("close", issue_id))
        self.issues[(subject.full_name, issue_id)].is_open = False


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def store() -> FakeIssueStore:
    return FakeIssueStore()


@pytest.fixture
def subject() -> Subject:
    return Subject(owner="mcm1957", repo="ioBroker.weblate-test")


@pytest.fixture
def promotion_subject() -> Subject:
    return Subject(
        owner="mcm1957", repo="ioBroker.weblate-test", kind=SubjectKind.PROMOTION_ADD
    )


@pytest.fixture
def context(subject: Subject, now: datetime) -> RenderContext:
    return RenderContext(
        subject=subject, checker_version="3.1.0", commit_sha="abc123", now=now
    )
