"""Asynchronous issue store backed by the PyGitHub client."""

import asyncio
from collections.abc import Callable
from typing import Any

from github.GithubException import GithubException

from ..errors import TrackingStoreError, TransientFetchError
from ..tracking.models import Subject, TrackingIssue
from ..tracking.store import TitleMatcher
from .client import GitHubClient
from .models import GitHubIssue


class GitHubIssueStore:
    """``IssueStore`` implementation running PyGitHub calls in worker threads."""

    def __init__(self, client: GitHubClient):
        self.client = client

    @staticmethod
    def _to_tracking_issue(subject: Subject, issue: GitHubIssue) -> TrackingIssue:
        return TrackingIssue(
            id=issue.number,
            subject_key=subject.key,
            title=issue.title,
            body=issue.body or "",
            is_open=issue.is_open,
            labels=issue.labels,
        )

    async def _read(self, subject: Subject, func: Callable[..., Any], *args: Any) -> Any:
        try:
            return await asyncio.to_thread(func, *args)
        except (GithubException, OSError) as e:
            raise TransientFetchError(f"issues of {subject.full_name}", str(e)) from e

    async def _write(
        self, operation: str, subject: Subject, func: Callable[..., Any], *args: Any
    ) -> Any:
        try:
            return await asyncio.to_thread(func, *args)
        except (GithubException, OSError, ValueError) as e:
            raise TrackingStoreError(operation, subject.key, str(e)) from e

    async def list_open(
        self, subject: Subject, title_matcher: TitleMatcher
    ) -> list[TrackingIssue]:
        issues = await self._read(
            subject, self.client.list_open_issues, subject.owner, subject.repo
        )
        return [
            self._to_tracking_issue(subject, issue)
            for issue in issues
            if title_matcher(issue.title)
        ]

    async def get(self, subject: Subject, issue_id: int) -> TrackingIssue:
        issue = await self._read(
            subject, self.client.get_issue, subject.owner, subject.repo, issue_id
        )
        return self._to_tracking_issue(subject, issue)

    async def create(self, subject: Subject, title: str, body: str) -> int:
        return await self._write(
            "create",
            subject,
            self.client.create_issue,
            subject.owner,
            subject.repo,
            title,
            body,
        )

    async def update(
        self, subject: Subject, issue_id: int, title: str, body: str
    ) -> None:
        await self._write(
            "update",
            subject,
            self.client.update_issue,
            subject.owner,
            subject.repo,
            issue_id,
            title,
            body,
        )

    async def comment(self, subject: Subject, issue_id: int, text: str) -> None:
        await self._write(
            "comment",
            subject,
            self.client.add_issue_comment,
            subject.owner,
            subject.repo,
            issue_id,
            text,
        )

    async def close(self, subject: Subject, issue_id: int) -> None:
        await self._write(
            "close",
            subject,
            self.client.close_issue,
            subject.owner,
            subject.repo,
            issue_id,
        )
