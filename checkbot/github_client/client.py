"""GitHub API client using PyGitHub."""

import os
import time

from github import Github
from github.GithubException import RateLimitExceededException, UnknownObjectException
from github.Issue import Issue
from github.Repository import Repository
from rich.console import Console

from .models import GitHubIssue, GitHubUser

console = Console()

# Remaining core requests below which calls wait for the rate limit reset.
RATE_LIMIT_RESERVE = 10
RATE_LIMIT_WAIT = 60


class GitHubClient:
    """Access to tracking issues of adapter repositories.

    Reads are retried once the rate limit resets. Mutations are not retried;
    a failed mutation surfaces to the caller and the next run picks the subject
    up again.
    """

    def __init__(self, token: str | None = None):
        """Initialize GitHub client with authentication.

        Args:
            token: GitHub personal access token. If None, reads from
                GITHUB_TOKEN env var.
        """
        self.token = token or os.getenv("GITHUB_TOKEN")
        if not self.token:
            raise ValueError(
                "GitHub token is required. Set GITHUB_TOKEN environment variable."
            )

        self.github = Github(self.token)
        self._repositories: dict[str, Repository] = {}
        self._check_rate_limit()

    def _check_rate_limit(self) -> None:
        """Wait for the rate limit reset when few requests are left."""
        try:
            core = self.github.get_rate_limit().core
            if core.remaining < RATE_LIMIT_RESERVE:
                wait = core.reset.timestamp() - time.time() + 1
                console.print(f"Rate limit low, waiting {wait:.1f} seconds...")
                time.sleep(wait)
        except Exception as e:
            console.print(f"Warning: Could not check rate limit: {e}")

    @staticmethod
    def _to_model(github_issue: Issue) -> GitHubIssue:
        return GitHubIssue(
            number=github_issue.number,
            title=github_issue.title,
            body=github_issue.body,
            state=github_issue.state,
            user=GitHubUser(login=github_issue.user.login, id=github_issue.user.id),
            labels=[label.name for label in github_issue.labels],
            created_at=github_issue.created_at,
            updated_at=github_issue.updated_at,
        )

    def get_repository(self, owner: str, repo: str) -> Repository:
        """Get repository object, cached for the lifetime of the client."""
        full_name = f"{owner}/{repo}"
        if full_name not in self._repositories:
            try:
                self._repositories[full_name] = self.github.get_repo(full_name)
            except UnknownObjectException:
                raise ValueError(f"Repository {full_name} not found")
        return self._repositories[full_name]

    def _github_issue(self, owner: str, repo: str, issue_number: int) -> Issue:
        try:
            return self.get_repository(owner, repo).get_issue(issue_number)
        except UnknownObjectException:
            raise ValueError(f"Issue #{issue_number} not found in {owner}/{repo}")

    def get_issue(self, owner: str, repo: str, issue_number: int) -> GitHubIssue:
        """Get one issue including its current body."""
        self._check_rate_limit()
        try:
            return self._to_model(self._github_issue(owner, repo, issue_number))
        except RateLimitExceededException:
            console.print("Rate limit exceeded during issue fetch, waiting...")
            time.sleep(RATE_LIMIT_WAIT)
            return self.get_issue(owner, repo, issue_number)

    def list_open_issues(self, owner: str, repo: str) -> list[GitHubIssue]:
        """List open issues of a repository, pull requests excluded."""
        self._check_rate_limit()
        try:
            return [
                self._to_model(github_issue)
                for github_issue in self.get_repository(owner, repo).get_issues(
                    state="open"
                )
                if github_issue.pull_request is None
            ]
        except RateLimitExceededException:
            console.print("Rate limit exceeded during issue listing, waiting...")
            time.sleep(RATE_LIMIT_WAIT)
            return self.list_open_issues(owner, repo)

    def create_issue(self, owner: str, repo: str, title: str, body: str) -> int:
        """Open a new issue.

        Returns:
            Number of the created issue

        Raises:
            ValueError: If repository not found
        """
        self._check_rate_limit()
        github_issue = self.get_repository(owner, repo).create_issue(
            title=title, body=body
        )
        return github_issue.number

    def update_issue(
        self, owner: str, repo: str, issue_number: int, title: str, body: str
    ) -> bool:
        """Overwrite title and body of an issue."""
        self._check_rate_limit()
        self._github_issue(owner, repo, issue_number).edit(title=title, body=body)
        return True

    def add_issue_comment(
        self, owner: str, repo: str, issue_number: int, comment: str
    ) -> bool:
        """Add a comment to an issue.

        Args:
            owner: Repository owner
            repo: Repository name
            issue_number: Issue number
            comment: Comment text in markdown

        Returns:
            True if successful

        Raises:
            ValueError: If repository or issue not found
        """
        self._check_rate_limit()
        self._github_issue(owner, repo, issue_number).create_comment(comment)
        return True

    def close_issue(self, owner: str, repo: str, issue_number: int) -> bool:
        """Close an issue."""
        self._check_rate_limit()
        self._github_issue(owner, repo, issue_number).edit(state="closed")
        return True
