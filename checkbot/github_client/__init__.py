"""GitHub access for tracking issues."""

from .client import GitHubClient
from .store import GitHubIssueStore

__all__ = ["GitHubClient", "GitHubIssueStore"]
