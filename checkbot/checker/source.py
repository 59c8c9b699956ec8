"""Sources of repository checker results."""

import json
import logging
from pathlib import Path
from typing import Any, Protocol

import httpx
from pydantic import BaseModel, Field, ValidationError

from ..errors import TransientFetchError

logger = logging.getLogger(__name__)

# Reserved codes meaning the check itself could not run meaningfully.
FATAL_CODES = ("[E000]", "[E999]")


class CheckResult(BaseModel):
    """Normalized result of one repository check."""

    repo_url: str = Field(..., description="Checked repository URL")
    errors: list[str] = Field(default_factory=list, description="[E###] findings")
    warnings: list[str] = Field(default_factory=list, description="[W###] findings")
    suggestions: list[str] = Field(
        default_factory=list, description="[S###] findings"
    )
    fatal: bool = Field(False, description="Check output cannot be trusted")
    checker_version: str | None = Field(None, description="Checker version")
    commit_sha: str | None = Field(None, description="Checked head commit")

    @classmethod
    def from_payload(cls, repo_url: str, payload: dict[str, Any]) -> "CheckResult":
        """Build a result from the raw checker JSON.

        The checker reports suggestions among its warnings; they are split out
        by their ``[S`` prefix. Messages are stripped and sorted.
        """
        errors = sorted(str(msg).strip() for msg in payload.get("errors") or [])
        raw_warnings = sorted(str(msg).strip() for msg in payload.get("warnings") or [])
        suggestions = sorted(
            {str(msg).strip() for msg in payload.get("suggestions") or []}
            | {msg for msg in raw_warnings if msg.startswith("[S")}
        )
        warnings = [msg for msg in raw_warnings if not msg.startswith("[S")]
        fatal = bool(payload.get("fatal")) or any(
            msg.startswith(FATAL_CODES) for msg in errors
        )
        return cls(
            repo_url=repo_url,
            errors=errors,
            warnings=warnings,
            suggestions=suggestions,
            fatal=fatal,
            checker_version=payload.get("version"),
            commit_sha=payload.get("lastCommitSha"),
        )

    @property
    def findings(self) -> list[str]:
        return [*self.errors, *self.warnings, *self.suggestions]


class FindingSource(Protocol):
    """Runs one check of a repository."""

    async def run(self, repo_url: str) -> CheckResult: ...


def _unwrap(payload: Any) -> dict[str, Any]:
    # Lambda style handlers wrap the result as a JSON string in "body".
    if isinstance(payload, dict) and isinstance(payload.get("body"), str):
        payload = json.loads(payload["body"])
    if not isinstance(payload, dict):
        raise ValueError("checker result is not a JSON object")
    return payload


class HttpCheckerSource:
    """Calls a repository checker endpoint with ``?url=<repository>``."""

    def __init__(
        self,
        checker_url: str,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ):
        self.checker_url = checker_url
        self.timeout = timeout
        self._client = client

    async def _get(self, client: httpx.AsyncClient, repo_url: str) -> Any:
        response = await client.get(
            self.checker_url, params={"url": repo_url}, timeout=self.timeout
        )
        response.raise_for_status()
        return response.json()

    async def run(self, repo_url: str) -> CheckResult:
        logger.info("running repository check for %s", repo_url)
        try:
            if self._client is not None:
                raw = await self._get(self._client, repo_url)
            else:
                async with httpx.AsyncClient() as client:
                    raw = await self._get(client, repo_url)
            result = CheckResult.from_payload(repo_url, _unwrap(raw))
        except (httpx.HTTPError, ValueError, ValidationError) as e:
            raise TransientFetchError(f"checker result for {repo_url}", str(e)) from e
        _log_result(result)
        return result


class JsonFileCheckerSource:
    """Reads a checker result saved as JSON, e.g. by a CI step."""

    def __init__(self, path: Path):
        self.path = path

    async def run(self, repo_url: str) -> CheckResult:
        try:
            with open(self.path, encoding="utf-8") as f:
                raw = json.load(f)
            result = CheckResult.from_payload(repo_url, _unwrap(raw))
        except (OSError, ValueError, ValidationError) as e:
            raise TransientFetchError(str(self.path), str(e)) from e
        _log_result(result)
        return result


def _log_result(result: CheckResult) -> None:
    for label, messages in (
        ("errors", result.errors),
        ("warnings", result.warnings),
        ("suggestions", result.suggestions),
    ):
        if messages:
            logger.info("%d %s reported", len(messages), label)
            for message in messages:
                logger.debug("    %s", message)
        else:
            logger.info("no %s encountered", label)
