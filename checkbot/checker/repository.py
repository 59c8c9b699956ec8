"""Checker pass for a single repository."""

import logging
import re
from datetime import datetime

from ..storage.statistics import StatisticsStore
from ..tracking.decision import DecisionPolicy
from ..tracking.encoding import FindingChecklistCodec, RenderContext
from ..tracking.models import Subject, SubjectKind
from ..tracking.reconciler import ReconcileOutcome, reconcile_subject
from ..tracking.store import IssueStore
from .decorate import decorate_messages
from .source import FindingSource

logger = logging.getLogger(__name__)

REPOSITORY_PATTERN = re.compile(
    r"^(?:(?:https?://)?(?:www\.)?github\.com/)?([\w.-]+)/([\w.-]+?)(?:\.git)?/?$",
    re.IGNORECASE,
)


def parse_repository(value: str) -> Subject:
    """Parse ``owner/repo`` or a GitHub URL into a checker subject.

    Raises:
        ValueError: If the value does not name a repository
    """
    match = REPOSITORY_PATTERN.match(value.strip())
    if not match:
        raise ValueError(f"Cannot parse repository '{value}'")
    owner, repo = match.groups()
    if repo.lower().startswith("iobroker."):
        repo = "ioBroker." + repo[len("iobroker.") :]
    return Subject(owner=owner, repo=repo, kind=SubjectKind.CHECKER)


async def check_repository(
    subject: Subject,
    source: FindingSource,
    store: IssueStore,
    policy: DecisionPolicy | None = None,
    cleanup: bool = False,
    mention: str | None = None,
    statistics: StatisticsStore | None = None,
    dry_run: bool = False,
    now: datetime | None = None,
) -> ReconcileOutcome:
    """Run the checker for ``subject`` and reconcile its tracking issue."""
    logger.info("processing %s", subject.url)
    result = await source.run(subject.url)
    if result.fatal:
        logger.error(
            "some serious error occurred during checking - no issue processing possible"
        )

    findings = decorate_messages(result.findings, subject)
    context = RenderContext(
        subject=subject,
        checker_version=result.checker_version,
        commit_sha=result.commit_sha,
        mention=mention,
        cleanup=cleanup,
        now=now,
    )
    outcome = await reconcile_subject(
        subject,
        findings,
        FindingChecklistCodec(),
        store,
        context,
        policy=policy,
        fatal=result.fatal,
        dry_run=dry_run,
    )

    if statistics is not None and not dry_run and not result.fatal:
        statistics.save_findings(subject, findings, now=now)

    return outcome
