"""Apply a decision to the issue tracker."""

import logging
from dataclasses import dataclass

from .decision import Decision, DecisionKind
from .encoding import TrackingCodec
from .models import Subject
from .store import IssueStore

logger = logging.getLogger(__name__)


@dataclass
class ExecutionResult:
    """Side effects performed (or planned in dry run) for one decision."""

    decision: Decision
    dry_run: bool
    created_issue: int | None = None
    updated_issue: int | None = None
    closed_issue: int | None = None
    commented_issue: int | None = None


async def execute(
    decision: Decision,
    subject: Subject,
    store: IssueStore,
    codec: TrackingCodec,
    dry_run: bool = False,
) -> ExecutionResult:
    """Perform the single action of ``decision``.

    At most one create, one close and one comment happen. When superseding,
    the new issue is created before the old one is touched; if creation fails
    the old issue stays open.

    In dry run every action is logged together with the rendered text and no
    mutating store call is made.
    """
    result = ExecutionResult(decision=decision, dry_run=dry_run)
    kind = decision.kind

    if kind == DecisionKind.NONE:
        if decision.failed:
            logger.error("%s: %s", subject.key, decision.reason)
        else:
            logger.info("%s: nothing to do (%s)", subject.key, decision.reason)
        return result

    if kind == DecisionKind.CREATE:
        result.created_issue = await _create(decision, subject, store, dry_run)
        return result

    assert decision.issue_id is not None

    if kind == DecisionKind.UPDATE and decision.comment_only:
        if dry_run:
            logger.info(
                "[DRY] would add comment to issue #%d\n%s",
                decision.issue_id,
                decision.comment,
            )
        else:
            await store.comment(subject, decision.issue_id, decision.comment)
            logger.info("added comment to issue #%d", decision.issue_id)
        result.commented_issue = decision.issue_id
        return result

    if kind == DecisionKind.UPDATE:
        if dry_run:
            logger.info(
                "[DRY] would update issue #%d: %s\n%s",
                decision.issue_id,
                decision.title,
                decision.body,
            )
            if decision.comment:
                logger.info(
                    "[DRY] would add comment to issue #%d\n%s",
                    decision.issue_id,
                    decision.comment,
                )
        else:
            await store.update(
                subject, decision.issue_id, decision.title, decision.body
            )
            logger.info("updated issue #%d of %s", decision.issue_id, subject.key)
            if decision.comment:
                await store.comment(subject, decision.issue_id, decision.comment)
                logger.info("added comment to issue #%d", decision.issue_id)
        result.updated_issue = decision.issue_id
        if decision.comment:
            result.commented_issue = decision.issue_id
        return result

    if kind == DecisionKind.RECREATE_AND_SUPERSEDE:
        new_issue = await _create(decision, subject, store, dry_run)
        result.created_issue = new_issue
        comment = codec.superseded_comment(new_issue or None, decision.recreate)
        await _close(subject, store, decision.issue_id, comment, dry_run)
        result.closed_issue = decision.issue_id
        result.commented_issue = decision.issue_id
        return result

    if kind == DecisionKind.CLOSE:
        await _close(
            subject, store, decision.issue_id, decision.close_comment, dry_run
        )
        result.closed_issue = decision.issue_id
        result.commented_issue = decision.issue_id
        return result

    raise ValueError(f"Unknown decision kind: {kind}")


async def _create(
    decision: Decision, subject: Subject, store: IssueStore, dry_run: bool
) -> int:
    if dry_run:
        logger.info(
            "[DRY] would create new issue in %s: %s\n%s",
            subject.full_name,
            decision.title,
            decision.body,
        )
        return 0
    issue_id = await store.create(subject, decision.title, decision.body)
    logger.info("created issue #%d in %s", issue_id, subject.full_name)
    return issue_id


async def _close(
    subject: Subject, store: IssueStore, issue_id: int, comment: str, dry_run: bool
) -> None:
    if dry_run:
        logger.info("[DRY] would add comment to issue #%d\n%s", issue_id, comment)
        logger.info("[DRY] would close issue #%d", issue_id)
        return
    if comment:
        await store.comment(subject, issue_id, comment)
    await store.close(subject, issue_id)
    logger.info("closed issue #%d of %s", issue_id, subject.key)
