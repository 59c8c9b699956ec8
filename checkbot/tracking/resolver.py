"""Locate the authoritative tracking issue for a subject."""

import logging

from .encoding import TrackingCodec
from .models import Subject, TrackingIssue
from .store import IssueStore

logger = logging.getLogger(__name__)


class TrackingIssueResolver:
    """Finds the open tracking issue of a subject and closes duplicates.

    The issue with the highest number wins. Every other matching open issue is
    commented on and closed before anything else happens, so a second call with
    one open issue left is a no-op.
    """

    def __init__(self, store: IssueStore, dry_run: bool = False):
        self.store = store
        self.dry_run = dry_run

    async def resolve(
        self, subject: Subject, codec: TrackingCodec
    ) -> TrackingIssue | None:
        """Return the authoritative open issue, or None if there is none."""
        issues = await self.store.list_open(subject, codec.title_matches)
        issues = [issue for issue in issues if issue.is_open]
        if not issues:
            logger.debug("no open tracking issue for %s", subject.key)
            return None

        issues.sort(key=lambda issue: issue.id, reverse=True)
        current, duplicates = issues[0], issues[1:]
        if duplicates:
            logger.warning(
                "%s has %d open tracking issues, keeping #%d",
                subject.key,
                len(issues),
                current.id,
            )

        for duplicate in duplicates:
            await self._close_duplicate(subject, duplicate, codec)

        logger.debug("detected existing issue #%d for %s", current.id, subject.key)
        return current

    async def _close_duplicate(
        self, subject: Subject, issue: TrackingIssue, codec: TrackingCodec
    ) -> None:
        if self.dry_run:
            logger.info("[DRY] would close duplicate issue #%d", issue.id)
            return
        await self.store.comment(subject, issue.id, codec.duplicate_comment())
        await self.store.close(subject, issue.id)
        logger.info("closed duplicate issue #%d of %s", issue.id, subject.key)
