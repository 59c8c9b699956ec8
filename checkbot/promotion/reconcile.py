"""Promotion pass over every adapter of the latest channel."""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime

from ..errors import TrackingStoreError, TransientFetchError
from ..tracking.decision import DecisionPolicy
from ..tracking.encoding import RenderContext
from ..tracking.models import Subject, SubjectKind
from ..tracking.reconciler import ReconcileOutcome, reconcile_subject
from ..tracking.store import IssueStore
from .evaluator import evaluate_releases
from .feeds import FeedContext
from .models import PromotionDirection
from .requests import PromotionRequestCodec, find_stable_line

logger = logging.getLogger(__name__)

SUBJECT_KINDS = {
    PromotionDirection.ADD: SubjectKind.PROMOTION_ADD,
    PromotionDirection.UPDATE: SubjectKind.PROMOTION_UPDATE,
}


@dataclass
class PromotionReport:
    """Outcome of a promotion pass."""

    candidates: int = 0
    outcomes: list[ReconcileOutcome] = field(default_factory=list)
    failures: dict[str, str] = field(default_factory=dict)

    @property
    def failed(self) -> bool:
        return bool(self.failures)


async def run_promotion_pass(
    feeds: FeedContext,
    store: IssueStore,
    adapters: list[str] | None = None,
    recreate: bool = False,
    mention: str | None = None,
    delay: float = 0.0,
    dry_run: bool = False,
    now: datetime | None = None,
) -> PromotionReport:
    """Evaluate releases and reconcile the promotion issues of every adapter.

    Each adapter has two independent subjects, one per direction. A failing
    subject is recorded in the report and the pass continues with the next
    one.

    Args:
        feeds: Per-run feed snapshot
        store: Issue tracker
        adapters: Only process these adapters (names without 'ioBroker.')
        recreate: Replace every open request with a fresh issue
        mention: Maintainer mentioned for evidence
        delay: Seconds to wait after a subject caused a side effect
        dry_run: Log decisions instead of mutating the tracker
        now: Evaluation time
    """
    now = now or datetime.now(UTC)
    latest = await feeds.latest()
    stable = await feeds.stable()
    statistics = await feeds.statistics()
    try:
        stable_source = await feeds.stable_source()
    except TransientFetchError as e:
        logger.warning("stable source file unavailable, edit links without line: %s", e)
        stable_source = None

    logger.info("evaluating releases of %d adapters", len(latest))
    candidates = evaluate_releases(latest, stable, statistics, now)
    report = PromotionReport(candidates=len(candidates))

    selected = sorted(latest)
    if adapters:
        wanted = {name.removeprefix("ioBroker.").lower() for name in adapters}
        selected = [name for name in selected if name.lower() in wanted]

    policy = DecisionPolicy(
        recreate=recreate, replace_on_change=True, refresh_stale=True
    )

    for adapter in selected:
        owner = latest[adapter].owner
        if owner is None:
            logger.warning("skipping %s - no repository owner known", adapter)
            continue
        candidate = candidates.get(adapter)

        for direction, kind in SUBJECT_KINDS.items():
            subject = Subject(owner=owner, repo=f"ioBroker.{adapter}", kind=kind)
            codec = PromotionRequestCodec(
                direction,
                candidate=(
                    candidate
                    if candidate is not None and candidate.direction == direction
                    else None
                ),
                latest_version=latest[adapter].version,
                stable_version=stable[adapter].version if adapter in stable else None,
                stable_line=find_stable_line(stable_source, adapter),
                mention=mention,
            )
            context = RenderContext(subject=subject, mention=mention, now=now)
            try:
                outcome = await reconcile_subject(
                    subject,
                    codec.current_keys(),
                    codec,
                    store,
                    context,
                    policy=policy,
                    dry_run=dry_run,
                )
            except (TransientFetchError, TrackingStoreError, ValueError) as e:
                logger.error("%s: %s", subject.key, e)
                report.failures[subject.key] = str(e)
                continue

            report.outcomes.append(outcome)
            if outcome.decision.mutates and delay > 0:
                logger.debug("waiting %.0fs ...", delay)
                await asyncio.sleep(delay)

    return report
