"""One reconciliation pass for a single subject."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from .classifier import classify
from .decision import Decision, DecisionEngine, DecisionPolicy
from .encoding import RenderContext, TrackingCodec
from .executor import ExecutionResult, execute
from .models import Subject, TrackingIssue
from .resolver import TrackingIssueResolver
from .store import IssueStore

logger = logging.getLogger(__name__)


@dataclass
class ReconcileOutcome:
    """What a pass found and did for one subject."""

    subject: Subject
    existing: TrackingIssue | None
    decision: Decision
    result: ExecutionResult

    @property
    def failed(self) -> bool:
        return self.decision.failed


async def reconcile_subject(
    subject: Subject,
    current: Iterable[str],
    codec: TrackingCodec,
    store: IssueStore,
    context: RenderContext,
    policy: DecisionPolicy | None = None,
    fatal: bool = False,
    dry_run: bool = False,
) -> ReconcileOutcome:
    """Resolve, parse, classify, decide and execute for ``subject``.

    I/O steps are awaited one after the other. Any exception aborts the pass
    for this subject and propagates to the caller.

    Args:
        subject: Repository and tracking kind
        current: Item keys detected in this run
        codec: Text codec of the tracking domain
        store: Issue tracker
        context: Values rendered into issue text
        policy: Run flags
        fatal: The check ran but produced untrustworthy output
        dry_run: Log decisions instead of mutating the tracker
    """
    policy = policy or DecisionPolicy()
    engine = DecisionEngine(codec, policy)

    if fatal:
        # Leave every existing issue untouched.
        decision = engine.decide(None, [], context, fatal=True)
        result = await execute(decision, subject, store, codec, dry_run)
        return ReconcileOutcome(subject, None, decision, result)

    resolver = TrackingIssueResolver(store, dry_run=dry_run)
    existing = await resolver.resolve(subject, codec)

    previous: dict[str, bool] = {}
    if existing is not None and not policy.recreate:
        existing = await store.get(subject, existing.id)
        previous = codec.parse(existing)
        logger.debug("parsed %d item(s) from issue #%d", len(previous), existing.id)

    items = classify(previous, current)
    for item in items:
        logger.debug("    %s %s", item.state.value, item.key)

    decision = engine.decide(existing, items, context)
    logger.info("%s: decision %s (%s)", subject.key, decision.kind.value, decision.reason)
    result = await execute(decision, subject, store, codec, dry_run)
    return ReconcileOutcome(subject, existing, decision, result)
