"""Decision engine mapping classified items to one tracker action."""

from dataclasses import dataclass, field, replace
from enum import Enum

from .encoding import RenderContext, TrackingCodec
from .models import Severity, TrackedItem, TrackingIssue

STALE_LABEL = "stale"


class DecisionKind(str, Enum):
    """Action to take against the tracking issue of one subject."""

    NONE = "none"
    CREATE = "create"
    UPDATE = "update"
    RECREATE_AND_SUPERSEDE = "recreate_and_supersede"
    CLOSE = "close"


@dataclass
class DecisionPolicy:
    """Run flags steering the decision engine.

    Both tracking domains go through the same state machine; differences are
    expressed here rather than in separate code paths.
    """

    errors_only: bool = False
    include_suggestions: bool = False
    recreate: bool = False
    recheck: bool = False
    # One request per issue: any change replaces the issue instead of editing it.
    replace_on_change: bool = False
    # Comment on an unchanged issue flagged stale so stale bots keep it open.
    refresh_stale: bool = False

    def __post_init__(self) -> None:
        if self.recreate and self.recheck:
            raise ValueError("recreate and recheck must not be used together")


@dataclass
class Decision:
    """Single action chosen for a subject, with all rendered text."""

    kind: DecisionKind
    subject_key: str
    items: list[TrackedItem] = field(default_factory=list)
    issue_id: int | None = None
    title: str = ""
    body: str = ""
    comment: str = ""
    close_comment: str = ""
    reason: str = ""
    failed: bool = False
    recreate: bool = False
    comment_only: bool = False

    @property
    def mutates(self) -> bool:
        return self.kind != DecisionKind.NONE


class DecisionEngine:
    """Pure decision procedure over (existing issue, items, policy)."""

    def __init__(self, codec: TrackingCodec, policy: DecisionPolicy | None = None):
        self.codec = codec
        self.policy = policy or DecisionPolicy()

    def is_actionable(self, item: TrackedItem) -> bool:
        """Whether a present item justifies opening a new issue."""
        if not item.present:
            return False
        severity = item.severity
        if severity == Severity.WARNING:
            return not self.policy.errors_only
        if severity == Severity.SUGGESTION:
            return self.policy.include_suggestions
        return True

    def decide(
        self,
        existing: TrackingIssue | None,
        items: list[TrackedItem],
        context: RenderContext,
        fatal: bool = False,
    ) -> Decision:
        """Choose the action for one subject.

        Args:
            existing: Authoritative open tracking issue, if any
            items: Classified items of this run
            context: Values rendered into the issue body
            fatal: The check ran but its output cannot be trusted

        Returns:
            Decision with rendered title, body and comments
        """
        subject_key = context.subject.key
        if fatal:
            return Decision(
                kind=DecisionKind.NONE,
                subject_key=subject_key,
                items=items,
                issue_id=existing.id if existing else None,
                reason="fatal error reported by check, no issue processing possible",
                failed=True,
            )

        present = [item for item in items if item.present]

        if existing is None:
            if not any(self.is_actionable(item) for item in present):
                return Decision(
                    kind=DecisionKind.NONE,
                    subject_key=subject_key,
                    items=items,
                    reason="no actionable items detected",
                )
            return Decision(
                kind=DecisionKind.CREATE,
                subject_key=subject_key,
                items=items,
                title=self.codec.title(items),
                body=self.codec.body(items, context),
                reason=f"{len(present)} item(s) detected",
            )

        if not present:
            return Decision(
                kind=DecisionKind.CLOSE,
                subject_key=subject_key,
                items=items,
                issue_id=existing.id,
                close_comment=self.codec.close_comment(items),
                reason="all items resolved",
            )

        changed = [item for item in items if item.changed]

        if self.policy.recreate or (self.policy.replace_on_change and changed):
            fresh = [item for item in items if item.present]
            return Decision(
                kind=DecisionKind.RECREATE_AND_SUPERSEDE,
                subject_key=subject_key,
                items=items,
                issue_id=existing.id,
                title=self.codec.title(fresh),
                body=self.codec.body(
                    fresh, replace(context, replaces_issue=existing.id)
                ),
                close_comment=self.codec.superseded_comment(
                    None, self.policy.recreate
                ),
                reason=(
                    "recreate requested"
                    if self.policy.recreate
                    else "tracked request changed"
                ),
                recreate=self.policy.recreate,
            )

        if changed or self.policy.recheck:
            return Decision(
                kind=DecisionKind.UPDATE,
                subject_key=subject_key,
                items=items,
                issue_id=existing.id,
                title=self.codec.title(items),
                body=self.codec.body(items, context),
                comment=self.codec.update_comment(items, self.policy.recheck),
                reason=(
                    f"{len(changed)} item(s) changed" if changed else "recheck requested"
                ),
            )

        if self.policy.refresh_stale and existing.has_label(STALE_LABEL):
            return Decision(
                kind=DecisionKind.UPDATE,
                subject_key=subject_key,
                items=items,
                issue_id=existing.id,
                comment=self.codec.stale_comment(context),
                reason="issue still valid but flagged stale",
                comment_only=True,
            )

        return Decision(
            kind=DecisionKind.NONE,
            subject_key=subject_key,
            items=items,
            issue_id=existing.id,
            reason="no changes detected",
        )
