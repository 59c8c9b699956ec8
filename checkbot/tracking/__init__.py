"""Finding and request lifecycle reconciliation engine."""

from .classifier import classify
from .decision import Decision, DecisionEngine, DecisionKind, DecisionPolicy
from .encoding import FindingChecklistCodec, RenderContext, TrackingCodec
from .executor import ExecutionResult, execute
from .models import (
    LifecycleState,
    Severity,
    Subject,
    SubjectKind,
    TrackedItem,
    TrackingIssue,
)
from .reconciler import ReconcileOutcome, reconcile_subject
from .resolver import TrackingIssueResolver
from .store import IssueStore

__all__ = [
    "classify",
    "Decision",
    "DecisionEngine",
    "DecisionKind",
    "DecisionPolicy",
    "ExecutionResult",
    "execute",
    "FindingChecklistCodec",
    "IssueStore",
    "LifecycleState",
    "reconcile_subject",
    "ReconcileOutcome",
    "RenderContext",
    "Severity",
    "Subject",
    "SubjectKind",
    "TrackedItem",
    "TrackingCodec",
    "TrackingIssue",
    "TrackingIssueResolver",
]
