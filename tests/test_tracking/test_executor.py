"""Tests for decision execution."""

import pytest

from checkbot.errors import TrackingStoreError
from checkbot.tracking.decision import Decision, DecisionKind
from checkbot.tracking.encoding import CHECKER_TITLE, FindingChecklistCodec
from checkbot.tracking.executor import execute
from checkbot.tracking.models import Subject


def decision_for(subject: Subject, kind: DecisionKind, **kwargs) -> Decision:
    return Decision(
        kind=kind,
        subject_key=subject.key,
        title=CHECKER_TITLE,
        body="body",
        **kwargs,
    )


@pytest.mark.asyncio
async def test_none_does_nothing(store, subject: Subject) -> None:
    result = await execute(
        decision_for(subject, DecisionKind.NONE), subject, store, FindingChecklistCodec()
    )
    assert store.calls == []
    assert result.created_issue is None


@pytest.mark.asyncio
async def test_create(store, subject: Subject) -> None:
    result = await execute(
        decision_for(subject, DecisionKind.CREATE),
        subject,
        store,
        FindingChecklistCodec(),
    )
    assert result.created_issue == 100
    assert store.mutations == [("create", 100)]


@pytest.mark.asyncio
async def test_update_with_comment(store, subject: Subject) -> None:
    store.add(subject, 3, CHECKER_TITLE, "old")
    result = await execute(
        decision_for(subject, DecisionKind.UPDATE, issue_id=3, comment="changes"),
        subject,
        store,
        FindingChecklistCodec(),
    )
    assert store.mutations == [("update", 3), ("comment", 3)]
    assert store.comments[3] == ["changes"]
    assert result.updated_issue == 3
    assert result.commented_issue == 3


@pytest.mark.asyncio
async def test_comment_only_update(store, subject: Subject) -> None:
    store.add(subject, 3, CHECKER_TITLE, "old")
    result = await execute(
        decision_for(
            subject, DecisionKind.UPDATE, issue_id=3, comment="ping", comment_only=True
        ),
        subject,
        store,
        FindingChecklistCodec(),
    )
    assert store.mutations == [("comment", 3)]
    assert store.issues[(subject.full_name, 3)].body == "old"
    assert result.updated_issue is None
    assert result.commented_issue == 3


@pytest.mark.asyncio
async def test_close(store, subject: Subject) -> None:
    store.add(subject, 3, CHECKER_TITLE)
    await execute(
        decision_for(subject, DecisionKind.CLOSE, issue_id=3, close_comment="bye"),
        subject,
        store,
        FindingChecklistCodec(),
    )
    assert store.mutations == [("comment", 3), ("close", 3)]
    assert store.open_issues(subject) == []


@pytest.mark.asyncio
async def test_supersede_creates_before_closing(store, subject: Subject) -> None:
    store.add(subject, 3, CHECKER_TITLE)
    result = await execute(
        decision_for(
            subject, DecisionKind.RECREATE_AND_SUPERSEDE, issue_id=3, recreate=True
        ),
        subject,
        store,
        FindingChecklistCodec(),
    )

    assert store.mutations == [("create", 100), ("comment", 3), ("close", 3)]
    assert "Follow up issue #100 has been created." in store.comments[3][0]
    assert [i.id for i in store.open_issues(subject)] == [100]
    assert result.created_issue == 100
    assert result.closed_issue == 3


@pytest.mark.asyncio
async def test_failed_create_leaves_old_issue_open(store, subject: Subject) -> None:
    store.add(subject, 3, CHECKER_TITLE)
    store.fail_on.add("create")

    with pytest.raises(TrackingStoreError):
        await execute(
            decision_for(subject, DecisionKind.RECREATE_AND_SUPERSEDE, issue_id=3),
            subject,
            store,
            FindingChecklistCodec(),
        )

    assert store.mutations == []
    assert [i.id for i in store.open_issues(subject)] == [3]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "kind",
    [
        DecisionKind.CREATE,
        DecisionKind.UPDATE,
        DecisionKind.CLOSE,
        DecisionKind.RECREATE_AND_SUPERSEDE,
    ],
)
async def test_dry_run_never_mutates(
    store, subject: Subject, kind: DecisionKind, caplog
) -> None:
    store.add(subject, 3, CHECKER_TITLE)
    caplog.set_level("INFO")

    result = await execute(
        decision_for(subject, kind, issue_id=3, comment="c", close_comment="bye"),
        subject,
        store,
        FindingChecklistCodec(),
        dry_run=True,
    )

    assert store.mutations == []
    assert result.dry_run
    assert "[DRY] would" in caplog.text
