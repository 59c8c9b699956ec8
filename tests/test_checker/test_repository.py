"""Tests for the repository checker pass."""

import json
from datetime import datetime
from pathlib import Path

import pytest

from checkbot.checker.repository import check_repository, parse_repository
from checkbot.checker.source import CheckResult
from checkbot.storage.statistics import StatisticsStore
from checkbot.tracking.decision import DecisionKind, DecisionPolicy
from checkbot.tracking.encoding import CHECKER_TITLE
from checkbot.tracking.models import Subject, SubjectKind


class StaticSource:
    """Finding source returning a fixed payload."""

    def __init__(self, payload: dict):
        self.payload = payload
        self.calls: list[str] = []

    async def run(self, repo_url: str) -> CheckResult:
        self.calls.append(repo_url)
        return CheckResult.from_payload(repo_url, self.payload)


class TestParseRepository:
    """Test repository argument parsing."""

    @pytest.mark.parametrize(
        "value",
        [
            "mcm1957/ioBroker.weblate-test",
            "https://github.com/mcm1957/ioBroker.weblate-test",
            "https://github.com/mcm1957/ioBroker.weblate-test.git",
            "github.com/mcm1957/iobroker.weblate-test/",
        ],
    )
    def test_valid(self, value: str) -> None:
        subject = parse_repository(value)
        assert subject.owner == "mcm1957"
        assert subject.repo == "ioBroker.weblate-test"
        assert subject.kind == SubjectKind.CHECKER

    @pytest.mark.parametrize("value", ["weblate-test", "https://gitlab.com/a/b/c", ""])
    def test_invalid(self, value: str) -> None:
        with pytest.raises(ValueError, match="Cannot parse repository"):
            parse_repository(value)


@pytest.mark.asyncio
async def test_creates_issue_with_decorated_findings(
    store, subject: Subject, now: datetime
) -> None:
    source = StaticSource({"errors": ["[E105] README.md missing"], "version": "3.1.0"})

    outcome = await check_repository(subject, source, store, now=now)

    assert source.calls == [subject.url]
    assert outcome.decision.kind == DecisionKind.CREATE
    issue = store.open_issues(subject)[0]
    assert issue.title == CHECKER_TITLE
    assert "[E105] [README.md](https://github.com/mcm1957/ioBroker.weblate-test/blob/master/README.md) missing" in issue.body


@pytest.mark.asyncio
async def test_second_run_without_changes(
    store, subject: Subject, now: datetime
) -> None:
    source = StaticSource({"errors": ["[E105] README.md missing"]})
    await check_repository(subject, source, store, now=now)

    outcome = await check_repository(subject, source, store, now=now)

    assert outcome.decision.kind == DecisionKind.NONE
    assert store.mutations == [("create", 100)]


@pytest.mark.asyncio
async def test_fatal_result(store, subject: Subject, now: datetime) -> None:
    store.add(subject, 5, CHECKER_TITLE, "- [ ] :eyes: [W100] old")
    source = StaticSource({"errors": ["[E000] FATAL: cannot access repository"]})

    outcome = await check_repository(subject, source, store, now=now)

    assert outcome.failed
    assert store.calls == []
    assert [i.id for i in store.open_issues(subject)] == [5]


@pytest.mark.asyncio
async def test_errors_only_policy(store, subject: Subject, now: datetime) -> None:
    source = StaticSource({"warnings": ["[W100] warning"]})

    outcome = await check_repository(
        subject, source, store, policy=DecisionPolicy(errors_only=True), now=now
    )

    assert outcome.decision.kind == DecisionKind.NONE
    assert store.mutations == []


@pytest.mark.asyncio
async def test_statistics_saved(
    store, subject: Subject, now: datetime, tmp_path: Path
) -> None:
    statistics = StatisticsStore(tmp_path)
    source = StaticSource({"errors": ["[E105] broken"], "warnings": ["[W200] w"]})

    await check_repository(subject, source, store, statistics=statistics, now=now)

    data = json.loads((tmp_path / "ioBroker.weblate-test.json").read_text())
    assert set(data) == {"E105", "W200"}
    assert data["E105"]["adapter"] == "mcm1957/ioBroker.weblate-test"


@pytest.mark.asyncio
async def test_statistics_skipped_in_dry_run(
    store, subject: Subject, now: datetime, tmp_path: Path
) -> None:
    statistics = StatisticsStore(tmp_path)
    source = StaticSource({"errors": ["[E105] broken"]})

    await check_repository(
        subject, source, store, statistics=statistics, dry_run=True, now=now
    )

    assert statistics.load_findings(subject) is None
    assert store.mutations == []
