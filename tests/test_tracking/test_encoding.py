"""Tests for the checklist codec."""

from checkbot.tracking.encoding import (
    CHECKER_TITLE,
    FindingChecklistCodec,
    RenderContext,
    parse_body,
    render_item,
)
from checkbot.tracking.models import LifecycleState, TrackedItem, TrackingIssue


def item(key: str, state: LifecycleState, checked: bool = False) -> TrackedItem:
    return TrackedItem(key=key, state=state, previously_checked=checked)


class TestParseBody:
    """Test checklist extraction from issue bodies."""

    def test_open_and_checked_lines(self) -> None:
        body = (
            "**ERRORS:**\n"
            "- [ ] :heavy_exclamation_mark: [E123] Error one\n"
            "- [x] :heavy_exclamation_mark: [E200] Error two\n"
            "- [X] :eyes: [W500] Warning\n"
        )
        assert parse_body(body) == {
            "[E123] Error one": False,
            "[E200] Error two": True,
            "[W500] Warning": True,
        }

    def test_empty_body(self) -> None:
        assert parse_body("") == {}
        assert parse_body(None) == {}

    def test_non_matching_lines_are_ignored(self) -> None:
        body = (
            "## Notification\n"
            "- [ ] no code in this line\n"
            "* [ ] [E100] wrong bullet\n"
            "- [ ] :pushpin: [S001] Suggestion\n"
        )
        assert parse_body(body) == {"[S001] Suggestion": False}

    def test_carriage_returns_are_stripped(self) -> None:
        body = "- [ ] :eyes: [W001] First\r\n- [x] :eyes: [W002] Second\r\n"
        assert parse_body(body) == {"[W001] First": False, "[W002] Second": True}

    def test_key_starts_at_first_code(self) -> None:
        body = "- [ ] :eyes: [W100] message mentioning [E200] and - [x] syntax"
        assert parse_body(body) == {
            "[W100] message mentioning [E200] and - [x] syntax": False
        }

    def test_unknown_marker_is_accepted(self) -> None:
        assert parse_body("- [ ] :grey_question: [E001] Something") == {
            "[E001] Something": False
        }


class TestRenderItem:
    """Test single checklist line rendering."""

    def test_open_error(self) -> None:
        line = render_item(item("[E123] Broken", LifecycleState.OPEN))
        assert line == "- [ ] :heavy_exclamation_mark: [E123] Broken"

    def test_resolved_warning_is_checked(self) -> None:
        line = render_item(item("[W001] Fixed", LifecycleState.RESOLVED))
        assert line == "- [x] :eyes: [W001] Fixed"

    def test_render_then_parse_keeps_keys(self) -> None:
        keys = [
            "[E001] Missing [README.md](https://github.com/o/r/blob/master/README.md)",
            "[S522] Please consider migrating to admin 5 UI (jsonConfig).",
            "[W113] Adapter should support compact mode",
        ]
        body = "\n".join(
            render_item(item(key, LifecycleState.NEW)) for key in keys
        )
        assert parse_body(body) == {key: False for key in keys}


class TestFindingChecklistCodec:
    """Test issue rendering for checker findings."""

    def test_title_matches(self) -> None:
        codec = FindingChecklistCodec()
        assert codec.title_matches(CHECKER_TITLE)
        assert codec.title_matches(f"Re: {CHECKER_TITLE}")
        assert not codec.title_matches("Some other issue")

    def test_body_sections(self, context: RenderContext) -> None:
        codec = FindingChecklistCodec()
        items = [
            item("[E100] Error", LifecycleState.NEW),
            item("[W200] Warning", LifecycleState.RESOLVED),
        ]
        body = codec.body(items, context)

        assert "**ERRORS:**" in body
        assert "- [ ] :heavy_exclamation_mark: [E100] Error" in body
        assert "**WARNINGS:**" in body
        assert "- [x] :eyes: [W200] Warning" in body
        assert ":thumbsup: No suggestions found" in body
        assert "### [ioBroker.weblate-test](https://github.com/mcm1957/ioBroker.weblate-test)" in body
        assert "based on commit abc123" in body
        assert "ioBroker.repochecker 3.1.0" in body
        assert "Last update at Sat, 01 Jun 2024 12:00:00 GMT" in body

    def test_body_round_trip(self, context: RenderContext) -> None:
        codec = FindingChecklistCodec()
        items = [
            item("[E100] Error", LifecycleState.OPEN),
            item("[S300] Suggestion", LifecycleState.NEW),
            item("[W200] Warning", LifecycleState.RESOLVED),
        ]
        issue = TrackingIssue(
            id=1,
            subject_key=context.subject.key,
            title=CHECKER_TITLE,
            body=codec.body(items, context),
        )
        assert codec.parse(issue) == {
            "[E100] Error": False,
            "[S300] Suggestion": False,
            "[W200] Warning": True,
        }

    def test_cleanup_drops_resolved_items(self, context: RenderContext) -> None:
        codec = FindingChecklistCodec()
        context.cleanup = True
        body = codec.body(
            [
                item("[E100] Error", LifecycleState.OPEN),
                item("[W200] Warning", LifecycleState.RESOLVED),
            ],
            context,
        )
        assert "[W200] Warning" not in body
        assert ":thumbsup: No warnings found" in body

    def test_replacement_note_and_mention(self, context: RenderContext) -> None:
        codec = FindingChecklistCodec()
        context.replaces_issue = 12
        context.mention = "@mcm1957"
        body = codec.body([item("[E100] Error", LifecycleState.NEW)], context)
        assert "Note: This issue replaces issue #12" in body
        assert "@mcm1957 for evidence" in body

    def test_update_comment_lists_changes(self) -> None:
        codec = FindingChecklistCodec()
        comment = codec.update_comment(
            [
                item("[E100] Fixed", LifecycleState.RESOLVED),
                item("[E200] Back again", LifecycleState.REOPENED, checked=True),
                item("[W300] Brand new", LifecycleState.NEW),
                item("[W400] Still there", LifecycleState.OPEN),
            ],
            recheck=False,
        )
        assert "**The following issues have been fixed**\n[E100] Fixed" in comment
        assert "[E200] Back again" in comment
        assert "**The following issues are new and have been added**" in comment
        assert "[W400] Still there" not in comment
        assert "RECHECK" not in comment

    def test_update_comment_ignores_already_resolved(self) -> None:
        codec = FindingChecklistCodec()
        items = [
            item("[E100] Fixed long ago", LifecycleState.RESOLVED, checked=True),
            item("[W400] Still there", LifecycleState.OPEN),
        ]
        assert codec.update_comment(items, recheck=False) == ""

    def test_update_comment_recheck_without_changes(self) -> None:
        codec = FindingChecklistCodec()
        comment = codec.update_comment(
            [item("[W400] Still there", LifecycleState.OPEN)], recheck=True
        )
        assert "RECHECK has been performed as requested." in comment
        assert "No changes detected." in comment

    def test_close_and_superseded_comments(self) -> None:
        codec = FindingChecklistCodec()
        assert "All issues reported earlier seem to be fixed now." in (
            codec.close_comment([])
        )
        superseded = codec.superseded_comment(42, recreate=True)
        assert "Follow up issue #42 has been created." in superseded
        assert "This issue will be closed." in superseded
        assert "newer issues exist" in codec.duplicate_comment()
