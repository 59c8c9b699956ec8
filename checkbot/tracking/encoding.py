"""Text codec between tracked items and issue titles/bodies.

Issue bodies are the only durable state the bot has. Everything that reads or
writes issue text goes through a codec from this module (or the promotion
request codec), so the line grammar lives in one place.

Checklist line grammar, version 1::

    - [<box>] <marker> [<S><nnn>] <message>

``<box>`` is a space (open) or ``x``/``X`` (resolved). ``<marker>`` is any
text without a finding code and carries no meaning. Extraction anchors on the
first ``[E|W|S nnn]`` token, so everything from that token to the end of the
line is the item key, even if the message itself contains checkbox syntax.
Lines that do not match are ignored.
"""

import logging
import re
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol

from .models import LifecycleState, Severity, Subject, TrackedItem, TrackingIssue

logger = logging.getLogger(__name__)

GRAMMAR_VERSION = 1

CHECKLIST_LINE = re.compile(r"^-\s\[(.)\].*?(\[[EWS]\d{3}\].*)$")

BOT_NAME = "ioBroker Check and Service Bot"
BOT_HANDLE = "@iobroker-bot"

CHECKER_TITLE = "Please consider fixing issues detected by repository checker"

SEVERITY_MARKERS = {
    Severity.ERROR: ":heavy_exclamation_mark:",
    Severity.WARNING: ":eyes:",
    Severity.SUGGESTION: ":pushpin:",
}

SEVERITY_HEADINGS = {
    Severity.ERROR: ("**ERRORS:**", ":thumbsup: No errors found"),
    Severity.WARNING: ("**WARNINGS:**", ":thumbsup: No warnings found"),
    Severity.SUGGESTION: ("**SUGGESTIONS:**", ":thumbsup: No suggestions found"),
}

SEVERITY_NOTES = {
    Severity.ERROR: (
        "**Errors** reported by repository checker should be fixed as soon as "
        "possible. Some of them require a new release to be considered as fixed. "
        "**Please note that errors reported by checker might be considered as "
        "blocking point for future updates at stable repository.**"
    ),
    Severity.WARNING: (
        "**Warnings** reported by repository checker should be reviewed. While "
        "some warnings can be ignored due to good reasons or a dedicated decision "
        "of the developer, most warnings should be fixed as soon as appropriate."
    ),
    Severity.SUGGESTION: (
        "**Suggestions** reported by repository checker should be reviewed. "
        "Suggestions can be ignored due to a decision of the developer but they "
        "are reported as a hint to use a configuration which might get required "
        "in future or at least is used by most adapters. Suggestions are always "
        "optional to follow."
    ),
}

SIGNATURE = f"your  \n_{BOT_NAME}_\n"


@dataclass
class RenderContext:
    """Run specific values that end up in rendered issue text."""

    subject: Subject
    checker_version: str | None = None
    commit_sha: str | None = None
    replaces_issue: int | None = None
    mention: str | None = None
    cleanup: bool = False
    details: dict[str, str] | None = None
    now: datetime | None = None

    @property
    def timestamp(self) -> str:
        now = self.now or datetime.now(UTC)
        return now.strftime("%a, %d %b %Y %H:%M:%S GMT")


class TrackingCodec(Protocol):
    """Serialization boundary between tracked items and issue text."""

    def title_matches(self, title: str) -> bool: ...

    def parse(self, issue: TrackingIssue) -> dict[str, bool]: ...

    def title(self, items: list[TrackedItem]) -> str: ...

    def body(self, items: list[TrackedItem], context: RenderContext) -> str: ...

    def update_comment(self, items: list[TrackedItem], recheck: bool) -> str: ...

    def close_comment(self, items: list[TrackedItem]) -> str: ...

    def superseded_comment(self, new_issue: int | None, recreate: bool) -> str: ...

    def duplicate_comment(self) -> str: ...

    def stale_comment(self, context: RenderContext) -> str: ...


def render_item(item: TrackedItem) -> str:
    """Render one checklist line; resolved items are shown checked."""
    flag = "x" if item.state == LifecycleState.RESOLVED else " "
    marker = SEVERITY_MARKERS.get(item.severity, ":grey_question:")
    return f"- [{flag}] {marker} {item.key}"


def parse_body(body: str | None) -> dict[str, bool]:
    """Recover ``{key: checked}`` from an issue body.

    Unparseable lines are skipped, so an item that cannot be read back is
    treated as new on the next run.
    """
    result: dict[str, bool] = {}
    if not body:
        return result

    for line in body.replace("\r", "").split("\n"):
        match = CHECKLIST_LINE.match(line)
        if not match:
            if line.strip():
                logger.debug("ignored line: %r", line)
            continue
        key = match.group(2).rstrip()
        result[key] = match.group(1) != " "
    return result


def closing_comment(reason: str) -> str:
    return f"{reason}  \nThis issue will be closed.  \n  \n{SIGNATURE}"


def stale_refresh_comment(mention: str | None = None) -> str:
    text = (
        "This issue seems to be still valid. So it should not be flagged stale.\n"
        "Please consider processing the issue"
    )
    if mention:
        text += f"\n{mention} for evidence"
    return text


class FindingChecklistCodec:
    """Codec for repository checker findings rendered as a markdown checklist."""

    def title_matches(self, title: str) -> bool:
        return CHECKER_TITLE in title

    def parse(self, issue: TrackingIssue) -> dict[str, bool]:
        return parse_body(issue.body)

    def title(self, items: list[TrackedItem]) -> str:
        return CHECKER_TITLE

    def body(self, items: list[TrackedItem], context: RenderContext) -> str:
        subject = context.subject
        lines = [f"## Notification from {BOT_NAME}"]
        lines.append("Dear adapter developer,")
        lines.append("")
        lines.append(
            f"I'm the {BOT_NAME}. I'm an automated tool processing routine tasks "
            f"for the ioBroker infrastructure. I have recently checked the "
            f"repository for your adapter _**{subject.adapter}**_ for common errors "
            f"and appropriate suggestions to keep this adapter up to date."
        )
        lines.append("")
        lines.append(
            "### This check is based on the current head revisions "
            "(master / main branch) of the adapter repository"
        )
        lines.append("")
        lines.append("Please see the result of the check below.")
        lines.append("")
        lines.append(f"### [{subject.repo}]({subject.url})")
        lines.append("")

        visible = [
            item
            for item in sorted(items, key=lambda i: i.key)
            if not (context.cleanup and item.state == LifecycleState.RESOLVED)
        ]
        present_severities = set()
        for severity in Severity:
            heading, empty_line = SEVERITY_HEADINGS[severity]
            section = [item for item in visible if item.severity == severity]
            if section:
                present_severities.add(severity)
                lines.append(heading)
                lines.extend(render_item(item) for item in section)
            else:
                lines.append(empty_line)
            lines.append("")

        lines.append(
            "Please review issues reported and consider fixing them as soon as "
            "appropriate."
        )
        for severity in Severity:
            if severity in present_severities:
                lines.append("")
                lines.append(SEVERITY_NOTES[severity])

        lines.append("")
        lines.append(
            "You may start a new check or force the creation of a new issue at any "
            "time by adding the following comment to this issue:"
        )
        lines.append("")
        lines.append(f"`{BOT_HANDLE} recheck`")
        lines.append("or")
        lines.append(f"`{BOT_HANDLE} recreate`")
        lines.append("")
        lines.append(
            f"Feel free to contact me ({BOT_HANDLE}) if you have any questions or "
            f"feel that an issue is incorrectly flagged."
        )
        lines.append("")
        lines.append(
            "And **THANKS A LOT** for maintaining this adapter from me and all users."
        )
        lines.append("_Let's work together for the best user experience._")
        lines.append("")
        lines.append("your")
        lines.append(f"_{BOT_NAME}_")
        if context.replaces_issue:
            lines.append("")
            lines.append(f"Note: This issue replaces issue #{context.replaces_issue}")
        if context.mention:
            lines.append("")
            lines.append(f"{context.mention} for evidence")

        lines.append("")
        footer = f"Last update at {context.timestamp}"
        if context.commit_sha:
            footer += f" based on commit {context.commit_sha}"
        lines.append(footer)
        if context.checker_version:
            lines.append(f"ioBroker.repochecker {context.checker_version}")

        return "\n".join(lines)

    def update_comment(self, items: list[TrackedItem], recheck: bool) -> str:
        lines = [f"### This issue has been updated by {BOT_NAME}"]
        sections = [
            (
                [i for i in items if i.state == LifecycleState.RESOLVED and i.changed],
                "**The following issues have been fixed**",
                ":thumbsup:Thanks for fixing the issues.",
            ),
            (
                [i for i in items if i.state == LifecycleState.REOPENED],
                "**The following issues are not fixed and have been reopened**",
                None,
            ),
            (
                [i for i in items if i.state == LifecycleState.NEW],
                "**The following issues are new and have been added**",
                None,
            ),
        ]

        changes = False
        for section, heading, trailer in sections:
            if not section:
                continue
            changes = True
            lines.append(heading)
            lines.extend(item.key for item in sorted(section, key=lambda i: i.key))
            lines.append("")
            if trailer:
                lines.append(trailer)
                lines.append("")

        if recheck:
            lines.append("RECHECK has been performed as requested.")
            if not changes:
                lines.append("No changes detected.")

        if not changes and not recheck:
            return ""
        return "\n".join(lines)

    def close_comment(self, items: list[TrackedItem]) -> str:
        return closing_comment(
            "All issues reported earlier seem to be fixed now.  \n"
            "THANKS for your support."
        )

    def superseded_comment(self, new_issue: int | None, recreate: bool) -> str:
        follow_up = f"#{new_issue}" if new_issue else "a new issue"
        return closing_comment(
            f"Issue outdated due to RECREATE request. Follow up issue {follow_up} "
            f"has been created."
        )

    def duplicate_comment(self) -> str:
        return closing_comment("This issue is outdated as newer issues exist.")

    def stale_comment(self, context: RenderContext) -> str:
        return stale_refresh_comment(context.mention)
