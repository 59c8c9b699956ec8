"""Issue text codec for stable promotion requests.

A promotion issue tracks exactly one request, and the request key is the
canonical issue title. The version delta in the title is what makes a request
stale: once the target version changes, the old title no longer matches the
current request and the issue resolves.
"""

import re
from dataclasses import dataclass

from ..tracking.encoding import (
    BOT_HANDLE,
    RenderContext,
    closing_comment,
    stale_refresh_comment,
)
from ..tracking.models import TrackedItem, TrackingIssue
from .models import NO_STABLE_VERSION, PromotionCandidate, PromotionDirection

TITLE_ADD = "🚀 Please add adapter to stable repository - {latest}"
TITLE_UPDATE = "🚀 Consider updating stable version in repo from {stable} to {latest}"

ADD_TITLE_PATTERN = re.compile(
    r"Please add adapter to stable repository\s*-\s*(?P<to>\S+)\s*$"
)
UPDATE_TITLE_PATTERN = re.compile(
    r"Consider updating stable version in repo\s+from\s+(?P<from>\S+)\s+"
    r"to\s+(?P<to>\S+)\s*$"
)

PORTAL_URL = "https://www.iobroker.dev/adapter/{owner}/ioBroker.{adapter}/releases"
EDIT_URL = (
    "https://github.com/ioBroker/ioBroker.repositories/edit/master/"
    "sources-dist-stable.json"
)

VERSION_PATTERN = re.compile(r"^v?(\d+)\.(\d+)\.(\d+)")


@dataclass(frozen=True)
class PromotionRequest:
    """Version delta encoded in a request title."""

    direction: PromotionDirection
    from_version: str
    to_version: str

    @property
    def title(self) -> str:
        if self.direction == PromotionDirection.ADD:
            return TITLE_ADD.format(latest=self.to_version)
        return TITLE_UPDATE.format(stable=self.from_version, latest=self.to_version)


def request_for(candidate: PromotionCandidate) -> PromotionRequest:
    return PromotionRequest(
        direction=candidate.direction,
        from_version=candidate.stable_version,
        to_version=candidate.latest_version,
    )


def parse_request_title(title: str) -> PromotionRequest | None:
    """Recover the request from an issue title, tolerating emoji and spacing."""
    match = ADD_TITLE_PATTERN.search(title)
    if match:
        return PromotionRequest(
            PromotionDirection.ADD, NO_STABLE_VERSION, match.group("to")
        )
    match = UPDATE_TITLE_PATTERN.search(title)
    if match:
        return PromotionRequest(
            PromotionDirection.UPDATE, match.group("from"), match.group("to")
        )
    return None


def version_at_least(version: str, other: str) -> bool:
    """Compare the numeric release parts; unparseable versions must be equal."""
    left = VERSION_PATTERN.match(version)
    right = VERSION_PATTERN.match(other)
    if left is None or right is None:
        return version == other
    return tuple(map(int, left.groups())) >= tuple(map(int, right.groups()))


def find_stable_line(source: str | None, adapter: str) -> int | None:
    """1-based line of the adapter's entry in the stable source file."""
    if not source:
        return None
    entry = re.compile(rf'^\s*"{re.escape(adapter)}":\s*\{{\s*$')
    for number, line in enumerate(source.split("\n"), start=1):
        if entry.match(line):
            return number
    return None


class PromotionRequestCodec:
    """Codec for one adapter and one promotion direction.

    Args:
        direction: Which request kind this codec tracks
        candidate: Current candidate of that direction, if any
        latest_version: Current latest channel version, for close comments
        stable_version: Current stable channel version, for close comments
        stable_line: Line of the adapter in the stable source file
        mention: Maintainer mentioned for evidence in every comment
    """

    def __init__(
        self,
        direction: PromotionDirection,
        candidate: PromotionCandidate | None = None,
        latest_version: str | None = None,
        stable_version: str | None = None,
        stable_line: int | None = None,
        mention: str | None = None,
    ):
        if candidate is not None and candidate.direction != direction:
            raise ValueError("candidate direction does not match codec direction")
        self.direction = direction
        self.candidate = candidate
        self.latest_version = latest_version
        self.stable_version = stable_version
        self.stable_line = stable_line
        self.mention = mention
        self._persisted: PromotionRequest | None = None

    def current_keys(self) -> list[str]:
        if self.candidate is None:
            return []
        return [request_for(self.candidate).title]

    def title_matches(self, title: str) -> bool:
        request = parse_request_title(title)
        return request is not None and request.direction == self.direction

    def parse(self, issue: TrackingIssue) -> dict[str, bool]:
        request = parse_request_title(issue.title)
        if request is None or request.direction != self.direction:
            return {}
        self._persisted = request
        return {request.title: False}

    def title(self, items: list[TrackedItem]) -> str:
        present = [item.key for item in items if item.present]
        if present:
            return present[0]
        return self.current_keys()[0] if self.candidate else ""

    def body(self, items: list[TrackedItem], context: RenderContext) -> str:
        candidate = self.candidate
        if candidate is None:
            raise ValueError("cannot render a promotion request without candidate")

        portal = PORTAL_URL.format(owner=candidate.owner, adapter=candidate.adapter)
        edit = EDIT_URL
        if self.direction == PromotionDirection.UPDATE and self.stable_line:
            edit = f"{EDIT_URL}#L{self.stable_line}"

        lines = []
        if self.direction == PromotionDirection.ADD:
            lines.append(
                f"# Think about adding version {candidate.latest_version} to stable "
                f"repository."
            )
        else:
            lines.append(
                f"# Think about update stable version to {candidate.latest_version}"
            )
        lines.append(
            f"**Version**: stable=**{candidate.stable_version}** "
            f"({candidate.stable_age_days} days old) => "
            f"latest=**{candidate.latest_version}** "
            f"({candidate.latest_age_days} days old)"
        )
        lines.append(
            f"**Installs**: stable=**{candidate.stable_installs}** "
            f"({candidate.stable_share}%), latest=**{candidate.latest_installs}** "
            f"({candidate.install_share}%), total=**{candidate.total_installs}**"
        )
        lines.append("")
        lines.append(f"Click to use [developer portal]({portal})")
        lines.append(f"Click to [edit]({edit})")
        lines.append("")
        lines.append(
            "**Do not close this issue manually as a new issue will be created if "
            "condition for update still exists.**"
        )
        lines.append("")
        if self.direction == PromotionDirection.ADD:
            lines.append(
                f"Please drop a comment if any reason exists which blocks adding "
                f"adapter version {candidate.latest_version} to stable at this time."
            )
        else:
            lines.append(
                f"Please drop a comment if any reason exists which blocks updating "
                f"to version {candidate.latest_version} at this time."
            )
        lines.append("")
        if context.replaces_issue:
            lines.append(f"Note: This issue replaces issue #{context.replaces_issue}")
            lines.append("")
        lines.append(
            f"Note: This is an automatically generated message. Feel free to contact "
            f"me ({BOT_HANDLE}) if anything seems to be incorrect!"
        )
        if context.mention:
            lines.append(f"      {context.mention} for evidence")
        return "\n".join(lines)

    def update_comment(self, items: list[TrackedItem], recheck: bool) -> str:
        return ""

    def _closing(self, reason: str) -> str:
        text = closing_comment(reason)
        if self.mention:
            text += f"\n{self.mention} for evidence\n"
        return text

    def _requested(self) -> str:
        return self._persisted.to_version if self._persisted else "the requested version"

    def close_comment(self, items: list[TrackedItem]) -> str:
        if self.direction == PromotionDirection.ADD and self.stable_version:
            detail = (
                f"This issue suggests to add version {self._requested()} to the "
                f"stable repository but the adapter is already listed there with "
                f"version {self.stable_version}."
            )
        elif (
            self.stable_version
            and self._persisted
            and version_at_least(self.stable_version, self._persisted.to_version)
        ):
            detail = (
                f"This issue suggests to update the stable version of this adapter "
                f"to {self._requested()} but the current stable version is already "
                f"{self.stable_version}."
            )
        else:
            detail = (
                f"This issue suggests to update the stable version of this adapter "
                f"to {self._requested()} but this request is no longer valid. "
                f"Current latest release is {self.latest_version or 'unknown'}."
            )
        return self._closing(f"This issue seems to be outdated.\n\n{detail}\n")

    def superseded_comment(self, new_issue: int | None, recreate: bool) -> str:
        follow_up = f"#{new_issue}" if new_issue else "an updated one"
        if recreate:
            return self._closing(
                f"This issue will be closed due to recreate request. Follow up "
                f"issue {follow_up} has been created."
            )
        target = self.candidate.latest_version if self.candidate else "a newer version"
        return self._closing(
            f"This issue seems to be outdated.\n\nThis issue suggests to update the "
            f"stable version of this adapter to {self._requested()} but in the "
            f"meantime an update to version {target} is suggested.\n\n"
            f"So this issue will be replaced by {follow_up}.\n"
        )

    def duplicate_comment(self) -> str:
        return self._closing("This issue is outdated as newer issues exist.")

    def stale_comment(self, context: RenderContext) -> str:
        return stale_refresh_comment(context.mention or self.mention)
