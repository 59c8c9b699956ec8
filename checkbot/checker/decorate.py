"""Markdown decoration of raw checker messages.

Decoration is deterministic, so the decorated text is stable across runs and
can serve as the identity of a finding.
"""

import re

from ..tracking.models import Subject


def _rules(subject: Subject) -> list[tuple[re.Pattern[str], str, int]]:
    link = f"https://github.com/{subject.owner}/{subject.repo}"
    npm = f"https://www.npmjs.com/package/{subject.repo.lower()}"
    # (pattern, replacement, count) with count 0 meaning all occurrences
    return [
        (
            re.compile(r'"(npm owner add bluefox iobroker\.[-_a-z\d]+)"'),
            r"`\1`",
            1,
        ),
        (re.compile(r'"Manage topics"'), "`Manage topics`", 1),
        (re.compile(r'"## License"'), "`## License`", 1),
        (re.compile(r"travis"), "[travis](https://travis-ci.com/)", 0),
        (
            re.compile(r"Travis-ci\.org"),
            f"[Travis-ci.com](https://travis-ci.com/{subject.owner}/{subject.repo})",
            1,
        ),
        (re.compile(r" README\.md"), f" [README.md]({link}/blob/master/README.md)", 0),
        (
            re.compile(r" io-package\.json"),
            f" [io-package.json]({link}/blob/master/io-package.json)",
            0,
        ),
        (
            re.compile(r" package\.json"),
            f" [package.json]({link}/blob/master/package.json)",
            0,
        ),
        (
            re.compile(r" node_modules"),
            f" [node_modules]({link}/tree/master/node_modules)",
            0,
        ),
        (re.compile(r" NPM"), f" [NPM]({npm})", 0),
        (
            re.compile(r'"iob_npm\.done"'),
            f'"[iob_npm.done]({link}/blob/master/iob_npm.done)"',
            1,
        ),
        (
            re.compile(r" admin/words\.js"),
            f" [admin/words.js]({link}/blob/master/admin/words.js)",
            1,
        ),
        (re.compile(r" main\.js"), f" [main.js]({link}/blob/master/main.js)", 1),
    ]


def decorate_message(text: str, subject: Subject) -> str:
    """Turn file names and tool hints in a checker message into markdown links."""
    for pattern, replacement, count in _rules(subject):
        text = pattern.sub(replacement, text, count=count)
    return text


def decorate_messages(messages: list[str], subject: Subject) -> list[str]:
    return [decorate_message(message, subject) for message in messages]
