"""Lifecycle classification of tracked items."""

from collections.abc import Iterable, Mapping

from .models import LifecycleState, TrackedItem


def classify_key(previously_checked: bool | None, present: bool) -> LifecycleState:
    """Return the lifecycle state of a single key.

    Args:
        previously_checked: Checkbox state read from the issue, None if the key
            was not in the issue
        present: Whether the key was detected in the current run

    Raises:
        ValueError: If the key is neither persisted nor present
    """
    if previously_checked is None:
        if not present:
            raise ValueError("key is absent from both previous and current state")
        return LifecycleState.NEW
    if not present:
        return LifecycleState.RESOLVED
    return LifecycleState.REOPENED if previously_checked else LifecycleState.OPEN


def normalize_key(key: str) -> str:
    """Collapse whitespace runs so a key reads back from an issue body unchanged."""
    return " ".join(key.split())


def classify(
    previous: Mapping[str, bool], current: Iterable[str]
) -> list[TrackedItem]:
    """Classify every key of ``previous`` and ``current``.

    Keys are compared after whitespace normalization; otherwise matching is
    exact and a changed message resolves the old item and adds a new one.

    Returns:
        Tracked items sorted by key
    """
    persisted: dict[str, bool] = {}
    for key, checked in previous.items():
        persisted.setdefault(normalize_key(key), checked)
    current_keys = {normalize_key(key) for key in current} - {""}
    persisted.pop("", None)

    items = []
    for key in sorted(set(persisted) | current_keys):
        checked = persisted.get(key)
        items.append(
            TrackedItem(
                key=key,
                state=classify_key(checked, key in current_keys),
                previously_checked=bool(checked),
            )
        )
    return items
