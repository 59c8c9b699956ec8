"""Storage of per-adapter finding statistics."""

import json
import logging
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from ..tracking.models import CODE_PATTERN, Subject

logger = logging.getLogger(__name__)


class StatisticsStore:
    """Stores the findings of the latest check per adapter as JSON files."""

    def __init__(self, base_path: str | Path = "statistics"):
        """Initialize statistics storage.

        Args:
            base_path: Directory holding one JSON file per adapter
        """
        self.base_path = Path(base_path)
        self.base_path.mkdir(parents=True, exist_ok=True)

    def _get_file_path(self, subject: Subject) -> Path:
        return self.base_path / f"{subject.repo}.json"

    def save_findings(
        self, subject: Subject, findings: list[str], now: datetime | None = None
    ) -> Path:
        """Save present findings keyed by their code, e.g. ``E123``.

        Findings without a code are skipped with a warning.

        Returns:
            Path to the written file
        """
        timestamp = (now or datetime.now(UTC)).isoformat()
        statistics: dict[str, dict[str, Any]] = {}
        for finding in sorted(findings):
            match = CODE_PATTERN.search(finding)
            if not match:
                logger.warning("could not parse finding %r", finding)
                continue
            statistics[match.group(1) + match.group(2)] = {
                "issue": finding,
                "adapter": subject.full_name,
                "timestamp": timestamp,
            }

        file_path = self._get_file_path(subject)
        with open(file_path, "w", encoding="utf-8") as f:
            json.dump(statistics, f, indent=2, ensure_ascii=False)

        logger.info("saved statistics to %s", file_path)
        return file_path

    def load_findings(self, subject: Subject) -> dict[str, dict[str, Any]] | None:
        """Load saved statistics, or None if the adapter was never checked."""
        file_path = self._get_file_path(subject)
        if not file_path.exists():
            return None
        with open(file_path, encoding="utf-8") as f:
            return json.load(f)
