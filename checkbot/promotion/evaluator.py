"""Rules deciding which adapter versions to propose for the stable channel."""

import logging
from datetime import UTC, datetime, timedelta

from .models import (
    PromotionCandidate,
    PromotionDirection,
    ReleaseInfo,
    UsageStatistics,
)

logger = logging.getLogger(__name__)

ONE_DAY = timedelta(days=1)

# Add: latest release must be older than this.
ADD_MIN_AGE = timedelta(days=30)
# Update: latest release must be older than this...
UPDATE_MIN_AGE = timedelta(days=15)
# ...and either this many whole days after the stable release or older than
# UPDATE_MATURE_AGE...
UPDATE_MIN_RELEASE_GAP_DAYS = 30
UPDATE_MATURE_AGE = timedelta(days=30)
# ...and used by more than this share of installs, unless mature.
UPDATE_MIN_SHARE_PERCENT = 5.0


def _aware(moment: datetime) -> datetime:
    return moment if moment.tzinfo else moment.replace(tzinfo=UTC)


def _age_days(now: datetime, release: ReleaseInfo) -> int:
    return (now - _aware(release.version_date)) // ONE_DAY


def evaluate_add(
    adapter: str,
    latest: ReleaseInfo,
    statistics: UsageStatistics,
    now: datetime,
) -> PromotionCandidate | None:
    """Candidate for an adapter not yet listed in the stable channel."""
    owner = latest.owner
    if owner is None:
        logger.warning("adapter %s does not specify a 'meta' attribute", adapter)
        return None
    if not statistics.has(adapter):
        logger.warning("adapter %s does not yet provide statistics", adapter)
        return None

    elapsed = now - _aware(latest.version_date)
    candidate = PromotionCandidate(
        adapter=adapter,
        owner=owner,
        direction=PromotionDirection.ADD,
        latest_version=latest.version,
        latest_age_days=_age_days(now, latest),
        latest_installs=statistics.installs(adapter, latest.version),
        install_share=statistics.share(adapter, latest.version),
        total_installs=statistics.installs(adapter),
    )
    logger.debug(
        "ioBroker.%s not listed at stable, latest=%s (%d days old)",
        adapter,
        candidate.latest_version,
        candidate.latest_age_days,
    )

    if elapsed > ADD_MIN_AGE:
        logger.info("  + ioBroker.%s should be published", adapter)
        return candidate
    logger.info("  - ioBroker.%s too young for publishing", adapter)
    return None


def evaluate_update(
    adapter: str,
    latest: ReleaseInfo,
    stable: ReleaseInfo,
    statistics: UsageStatistics,
    now: datetime,
) -> PromotionCandidate | None:
    """Candidate for an adapter whose stable version lags behind latest."""
    if stable.version == latest.version:
        return None
    owner = latest.owner
    if owner is None:
        logger.warning("adapter %s does not specify a 'meta' attribute", adapter)
        return None
    if not statistics.has(adapter):
        logger.warning("adapter %s does not provide statistics", adapter)
        return None

    latest_time = _aware(latest.version_date)
    stable_time = _aware(stable.version_date)
    elapsed = now - latest_time
    gap_days = (latest_time - stable_time) // ONE_DAY

    candidate = PromotionCandidate(
        adapter=adapter,
        owner=owner,
        direction=PromotionDirection.UPDATE,
        latest_version=latest.version,
        stable_version=stable.version,
        latest_age_days=_age_days(now, latest),
        stable_age_days=_age_days(now, stable),
        release_gap_days=gap_days,
        latest_installs=statistics.installs(adapter, latest.version),
        stable_installs=statistics.installs(adapter, stable.version),
        install_share=statistics.share(adapter, latest.version),
        stable_share=statistics.share(adapter, stable.version),
        total_installs=statistics.installs(adapter),
    )
    logger.debug(
        "ioBroker.%s stable=%s (%d days old) => latest=%s (%d days old), %.2f%%",
        adapter,
        candidate.stable_version,
        candidate.stable_age_days,
        candidate.latest_version,
        candidate.latest_age_days,
        candidate.install_share,
    )

    mature = elapsed > UPDATE_MATURE_AGE
    if not (
        elapsed > UPDATE_MIN_AGE
        and (gap_days > UPDATE_MIN_RELEASE_GAP_DAYS or mature)
    ):
        logger.info("  - ioBroker.%s too young for update", adapter)
        return None
    if not (candidate.install_share > UPDATE_MIN_SHARE_PERCENT or mature):
        logger.info("  - ioBroker.%s too few users (percent limit missed)", adapter)
        return None

    logger.info("  + ioBroker.%s should be updated", adapter)
    return candidate


def evaluate_releases(
    latest: dict[str, ReleaseInfo],
    stable: dict[str, ReleaseInfo],
    statistics: UsageStatistics,
    now: datetime | None = None,
) -> dict[str, PromotionCandidate]:
    """Evaluate every adapter of the latest channel.

    Returns:
        Candidates keyed by adapter name; at most one per adapter
    """
    now = _aware(now or datetime.now(UTC))
    result: dict[str, PromotionCandidate] = {}

    for adapter in sorted(latest):
        if adapter in stable:
            candidate = evaluate_update(
                adapter, latest[adapter], stable[adapter], statistics, now
            )
        else:
            candidate = evaluate_add(adapter, latest[adapter], statistics, now)
        if candidate is not None:
            result[adapter] = candidate

    return result
