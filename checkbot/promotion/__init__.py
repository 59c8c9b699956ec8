"""Stable channel promotion requests."""

from .evaluator import evaluate_add, evaluate_releases, evaluate_update
from .feeds import FeedContext, HttpMetricsFeed, MetricsFeed
from .models import (
    PromotionCandidate,
    PromotionDirection,
    ReleaseInfo,
    UsageStatistics,
)
from .reconcile import PromotionReport, run_promotion_pass
from .requests import PromotionRequestCodec, parse_request_title

__all__ = [
    "evaluate_add",
    "evaluate_releases",
    "evaluate_update",
    "FeedContext",
    "HttpMetricsFeed",
    "MetricsFeed",
    "parse_request_title",
    "PromotionCandidate",
    "PromotionDirection",
    "PromotionReport",
    "PromotionRequestCodec",
    "ReleaseInfo",
    "run_promotion_pass",
    "UsageStatistics",
]
