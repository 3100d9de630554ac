"""
Lottery Statistics Engine

Descriptive statistics over an ordered sequence of DrawRecords for one
zone (SSQ/DLT: primary or secondary) or one digit position (FC3D):

    number_statistics       : frequency, gaps and probability per number,
                              plus chart-ready trend points
    frequency_distribution  : per-number counts and a uniformity test

Records are expected oldest first. Every function works on the trailing
window of the `period_count` most recent records; gaps are counted inside
that window only, never against the full history.
"""
import logging
import os
from collections import Counter
from dataclasses import asdict, dataclass

import numpy as np
import pandas as pd
from scipy import stats

from . import config
from .cache import RESULT_CACHE
from .games import PRIMARY, SECONDARY, profile_for
from .scraper import load_dataset

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

@dataclass
class NumberStatistic:
    number: int
    frequency: int = 0
    current_gap: int = 0
    last_gap: int = 0
    max_gap: int = 0
    average_gap: float = 0.0
    probability: float = 0.0

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class TrendPoint:
    position: int
    value: int

    def to_dict(self) -> dict:
        return asdict(self)


def _window(records, period_count: int) -> list:
    """Trailing `period_count` records; an empty list for a zero window."""
    if period_count is None:
        period_count = config.DEFAULT_PERIOD_COUNT
    if period_count < 0:
        raise ValueError(f"period_count must not be negative, got {period_count}")
    if period_count == 0:
        return []
    return list(records)[-period_count:]


def _trend_values(numbers: list, zone: str, is_positional: bool) -> list:
    """Primary zones draw one trend line from their first number."""
    if zone == PRIMARY and not is_positional:
        return numbers[:1]
    return numbers


# ===================================================================
# 1. Number Statistics (frequency / gaps / probability)
# ===================================================================

def number_statistics(records, game_id: str, zone: str = PRIMARY, period_count: int = None) -> dict:
    """
    Walk the window oldest to newest and track, for every number in the
    zone's range, how often it was drawn and how far apart its draws were.

    Returns
    -------
    dict with keys:
        game          : canonical game id
        zone          : canonical zone / position
        period_count  : number of records actually analysed (W)
        number_stats  : list of NumberStatistic, ascending by number
        trend         : list of TrendPoint (1-indexed positions)
        dataframe     : pd.DataFrame of number_stats
    """
    profile = profile_for(game_id)
    canonical = profile.resolve_zone(zone)
    lo, hi = profile.zone_range(canonical)
    data = _window(records, period_count)
    total = len(data)

    number_stats = {n: NumberStatistic(number=n) for n in range(lo, hi + 1)}
    intervals = {n: [] for n in number_stats}
    last_seen = {n: -1 for n in number_stats}
    trend = []

    for index, record in enumerate(data):
        drawn = profile.zone_numbers(record, canonical)

        for value in _trend_values(drawn, canonical, profile.is_positional):
            trend.append(TrendPoint(position=index + 1, value=value))

        for value in drawn:
            if value in number_stats:
                number_stats[value].frequency += 1

        drawn_set = set(drawn)
        for n, stat in number_stats.items():
            if n in drawn_set:
                if last_seen[n] >= 0:
                    interval = index - last_seen[n]
                    intervals[n].append(interval)
                    stat.last_gap = interval
                last_seen[n] = index
                stat.current_gap = 0
            elif last_seen[n] >= 0:
                stat.current_gap = index - last_seen[n]
            else:
                # Not seen yet: distinct from a gap of zero
                stat.current_gap = index + 1

    for n, stat in number_stats.items():
        if intervals[n]:
            stat.average_gap = round(float(np.mean(intervals[n])), 2)
            stat.max_gap = int(max(intervals[n]))
        stat.probability = round(stat.frequency / total, 2) if total else 0.0

    ordered = [number_stats[n] for n in sorted(number_stats)]
    return {
        "game": profile.game_id,
        "zone": canonical,
        "period_count": total,
        "number_stats": ordered,
        "trend": trend,
        "dataframe": pd.DataFrame([s.to_dict() for s in ordered]),
    }


# ===================================================================
# 2. Frequency Distribution
# ===================================================================

def frequency_distribution(records, game_id: str, zone: str = PRIMARY, period_count: int = None) -> dict:
    """
    Count every number of the zone across the window and test the counts
    against a uniform distribution (chi-squared).

    Returns
    -------
    dict with keys:
        game, zone, period_count
        frequency   : dict {number: count}
        points      : list of TrendPoint (position = number, value = count)
        uniformity  : {chi2_stat, chi2_pvalue, significant} or None when
                      nothing was drawn
        dataframe   : pd.DataFrame (number, frequency)
    """
    profile = profile_for(game_id)
    canonical = profile.resolve_zone(zone)
    lo, hi = profile.zone_range(canonical)
    data = _window(records, period_count)

    counter = Counter()
    for record in data:
        counter.update(n for n in profile.zone_numbers(record, canonical) if lo <= n <= hi)
    frequency = {n: counter.get(n, 0) for n in range(lo, hi + 1)}

    observed = np.array(list(frequency.values()), dtype=float)
    uniformity = None
    if observed.sum() > 0:
        chi2_stat, chi2_p = stats.chisquare(observed)
        uniformity = {
            "chi2_stat": round(float(chi2_stat), 4),
            "chi2_pvalue": round(float(chi2_p), 6),
            "significant": bool(chi2_p < 0.05),
        }

    return {
        "game": profile.game_id,
        "zone": canonical,
        "period_count": len(data),
        "frequency": frequency,
        "points": [TrendPoint(position=n, value=c) for n, c in frequency.items()],
        "uniformity": uniformity,
        "dataframe": pd.DataFrame(
            [{"number": n, "frequency": c} for n, c in frequency.items()]
        ),
    }


# ===================================================================
# Cached service
# ===================================================================

ZONE_STYLES = {
    PRIMARY: {"trend": "红球走势", "frequency": "红球出现频率", "color": "#ff4d4f",
              "fill": "rgba(255, 77, 79, 0.1)"},
    SECONDARY: {"trend": "蓝球走势", "frequency": "蓝球出现频率", "color": "#1890ff",
                "fill": "rgba(24, 144, 255, 0.1)"},
    "hundreds": {"trend": "百位走势", "frequency": "百位出现频率", "color": "#fa8c16",
                 "fill": "rgba(250, 140, 22, 0.1)"},
    "tens": {"trend": "十位走势", "frequency": "十位出现频率", "color": "#52c41a",
             "fill": "rgba(82, 196, 26, 0.1)"},
    "ones": {"trend": "个位走势", "frequency": "个位出现频率", "color": "#722ed1",
             "fill": "rgba(114, 46, 209, 0.1)"},
}


class StatisticsService:
    """Chart payloads for a dataset file, memoised in the result cache."""

    def __init__(self, cache=None, period_count: int = None):
        self.cache = RESULT_CACHE if cache is None else cache
        self.period_count = config.DEFAULT_PERIOD_COUNT if period_count is None else period_count

    def _key(self, kind, dataset_path, game_id, zone, period_count):
        return (kind, os.path.abspath(dataset_path), game_id, zone, period_count)

    def number_trend(self, dataset_path: str, game_id: str, period_count: int = None,
                     zone: str = PRIMARY, include_chart_data: bool = True) -> dict:
        profile = profile_for(game_id)
        canonical = profile.resolve_zone(zone)
        periods = self.period_count if period_count is None else period_count
        key = self._key("trend", dataset_path, profile.game_id, canonical, periods)

        result = self.cache.get_or_compute(
            key, lambda: self._build_trend(dataset_path, profile.game_id, canonical, periods)
        )
        if not include_chart_data:
            return {k: v for k, v in result.items() if k != "chart_data"}
        return result

    def frequency_chart(self, dataset_path: str, game_id: str, period_count: int = None,
                        zone: str = PRIMARY) -> dict:
        profile = profile_for(game_id)
        canonical = profile.resolve_zone(zone)
        periods = self.period_count if period_count is None else period_count
        key = self._key("frequency", dataset_path, profile.game_id, canonical, periods)

        return self.cache.get_or_compute(
            key, lambda: self._build_frequency(dataset_path, profile.game_id, canonical, periods)
        )

    def _build_trend(self, dataset_path, game_id, zone, period_count) -> dict:
        logger.info("Computing %s %s trend over %s periods", game_id, zone, period_count)
        records = load_dataset(dataset_path, game_id)
        result = number_statistics(records, game_id, zone, period_count)
        lo, hi = profile_for(game_id).zone_range(zone)
        style = ZONE_STYLES[zone]
        return {
            "game": game_id,
            "zone": zone,
            "period_count": result["period_count"],
            "chart_data": {
                "type": "line",
                "datasets": [{
                    "label": style["trend"],
                    "data": [p.to_dict() for p in result["trend"]],
                    "border_color": style["color"],
                    "background_color": style["fill"],
                }],
                "x_title": "期数",
                "y_title": "号码",
                "y_range": [lo - 1, hi + 1],
            },
            "statistics": {
                "number_stats": [s.to_dict() for s in result["number_stats"]],
            },
        }

    def _build_frequency(self, dataset_path, game_id, zone, period_count) -> dict:
        logger.info("Computing %s %s frequency over %s periods", game_id, zone, period_count)
        records = load_dataset(dataset_path, game_id)
        result = frequency_distribution(records, game_id, zone, period_count)
        style = ZONE_STYLES[zone]
        return {
            "game": game_id,
            "zone": zone,
            "period_count": result["period_count"],
            "chart_data": {
                "type": "bar",
                "datasets": [{
                    "label": style["frequency"],
                    "data": [p.to_dict() for p in result["points"]],
                    "background_color": style["color"],
                }],
                "x_title": "号码",
                "y_title": "出现次数",
            },
            "uniformity": result["uniformity"],
        }
