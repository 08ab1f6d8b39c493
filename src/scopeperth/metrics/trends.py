"""
Sold Price Trends

Quarterly median sold prices and per-suburb summaries for the suburb
comparison chart.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence

from scopeperth.core import constants
from scopeperth.core.models import SoldRecord
from scopeperth.utils.date_parser import quarter_label, quarter_sort_key
from scopeperth.utils.numbers import mean_median
from scopeperth.utils.suburbs import normalize_suburb


@dataclass
class QuarterPoint:
    """Median sold price per suburb for one quarter (None below the sale minimum)."""

    quarter: str
    medians: Dict[str, Optional[int]] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {"quarter": self.quarter, **self.medians}


@dataclass
class TrendSummary:
    suburb: str
    count: int
    median: Optional[int]
    min: Optional[int]
    max: Optional[int]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "suburb": self.suburb,
            "count": self.count,
            "median": self.median,
            "min": self.min,
            "max": self.max,
        }


def limit_trend_suburbs(suburbs: Sequence[str]) -> List[str]:
    """Normalise and de-duplicate a suburb selection, keeping at most five."""
    selected: List[str] = []
    for suburb in suburbs:
        key = normalize_suburb(suburb)
        if key and key not in selected:
            selected.append(key)
    return selected[: constants.MAX_TREND_SUBURBS]


def quarterly_medians(
    records: Iterable[SoldRecord],
    suburbs: Sequence[str],
    min_sales: int = constants.MIN_SALES_PER_QUARTER,
) -> List[QuarterPoint]:
    """Quarterly median sold price per suburb, oldest quarter first.

    Args:
        records: Sold records (any suburbs; others are ignored per point).
        suburbs: Suburbs to report, in display order.
        min_sales: Sales a suburb needs in a quarter for its median to count.

    Returns:
        One point per quarter that has any sale. A suburb with fewer than
        ``min_sales`` sales in a quarter has a None median there.
    """
    grouped: Dict[str, Dict[str, List[int]]] = {}
    for record in records:
        if not record.sold_price:
            continue
        label = quarter_label(record.sold_date)
        if label is None:
            continue
        grouped.setdefault(label, {}).setdefault(record.suburb, []).append(record.sold_price)

    points = []
    for label in sorted(grouped, key=quarter_sort_key):
        medians: Dict[str, Optional[int]] = {}
        for suburb in suburbs:
            prices = grouped[label].get(suburb, [])
            medians[suburb] = mean_median(prices) if len(prices) >= min_sales else None
        points.append(QuarterPoint(quarter=label, medians=medians))
    return points


def summarize_trends(records: Iterable[SoldRecord], suburbs: Sequence[str]) -> List[TrendSummary]:
    """Count, median, min and max sold price per selected suburb."""
    records = list(records)
    summaries = []
    for suburb in suburbs:
        prices = [r.sold_price for r in records if r.suburb == suburb and r.sold_price]
        summaries.append(
            TrendSummary(
                suburb=suburb,
                count=len(prices),
                median=mean_median(prices),
                min=min(prices) if prices else None,
                max=max(prices) if prices else None,
            )
        )
    return summaries
