"""core/services/chart_adapter.py

Adapts a per-question aggregate to the series a chart renderer consumes.

Each aggregate variant is reshaped into ``ChartSeriesPoint`` records (or
passed through for word-cloud and cross-tab data), paired with axis labels,
and checked against the requested chart type. Incompatible combinations come
back as a ``Placeholder`` the presentation layer can show as-is.
"""
import logging
import math
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any, Optional, Tuple

from core.services.aggregates import (
    AggregateType,
    BasicAggregate,
    ChartSeriesPoint,
    ChoiceAggregate,
    NumericAggregate,
    TableAggregate,
    TextAggregate,
    parse_aggregate,
)

logger = logging.getLogger(__name__)


class ChartType(str, Enum):
    BAR = 'Bar'
    PIE = 'Pie'
    DOUGHNUT = 'Doughnut'
    LINE = 'Line'
    AREA = 'Area'
    RADAR = 'Radar'
    POLAR_AREA = 'PolarArea'
    WORD_CLOUD = 'WordCloud'

    @property
    def label(self):
        return CHART_TYPE_LABELS[self]


CHART_TYPE_LABELS = {
    ChartType.BAR: 'Bar Chart',
    ChartType.PIE: 'Pie Chart',
    ChartType.DOUGHNUT: 'Doughnut Chart',
    ChartType.LINE: 'Line Chart',
    ChartType.AREA: 'Area Chart',
    ChartType.RADAR: 'Radar Chart',
    ChartType.POLAR_AREA: 'Polar Area Chart',
    ChartType.WORD_CLOUD: 'Word Cloud',
}

DEFAULT_CHART_TYPE = ChartType.BAR

_AVAILABLE_CHART_TYPES = {
    AggregateType.CHOICE: (ChartType.BAR, ChartType.PIE, ChartType.LINE),
    AggregateType.NUMERIC: (ChartType.BAR, ChartType.PIE, ChartType.LINE),
    AggregateType.TEXT: (ChartType.WORD_CLOUD,),
    AggregateType.MATRIX: (ChartType.BAR, ChartType.PIE, ChartType.LINE),
    AggregateType.GRID: (ChartType.BAR, ChartType.PIE, ChartType.LINE),
}


def available_chart_types(aggregate_type):
    """Chart types offered in the selector for an aggregate type."""
    try:
        aggregate_type = AggregateType(aggregate_type)
    except ValueError:
        return (ChartType.BAR,)
    return _AVAILABLE_CHART_TYPES.get(aggregate_type, (ChartType.BAR,))


# --- Sentiment (smiley) ordering ---

class SentimentLevel(IntEnum):
    VERY_SAD = 0
    SAD = 1
    NEUTRAL = 2
    HAPPY = 3
    VERY_HAPPY = 4

    @property
    def label(self):
        return self.name.replace('_', ' ').title()

    @classmethod
    def from_label(cls, label):
        return _SENTIMENT_BY_LABEL.get(label)


_SENTIMENT_BY_LABEL = {level.label: level for level in SentimentLevel}

# Rank of labels outside the five-step scale: after every known level,
# keeping their input order.
UNORDERED_TAIL = len(SentimentLevel)

_SENTIMENT_MARKERS = (SentimentLevel.VERY_SAD.label, SentimentLevel.VERY_HAPPY.label)


def is_sentiment_scale(labels):
    return any(marker in str(label) for label in labels for marker in _SENTIMENT_MARKERS)


def sentiment_rank(label):
    level = SentimentLevel.from_label(label)
    return UNORDERED_TAIL if level is None else int(level)


def numeric_sort_key(label) -> Tuple[int, float]:
    # Non-numeric bucket labels have no defined order among numbers; they are
    # kept after the numeric ones in input order.
    try:
        value = float(label)
    except (TypeError, ValueError):
        return (1, 0.0)
    if math.isnan(value):
        return (1, 0.0)
    return (0, value)


# --- Adapter ---

@dataclass(frozen=True)
class AxisLabels:
    x: str
    y: str

    def to_dict(self):
        return {'x': self.x, 'y': self.y}


@dataclass(frozen=True)
class Placeholder:
    """A renderable message standing in for a chart that cannot be drawn."""
    message: str

    def to_dict(self):
        return {'placeholder': self.message}


@dataclass(frozen=True)
class ChartData:
    chart_type: ChartType
    aggregate_type: AggregateType
    series: Any
    axis_labels: AxisLabels
    title: Optional[str] = None

    def series_to_json(self):
        if isinstance(self.series, (list, tuple)):
            return [p.to_dict() if isinstance(p, ChartSeriesPoint) else p for p in self.series]
        return self.series

    def to_dict(self):
        return {
            'chartType': self.chart_type.value,
            'type': self.aggregate_type.value,
            'series': self.series_to_json(),
            'axisLabels': self.axis_labels.to_dict(),
            'title': self.title,
        }


NOT_IMPLEMENTED = Placeholder('Chart type not implemented')
WORD_CLOUD_TEXT_ONLY = Placeholder('Word cloud only available for text data')

# Chart types drawing name/value series, with the label used when rejecting
_SERIES_CHARTS = {
    ChartType.BAR: 'Bar',
    ChartType.PIE: 'Pie',
    ChartType.DOUGHNUT: 'Pie',
    ChartType.LINE: 'Line',
    ChartType.AREA: 'Line',
}

_NON_SERIES_TYPES = (AggregateType.TEXT, AggregateType.MATRIX, AggregateType.GRID)


class ChartDataAdapter:
    """Reshapes aggregates into chart-ready data. Stateless and pure."""

    @staticmethod
    def get_chart_data(aggregate):
        """
        Series for an aggregate.

        Returns:
            list[ChartSeriesPoint] for choice/numeric data, the raw top words
            list for text, the row mapping for matrix/grid and an empty list
            for basic aggregates
        """
        aggregate = parse_aggregate(aggregate)

        if isinstance(aggregate, ChoiceAggregate):
            return [ChartSeriesPoint(name, value) for name, value in aggregate.counts.items()]

        if isinstance(aggregate, NumericAggregate):
            if aggregate.distribution is not None:
                return ChartDataAdapter._distribution_series(aggregate.distribution)
            return [
                ChartSeriesPoint('Average', aggregate.avg or 0),
                ChartSeriesPoint('Minimum', aggregate.min or 0),
                ChartSeriesPoint('Maximum', aggregate.max or 0),
            ]

        if isinstance(aggregate, TextAggregate):
            return aggregate.top_words

        if isinstance(aggregate, TableAggregate):
            return aggregate.rows

        if isinstance(aggregate, BasicAggregate):
            return []

        raise TypeError(f"Unhandled aggregate variant: {type(aggregate).__name__}")

    @staticmethod
    def _distribution_series(distribution):
        entries = list(distribution.items())
        if is_sentiment_scale(label for label, _ in entries):
            entries.sort(key=lambda item: sentiment_rank(item[0]))
        else:
            entries.sort(key=lambda item: numeric_sort_key(item[0]))
        return [ChartSeriesPoint(name, value) for name, value in entries]

    @staticmethod
    def get_axis_labels(aggregate):
        aggregate = parse_aggregate(aggregate)
        if aggregate.type is AggregateType.NUMERIC:
            return AxisLabels('Value', 'Responses')
        if aggregate.type is AggregateType.CHOICE:
            return AxisLabels('Options', 'Responses')
        return AxisLabels('Categories', 'Responses')

    @staticmethod
    def check_compatibility(aggregate_type, chart_type):
        """Returns a Placeholder when the chart cannot draw this data, else None."""
        if chart_type in _SERIES_CHARTS:
            if aggregate_type in _NON_SERIES_TYPES:
                return Placeholder(f"{_SERIES_CHARTS[chart_type]} chart not available for this data type")
            return None
        if chart_type is ChartType.WORD_CLOUD:
            return None if aggregate_type is AggregateType.TEXT else WORD_CLOUD_TEXT_ONLY
        return NOT_IMPLEMENTED

    @classmethod
    def adapt(cls, aggregate, chart_type, title=None):
        """
        Chart data for an aggregate drawn as ``chart_type``.

        Args:
            aggregate: aggregate variant or its JSON-shaped mapping
            chart_type: ChartType or its string value
            title: optional chart title carried through

        Returns:
            ChartData, or Placeholder for unsupported combinations
        """
        aggregate = parse_aggregate(aggregate)
        try:
            chart_type = ChartType(chart_type)
        except ValueError:
            logger.debug(f"Unknown chart type requested: {chart_type!r}")
            return NOT_IMPLEMENTED

        placeholder = cls.check_compatibility(aggregate.type, chart_type)
        if placeholder is not None:
            logger.debug(
                f"Rejected {chart_type.value} chart for {aggregate.type.value} data: {placeholder.message}"
            )
            return placeholder

        return ChartData(
            chart_type=chart_type,
            aggregate_type=aggregate.type,
            series=cls.get_chart_data(aggregate),
            axis_labels=cls.get_axis_labels(aggregate),
            title=title,
        )
