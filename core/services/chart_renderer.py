"""core/services/chart_renderer.py

Chart-type dispatch: adapts an aggregate and hands it to the matching
renderer (matplotlib images for series charts, the word-frequency engine for
word clouds). Unsupported combinations render as placeholders.
"""
import hashlib
import json
from dataclasses import dataclass, field
from typing import Any, List, Optional

from django.conf import settings
from django.core.cache import cache

from core.services.aggregates import parse_aggregate
from core.services.chart_adapter import (
    AxisLabels,
    ChartData,
    ChartDataAdapter,
    ChartType,
    DEFAULT_CHART_TYPE,
    Placeholder,
    available_chart_types,
)
from core.services.word_cloud import WordCloudEngine
from core.utils.charts import ChartGenerator
from core.utils.logging_utils import StructuredLogger, log_performance

logger = StructuredLogger(__name__)

NO_RESPONSES_MESSAGE = 'No responses yet for this question'
NO_ANALYTICS_MESSAGE = 'Analytics not available for this question type'
NO_CHART_DATA_MESSAGE = 'No data available for this chart'

KIND_IMAGE = 'image'
KIND_WORD_CLOUD = 'word_cloud'
KIND_PLACEHOLDER = 'placeholder'


@dataclass(frozen=True)
class RenderedChart:
    chart_type: str
    kind: str
    image: Optional[str] = None
    words: List[Any] = field(default_factory=list)
    message: Optional[str] = None
    axis_labels: Optional[AxisLabels] = None
    series: Any = None
    title: Optional[str] = None

    @classmethod
    def placeholder(cls, chart_type, message, **kwargs):
        return cls(chart_type=_chart_type_value(chart_type), kind=KIND_PLACEHOLDER, message=message, **kwargs)

    def to_dict(self):
        return {
            'chartType': self.chart_type,
            'kind': self.kind,
            'image': self.image,
            'words': [w.to_dict() for w in self.words],
            'message': self.message,
            'axisLabels': self.axis_labels.to_dict() if self.axis_labels else None,
            'series': self.series,
            'title': self.title,
        }


def _chart_type_value(chart_type):
    return chart_type.value if isinstance(chart_type, ChartType) else str(chart_type)


class ChartRenderer:

    @staticmethod
    def _image_for(chart, dark_mode):
        names = [point.name for point in chart.series]
        values = [point.value for point in chart.series]
        x_label, y_label = chart.axis_labels.x, chart.axis_labels.y

        if chart.chart_type is ChartType.BAR:
            return ChartGenerator.generate_bar_chart(
                names, values, chart.title, x_label, y_label, dark_mode=dark_mode
            )
        if chart.chart_type is ChartType.PIE:
            return ChartGenerator.generate_pie_chart(names, values, chart.title, dark_mode=dark_mode)
        if chart.chart_type is ChartType.DOUGHNUT:
            return ChartGenerator.generate_donut_chart(names, values, chart.title, dark_mode=dark_mode)
        if chart.chart_type in (ChartType.LINE, ChartType.AREA):
            return ChartGenerator.generate_line_chart(
                names, values, chart.title, x_label, y_label,
                fill=chart.chart_type is ChartType.AREA, dark_mode=dark_mode,
            )
        raise ValueError(f"No image renderer for {chart.chart_type.value}")

    @staticmethod
    def cache_key(chart: ChartData, dark_mode):
        payload = json.dumps(
            [chart.chart_type.value, chart.series_to_json(), chart.title, bool(dark_mode)],
            default=str,
        )
        return f"chart_image:v1:{hashlib.sha256(payload.encode('utf-8')).hexdigest()}"

    @classmethod
    def _cached_image(cls, chart, dark_mode):
        key = cls.cache_key(chart, dark_mode)
        image = cache.get(key)
        if image is None:
            image = cls._image_for(chart, dark_mode)
            if image is not None:
                cache.set(key, image, settings.CHART_CACHE_TIMEOUT)
        return image

    @classmethod
    @log_performance()
    def render(cls, aggregate, chart_type=DEFAULT_CHART_TYPE, title=None, dark_mode=None):
        """
        Renders one aggregate as ``chart_type``.

        Raises:
            InvalidAggregateError: the aggregate payload is malformed
        """
        if dark_mode is None:
            dark_mode = settings.CHART_DARK_MODE

        chart = ChartDataAdapter.adapt(aggregate, chart_type, title)
        if isinstance(chart, Placeholder):
            return RenderedChart.placeholder(chart_type, chart.message, title=title)

        if chart.chart_type is ChartType.WORD_CLOUD:
            result = WordCloudEngine.render(chart.series)
            return RenderedChart(
                chart_type=chart.chart_type.value,
                kind=KIND_WORD_CLOUD,
                words=result.words,
                message=result.message,
                title=title,
            )

        common = dict(axis_labels=chart.axis_labels, series=chart.series_to_json(), title=title)
        image = cls._cached_image(chart, dark_mode)
        if image is None:
            logger.warning("Chart image not rendered", chart_type=chart.chart_type.value, points=len(chart.series))
            return RenderedChart.placeholder(chart.chart_type, NO_CHART_DATA_MESSAGE, **common)

        return RenderedChart(chart_type=chart.chart_type.value, kind=KIND_IMAGE, image=image, **common)

    @classmethod
    def render_question(cls, question, chart_type=None, dark_mode=None):
        """
        Renders one entry of the survey analytics document
        ({'questionId', 'type', 'title', 'totalResponses', 'analytics'}).

        Without an explicit chart type, the first one available for the
        aggregate's type is used.
        """
        requested = chart_type or DEFAULT_CHART_TYPE
        if not question.get('totalResponses'):
            return RenderedChart.placeholder(requested, NO_RESPONSES_MESSAGE)

        analytics = question.get('analytics')
        if not analytics:
            return RenderedChart.placeholder(requested, NO_ANALYTICS_MESSAGE)

        aggregate = parse_aggregate(analytics)
        if chart_type is None:
            chart_type = available_chart_types(aggregate.type)[0]
        return cls.render(aggregate, chart_type, title=question.get('title'), dark_mode=dark_mode)
