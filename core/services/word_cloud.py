"""core/services/word_cloud.py

Word-frequency rendering engine.

Maps ``{word, count}`` pairs to a font size, palette color and font weight
derived from each count's position between the batch minimum and maximum, so
frequent words dominate visually. Input order is preserved; prominence comes
from the visuals only.
"""
import logging
import math
from dataclasses import dataclass, field
from typing import List, Optional

from core.services.aggregates import WordDatum
from core.validators import WordDataValidator

logger = logging.getLogger(__name__)


MIN_FONT_SIZE_PX = 16
MAX_FONT_SIZE_PX = 46

# Designer-picked hues, ordered from least to most frequent
PALETTE = (
    '#94a3b8',
    '#06b6d4',
    '#0ea5e9',
    '#3b82f6',
    '#6366f1',
    '#8b5cf6',
    '#a855f7',
    '#ec4899',
    '#ef4444',
)

# (upper bound of the normalized ratio, weight); last bucket catches the rest
WEIGHT_BUCKETS = ((0.25, 400), (0.5, 500), (0.75, 600))
TOP_WEIGHT = 700

UNIFORM_FONT_SIZE_PX = (MIN_FONT_SIZE_PX + MAX_FONT_SIZE_PX) / 2
UNIFORM_COLOR_INDEX = len(PALETTE) // 2
UNIFORM_FONT_WEIGHT = 500

MIN_OPACITY = 0.65

NO_DATA_MESSAGE = 'No text data available'


@dataclass(frozen=True)
class WordVisual:
    font_size_px: float
    color_index: int
    font_weight: int


@dataclass(frozen=True)
class RenderedWord:
    word: str
    count: float
    font_size_px: float
    color: str
    font_weight: int
    opacity: float
    tooltip: str

    def to_dict(self):
        return {
            'word': self.word,
            'count': self.count,
            'fontSizePx': self.font_size_px,
            'color': self.color,
            'fontWeight': self.font_weight,
            'opacity': self.opacity,
            'tooltip': self.tooltip,
        }


@dataclass(frozen=True)
class WordCloudResult:
    words: List[RenderedWord] = field(default_factory=list)
    message: Optional[str] = None

    @property
    def is_empty(self):
        return not self.words

    def to_dict(self):
        return {'words': [w.to_dict() for w in self.words], 'message': self.message}


def normalized_ratio(count, min_count, max_count):
    if max_count == min_count:
        return None
    return (count - min_count) / (max_count - min_count)


def word_visual(count, min_count, max_count, palette_size=len(PALETTE)):
    """
    Visual triple for one count within a batch.

    A zero-range batch (all counts equal, single word included) maps every
    word to the same mid-range size, base color and weight.
    """
    ratio = normalized_ratio(count, min_count, max_count)
    if ratio is None:
        return WordVisual(UNIFORM_FONT_SIZE_PX, min(UNIFORM_COLOR_INDEX, palette_size - 1), UNIFORM_FONT_WEIGHT)

    ratio = min(1.0, max(0.0, ratio))
    size = MIN_FONT_SIZE_PX + ratio * (MAX_FONT_SIZE_PX - MIN_FONT_SIZE_PX)
    size = min(MAX_FONT_SIZE_PX, max(MIN_FONT_SIZE_PX, size))

    color_index = min(palette_size - 1, math.floor(ratio * (palette_size - 1)))

    weight = TOP_WEIGHT
    for upper, bucket_weight in WEIGHT_BUCKETS:
        if ratio < upper:
            weight = bucket_weight
            break

    return WordVisual(size, color_index, weight)


def format_count(count):
    if isinstance(count, float) and count.is_integer():
        return str(int(count))
    return str(count)


def build_tooltip(word, count):
    return f"{word}: {format_count(count)} occurrences"


class WordCloudEngine:
    """Turns a word-frequency batch into rendered words. Stateless."""

    palette = PALETTE

    @classmethod
    def render(cls, data):
        """
        Args:
            data: list of {'word', 'count'} mappings or WordDatum values

        Returns:
            WordCloudResult; empty with NO_DATA_MESSAGE when nothing is
            renderable
        """
        if not isinstance(data, (list, tuple)) or not data:
            return WordCloudResult(message=NO_DATA_MESSAGE)

        entries = WordDataValidator.clean_entries(
            [d.to_dict() if isinstance(d, WordDatum) else d for d in data]
        )
        if not entries:
            return WordCloudResult(message=NO_DATA_MESSAGE)

        counts = [entry['count'] for entry in entries]
        min_count, max_count = min(counts), max(counts)

        words = []
        for entry in entries:
            word, count = entry['word'], entry['count']
            visual = word_visual(count, min_count, max_count, len(cls.palette))
            ratio = normalized_ratio(count, min_count, max_count)
            opacity = 1.0 if ratio is None else MIN_OPACITY + ratio * (1 - MIN_OPACITY)
            words.append(RenderedWord(
                word=word,
                count=count,
                font_size_px=visual.font_size_px,
                color=cls.palette[visual.color_index],
                font_weight=visual.font_weight,
                opacity=round(opacity, 3),
                tooltip=build_tooltip(word, count),
            ))

        logger.debug(f"Rendered word cloud with {len(words)} words (counts {min_count}..{max_count})")
        return WordCloudResult(words=words)
