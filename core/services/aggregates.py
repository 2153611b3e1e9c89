"""core/services/aggregates.py

Per-question analytics aggregates as an explicit tagged union.

The analytics document carries one aggregate per question, shaped by its
``type`` tag (choice counts, numeric summary/distribution, text top words,
matrix/grid cross-tabs or a basic response count). ``parse_aggregate`` turns
the JSON-shaped mapping into one of the variants below and ``to_dict`` goes
back; everything downstream dispatches on the variant, never on raw keys.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from core.validators import AggregateValidator


class AggregateType(str, Enum):
    CHOICE = 'choice'
    NUMERIC = 'numeric'
    TEXT = 'text'
    MATRIX = 'matrix'
    GRID = 'grid'
    BASIC = 'basic'


@dataclass(frozen=True)
class ChartSeriesPoint:
    name: str
    value: float

    def to_dict(self):
        return {'name': self.name, 'value': self.value}


@dataclass(frozen=True)
class WordDatum:
    word: str
    count: float

    def to_dict(self):
        return {'word': self.word, 'count': self.count}


@dataclass(frozen=True)
class ChoiceAggregate:
    counts: Dict[str, float] = field(default_factory=dict)
    type: AggregateType = field(default=AggregateType.CHOICE, init=False)

    def to_dict(self):
        return {'type': self.type.value, 'counts': dict(self.counts)}


@dataclass(frozen=True)
class NumericAggregate:
    avg: Optional[float] = None
    min: Optional[float] = None
    max: Optional[float] = None
    distribution: Optional[Dict[str, float]] = None
    type: AggregateType = field(default=AggregateType.NUMERIC, init=False)

    def to_dict(self):
        data = {'type': self.type.value}
        for key in ('avg', 'min', 'max'):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        if self.distribution is not None:
            data['distribution'] = dict(self.distribution)
        return data


@dataclass(frozen=True)
class TextAggregate:
    # Raw upstream entries; order is upstream insertion order, not sorted.
    top_words: List[Any] = field(default_factory=list)
    type: AggregateType = field(default=AggregateType.TEXT, init=False)

    def to_dict(self):
        return {
            'type': self.type.value,
            'topWords': [w.to_dict() if isinstance(w, WordDatum) else w for w in self.top_words],
        }


@dataclass(frozen=True)
class TableAggregate:
    """Two-level row -> column -> count mapping, tagged matrix or grid."""
    type: AggregateType
    rows: Dict[str, Dict[str, float]] = field(default_factory=dict)

    def __post_init__(self):
        if self.type not in (AggregateType.MATRIX, AggregateType.GRID):
            raise ValueError(f"TableAggregate only holds matrix or grid data, got {self.type}")

    def to_dict(self):
        return {'type': self.type.value, self.type.value: {k: dict(v) for k, v in self.rows.items()}}


@dataclass(frozen=True)
class BasicAggregate:
    response_count: int = 0
    type: AggregateType = field(default=AggregateType.BASIC, init=False)

    def to_dict(self):
        return {'type': self.type.value, 'responseCount': self.response_count}


AggregateResult = Union[ChoiceAggregate, NumericAggregate, TextAggregate, TableAggregate, BasicAggregate]

_KNOWN_TYPES = frozenset(t.value for t in AggregateType)


def parse_aggregate(payload):
    """
    Builds the aggregate variant for a JSON-shaped mapping.

    Raises:
        InvalidAggregateError: payload is not a mapping, has an unknown
            ``type``, a shape field of the wrong kind or a count that is not a
            finite number
    """
    if isinstance(payload, (ChoiceAggregate, NumericAggregate, TextAggregate, TableAggregate, BasicAggregate)):
        return payload

    type_tag = AggregateType(AggregateValidator.validate_payload(payload, _KNOWN_TYPES))

    if type_tag is AggregateType.CHOICE:
        return ChoiceAggregate(counts=AggregateValidator.validate_counts(payload.get('counts'), 'counts'))

    if type_tag is AggregateType.NUMERIC:
        distribution = payload.get('distribution')
        if distribution is not None:
            distribution = AggregateValidator.validate_counts(distribution, 'distribution')
        return NumericAggregate(
            avg=AggregateValidator.validate_optional_number(payload.get('avg'), 'avg'),
            min=AggregateValidator.validate_optional_number(payload.get('min'), 'min'),
            max=AggregateValidator.validate_optional_number(payload.get('max'), 'max'),
            distribution=distribution,
        )

    if type_tag is AggregateType.TEXT:
        top_words = payload.get('topWords')
        # Left as-is: the word-frequency engine decides what is renderable
        return TextAggregate(top_words=top_words if isinstance(top_words, list) else [])

    if type_tag in (AggregateType.MATRIX, AggregateType.GRID):
        rows = AggregateValidator.validate_table(payload.get(type_tag.value), type_tag.value)
        return TableAggregate(type=type_tag, rows=rows)

    response_count = AggregateValidator.validate_optional_number(payload.get('responseCount'), 'responseCount')
    return BasicAggregate(response_count=int(response_count or 0))
