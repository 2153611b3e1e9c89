"""
Custom validators for the core module.
Centralizes input validation for aggregates and word-frequency batches.
"""
import logging
import math
from numbers import Real

from django.core.exceptions import ValidationError

logger = logging.getLogger(__name__)


class InvalidAggregateError(ValidationError):
    """Raised when an analytics aggregate payload cannot be interpreted."""


class AggregateValidator:
    """Validators for per-question aggregate payloads."""

    @staticmethod
    def validate_payload(payload, known_types):
        """Checks the envelope of an aggregate and returns its type tag."""
        if not isinstance(payload, dict):
            raise InvalidAggregateError(
                f"Aggregate must be a mapping, got {type(payload).__name__}"
            )

        type_tag = payload.get('type')
        if type_tag not in known_types:
            raise InvalidAggregateError(
                f"Unknown aggregate type: '{type_tag}'. Expected one of: {', '.join(sorted(known_types))}"
            )
        return type_tag

    @staticmethod
    def validate_mapping(value, field_name, value_check=None):
        """
        Returns a mapping field, defaulting to empty when absent.

        ``value_check`` (optional) is applied to every value; a falsy result
        rejects the whole mapping.
        """
        if value is None:
            return {}
        if not isinstance(value, dict):
            raise InvalidAggregateError(f"Field '{field_name}' must be a mapping")
        if value_check is not None:
            for key, item in value.items():
                if not value_check(item):
                    raise InvalidAggregateError(
                        f"Field '{field_name}' has an invalid value for '{key}': {item!r}"
                    )
        return value

    @staticmethod
    def validate_counts(value, field_name):
        """Mapping of label -> finite number count."""
        return AggregateValidator.validate_mapping(value, field_name, WordDataValidator.is_valid_count)

    @staticmethod
    def validate_table(value, field_name):
        """Two-level mapping of row -> column -> finite number count."""
        rows = AggregateValidator.validate_mapping(value, field_name)
        for row_label, columns in rows.items():
            AggregateValidator.validate_counts(columns, f"{field_name}.{row_label}")
        return rows

    @staticmethod
    def validate_optional_number(value, field_name):
        if value is None:
            return None
        if not WordDataValidator.is_valid_count(value):
            raise InvalidAggregateError(f"Field '{field_name}' must be a finite number")
        return float(value)


class WordDataValidator:
    """Validators for word-frequency entries ({word, count})."""

    @staticmethod
    def is_valid_count(value):
        # bool is a Real subclass but never a meaningful count
        if isinstance(value, bool) or not isinstance(value, Real):
            return False
        return math.isfinite(value)

    @staticmethod
    def is_valid_entry(entry):
        if not isinstance(entry, dict):
            return False
        if not isinstance(entry.get('word'), str):
            return False
        return WordDataValidator.is_valid_count(entry.get('count'))

    @staticmethod
    def clean_entries(entries):
        """
        Filters a word batch down to well-formed entries.

        Malformed entries (non-mapping, missing or non-string word, missing,
        boolean, non-numeric or non-finite count) are dropped and logged.
        Zero, negative and fractional counts are kept.

        Returns:
            list: the valid entries, in input order
        """
        if not isinstance(entries, (list, tuple)):
            return []

        valid = []
        dropped = 0
        for entry in entries:
            if WordDataValidator.is_valid_entry(entry):
                valid.append(entry)
            else:
                dropped += 1

        if dropped:
            logger.warning(f"Dropped {dropped} malformed word entries out of {len(entries)}")
        return valid
