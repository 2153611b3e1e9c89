"""
Unit tests for core/validators.py
Aggregate envelope checks and word-entry filtering, with valid and invalid data.
"""
import pytest
from django.core.exceptions import ValidationError

from core.validators import AggregateValidator, InvalidAggregateError, WordDataValidator

KNOWN = frozenset({'choice', 'numeric'})


class TestAggregateValidator:
    """Tests for AggregateValidator"""

    def test_validate_payload_returns_type(self):
        assert AggregateValidator.validate_payload({'type': 'choice'}, KNOWN) == 'choice'

    def test_validate_payload_rejects_non_mapping(self):
        with pytest.raises(InvalidAggregateError, match="must be a mapping, got list"):
            AggregateValidator.validate_payload([], KNOWN)

    def test_validate_payload_rejects_unknown_type(self):
        with pytest.raises(InvalidAggregateError, match="Unknown aggregate type: 'pie'"):
            AggregateValidator.validate_payload({'type': 'pie'}, KNOWN)

    def test_invalid_aggregate_is_a_validation_error(self):
        """Callers catching ValidationError also see aggregate errors"""
        with pytest.raises(ValidationError):
            AggregateValidator.validate_payload({}, KNOWN)

    def test_validate_mapping(self):
        assert AggregateValidator.validate_mapping(None, 'counts') == {}
        assert AggregateValidator.validate_mapping({'a': 1}, 'counts') == {'a': 1}
        with pytest.raises(InvalidAggregateError, match="'counts' must be a mapping"):
            AggregateValidator.validate_mapping('a=1', 'counts')

    def test_validate_optional_number(self):
        assert AggregateValidator.validate_optional_number(None, 'avg') is None
        assert AggregateValidator.validate_optional_number(3, 'avg') == 3.0
        for bad in ('3', True, float('nan')):
            with pytest.raises(InvalidAggregateError):
                AggregateValidator.validate_optional_number(bad, 'avg')


class TestWordDataValidator:
    """Tests for WordDataValidator"""

    @pytest.mark.parametrize('value', [0, 3, -2, 2.5])
    def test_valid_counts(self, value):
        assert WordDataValidator.is_valid_count(value)

    @pytest.mark.parametrize('value', [None, '3', True, False, float('inf'), float('nan'), [1]])
    def test_invalid_counts(self, value):
        assert not WordDataValidator.is_valid_count(value)

    def test_entry_needs_string_word(self):
        assert WordDataValidator.is_valid_entry({'word': '', 'count': 1})
        assert not WordDataValidator.is_valid_entry({'word': 3, 'count': 1})
        assert not WordDataValidator.is_valid_entry(('ok', 1))

    def test_clean_entries_keeps_order(self):
        entries = [{'word': 'b', 'count': 1}, {'word': 'x'}, {'word': 'a', 'count': 0}]
        assert WordDataValidator.clean_entries(entries) == [entries[0], entries[2]]

    def test_clean_entries_non_list(self):
        assert WordDataValidator.clean_entries(None) == []
        assert WordDataValidator.clean_entries({'word': 'a', 'count': 1}) == []


class TestCountMappings:
    """Tests for count and table mapping checks"""

    def test_validate_counts(self):
        assert AggregateValidator.validate_counts({'a': 1, 'b': 0.5}, 'counts') == {'a': 1, 'b': 0.5}
        with pytest.raises(InvalidAggregateError, match="'counts' has an invalid value for 'b'"):
            AggregateValidator.validate_counts({'a': 1, 'b': None}, 'counts')

    def test_validate_table(self):
        assert AggregateValidator.validate_table({'r': {'c': 2}}, 'grid') == {'r': {'c': 2}}
        with pytest.raises(InvalidAggregateError, match="'grid.r' must be a mapping"):
            AggregateValidator.validate_table({'r': [2]}, 'grid')
        with pytest.raises(InvalidAggregateError, match="'grid.r' has an invalid value"):
            AggregateValidator.validate_table({'r': {'c': 'x'}}, 'grid')
