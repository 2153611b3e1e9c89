"""
Tests for core/services/analytics_builder.py
Per-question aggregates and the survey analytics document.
"""
import pytest

from core.services.aggregates import BasicAggregate, ChoiceAggregate, NumericAggregate, TextAggregate
from core.services.analytics_builder import (
    QuestionAnalyzer,
    SurveyAnalyticsBuilder,
    TextMiningEngine,
    format_number_key,
)
from core.services.chart_renderer import ChartRenderer


# ============================================================================
# FIXTURES
# ============================================================================


@pytest.fixture
def survey():
    return {
        'id': 'survey-1',
        'pages': [
            {'questions': [
                {'id': 'q1', 'type': 'singleChoice', 'title': 'Favourite colour'},
                {'id': 'q2', 'type': 'ratingSmiley', 'title': 'Mood'},
            ]},
            {'questions': [
                {'id': 'q3', 'type': 'textLong', 'title': 'Comments'},
                {'id': 'q4', 'type': 'datePicker', 'title': 'When'},
                {'id': 'q5', 'type': 'multiChoice', 'title': 'Never answered'},
            ]},
        ],
    }


@pytest.fixture
def responses():
    return [
        {'responses': [
            {'questionId': 'q1', 'value': 'Red'},
            {'questionId': 'q2', 'value': 4},
            {'questionId': 'q3', 'value': 'Fast delivery, great support!'},
            {'questionId': 'q4', 'value': '2024-05-01'},
        ]},
        {'responses': [
            {'questionId': 'q1', 'value': 'Blue'},
            {'questionId': 'q2', 'value': '5'},
            {'questionId': 'q3', 'value': 'Support was fast'},
        ]},
        {'responses': [
            {'questionId': 'q1', 'value': 'Red'},
        ]},
    ]


# ============================================================================
# TEXT MINING
# ============================================================================


class TestTextMiningEngine:

    def test_extract_words_drops_stop_words_punctuation_and_short_words(self):
        words = TextMiningEngine.extract_words(['The app is GREAT, I love it!', None, 'a b ok'])
        assert words == ['app', 'great', 'love', 'ok']

    def test_top_words_sorted_by_count_with_stable_ties(self):
        top = TextMiningEngine.top_words(['beta alpha', 'alpha gamma', 'beta'])
        assert top == [
            {'word': 'beta', 'count': 2},
            {'word': 'alpha', 'count': 2},
            {'word': 'gamma', 'count': 1},
        ]

    def test_top_words_limit(self, settings):
        settings.TEXT_TOP_WORDS_LIMIT = 2
        top = TextMiningEngine.top_words(['one two three four'])
        assert [w['word'] for w in top] == ['one', 'two']

    def test_explicit_limit_wins(self):
        assert len(TextMiningEngine.top_words(['one two three'], limit=1)) == 1


# ============================================================================
# QUESTION ANALYZER
# ============================================================================


class TestQuestionAnalyzer:

    def test_choice_counts_scalars_and_lists(self):
        aggregate = QuestionAnalyzer.analyze_choice_question(['Red', ['Red', 'Green'], '', None, 'Blue'])
        assert aggregate == ChoiceAggregate(counts={'Red': 2, 'Green': 1, 'Blue': 1})

    def test_numeric_summary_and_distribution(self):
        aggregate = QuestionAnalyzer.analyze_numeric_question([1, '2', 2, 4.5, 0.5, 'n/a', None, True])
        assert isinstance(aggregate, NumericAggregate)
        assert aggregate.avg == 2.0
        assert aggregate.min == 0.5
        assert aggregate.max == 4.5
        assert aggregate.distribution == {'1': 1, '2': 2, '4.5': 1, '0.5': 1}

    def test_numeric_without_valid_values(self):
        assert QuestionAnalyzer.analyze_numeric_question(['x', None]) is None

    def test_text_question(self):
        aggregate = QuestionAnalyzer.analyze_text_question(['great great app'])
        assert aggregate == TextAggregate(top_words=[{'word': 'great', 'count': 2}, {'word': 'app', 'count': 1}])

    @pytest.mark.parametrize('question_type, expected', [
        ('singleChoice', ChoiceAggregate),
        ('dropdown', ChoiceAggregate),
        ('slider', NumericAggregate),
        ('ratingStar', NumericAggregate),
        ('textShort', TextAggregate),
        ('fileUpload', BasicAggregate),
    ])
    def test_dispatch_by_question_type(self, question_type, expected):
        assert isinstance(QuestionAnalyzer.calculate_analytics(question_type, ['3']), expected)

    def test_basic_counts_responses(self):
        assert QuestionAnalyzer.calculate_analytics('email', ['a@b.c', 'd@e.f']) == BasicAggregate(response_count=2)


def test_format_number_key():
    assert format_number_key(4.0) == '4'
    assert format_number_key(4.5) == '4.5'
    assert format_number_key(-1) == '-1'


# ============================================================================
# SURVEY DOCUMENT
# ============================================================================


class TestSurveyAnalyticsBuilder:

    def test_no_responses(self, survey):
        assert SurveyAnalyticsBuilder.build(survey, []) == {
            'surveyId': 'survey-1', 'totalResponses': 0, 'questions': [],
        }

    def test_document_shape(self, survey, responses):
        document = SurveyAnalyticsBuilder.build(survey, responses)

        assert document['surveyId'] == 'survey-1'
        assert document['totalResponses'] == 3
        assert [q['questionId'] for q in document['questions']] == ['q1', 'q2', 'q3', 'q4', 'q5']

        by_id = {q['questionId']: q for q in document['questions']}
        assert by_id['q1']['totalResponses'] == 3
        assert by_id['q1']['analytics'] == {'type': 'choice', 'counts': {'Red': 2, 'Blue': 1}}
        assert by_id['q2']['analytics']['distribution'] == {'4': 1, '5': 1}
        assert by_id['q2']['analytics']['avg'] == 4.5
        assert by_id['q3']['analytics']['topWords'][:2] == [
            {'word': 'fast', 'count': 2}, {'word': 'support', 'count': 2},
        ]
        assert by_id['q4']['analytics'] == {'type': 'basic', 'responseCount': 1}
        assert by_id['q5'] == {
            'questionId': 'q5', 'type': 'multiChoice', 'title': 'Never answered',
            'totalResponses': 0, 'analytics': None,
        }

    def test_numeric_question_without_numbers_has_no_analytics(self):
        survey = {'id': 's', 'pages': [{'questions': [{'id': 'q', 'type': 'slider', 'title': 'S'}]}]}
        document = SurveyAnalyticsBuilder.build(survey, [{'responses': [{'questionId': 'q', 'value': 'abc'}]}])
        assert document['questions'][0]['totalResponses'] == 1
        assert document['questions'][0]['analytics'] is None


# ============================================================================
# NON-FINITE NUMERIC ANSWERS
# ============================================================================


class TestNonFiniteNumericAnswers:

    def test_infinities_nan_and_huge_ints_are_ignored(self):
        aggregate = QuestionAnalyzer.analyze_numeric_question(
            ['inf', float('-inf'), 'nan', float('nan'), 10 ** 400, 3]
        )
        assert aggregate == NumericAggregate(avg=3.0, min=3.0, max=3.0, distribution={'3': 1})

    def test_only_non_finite_answers_give_no_aggregate(self):
        assert QuestionAnalyzer.analyze_numeric_question(['inf', 10 ** 400]) is None

    def test_average_of_huge_values_stays_finite(self):
        aggregate = QuestionAnalyzer.analyze_numeric_question([1e308, 1e308])
        assert aggregate.avg == 1e308

    def test_built_document_renders(self):
        survey = {'id': 's', 'pages': [{'questions': [{'id': 'q', 'type': 'slider', 'title': 'S'}]}]}
        responses = [
            {'responses': [{'questionId': 'q', 'value': 'inf'}]},
            {'responses': [{'questionId': 'q', 'value': 3}]},
        ]
        question = SurveyAnalyticsBuilder.build(survey, responses)['questions'][0]

        assert question['analytics'] == {
            'type': 'numeric', 'avg': 3.0, 'min': 3.0, 'max': 3.0, 'distribution': {'3': 1},
        }
        rendered = ChartRenderer.render_question(question)
        assert rendered.series == [{'name': '3', 'value': 1}]


def test_format_number_key_extreme_magnitudes():
    assert format_number_key(1e21) == '1000000000000000000000'
    assert format_number_key(1e-7) == '1e-07'
