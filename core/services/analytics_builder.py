"""core/services/analytics_builder.py

Builds the survey analytics document from in-memory survey definitions and
responses.

Answers are grouped per question and aggregated by question type: choice
counts, a numeric summary with a value distribution, the most frequent words
of free-text answers, or a plain response count for everything else. The
resulting aggregates use the JSON shapes ``parse_aggregate`` accepts.
"""
import logging
import math
import re
from collections import Counter

from django.conf import settings

from core.services.aggregates import (
    BasicAggregate,
    ChoiceAggregate,
    NumericAggregate,
    TextAggregate,
)
from core.utils.logging_utils import log_performance

logger = logging.getLogger(__name__)

CHOICE_QUESTION_TYPES = frozenset({'singleChoice', 'multiChoice', 'dropdown'})
NUMERIC_QUESTION_TYPES = frozenset({'slider', 'ratingStar', 'ratingNumber', 'ratingSmiley'})
TEXT_QUESTION_TYPES = frozenset({'textShort', 'textLong'})

# --- 1. TEXT MINING ---


class TextMiningEngine:
    STOP_WORDS = frozenset({
        'the', 'a', 'an', 'and', 'or', 'but', 'in', 'on', 'at', 'to', 'for', 'of', 'with', 'by',
        'is', 'are', 'was', 'were', 'be', 'been', 'being', 'have', 'has', 'had', 'do', 'does', 'did',
        'will', 'would', 'could', 'should', 'may', 'might', 'must', 'can', 'cannot',
        'this', 'that', 'these', 'those', 'i', 'you', 'he', 'she', 'it', 'we', 'they',
        'me', 'him', 'her', 'us', 'them', 'my', 'your', 'his', 'its', 'our', 'their',
    })
    _PUNCTUATION = re.compile(r'[^\w\s]')

    @staticmethod
    def extract_words(values):
        text = ' '.join('' if v is None else str(v) for v in values).lower()
        text = TextMiningEngine._PUNCTUATION.sub('', text)
        return [w for w in text.split() if len(w) > 1 and w not in TextMiningEngine.STOP_WORDS]

    @staticmethod
    def top_words(values, limit=None):
        """Most frequent words as [{'word', 'count'}]; ties keep first-seen order."""
        if limit is None:
            limit = settings.TEXT_TOP_WORDS_LIMIT
        # Counter.most_common is stable for equal counts (insertion order)
        counts = Counter(TextMiningEngine.extract_words(values))
        return [{'word': word, 'count': count} for word, count in counts.most_common(limit)]


# --- 2. PER-QUESTION AGGREGATES ---


def format_number_key(value):
    """
    Distribution bucket label for a numeric answer.

    Integral values drop the fraction ("4" for 4.0, every digit for large
    magnitudes such as 1e21); other values use Python's shortest float repr
    ("4.5", "1e-07"). Labels only need to be stable and parse back with
    ``float`` for numeric ordering.
    """
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


class QuestionAnalyzer:

    @staticmethod
    def analyze_choice_question(values):
        counts = {}
        for value in values:
            selected = value if isinstance(value, (list, tuple)) else [value] if value else []
            for option in selected:
                key = str(option)
                counts[key] = counts.get(key, 0) + 1
        return ChoiceAggregate(counts=counts)

    @staticmethod
    def analyze_numeric_question(values):
        numbers = []
        for value in values:
            if isinstance(value, bool) or value is None:
                continue
            try:
                number = float(value)
            except (TypeError, ValueError, OverflowError):
                continue
            # NaN and infinities are not answers
            if math.isfinite(number):
                numbers.append(number)

        if not numbers:
            return None

        distribution = {}
        for number in numbers:
            key = format_number_key(number)
            distribution[key] = distribution.get(key, 0) + 1

        return NumericAggregate(
            avg=round(math.fsum(n / len(numbers) for n in numbers), 2),
            min=min(numbers),
            max=max(numbers),
            distribution=distribution,
        )

    @staticmethod
    def analyze_text_question(values):
        return TextAggregate(top_words=TextMiningEngine.top_words(values))

    @staticmethod
    def calculate_analytics(question_type, values):
        """Aggregate for one question's answer values, dispatched on question type."""
        if question_type in CHOICE_QUESTION_TYPES:
            return QuestionAnalyzer.analyze_choice_question(values)
        if question_type in NUMERIC_QUESTION_TYPES:
            return QuestionAnalyzer.analyze_numeric_question(values)
        if question_type in TEXT_QUESTION_TYPES:
            return QuestionAnalyzer.analyze_text_question(values)
        return BasicAggregate(response_count=len(values))


# --- 3. SURVEY DOCUMENT ---


class SurveyAnalyticsBuilder:
    """
    Builds the survey analytics document from an in-memory survey definition
    and its responses.

    survey: {'id', 'pages': [{'questions': [{'id', 'type', 'title'}]}]}
    responses: [{'responses': [{'questionId', 'value'}]}]
    """

    @staticmethod
    def iter_questions(survey):
        for page in survey.get('pages') or []:
            for question in page.get('questions') or []:
                yield question

    @staticmethod
    def question_values(responses, question_id):
        values = []
        for response in responses:
            for answer in response.get('responses') or []:
                if answer.get('questionId') == question_id:
                    values.append(answer.get('value'))
                    break
        return values

    @staticmethod
    def analyze_question(question, values):
        item = {
            'questionId': question.get('id'),
            'type': question.get('type'),
            'title': question.get('title'),
            'totalResponses': len(values),
            'analytics': None,
        }
        if values:
            aggregate = QuestionAnalyzer.calculate_analytics(question.get('type'), values)
            item['analytics'] = aggregate.to_dict() if aggregate is not None else None
        return item

    @staticmethod
    @log_performance()
    def build(survey, responses):
        survey_id = survey.get('id')
        if not responses:
            return {'surveyId': survey_id, 'totalResponses': 0, 'questions': []}

        questions = [
            SurveyAnalyticsBuilder.analyze_question(
                q, SurveyAnalyticsBuilder.question_values(responses, q.get('id'))
            )
            for q in SurveyAnalyticsBuilder.iter_questions(survey)
        ]
        logger.info(f"Built analytics for survey {survey_id}: {len(responses)} responses, {len(questions)} questions")
        return {'surveyId': survey_id, 'totalResponses': len(responses), 'questions': questions}
