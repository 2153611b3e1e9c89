"""Management command to render a survey analytics document as chart payloads."""

import json
import sys

from django.core.exceptions import ValidationError
from django.core.management.base import BaseCommand, CommandError

from core.services.chart_adapter import ChartType
from core.services.chart_renderer import ChartRenderer


class Command(BaseCommand):
    help = 'Render every question of a survey analytics JSON document into chart payloads.'

    def add_arguments(self, parser):
        parser.add_argument(
            'source',
            nargs='?',
            default='-',
            help='Path to the analytics JSON document, or "-" for stdin (default).',
        )
        parser.add_argument(
            '--chart-type',
            choices=[t.value for t in ChartType],
            default=None,
            help='Chart type for every question (default: first type available per question).',
        )
        parser.add_argument(
            '--dark',
            action='store_true',
            help='Render images with the dark theme.',
        )
        parser.add_argument(
            '--indent',
            type=int,
            default=None,
            help='Indent the JSON output.',
        )

    def _load(self, source):
        try:
            if source == '-':
                return json.load(sys.stdin)
            with open(source, encoding='utf-8') as fh:
                return json.load(fh)
        except OSError as exc:
            raise CommandError(f'Cannot read {source}: {exc}')
        except json.JSONDecodeError as exc:
            raise CommandError(f'Invalid JSON in {source}: {exc}')

    def handle(self, *args, **options):
        document = self._load(options['source'])
        if not isinstance(document, dict):
            raise CommandError('Analytics document must be a JSON object')

        questions = document.get('questions') or []
        rendered = []
        for question in questions:
            try:
                chart = ChartRenderer.render_question(
                    question,
                    chart_type=options['chart_type'],
                    dark_mode=options['dark'],
                )
            except ValidationError as exc:
                raise CommandError(f"Question {question.get('questionId')}: {'; '.join(exc.messages)}")
            rendered.append({'questionId': question.get('questionId'), **chart.to_dict()})

        self.stdout.write(json.dumps(rendered, indent=options['indent']))
        self.stderr.write(self.style.SUCCESS(
            f"Rendered {len(rendered)} questions for survey {document.get('surveyId')}"
        ))
