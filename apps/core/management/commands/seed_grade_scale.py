# core/management/commands/seed_grade_scale.py

from django.core.management.base import BaseCommand, CommandError
from django.db import transaction
from decimal import Decimal
from core.exceptions import ConfigurationError
from grading.models import GradeScaleBand
from grading.scale import GradeScaleResolver
from utils.models import audit_update_fields
import logging

logger = logging.getLogger(__name__)

# (letter, quality points, min mark, max mark, description)
# Neighbouring bands share their boundary mark; the higher band wins it.
DEFAULT_GRADE_SCALE = [
    ('A+', '4.00', '96', '100', 'Exceptional'),
    ('A', '4.00', '92', '96', 'Excellent'),
    ('A-', '3.70', '88', '92', 'Excellent'),
    ('B+', '3.30', '84', '88', 'Good'),
    ('B', '3.00', '80', '84', 'Good'),
    ('B-', '2.70', '76', '80', 'Good'),
    ('C+', '2.30', '72', '76', 'Satisfactory'),
    ('C', '2.00', '68', '72', 'Satisfactory'),
    ('C-', '1.70', '64', '68', 'Satisfactory'),
    ('D+', '1.30', '60', '64', 'Poor'),
    ('D', '1.00', '55', '60', 'Poor'),
    ('D-', '0.70', '50', '55', 'Poor'),
    ('F', '0.00', '0', '50', 'Failure'),
]


class Command(BaseCommand):
    help = 'Install the default A+ to F grade scale'

    def add_arguments(self, parser):
        parser.add_argument(
            '--replace', action='store_true',
            help='Deactivate the current active bands and install the default scale'
        )

    def handle(self, *args, **options):
        existing = GradeScaleBand.objects.active()

        if existing.exists() and not options['replace']:
            self.stdout.write(self.style.WARNING(
                f'An active grade scale with {existing.count()} bands already exists. '
                f'Use --replace to overwrite it.'
            ))
            return

        bands = [
            GradeScaleBand(
                letter_grade=letter,
                quality_points=Decimal(points),
                min_mark=Decimal(low),
                max_mark=Decimal(high),
                description=description,
            )
            for letter, points, low, high, description in DEFAULT_GRADE_SCALE
        ]
        bands.sort(key=lambda band: band.min_mark)

        try:
            GradeScaleResolver.validate(bands)
        except ConfigurationError as e:
            raise CommandError(f'Default grade scale is invalid: {e}')

        with transaction.atomic():
            replaced = existing.update(is_active=False, **audit_update_fields())
            for band in bands:
                band.save()

        GradeScaleResolver.invalidate()

        if replaced:
            self.stdout.write(f'Deactivated {replaced} existing bands')
        logger.info(f"Installed default grade scale ({len(bands)} bands, replaced {replaced})")
        self.stdout.write(self.style.SUCCESS(f'Installed {len(bands)} grade scale bands'))
