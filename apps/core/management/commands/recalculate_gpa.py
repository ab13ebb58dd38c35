# core/management/commands/recalculate_gpa.py

from django.core.management.base import BaseCommand, CommandError
from grading.gpa import GPACalculator
from students.models import Student
from utils.context import RequestContext
import logging

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = 'Rebuild cached GPA, percentage and passed hours from enrollment records'

    def add_arguments(self, parser):
        parser.add_argument(
            '--student', type=str, default=None,
            help='Only recalculate the student with this student number'
        )

    def handle(self, *args, **options):
        students = Student.objects.all()

        if options['student']:
            students = students.filter(student_number=options['student'].strip().upper())
            if not students.exists():
                raise CommandError(f"Student {options['student']} not found")

        updated = 0
        with RequestContext(request_path='manage.py recalculate_gpa'):
            for student_id in students.values_list('pk', flat=True):
                student = GPACalculator.refresh_student_projection(student_id)
                updated += 1
                if options['verbosity'] > 1:
                    self.stdout.write(f'{student.student_number}: GPA {student.cumulative_gpa}')

        logger.info(f"Recalculated GPA projection for {updated} students")
        self.stdout.write(self.style.SUCCESS(f'Recalculated {updated} students'))
