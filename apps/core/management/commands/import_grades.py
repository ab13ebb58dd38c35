# core/management/commands/import_grades.py

"""
Bulk grade import from an Excel workbook.

The first row of the active sheet is a header naming the columns
``Student Number``, ``Course Code`` and ``Mark`` (any order, any case).
Each data row grades the student's in-progress enrollment in that course
for the chosen semester. A failing row is reported and skipped; the rest of
the batch is still imported.
"""

from django.core.management.base import BaseCommand, CommandError
from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException
from zipfile import BadZipFile
from academics.utils import get_current_semester, get_semester_by_name
from core.exceptions import EngineError
from enrollment.models import Enrollment
from enrollment.services import EnrollmentLifecycleManager
from utils.context import RequestContext
import logging

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = {
    'student number': 'student_number',
    'course code': 'course_code',
    'mark': 'mark',
}


class Command(BaseCommand):
    help = 'Import marks from an .xlsx workbook (Student Number, Course Code, Mark)'

    def add_arguments(self, parser):
        parser.add_argument('path', type=str, help='Path to the .xlsx workbook')
        parser.add_argument(
            '--semester', type=str, default=None,
            help='Semester name (defaults to the current semester)'
        )

    def handle(self, *args, **options):
        semester = self._get_semester(options['semester'])

        try:
            workbook = load_workbook(options['path'], read_only=True, data_only=True)
        except (OSError, InvalidFileException, BadZipFile) as e:
            raise CommandError(f"Cannot open workbook {options['path']}: {e}")

        try:
            rows = workbook.active.iter_rows(values_only=True)
            columns = self._read_header(next(rows, None))

            imported = 0
            failures = []
            with RequestContext(request_path='manage.py import_grades'):
                for row_number, row in enumerate(rows, start=2):
                    if row is None or all(cell in (None, '') for cell in row):
                        continue
                    values = {name: row[index] if index < len(row) else None
                              for name, index in columns.items()}
                    error = self._import_row(semester, values)
                    if error:
                        failures.append((row_number, error))
                    else:
                        imported += 1
        finally:
            workbook.close()

        for row_number, error in failures:
            self.stdout.write(self.style.ERROR(f'Row {row_number}: {error}'))

        logger.info(
            f"Grade import into {semester}: {imported} imported, {len(failures)} failed"
        )
        summary = f'Imported {imported} grades for {semester}; {len(failures)} rows failed'
        if failures:
            self.stdout.write(self.style.WARNING(summary))
        else:
            self.stdout.write(self.style.SUCCESS(summary))

    def _get_semester(self, name):
        if name:
            semester = get_semester_by_name(name)
            if semester is None:
                raise CommandError(f'Semester "{name}" not found')
            return semester

        semester = get_current_semester()
        if semester is None:
            raise CommandError('No current semester; pass --semester')
        return semester

    def _read_header(self, header):
        if not header:
            raise CommandError('Workbook is empty')

        positions = {}
        for index, cell in enumerate(header):
            key = str(cell).strip().lower() if cell is not None else ''
            if key in REQUIRED_COLUMNS:
                positions[REQUIRED_COLUMNS[key]] = index

        missing = [title for title, name in REQUIRED_COLUMNS.items() if name not in positions]
        if missing:
            raise CommandError(f"Missing columns: {', '.join(missing)}")
        return positions

    def _import_row(self, semester, values):
        """Grade one row; returns an error message or None"""
        student_number = str(values['student_number'] or '').strip().upper()
        course_code = str(values['course_code'] or '').strip().upper()

        if not student_number or not course_code:
            return 'Student number and course code are required'

        enrollment = Enrollment.objects.in_progress().filter(
            student__student_number=student_number,
            offering__course__code=course_code,
            offering__semester=semester,
        ).first()
        if enrollment is None:
            return f'No in-progress enrollment for {student_number} in {course_code}'

        try:
            EnrollmentLifecycleManager.assign_grade(enrollment.pk, values['mark'])
        except EngineError as e:
            return f'{student_number} {course_code}: {e}'
        return None
