import os
import tempfile
from decimal import Decimal
from io import StringIO

from django.core.cache import cache
from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase
from openpyxl import Workbook

from core.tests.factories import (
    make_course,
    make_graded_enrollment,
    make_offering,
    make_semester,
    make_student,
)
from enrollment.models import Enrollment
from enrollment.services import EnrollmentLifecycleManager
from grading.models import GradeScaleBand
from grading.scale import GradeScaleResolver


class SeedGradeScaleTests(TestCase):

    def setUp(self):
        cache.clear()

    def test_installs_default_scale(self):
        out = StringIO()
        call_command('seed_grade_scale', stdout=out)

        self.assertEqual(GradeScaleBand.objects.active().count(), 13)
        self.assertIn('Installed 13', out.getvalue())
        self.assertEqual(GradeScaleResolver.resolve(96), ('A+', Decimal('4.00')))
        self.assertEqual(GradeScaleResolver.resolve(50), ('D-', Decimal('0.70')))
        self.assertEqual(GradeScaleResolver.resolve('49.99'), ('F', Decimal('0.00')))

    def test_keeps_existing_scale(self):
        call_command('seed_grade_scale', stdout=StringIO())
        out = StringIO()
        call_command('seed_grade_scale', stdout=out)

        self.assertIn('--replace', out.getvalue())
        self.assertEqual(GradeScaleBand.objects.count(), 13)

    def test_replace(self):
        call_command('seed_grade_scale', stdout=StringIO())
        call_command('seed_grade_scale', '--replace', stdout=StringIO())

        self.assertEqual(GradeScaleBand.objects.active().count(), 13)
        self.assertEqual(GradeScaleBand.objects.inactive().count(), 13)
        self.assertEqual(GradeScaleResolver.resolve(85)[0], 'B+')


class ImportGradesTests(TestCase):

    def setUp(self):
        cache.clear()
        call_command('seed_grade_scale', stdout=StringIO())
        self.semester = make_semester(name='Fall 2025')
        self.course = make_course(code='CS101')
        self.offering = make_offering(course=self.course, semester=self.semester)
        self.alice = make_student(student_number='S100')
        self.bob = make_student(student_number='S200')
        self.alice_enrollment = EnrollmentLifecycleManager.enroll(self.alice.pk, self.offering.pk)
        self.bob_enrollment = EnrollmentLifecycleManager.enroll(self.bob.pk, self.offering.pk)

    def _workbook(self, rows, header=('Student Number', 'Course Code', 'Mark')):
        workbook = Workbook()
        sheet = workbook.active
        sheet.append(list(header))
        for row in rows:
            sheet.append(list(row))
        handle, path = tempfile.mkstemp(suffix='.xlsx')
        os.close(handle)
        workbook.save(path)
        self.addCleanup(os.remove, path)
        return path

    def test_imports_rows_and_reports_failures(self):
        path = self._workbook([
            ('S100', 'CS101', 91),
            ('s200', 'cs101', 'absent'),
            ('S999', 'CS101', 70),
            (None, None, None),
        ])
        out = StringIO()

        call_command('import_grades', path, '--semester', 'Fall 2025', stdout=out)

        self.alice_enrollment.refresh_from_db()
        self.assertEqual(self.alice_enrollment.status, Enrollment.Status.COMPLETED)
        self.assertEqual(self.alice_enrollment.letter_grade, 'A-')

        self.bob_enrollment.refresh_from_db()
        self.assertEqual(self.bob_enrollment.status, Enrollment.Status.IN_PROGRESS)

        output = out.getvalue()
        self.assertIn('Imported 1 grades', output)
        self.assertIn('2 rows failed', output)
        self.assertIn('Row 3', output)
        self.assertIn('Row 4', output)

    def test_columns_in_any_order(self):
        path = self._workbook([(77, 'S200', 'CS101')], header=('mark', 'STUDENT NUMBER', 'Course code'))

        call_command('import_grades', path, '--semester', 'Fall 2025', stdout=StringIO())

        self.bob_enrollment.refresh_from_db()
        self.assertEqual(self.bob_enrollment.letter_grade, 'B-')

    def test_missing_column(self):
        path = self._workbook([], header=('Student Number', 'Mark'))

        with self.assertRaisesMessage(CommandError, 'course code'):
            call_command('import_grades', path, '--semester', 'Fall 2025', stdout=StringIO())

    def test_unknown_semester(self):
        path = self._workbook([])

        with self.assertRaises(CommandError):
            call_command('import_grades', path, '--semester', 'Winter 1999', stdout=StringIO())

    def test_current_semester_is_default(self):
        self.semester.is_current = True
        self.semester.save()
        path = self._workbook([('S100', 'CS101', 55)])

        call_command('import_grades', path, stdout=StringIO())

        self.alice_enrollment.refresh_from_db()
        self.assertEqual(self.alice_enrollment.letter_grade, 'D')


class RecalculateGPATests(TestCase):

    def test_rebuilds_projection(self):
        student = make_student(student_number='S300')
        make_graded_enrollment(student, make_offering(course=make_course(credits=4)), 85, 'B', '3.00')
        student.cumulative_gpa = Decimal('0.50')
        student.save()

        out = StringIO()
        call_command('recalculate_gpa', '--student', 's300', stdout=out)

        student.refresh_from_db()
        self.assertEqual(student.cumulative_gpa, Decimal('3.00'))
        self.assertEqual(student.passed_hours, 4)
        self.assertIn('Recalculated 1 students', out.getvalue())

    def test_all_students(self):
        make_student()
        make_student()

        out = StringIO()
        call_command('recalculate_gpa', stdout=out)

        self.assertIn('Recalculated 2 students', out.getvalue())

    def test_unknown_student(self):
        with self.assertRaises(CommandError):
            call_command('recalculate_gpa', '--student', 'NOPE', stdout=StringIO())
