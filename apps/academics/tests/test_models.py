from datetime import date
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db.models import F
from django.test import SimpleTestCase, TestCase

from academics.models import CourseOffering, Semester
from academics.utils import (
    get_current_semester,
    get_offering_capacity_summary,
    get_semester_by_name,
)
from core.tests.factories import make_course, make_offering, make_semester, make_student
from enrollment.services import EnrollmentLifecycleManager


class SemesterRegistrationTests(SimpleTestCase):

    def test_closed_semester(self):
        semester = Semester(is_registration_open=False)
        self.assertFalse(semester.accepts_registration(date(2025, 9, 1)))

    def test_window_is_inclusive(self):
        semester = Semester(
            is_registration_open=True,
            registration_start_date=date(2025, 8, 1),
            registration_end_date=date(2025, 8, 31),
        )
        self.assertTrue(semester.accepts_registration(date(2025, 8, 1)))
        self.assertTrue(semester.accepts_registration(date(2025, 8, 31)))
        self.assertFalse(semester.accepts_registration(date(2025, 9, 1)))
        self.assertFalse(semester.accepts_registration(date(2025, 7, 31)))

    def test_window_not_enforced(self):
        semester = Semester(
            is_registration_open=True,
            registration_end_date=date(2025, 8, 31),
        )
        self.assertTrue(semester.accepts_registration(date(2025, 9, 15), enforce_window=False))


class SemesterTests(TestCase):

    def test_invalid_registration_window(self):
        with self.assertRaises(ValidationError):
            make_semester(
                registration_start_date=date(2025, 9, 1),
                registration_end_date=date(2025, 8, 1),
            )

    def test_current_semester(self):
        make_semester(name='Fall 2025')
        current = make_semester(name='Spring 2026', is_current=True)

        self.assertEqual(get_current_semester(), current)
        self.assertEqual(get_semester_by_name('spring 2026'), current)


class CourseTests(TestCase):

    def test_credits_range(self):
        with self.assertRaises(ValidationError):
            make_course(credits=7)

    def test_code_is_normalised(self):
        self.assertEqual(make_course(code=' cs101 ').code, 'CS101')


class CourseOfferingTests(TestCase):

    def setUp(self):
        self.offering = make_offering(max_students=3)

    def test_new_offering_starts_empty(self):
        offering = CourseOffering(
            course=make_course(), semester=make_semester(), max_students=5, enrolled_count=4
        )
        offering.save()

        offering.refresh_from_db()
        self.assertEqual(offering.enrolled_count, 0)

    def test_save_never_writes_seat_counter(self):
        stale = CourseOffering.objects.get(pk=self.offering.pk)
        CourseOffering.objects.filter(pk=self.offering.pk).update(enrolled_count=F('enrolled_count') + 2)

        stale.min_passed_hours = 3
        stale.save()

        self.offering.refresh_from_db()
        self.assertEqual(self.offering.enrolled_count, 2)
        self.assertEqual(self.offering.min_passed_hours, 3)

    def test_capacity_cannot_drop_below_seats_taken(self):
        for _ in range(2):
            EnrollmentLifecycleManager.enroll(make_student().pk, self.offering.pk)

        self.offering.refresh_from_db()
        self.offering.max_students = 1
        with self.assertRaises(ValidationError):
            self.offering.save()

    def test_frozen_once_enrolled(self):
        EnrollmentLifecycleManager.enroll(make_student().pk, self.offering.pk)

        self.offering.refresh_from_db()
        self.offering.min_gpa = Decimal('2.00')
        with self.assertRaises(ValidationError):
            self.offering.save()

        self.offering.refresh_from_db()
        self.offering.max_students = 10
        self.offering.is_active = False
        self.offering.save()

    def test_capacity_summary(self):
        students = [make_student() for _ in range(2)]
        first = EnrollmentLifecycleManager.enroll(students[0].pk, self.offering.pk)
        EnrollmentLifecycleManager.enroll(students[1].pk, self.offering.pk)
        EnrollmentLifecycleManager.withdraw(first.pk)

        self.offering.refresh_from_db()
        summary = get_offering_capacity_summary(self.offering)

        self.assertEqual(summary['seats_taken'], 1)
        self.assertEqual(summary['in_progress'], 1)
        self.assertEqual(summary['available_capacity'], 2)
        self.assertEqual(summary['occupancy_percentage'], 33.3)
        self.assertFalse(summary['is_full'])
        self.assertTrue(summary['has_capacity'])
