from datetime import timedelta
from decimal import Decimal

from django.db.models import F
from django.test import TestCase

from academics.models import CourseOffering
from core.exceptions import NotFoundError
from core.models import AcademicConfiguration
from core.tests.factories import (
    make_course,
    make_graded_enrollment,
    make_offering,
    make_prerequisite,
    make_semester,
    make_student,
)
from core.utils import get_today
from enrollment.eligibility import EligibilityEvaluator
from enrollment.models import Enrollment


class EligibilityTests(TestCase):

    def setUp(self):
        self.student = make_student()
        self.semester = make_semester()
        self.offering = make_offering(semester=self.semester)

    def _check(self, offering=None):
        return EligibilityEvaluator.check_eligibility(self.student.pk, (offering or self.offering).pk)

    def test_eligible(self):
        result = self._check()

        self.assertTrue(result.eligible)
        self.assertEqual(result.reasons, [])
        self.assertEqual(result.codes, [])

    def test_inactive_student(self):
        self.student.is_active = False
        self.student.save()

        result = self._check()

        self.assertFalse(result.eligible)
        self.assertEqual(result.codes, ['student_inactive'])

    def test_inactive_offering(self):
        self.offering.is_active = False
        self.offering.save()

        self.assertEqual(self._check().codes, ['offering_closed'])

    def test_inactive_course(self):
        course = self.offering.course
        course.is_active = False
        course.save()

        self.assertEqual(self._check().codes, ['offering_closed'])

    def test_registration_closed(self):
        self.semester.is_registration_open = False
        self.semester.save()

        self.assertEqual(self._check().codes, ['registration_closed'])

    def test_registration_window(self):
        self.semester.registration_start_date = get_today() - timedelta(days=10)
        self.semester.registration_end_date = get_today() - timedelta(days=1)
        self.semester.save()

        self.assertEqual(self._check().codes, ['registration_closed'])

        config = AcademicConfiguration.get_instance()
        config.enforce_registration_window = False
        config.save()

        self.assertTrue(self._check().eligible)

    def test_duplicate_enrollment(self):
        Enrollment.objects.create(student=self.student, offering=self.offering, enrollment_date=get_today())

        self.assertEqual(self._check().codes, ['duplicate_enrollment'])

    def test_withdrawn_enrollment_is_not_a_duplicate(self):
        Enrollment.objects.create(
            student=self.student,
            offering=self.offering,
            enrollment_date=get_today(),
            status=Enrollment.Status.WITHDRAWN,
            is_active=False,
        )

        self.assertTrue(self._check().eligible)

    def test_gpa_below_minimum(self):
        offering = make_offering(semester=self.semester, min_gpa=Decimal('2.50'))

        result = self._check(offering)
        self.assertEqual(result.codes, ['gpa_below_minimum'])
        self.assertIn('2.50', result.reasons[0])

    def test_passed_hours_counted_from_completed_enrollments(self):
        offering = make_offering(semester=self.semester, min_passed_hours=6)
        self.assertEqual(self._check(offering).codes, ['insufficient_passed_hours'])

        earlier = make_semester()
        make_graded_enrollment(
            self.student, make_offering(course=make_course(credits=3), semester=earlier), 90, 'A', '4.00'
        )
        make_graded_enrollment(
            self.student, make_offering(course=make_course(credits=3), semester=earlier), 30, 'F', '0.00',
            status=Enrollment.Status.FAILED,
        )
        self.assertEqual(self._check(offering).codes, ['insufficient_passed_hours'])

        make_graded_enrollment(
            self.student, make_offering(course=make_course(credits=3), semester=earlier), 75, 'C', '2.00'
        )
        self.assertTrue(self._check(offering).eligible)

    def test_course_full(self):
        offering = make_offering(semester=self.semester, max_students=1)
        CourseOffering.objects.filter(pk=offering.pk).update(enrolled_count=F('enrolled_count') + 1)

        self.assertEqual(self._check(offering).codes, ['course_full'])

    def test_prerequisites(self):
        intro = make_course(code='CS100')
        make_prerequisite(self.offering.course, intro, min_mark=Decimal('70'))

        result = self._check()
        self.assertEqual(result.codes, ['prerequisites_not_met'])
        self.assertIn('CS100', result.reasons[0])

        earlier = make_semester()
        make_graded_enrollment(self.student, make_offering(course=intro, semester=earlier), 65, 'D', '1.00')
        self.assertEqual(self._check().codes, ['prerequisites_not_met'])

        retake = make_semester()
        make_graded_enrollment(self.student, make_offering(course=intro, semester=retake), 82, 'B', '3.00')
        self.assertTrue(self._check().eligible)

    def test_optional_prerequisite_is_not_enforced(self):
        make_prerequisite(self.offering.course, make_course(), is_required=False)

        self.assertTrue(self._check().eligible)

    def test_every_failed_rule_is_reported(self):
        self.semester.is_registration_open = False
        self.semester.save()
        offering = make_offering(
            semester=self.semester,
            max_students=1,
            min_gpa=Decimal('3.00'),
            min_passed_hours=12,
            is_active=False,
        )
        make_prerequisite(offering.course, make_course())
        Enrollment.objects.create(student=self.student, offering=offering, enrollment_date=get_today())
        CourseOffering.objects.filter(pk=offering.pk).update(enrolled_count=1)

        result = self._check(offering)

        self.assertFalse(result.eligible)
        self.assertEqual(
            set(result.codes),
            {
                'offering_closed',
                'registration_closed',
                'duplicate_enrollment',
                'gpa_below_minimum',
                'insufficient_passed_hours',
                'course_full',
                'prerequisites_not_met',
            },
        )
        self.assertEqual(len(result.reasons), 7)

    def test_unknown_student_or_offering(self):
        with self.assertRaises(NotFoundError):
            EligibilityEvaluator.check_eligibility('00000000-0000-0000-0000-000000000000', self.offering.pk)
        with self.assertRaises(NotFoundError):
            EligibilityEvaluator.check_eligibility(self.student.pk, 'bogus')


class ListEligibleOfferingsTests(TestCase):

    def test_lists_only_eligible_active_offerings(self):
        student = make_student()
        semester = make_semester()
        open_offering = make_offering(course=make_course(code='AA100'), semester=semester)
        make_offering(course=make_course(code='AA200'), semester=semester, min_gpa=Decimal('3.00'))
        make_offering(course=make_course(code='AA300'), semester=semester, is_active=False)
        make_offering(course=make_course(code='AA400'))

        offerings = EligibilityEvaluator.list_eligible_offerings(student.pk, semester.pk)

        self.assertEqual(offerings, [open_offering])

    def test_unknown_semester(self):
        with self.assertRaises(NotFoundError):
            EligibilityEvaluator.list_eligible_offerings(
                make_student().pk, '00000000-0000-0000-0000-000000000000'
            )
