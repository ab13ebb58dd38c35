import threading

from django.db import connections
from django.test import TransactionTestCase

from academics.models import CourseOffering
from core.exceptions import CapacityExceededError, DuplicateEnrollmentError
from core.models import AcademicConfiguration
from core.tests.factories import make_offering, make_student
from enrollment.models import Enrollment
from enrollment.services import EnrollmentLifecycleManager


class ConcurrentEnrollmentTests(TransactionTestCase):
    """Real threads, each on its own database connection"""

    def setUp(self):
        AcademicConfiguration.get_instance()

    def _enroll_concurrently(self, pairs):
        barrier = threading.Barrier(len(pairs))
        outcomes = []
        lock = threading.Lock()

        def worker(student_id, offering_id):
            try:
                barrier.wait()
                try:
                    EnrollmentLifecycleManager.enroll(student_id, offering_id)
                    outcome = 'enrolled'
                except CapacityExceededError:
                    outcome = 'full'
                except DuplicateEnrollmentError:
                    outcome = 'duplicate'
                with lock:
                    outcomes.append(outcome)
            finally:
                connections.close_all()

        threads = [threading.Thread(target=worker, args=pair) for pair in pairs]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        return outcomes

    def test_single_seat_goes_to_exactly_one_student(self):
        offering = make_offering(max_students=1)
        students = [make_student() for _ in range(8)]

        outcomes = self._enroll_concurrently([(s.pk, offering.pk) for s in students])

        self.assertEqual(outcomes.count('enrolled'), 1)
        self.assertEqual(outcomes.count('full'), 7)
        self.assertEqual(CourseOffering.objects.get(pk=offering.pk).enrolled_count, 1)
        self.assertEqual(Enrollment.objects.filter(offering=offering).count(), 1)

    def test_two_seats_three_students(self):
        offering = make_offering(max_students=2)
        students = [make_student() for _ in range(3)]

        outcomes = self._enroll_concurrently([(s.pk, offering.pk) for s in students])

        self.assertEqual(sorted(outcomes), ['enrolled', 'enrolled', 'full'])
        self.assertEqual(CourseOffering.objects.get(pk=offering.pk).enrolled_count, 2)

    def test_same_student_twice(self):
        offering = make_offering(max_students=5)
        student = make_student()

        outcomes = self._enroll_concurrently([(student.pk, offering.pk)] * 2)

        self.assertEqual(sorted(outcomes), ['duplicate', 'enrolled'])
        self.assertEqual(CourseOffering.objects.get(pk=offering.pk).enrolled_count, 1)
