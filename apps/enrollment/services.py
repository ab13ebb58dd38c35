# enrollment/services.py

"""
Enrollment lifecycle: enroll, withdraw, grade and capacity changes.

Seat counts and statuses are only ever changed by conditional UPDATE
statements, so concurrent requests can never oversubscribe an offering or
move an enrollment out of a terminal state.
"""

from django.core.exceptions import ValidationError
from django.db import transaction, IntegrityError
from django.db.models import F
from core.exceptions import (
    CapacityExceededError,
    DuplicateEnrollmentError,
    EligibilityError,
    InvalidTransitionError,
)
from core.utils import get_today, get_academic_configuration, get_or_not_found
from utils.models import audit_update_fields
from .models import Enrollment, EnrollmentStatusHistory
from .eligibility import EligibilityEvaluator, DUPLICATE_ENROLLMENT
import logging

logger = logging.getLogger(__name__)


class EnrollmentLifecycleManager:
    """Enrollment state machine: IN_PROGRESS -> COMPLETED | FAILED | WITHDRAWN"""

    # =========================================================================
    # ENROLL
    # =========================================================================

    @staticmethod
    @transaction.atomic
    def enroll(student_id, offering_id):
        """
        Enroll a student in a course offering.

        Args:
            student_id: Student primary key
            offering_id: CourseOffering primary key

        Returns:
            Enrollment: the new IN_PROGRESS enrollment

        Raises:
            NotFoundError: unknown student or offering
            DuplicateEnrollmentError: student already holds an active enrollment
            EligibilityError: any other rule failed (all reasons included)
            CapacityExceededError: no free seat
        """
        from students.models import Student
        from academics.models import CourseOffering

        student = get_or_not_found(Student, student_id, 'Student')
        offering = get_or_not_found(
            CourseOffering.objects.select_related('course', 'semester').prefetch_related(
                'course__prerequisite_links__prerequisite'
            ),
            offering_id,
            'Course offering'
        )

        # =================================================================
        # STEP 1: RE-CHECK ELIGIBILITY
        # =================================================================

        record = EligibilityEvaluator.load_student_record(student)
        result = EligibilityEvaluator.evaluate(record, offering, include_capacity=False)

        if DUPLICATE_ENROLLMENT in result.codes:
            raise DuplicateEnrollmentError(
                f"{student.student_number} is already enrolled in {offering}"
            )
        if not result.eligible:
            raise EligibilityError(
                f"{student.student_number} is not eligible for {offering}",
                reasons=result.reasons
            )

        # =================================================================
        # STEP 2: RESERVE SEAT
        # =================================================================

        reserved = CourseOffering.objects.filter(
            pk=offering.pk,
            enrolled_count__lt=F('max_students'),
        ).update(
            enrolled_count=F('enrolled_count') + 1,
            **audit_update_fields()
        )

        if not reserved:
            logger.warning(f"No free seat in {offering} for {student.student_number}")
            raise CapacityExceededError(f"{offering} is full")

        # =================================================================
        # STEP 3: CREATE ENROLLMENT
        # =================================================================

        today = get_today()
        try:
            enrollment = Enrollment.objects.create(
                student=student,
                offering=offering,
                enrollment_date=today,
                status=Enrollment.Status.IN_PROGRESS,
                is_active=True,
            )
        except IntegrityError as e:
            # A concurrent request inserted the same active enrollment; the
            # seat reservation rolls back with this transaction.
            logger.warning(
                f"Concurrent duplicate enrollment of {student.student_number} in {offering}: {e}"
            )
            raise DuplicateEnrollmentError(
                f"{student.student_number} is already enrolled in {offering}"
            ) from e

        EnrollmentLifecycleManager._record_transition(
            enrollment, '', Enrollment.Status.IN_PROGRESS, today, reason='Enrolled'
        )

        logger.info(f"Enrolled {student.student_number} in {offering} (enrollment {enrollment.pk})")
        return enrollment

    # =========================================================================
    # WITHDRAW
    # =========================================================================

    @staticmethod
    @transaction.atomic
    def withdraw(enrollment_id, reason=''):
        """
        Withdraw an in-progress enrollment and release its seat.

        Raises:
            NotFoundError: unknown enrollment
            InvalidTransitionError: enrollment is not IN_PROGRESS
        """
        from academics.models import CourseOffering

        enrollment = get_or_not_found(Enrollment, enrollment_id, 'Enrollment')
        today = get_today()

        withdrawn = Enrollment.objects.filter(
            pk=enrollment.pk,
            status=Enrollment.Status.IN_PROGRESS,
        ).update(
            status=Enrollment.Status.WITHDRAWN,
            is_active=False,
            withdrawal_date=today,
            withdrawal_reason=reason or '',
            **audit_update_fields()
        )

        if not withdrawn:
            enrollment.refresh_from_db(fields=['status'])
            logger.warning(
                f"Rejected withdrawal of enrollment {enrollment.pk} in status {enrollment.status}"
            )
            raise InvalidTransitionError(
                f"Cannot withdraw an enrollment that is {enrollment.get_status_display()}"
            )

        released = CourseOffering.objects.filter(
            pk=enrollment.offering_id,
            enrolled_count__gt=0,
        ).update(
            enrolled_count=F('enrolled_count') - 1,
            **audit_update_fields()
        )
        if not released:
            logger.error(f"Seat counter of offering {enrollment.offering_id} already at zero")

        EnrollmentLifecycleManager._record_transition(
            enrollment, Enrollment.Status.IN_PROGRESS, Enrollment.Status.WITHDRAWN, today,
            reason=reason or 'Withdrawn'
        )

        enrollment.refresh_from_db()
        logger.info(f"Withdrew enrollment {enrollment.pk}" + (f": {reason}" if reason else ""))
        return enrollment

    # =========================================================================
    # GRADE
    # =========================================================================

    @staticmethod
    @transaction.atomic
    def assign_grade(enrollment_id, mark):
        """
        Record a mark, resolve its letter grade and close the enrollment.

        The enrollment becomes COMPLETED when its quality points are above
        the configured passing threshold, FAILED otherwise. The seat stays
        taken. The student's cached GPA projection is refreshed in the same
        transaction.

        Raises:
            NotFoundError: unknown enrollment
            InvalidMarkError: mark is not a number in [0, 100]
            InvalidTransitionError: enrollment is not IN_PROGRESS
            ConfigurationError: the active grade scale is malformed
        """
        from grading.scale import GradeScaleResolver, clean_mark
        from grading.gpa import GPACalculator

        enrollment = get_or_not_found(Enrollment, enrollment_id, 'Enrollment')
        mark = clean_mark(mark)

        if enrollment.status != Enrollment.Status.IN_PROGRESS:
            logger.warning(
                f"Rejected grade for enrollment {enrollment.pk} in status {enrollment.status}"
            )
            raise InvalidTransitionError(
                f"Cannot grade an enrollment that is {enrollment.get_status_display()}"
            )

        letter_grade, quality_points = GradeScaleResolver.resolve(mark)
        config = get_academic_configuration()

        if quality_points > config.passing_quality_points:
            new_status = Enrollment.Status.COMPLETED
        else:
            new_status = Enrollment.Status.FAILED

        today = get_today()
        graded = Enrollment.objects.filter(
            pk=enrollment.pk,
            status=Enrollment.Status.IN_PROGRESS,
        ).update(
            mark=mark,
            letter_grade=letter_grade,
            quality_points=quality_points,
            status=new_status,
            completion_date=today,
            **audit_update_fields()
        )

        if not graded:
            logger.warning(f"Enrollment {enrollment.pk} changed status while being graded")
            raise InvalidTransitionError(f"Enrollment {enrollment.pk} is no longer in progress")

        EnrollmentLifecycleManager._record_transition(
            enrollment, Enrollment.Status.IN_PROGRESS, new_status, today,
            reason=f"Graded {letter_grade}", mark=mark
        )

        GPACalculator.refresh_student_projection(enrollment.student_id)

        enrollment.refresh_from_db()
        logger.info(
            f"Graded enrollment {enrollment.pk}: mark={mark} grade={letter_grade} "
            f"points={quality_points} status={new_status}"
        )
        return enrollment

    # =========================================================================
    # CAPACITY
    # =========================================================================

    @staticmethod
    @transaction.atomic
    def adjust_capacity(offering_id, max_students):
        """
        Change an offering's capacity.

        Raises:
            NotFoundError: unknown offering
            ValidationError: new capacity is not a whole number of at least one seat
            CapacityExceededError: new capacity is below the seats already taken
        """
        from academics.models import CourseOffering

        offering = get_or_not_found(CourseOffering, offering_id, 'Course offering')

        if isinstance(max_students, bool) or not isinstance(max_students, int) or max_students < 1:
            raise ValidationError(
                {'max_students': f"Capacity must be a whole number of at least one seat, got {max_students!r}"}
            )

        updated = CourseOffering.objects.filter(
            pk=offering.pk,
            enrolled_count__lte=max_students,
        ).update(
            max_students=max_students,
            **audit_update_fields()
        )

        if not updated:
            offering.refresh_from_db(fields=['enrolled_count'])
            raise CapacityExceededError(
                f"Cannot reduce capacity of {offering} to {max_students}: "
                f"{offering.enrolled_count} seats are taken"
            )

        offering.refresh_from_db()
        logger.info(f"Capacity of {offering} set to {max_students}")
        return offering

    # =========================================================================
    # HELPERS
    # =========================================================================

    @staticmethod
    def _record_transition(enrollment, previous_status, new_status, effective_date, reason='', mark=None):
        return EnrollmentStatusHistory.objects.create(
            enrollment=enrollment,
            previous_status=previous_status,
            new_status=new_status,
            effective_date=effective_date,
            reason=reason,
            mark=mark,
        )
