# enrollment/eligibility.py

"""
Enrollment eligibility rules.

Every rule is evaluated and every failure reported, so a student sees all
the reasons an offering is closed to them at once:

    student_inactive           student record is deactivated
    offering_closed            offering or its course is inactive
    registration_closed        semester is not taking registrations today
    duplicate_enrollment       student already holds an active enrollment
    gpa_below_minimum          cached cumulative GPA below the offering minimum
    insufficient_passed_hours  completed credit hours below the minimum
    course_full                no free seat (advisory; the seat reservation
                               in EnrollmentLifecycleManager is authoritative)
    prerequisites_not_met      a required prerequisite is missing or below its mark
"""

from dataclasses import dataclass, field
from django.db.models import Sum
from core.utils import get_today, get_academic_configuration, get_or_not_found
import logging

logger = logging.getLogger(__name__)

STUDENT_INACTIVE = 'student_inactive'
OFFERING_CLOSED = 'offering_closed'
REGISTRATION_CLOSED = 'registration_closed'
DUPLICATE_ENROLLMENT = 'duplicate_enrollment'
GPA_BELOW_MINIMUM = 'gpa_below_minimum'
INSUFFICIENT_PASSED_HOURS = 'insufficient_passed_hours'
COURSE_FULL = 'course_full'
PREREQUISITES_NOT_MET = 'prerequisites_not_met'


@dataclass
class EligibilityResult:
    """
    Outcome of an eligibility check.

    Attributes:
        eligible: True when no rule failed
        reasons: Human-readable explanation per failed rule
        codes: Machine-readable code per failed rule, parallel to reasons
    """
    eligible: bool = True
    reasons: list = field(default_factory=list)
    codes: list = field(default_factory=list)

    def add(self, code, reason):
        self.eligible = False
        self.codes.append(code)
        self.reasons.append(reason)


@dataclass
class StudentRecord:
    """Per-student facts shared by all offerings checked for one student"""
    student: object
    passed_hours: int
    active_offering_ids: set
    completed_marks: dict


class EligibilityEvaluator:
    """Decides whether a student may enroll in a course offering"""

    @staticmethod
    def _offerings():
        from academics.models import CourseOffering
        return CourseOffering.objects.select_related('course', 'semester').prefetch_related(
            'course__prerequisite_links__prerequisite'
        )

    @staticmethod
    def load_student_record(student):
        """Read the student's completed hours, active enrollments and best marks"""
        from enrollment.models import Enrollment
        from academics.utils import get_completed_course_marks

        enrollments = Enrollment.objects.for_student(student.pk)
        passed_hours = enrollments.completed().aggregate(
            total=Sum('offering__course__credits')
        )['total'] or 0
        active_offering_ids = set(enrollments.active().values_list('offering_id', flat=True))

        return StudentRecord(
            student=student,
            passed_hours=passed_hours,
            active_offering_ids=active_offering_ids,
            completed_marks=get_completed_course_marks(student.pk),
        )

    @classmethod
    def check_eligibility(cls, student_id, offering_id):
        """
        Evaluate every rule for a student and offering.

        Returns:
            EligibilityResult

        Raises:
            NotFoundError: unknown student or offering
        """
        from students.models import Student

        student = get_or_not_found(Student, student_id, 'Student')
        offering = get_or_not_found(cls._offerings(), offering_id, 'Course offering')

        return cls.evaluate(cls.load_student_record(student), offering)

    @classmethod
    def list_eligible_offerings(cls, student_id, semester_id):
        """
        Active offerings of a semester the student may currently enroll in.

        Raises:
            NotFoundError: unknown student or semester
        """
        from students.models import Student
        from academics.models import Semester

        student = get_or_not_found(Student, student_id, 'Student')
        semester = get_or_not_found(Semester, semester_id, 'Semester')

        record = cls.load_student_record(student)
        offerings = cls._offerings().for_semester(semester.pk).active().order_by('course__code')

        return [
            offering for offering in offerings
            if cls.evaluate(record, offering).eligible
        ]

    @classmethod
    def evaluate(cls, record, offering, include_capacity=True):
        """
        Run the rules against an already loaded student record and offering.

        ``include_capacity=False`` skips the advisory seat check; enroll uses
        it because the seat is then reserved atomically.
        """
        from academics.utils import validate_course_prerequisites

        result = EligibilityResult()
        student = record.student
        course = offering.course
        config = get_academic_configuration()

        if not student.is_active:
            result.add(STUDENT_INACTIVE, f"Student {student.student_number} is not active")

        if not offering.is_active or not course.is_active:
            result.add(OFFERING_CLOSED, f"{course.code} is not offered in {offering.semester}")

        if not offering.semester.accepts_registration(
            get_today(), enforce_window=config.enforce_registration_window
        ):
            result.add(REGISTRATION_CLOSED, f"Registration for {offering.semester} is closed")

        if offering.pk in record.active_offering_ids:
            result.add(DUPLICATE_ENROLLMENT, f"Already enrolled in {course.code} for {offering.semester}")

        if student.cumulative_gpa < offering.min_gpa:
            result.add(
                GPA_BELOW_MINIMUM,
                f"GPA {student.cumulative_gpa} is below the required {offering.min_gpa}"
            )

        if record.passed_hours < offering.min_passed_hours:
            result.add(
                INSUFFICIENT_PASSED_HOURS,
                f"{record.passed_hours} passed hours; {offering.min_passed_hours} required"
            )

        if include_capacity and not offering.has_capacity():
            result.add(COURSE_FULL, f"{course.code} is full ({offering.enrolled_count}/{offering.max_students})")

        is_valid, missing = validate_course_prerequisites(course, student.pk, record.completed_marks)
        if not is_valid:
            codes = ', '.join(prerequisite.code for prerequisite in missing)
            result.add(PREREQUISITES_NOT_MET, f"Prerequisites not met: {codes}")

        if not result.eligible:
            logger.debug(
                f"{student.student_number} not eligible for {course.code}: {', '.join(result.codes)}"
            )
        return result
