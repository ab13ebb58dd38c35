# grading/gpa.py

"""
GPA aggregation and the cached student projection.

GPA is always recomputed from source enrollment rows:
    sum(quality_points x credits) / sum(credits)
over completed and failed enrollments, rounded once to two places
(half away from zero). The figures stored on ``Student`` are only a
projection of that result.
"""

from decimal import Decimal
from django.db import transaction
from core.utils import get_or_not_found, round_half_up
import logging

logger = logging.getLogger(__name__)

ZERO_GPA = Decimal('0.00')


class GPACalculator:
    """Computes GPAs from graded enrollments"""

    @staticmethod
    def calculate_from_enrollments(rows):
        """
        Aggregate ``(quality_points, credits)`` pairs into a GPA.

        Pairs with no quality points are ignored. Returns 0.00 when no
        credits qualify.
        """
        total_points = Decimal('0')
        total_credits = 0

        for quality_points, credits in rows:
            if quality_points is None or not credits:
                continue
            total_points += Decimal(quality_points) * credits
            total_credits += credits

        if total_credits == 0:
            return ZERO_GPA

        return round_half_up(total_points / total_credits)

    @staticmethod
    def _graded_rows(student_id, semester_id=None):
        from enrollment.models import Enrollment

        queryset = Enrollment.objects.for_student(student_id).graded().filter(
            quality_points__isnull=False
        )
        if semester_id is not None:
            queryset = queryset.for_semester(semester_id)
        return queryset

    @classmethod
    def calculate_gpa(cls, student_id, semester_id=None):
        """
        GPA of a student, cumulative or for a single semester.

        Raises:
            NotFoundError: unknown student (or semester, when given)
        """
        from students.models import Student
        from academics.models import Semester

        student = get_or_not_found(Student.objects.only('pk'), student_id, 'Student')
        if semester_id is not None:
            semester_id = get_or_not_found(Semester.objects.only('pk'), semester_id, 'Semester').pk

        rows = cls._graded_rows(student.pk, semester_id).values_list(
            'quality_points', 'offering__course__credits'
        )
        return cls.calculate_from_enrollments(rows)

    @classmethod
    @transaction.atomic
    def refresh_student_projection(cls, student_id):
        """
        Rewrite the student's cached cumulative GPA, percentage and passed
        hours from their graded enrollments.

        The student row is locked first so concurrent grade events for the
        same student are applied one after the other.

        Returns:
            Student: the updated student
        """
        from students.models import Student
        from enrollment.models import Enrollment

        student = get_or_not_found(Student.objects.select_for_update(), student_id, 'Student')

        rows = list(
            cls._graded_rows(student.pk).values_list(
                'quality_points', 'offering__course__credits', 'mark', 'status'
            )
        )

        gpa = cls.calculate_from_enrollments((qp, credits) for qp, credits, _, _ in rows)

        weighted_marks = Decimal('0')
        credits_with_marks = 0
        passed_hours = 0
        for _, credits, mark, status in rows:
            if mark is not None:
                weighted_marks += mark * credits
                credits_with_marks += credits
            if status == Enrollment.Status.COMPLETED:
                passed_hours += credits

        percentage = (
            round_half_up(weighted_marks / credits_with_marks)
            if credits_with_marks else Decimal('0.00')
        )

        student.cumulative_gpa = gpa
        student.percentage = percentage
        student.passed_hours = passed_hours
        student.save(update_fields=['cumulative_gpa', 'percentage', 'passed_hours'])

        logger.info(
            f"Refreshed projection for student {student.student_number}: "
            f"gpa={gpa} percentage={percentage} passed_hours={passed_hours}"
        )
        return student
