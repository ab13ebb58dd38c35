# grading/transcripts.py

"""
Transcript assembly.

A transcript lists every completed, failed and withdrawn enrollment of a
student, grouped by semester in chronological order, with per-semester and
cumulative GPAs. Withdrawn courses appear with the letter grade ``W`` and
never count toward any GPA or credit total.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from itertools import groupby
from typing import Optional

from core.utils import get_current_time, get_academic_configuration, get_or_not_found
from .gpa import GPACalculator
import logging

logger = logging.getLogger(__name__)

WITHDRAWN_LETTER = 'W'


@dataclass
class TranscriptLine:
    """One course on a transcript"""
    enrollment_id: object
    course_code: str
    course_name: str
    credits: int
    mark: Optional[Decimal]
    letter_grade: str
    quality_points: Optional[Decimal]
    description: str
    status: str

    @property
    def counts_toward_gpa(self):
        return self.status != 'WITHDRAWN' and self.quality_points is not None


@dataclass
class SemesterRecord:
    """All transcript lines of one semester plus that semester's GPA"""
    semester_id: object
    semester_name: str
    academic_year: str
    term_order: int
    lines: list = field(default_factory=list)
    gpa: Decimal = Decimal('0.00')
    credits_attempted: int = 0
    credits_earned: int = 0


@dataclass
class Transcript:
    student: object
    per_semester: list
    cumulative_gpa: Decimal
    credits_earned: int
    credits_attempted: int
    completed_courses: int
    academic_standing: str
    generated_at: datetime


class TranscriptBuilder:
    """Builds transcripts from source enrollment rows"""

    @classmethod
    def build_transcript(cls, student_id):
        """
        Assemble the transcript of a student.

        Raises:
            NotFoundError: unknown student
        """
        from students.models import Student
        from enrollment.models import Enrollment
        from .models import GradeScaleBand

        student = get_or_not_found(Student, student_id, 'Student')

        enrollments = (
            Enrollment.objects.for_student(student.pk)
            .on_transcript()
            .with_course_details()
            .order_by(
                'offering__semester__academic_year',
                'offering__semester__term_order',
                'offering__course__code',
                'enrollment_date',
            )
        )

        descriptions = dict(
            GradeScaleBand.objects.active().values_list('letter_grade', 'description')
        )

        per_semester = []
        for semester, rows in groupby(enrollments, key=lambda e: e.offering.semester):
            record = SemesterRecord(
                semester_id=semester.pk,
                semester_name=semester.name,
                academic_year=semester.academic_year,
                term_order=semester.term_order,
            )
            for enrollment in rows:
                record.lines.append(cls._build_line(enrollment, descriptions))
            cls._summarise(record)
            per_semester.append(record)

        all_lines = [line for record in per_semester for line in record.lines]
        cumulative_gpa = GPACalculator.calculate_from_enrollments(
            (line.quality_points, line.credits) for line in all_lines if line.counts_toward_gpa
        )
        credits_attempted = sum(record.credits_attempted for record in per_semester)
        credits_earned = sum(record.credits_earned for record in per_semester)
        completed_courses = sum(1 for line in all_lines if line.status == 'COMPLETED')

        config = get_academic_configuration()
        if credits_attempted:
            standing = config.get_academic_standing(cumulative_gpa)
        else:
            # Nothing graded yet
            standing = 'Good Standing'

        logger.debug(
            f"Built transcript for {student.student_number}: "
            f"{len(per_semester)} semesters, {len(all_lines)} courses"
        )

        return Transcript(
            student=student,
            per_semester=per_semester,
            cumulative_gpa=cumulative_gpa,
            credits_earned=credits_earned,
            credits_attempted=credits_attempted,
            completed_courses=completed_courses,
            academic_standing=standing,
            generated_at=get_current_time(),
        )

    @staticmethod
    def _build_line(enrollment, descriptions):
        course = enrollment.offering.course
        withdrawn = enrollment.status == enrollment.Status.WITHDRAWN
        letter = WITHDRAWN_LETTER if withdrawn else (enrollment.letter_grade or '')

        return TranscriptLine(
            enrollment_id=enrollment.pk,
            course_code=course.code,
            course_name=course.name,
            credits=course.credits,
            mark=None if withdrawn else enrollment.mark,
            letter_grade=letter,
            quality_points=None if withdrawn else enrollment.quality_points,
            description='Withdrawn' if withdrawn else descriptions.get(letter, ''),
            status=enrollment.status,
        )

    @staticmethod
    def _summarise(record):
        graded = [line for line in record.lines if line.counts_toward_gpa]
        record.gpa = GPACalculator.calculate_from_enrollments(
            (line.quality_points, line.credits) for line in graded
        )
        record.credits_attempted = sum(line.credits for line in graded)
        record.credits_earned = sum(
            line.credits for line in graded if line.status == 'COMPLETED'
        )
