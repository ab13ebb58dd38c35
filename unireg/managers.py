# managers.py

"""
Shared querysets and managers for the engine's models.

Status names are read from ``self.model`` so the querysets stay importable
before the app models are loaded.
"""

from django.db import models
import logging

logger = logging.getLogger(__name__)


class ActiveQuerySet(models.QuerySet):
    """QuerySet for models carrying an ``is_active`` flag"""

    def active(self):
        return self.filter(is_active=True)

    def inactive(self):
        return self.filter(is_active=False)


# ==============================================================================
# ENROLLMENT QUERIES
# ==============================================================================

class EnrollmentQuerySet(ActiveQuerySet):
    """Common enrollment filters used by eligibility, grading and transcripts"""

    def for_student(self, student_id):
        return self.filter(student_id=student_id)

    def for_offering(self, offering_id):
        return self.filter(offering_id=offering_id)

    def for_semester(self, semester_id):
        return self.filter(offering__semester_id=semester_id)

    def in_progress(self):
        return self.filter(status=self.model.Status.IN_PROGRESS)

    def completed(self):
        return self.filter(status=self.model.Status.COMPLETED)

    def graded(self):
        """Completed or failed enrollments: the ones that count toward GPA"""
        return self.filter(status__in=self.model.GRADED_STATUSES)

    def on_transcript(self):
        """Graded plus withdrawn enrollments"""
        return self.filter(status__in=self.model.TRANSCRIPT_STATUSES)

    def holding_seat(self):
        """Enrollments counted against an offering's capacity"""
        return self.filter(status__in=self.model.SEAT_HOLDING_STATUSES)

    def with_course_details(self):
        return self.select_related(
            'offering',
            'offering__course',
            'offering__semester',
        )


class EnrollmentManager(models.Manager.from_queryset(EnrollmentQuerySet)):
    pass


# ==============================================================================
# OFFERING QUERIES
# ==============================================================================

class CourseOfferingQuerySet(ActiveQuerySet):

    def for_semester(self, semester_id):
        return self.filter(semester_id=semester_id)

    def open_for_registration(self):
        """Active offerings of active courses in semesters taking registrations"""
        return self.filter(
            is_active=True,
            course__is_active=True,
            semester__is_registration_open=True,
        )

    def with_free_seats(self):
        return self.filter(enrolled_count__lt=models.F('max_students'))


class CourseOfferingManager(models.Manager.from_queryset(CourseOfferingQuerySet)):
    pass


# ==============================================================================
# GRADE SCALE QUERIES
# ==============================================================================

class GradeScaleBandQuerySet(ActiveQuerySet):

    def ordered(self):
        return self.order_by('min_mark', 'max_mark')


class GradeScaleBandManager(models.Manager.from_queryset(GradeScaleBandQuerySet)):
    pass
