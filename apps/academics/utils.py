# academics/utils.py

"""
Semester, offering and prerequisite helpers used by the enrollment engine.
"""

import logging

logger = logging.getLogger(__name__)


# =============================================================================
# SEMESTER UTILITIES
# =============================================================================

def get_current_semester():
    """
    Get the current semester.

    Returns:
        Semester or None: Semester flagged as current, or the one whose dates
        contain today
    """
    from .models import Semester
    from core.utils import get_today

    try:
        return Semester.objects.get(is_current=True)
    except Semester.DoesNotExist:
        today = get_today()
        return Semester.objects.filter(
            start_date__lte=today,
            end_date__gte=today,
        ).first()
    except Semester.MultipleObjectsReturned:
        logger.warning("Multiple semesters marked as current")
        return Semester.objects.filter(is_current=True).order_by(
            '-academic_year', '-term_order'
        ).first()


def get_semester_by_name(name):
    from .models import Semester
    return Semester.objects.filter(name__iexact=name.strip()).first()


# =============================================================================
# OFFERING UTILITIES
# =============================================================================

def get_offering_capacity_summary(offering):
    """
    Get capacity summary for a course offering.

    ``seats_taken`` is the authoritative counter (in-progress, completed and
    failed enrollments); ``in_progress`` is the current teaching load.

    Returns:
        dict: Capacity information
    """
    seats_taken = offering.enrolled_count
    max_students = offering.max_students
    in_progress = offering.enrollments.in_progress().count()

    return {
        'seats_taken': seats_taken,
        'in_progress': in_progress,
        'max_students': max_students,
        'available_capacity': offering.get_available_capacity(),
        'occupancy_percentage': offering.get_occupancy_percentage(),
        'is_full': seats_taken >= max_students,
        'has_capacity': seats_taken < max_students,
    }


# =============================================================================
# PREREQUISITE UTILITIES
# =============================================================================

def validate_course_prerequisites(course, student_id, completed_marks=None):
    """
    Check if a student has completed the required prerequisites for a course.

    A prerequisite is met by a completed enrollment in the prerequisite
    course whose mark reaches the prerequisite's ``min_mark`` when one is set.

    Args:
        course (Course): The course being enrolled in
        student_id: The student's primary key
        completed_marks (dict): Optional result of get_completed_course_marks()
            when checking many courses for the same student

    Returns:
        tuple: (is_valid, missing_prerequisites) where the list holds the
        unmet prerequisite Course objects
    """
    links = [link for link in course.prerequisite_links.all() if link.is_required]
    if not links:
        return (True, [])

    if completed_marks is None:
        completed_marks = get_completed_course_marks(
            student_id, course_ids=[link.prerequisite_id for link in links]
        )

    missing = []
    for link in links:
        best = completed_marks.get(link.prerequisite_id)
        if best is None:
            missing.append(link.prerequisite)
        elif link.min_mark is not None and best < link.min_mark:
            missing.append(link.prerequisite)

    if missing:
        return (False, missing)

    return (True, [])


def get_completed_course_marks(student_id, course_ids=None):
    """
    Best mark per course among a student's completed enrollments.

    Returns:
        dict: {course_id: Decimal}
    """
    from enrollment.models import Enrollment

    queryset = Enrollment.objects.for_student(student_id).completed().filter(mark__isnull=False)
    if course_ids is not None:
        queryset = queryset.filter(offering__course_id__in=course_ids)

    best_marks = {}
    for course_id, mark in queryset.values_list('offering__course_id', 'mark'):
        if course_id not in best_marks or mark > best_marks[course_id]:
            best_marks[course_id] = mark
    return best_marks
