# core/api.py

"""
Collaborator boundary of the enrollment and grading engine.

The host application calls these functions instead of the services
directly. Each returns an ``OperationResult`` and never raises: domain
errors become an ``error_kind`` (the error's code), rejected input becomes
``validation_error``, lock and busy timeouts become the retryable
``timeout`` kind, and anything unexpected is logged and reported as
``internal_error``.

Example:
    >>> result = api.enroll(student_id, offering_id)
    >>> if not result.ok and result.error_kind == 'not_eligible':
    ...     show(result.reasons)
"""

from dataclasses import dataclass, field
from typing import Any, Optional
from django.core.exceptions import ValidationError
from django.db import OperationalError
from core.exceptions import EngineError, TransientError
import logging

logger = logging.getLogger(__name__)

INTERNAL_ERROR = 'internal_error'
VALIDATION_ERROR = 'validation_error'


# SQLSTATEs for lock_timeout, deadlock, serialization failure and
# statement_timeout on PostgreSQL
TRANSIENT_SQLSTATES = {'55P03', '40P01', '40001', '57014'}

# SQLite reports busy timeouts only through the message
TRANSIENT_MESSAGES = ('database is locked', 'database table is locked')


@dataclass
class OperationResult:
    ok: bool
    value: Any = None
    error_kind: Optional[str] = None
    message: str = ''
    reasons: list = field(default_factory=list)
    retryable: bool = False

    @classmethod
    def success(cls, value):
        return cls(ok=True, value=value)

    @classmethod
    def from_error(cls, error):
        return cls(
            ok=False,
            error_kind=error.code,
            message=error.message,
            reasons=list(error.reasons),
            retryable=error.retryable,
        )

    @classmethod
    def from_validation_error(cls, error):
        messages = list(error.messages)
        return cls(
            ok=False,
            error_kind=VALIDATION_ERROR,
            message='; '.join(messages),
            reasons=messages,
        )

    @classmethod
    def internal_error(cls):
        return cls(ok=False, error_kind=INTERNAL_ERROR, message="Internal error")


def is_transient_database_error(error):
    """True for lock and busy timeouts, which are safe to retry"""
    cause = error.__cause__
    sqlstate = getattr(cause, 'sqlstate', None) or getattr(cause, 'pgcode', None)
    if sqlstate in TRANSIENT_SQLSTATES:
        return True
    message = str(error).lower()
    return any(text in message for text in TRANSIENT_MESSAGES)


def _run(operation, func, *args, **kwargs):
    try:
        return OperationResult.success(func(*args, **kwargs))
    except EngineError as e:
        logger.info(f"{operation} failed ({e.code}): {e.message}")
        return OperationResult.from_error(e)
    except ValidationError as e:
        logger.info(f"{operation} rejected invalid input: {e.messages}")
        return OperationResult.from_validation_error(e)
    except OperationalError as e:
        if not is_transient_database_error(e):
            logger.exception(f"Database error in {operation}")
            return OperationResult.internal_error()
        logger.warning(f"{operation} hit a database lock timeout: {e}")
        return OperationResult.from_error(
            TransientError("The record store is busy; retry the request")
        )
    except Exception:
        logger.exception(f"Unexpected error in {operation}")
        return OperationResult.internal_error()


# =============================================================================
# ELIGIBILITY
# =============================================================================

def check_eligibility(student_id, offering_id):
    """Value: EligibilityResult (an ineligible student is still ``ok``)"""
    from enrollment.eligibility import EligibilityEvaluator
    return _run('check_eligibility', EligibilityEvaluator.check_eligibility, student_id, offering_id)


def list_eligible_offerings(student_id, semester_id):
    """Value: list of CourseOffering"""
    from enrollment.eligibility import EligibilityEvaluator
    return _run(
        'list_eligible_offerings', EligibilityEvaluator.list_eligible_offerings, student_id, semester_id
    )


# =============================================================================
# LIFECYCLE
# =============================================================================

def enroll(student_id, offering_id):
    """Value: the new Enrollment"""
    from enrollment.services import EnrollmentLifecycleManager
    return _run('enroll', EnrollmentLifecycleManager.enroll, student_id, offering_id)


def withdraw(enrollment_id, reason=''):
    """Value: the withdrawn Enrollment"""
    from enrollment.services import EnrollmentLifecycleManager
    return _run('withdraw', EnrollmentLifecycleManager.withdraw, enrollment_id, reason)


def assign_grade(enrollment_id, mark):
    """Value: the graded Enrollment"""
    from enrollment.services import EnrollmentLifecycleManager
    return _run('assign_grade', EnrollmentLifecycleManager.assign_grade, enrollment_id, mark)


def adjust_capacity(offering_id, max_students):
    """Value: the updated CourseOffering"""
    from enrollment.services import EnrollmentLifecycleManager
    return _run('adjust_capacity', EnrollmentLifecycleManager.adjust_capacity, offering_id, max_students)


# =============================================================================
# GRADING
# =============================================================================

def calculate_gpa(student_id, semester_id=None):
    """Value: Decimal GPA"""
    from grading.gpa import GPACalculator
    return _run('calculate_gpa', GPACalculator.calculate_gpa, student_id, semester_id)


def build_transcript(student_id):
    """Value: Transcript"""
    from grading.transcripts import TranscriptBuilder
    return _run('build_transcript', TranscriptBuilder.build_transcript, student_id)


def list_active_grade_scales():
    """Value: active GradeScaleBand rows ordered by min_mark"""
    from grading.scale import get_active_grade_scale
    return _run('list_active_grade_scales', get_active_grade_scale)
