# core/exceptions.py

"""
Domain errors raised by the enrollment and grading engine.

Every error carries a stable ``code`` (the error kind reported by
``core.api``) and a ``retryable`` flag. Business-rule failures are never
retryable; only lock and busy timeouts are.
"""


class EngineError(Exception):
    """Base class for all engine errors"""

    code = 'engine_error'
    retryable = False

    def __init__(self, message='', reasons=None):
        super().__init__(message)
        self.message = message
        self.reasons = list(reasons or [])

    def __str__(self):
        return self.message


class NotFoundError(EngineError):
    code = 'not_found'


class InvalidTransitionError(EngineError):
    """Enrollment is not in the state the operation requires"""
    code = 'invalid_transition'


class CapacityExceededError(EngineError):
    """No free seat in the offering, or capacity below seats already taken"""
    code = 'capacity_exceeded'


class InvalidMarkError(EngineError):
    code = 'invalid_mark'


class OutOfRangeError(InvalidMarkError):
    """Mark is numeric but outside [0, 100]"""


class ConfigurationError(EngineError):
    """Grading scale or institution policy is malformed"""
    code = 'configuration_error'


class DuplicateEnrollmentError(EngineError):
    code = 'duplicate_enrollment'


class EligibilityError(EngineError):
    """Student fails one or more enrollment rules; ``reasons`` lists them all"""
    code = 'not_eligible'


class TransientError(EngineError):
    """Lock or busy timeout in the record store; safe to retry"""
    code = 'timeout'
    retryable = True
