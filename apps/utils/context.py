# utils/context.py

"""
Thread-local request context for audit fields and log records.

The middleware stores the acting user and client IP here at the start of a
request; ``BaseModel.save()`` stamps them on rows and
``RequestContextFilter`` adds them to every log line. Management commands
and background jobs use ``RequestContext`` to do the same.
"""

from threading import local
import logging

logger = logging.getLogger(__name__)

_thread_locals = local()


def set_request_context(user=None, ip_address=None, user_agent=None,
                        request_path=None, request=None):
    """
    Set the current request context for this thread.

    Args:
        user: The authenticated user (or None)
        ip_address: Client IP address
        user_agent: Browser user agent string
        request_path: The request path/URL
        request: The full request object (alternative to individual params)
    """
    if request is not None:
        user = getattr(request, 'user', None)
        ip_address = get_client_ip(request)
        user_agent = request.META.get('HTTP_USER_AGENT', '')
        request_path = getattr(request, 'path', '')

    if user is not None and not getattr(user, 'is_authenticated', False):
        user = None

    _thread_locals.request_context = {
        'user': user,
        'ip_address': ip_address,
        'user_agent': user_agent or '',
        'request_path': request_path or '',
    }

    logger.debug(f"Set request context: user={user}, ip={ip_address}")


def get_request_context():
    """
    Get the current request context for this thread.

    Returns:
        dict or None when no context is set.
    """
    return getattr(_thread_locals, 'request_context', None)


def clear_request_context():
    """Clear the request context for this thread."""
    if hasattr(_thread_locals, 'request_context'):
        delattr(_thread_locals, 'request_context')
        logger.debug("Cleared request context")


def get_client_ip(request):
    """
    Extract the client's real IP address from the request.

    Handles X-Forwarded-For header for proxied requests.
    """
    x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
    if x_forwarded_for:
        # first entry is the originating client
        return x_forwarded_for.split(',')[0].strip()
    return request.META.get('REMOTE_ADDR')


# ============================================================================
# CONTEXT MANAGER
# ============================================================================

class RequestContext:
    """
    Context manager for temporarily setting request context.

    Useful for management commands that need to set audit context.

    Example:
        with RequestContext(user=admin, ip_address='127.0.0.1'):
            EnrollmentLifecycleManager.assign_grade(enrollment_id, 75)
    """

    def __init__(self, user=None, ip_address=None, user_agent=None,
                 request_path=None):
        self.context = {
            'user': user,
            'ip_address': ip_address,
            'user_agent': user_agent or '',
            'request_path': request_path or '',
        }
        self.previous_context = None

    def __enter__(self):
        self.previous_context = get_request_context()
        _thread_locals.request_context = self.context
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.previous_context:
            _thread_locals.request_context = self.previous_context
        else:
            clear_request_context()


# ============================================================================
# LOGGING
# ============================================================================

class RequestContextFilter(logging.Filter):
    """
    Adds ``user_id`` and ``ip`` attributes to log records.

    Both fall back to ``-`` outside a request so the formatter never fails.
    """

    def filter(self, record):
        context = get_request_context() or {}
        user = context.get('user')
        record.user_id = str(user.pk) if user is not None else '-'
        record.ip = context.get('ip_address') or '-'
        return True
