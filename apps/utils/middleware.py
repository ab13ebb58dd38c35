# utils/middleware.py

import logging
from utils.context import set_request_context, clear_request_context

logger = logging.getLogger(__name__)


class AuditContextMiddleware:
    """
    Captures the acting user and client IP for the duration of a request.

    The identity itself is resolved upstream by the host application's
    authentication middleware; requests without a user are recorded as
    anonymous.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        set_request_context(request=request)

        try:
            response = self.get_response(request)
        finally:
            clear_request_context()

        return response
