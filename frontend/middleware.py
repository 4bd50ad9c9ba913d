import logging

from django.contrib import messages
from django.shortcuts import redirect, render
from django.utils.functional import SimpleLazyObject

from frontend.api import members as members_api
from frontend.exceptions import APIForbiddenError, APIResponseError, BackendError, SessionExpiredError
from frontend.session import clear_token, client_for, get_token

logger = logging.getLogger(__name__)


def load_member(request):
    """Resolve the logged-in member from the stored token, or None."""
    if not get_token(request):
        return None
    try:
        return members_api.get_profile(request.api)
    except APIResponseError as e:
        if e.status_code != 401:
            raise
        logger.info("Stored token rejected, clearing session")
        clear_token(request)
        return None


class CurrentMemberMiddleware:
    """Attach ``request.api`` and a lazily loaded ``request.member``."""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request.api = SimpleLazyObject(lambda: client_for(request))
        request.member = SimpleLazyObject(lambda: load_member(request))
        return self.get_response(request)


class BackendErrorMiddleware:
    """Turn backend failures that escape a view into pages."""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        return self.get_response(request)

    def process_exception(self, request, exception):
        if isinstance(exception, SessionExpiredError):
            # session expired during use
            clear_token(request)
            messages.info(request, "Deine Sitzung ist abgelaufen. Bitte melde dich erneut an.")
            return redirect("login")
        if isinstance(exception, APIForbiddenError):
            return render(request, "frontend/errors/403.html", status=403)
        if isinstance(exception, BackendError):
            logger.error("Backend failure on %s: %s", request.path, exception, exc_info=exception)
            return render(request, "frontend/errors/500.html", status=500)
        return None
