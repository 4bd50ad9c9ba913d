from functools import wraps

from django.shortcuts import redirect


def member_required(view_func):
    """Send visitors without a valid session to the login page."""

    @wraps(view_func)
    def _wrapped(request, *args, **kwargs):
        if not request.member:
            return redirect("login")
        return view_func(request, *args, **kwargs)

    return _wrapped


def staff_required(view_func):
    """Only administrators and teamsters; other members go back to the dashboard."""

    @wraps(view_func)
    def _wrapped(request, *args, **kwargs):
        if not request.member:
            return redirect("login")
        if not request.member.is_staff_member:
            return redirect("dashboard")
        return view_func(request, *args, **kwargs)

    return _wrapped


def anonymous_required(view_func):
    @wraps(view_func)
    def _wrapped(request, *args, **kwargs):
        if request.member:
            return redirect("dashboard")
        return view_func(request, *args, **kwargs)

    return _wrapped
