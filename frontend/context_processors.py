import logging

from frontend.exceptions import BackendError

logger = logging.getLogger(__name__)


def navigation(request):
    """Expose the logged-in member to the navigation shell."""
    try:
        member = getattr(request, "member", None) or None
    except BackendError as e:
        # error pages must still render when the backend is down
        logger.warning("Could not load member for navigation: %s", e)
        member = None
    if member is None:
        return {"member": None, "is_admin": False, "is_teamster": False}
    return {
        "member": member,
        "is_admin": member.is_admin,
        "is_teamster": member.is_teamster,
    }
