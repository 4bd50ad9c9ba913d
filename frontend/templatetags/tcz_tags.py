from django import template
from django.utils.http import urlencode

from frontend.models import initials_for

register = template.Library()


@register.filter
def initials(name):
    return initials_for(str(name))


@register.filter
def hhmm(value):
    """Format a time as HH:MM."""
    if not value:
        return ""
    if isinstance(value, str):
        return value[:5]
    return value.strftime("%H:%M")


@register.simple_tag(takes_context=True)
def query(context, **params):
    """Current query string with ``params`` replaced; None drops a key."""
    current = context["request"].GET.copy()
    for key, value in params.items():
        if value is None or value == "":
            current.pop(key, None)
        else:
            current[key] = value
    encoded = urlencode(sorted(current.items()))
    return f"?{encoded}" if encoded else "?"
