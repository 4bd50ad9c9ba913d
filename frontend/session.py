"""Bearer token storage in the Django session."""

from django.conf import settings

from frontend.api.client import BackendClient

TOKEN_KEY = "api_token"


def get_token(request):
    return request.session.get(TOKEN_KEY)


def set_token(request, token):
    # new login, new session id
    request.session.cycle_key()
    request.session[TOKEN_KEY] = token


def clear_token(request):
    request.session.flush()


def client_for(request):
    timeout = (BackendClient.DEFAULT_TIMEOUT[0], settings.TCZ_API_TIMEOUT)
    return BackendClient(settings.TCZ_API_URL, token=get_token(request), timeout=timeout)
