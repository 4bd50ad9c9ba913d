from frontend.api.client import BackendClient

__all__ = ["BackendClient"]
