from fastapi import Request

from ..config import Settings


def get_settings(request: Request) -> Settings:
    """FastAPI dependency returning the app's settings."""
    return request.app.state.settings
