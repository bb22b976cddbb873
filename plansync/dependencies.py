"""FastAPI dependencies."""
from fastapi import Request

from plansync.container import Container


def get_container(request: Request) -> Container:
    """Dependency to get the application's component container."""
    return request.app.state.container
