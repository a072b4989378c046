# dependencies.py
from fastapi import Request

from storage import TaskStore


def get_store(request: Request) -> TaskStore:
    """
    Returns the task store attached to the running application.
    Routes depend on this instead of a module-level store, so tests and other backends can swap it in.
    """
    return request.app.state.store
