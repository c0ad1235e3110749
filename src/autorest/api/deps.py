"""FastAPI dependency injection.

Provides the shared ResourceDispatcher built by the application factory.
"""

from typing import Annotated

from fastapi import Depends, Request

from autorest.api.dispatcher import ResourceDispatcher


def get_dispatcher(request: Request) -> ResourceDispatcher:
    """Get the dispatcher stored on the application state."""
    dispatcher: ResourceDispatcher = request.app.state.dispatcher
    return dispatcher


# Type aliases for dependency injection
DispatcherDep = Annotated[ResourceDispatcher, Depends(get_dispatcher)]
