"""
Shared FastAPI dependencies.
"""
from fastapi import HTTPException, Request, status

from blueprint_service.db.repositories import BlueprintStore


def get_blueprint_store(request: Request) -> BlueprintStore:
    """Return the store the application was assembled with."""
    store = getattr(request.app.state, "blueprint_store", None)
    if store is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Blueprint store is not initialized",
        )
    return store
