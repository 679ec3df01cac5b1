"""
Blueprints API endpoints.

List, fetch, create and extend blueprints. Store failures are translated to
HTTP errors: not found -> 404, conflict -> 400, storage fault -> 500.
"""
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from blueprint_service.api.deps import get_blueprint_store
from blueprint_service.db import schemas
from blueprint_service.db.repositories import BlueprintStore
from blueprint_service.db.results import Failure, FailureKind, Result

router = APIRouter(prefix="/api/v1/blueprints", tags=["blueprints"])

_FAILURE_STATUS = {
    FailureKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    FailureKind.CONFLICT: status.HTTP_400_BAD_REQUEST,
    FailureKind.STORAGE_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def _unwrap(result: Result):
    if isinstance(result, Failure):
        detail = result.message
        if result.kind == FailureKind.STORAGE_ERROR:
            # Storage details stay in the logs
            detail = "internal error"
        raise HTTPException(status_code=_FAILURE_STATUS[result.kind], detail=detail)
    return result.value


@router.get("", response_model=schemas.ApiResponse[List[schemas.Blueprint]])
def get_all_blueprints_endpoint(store: BlueprintStore = Depends(get_blueprint_store)):
    blueprints = _unwrap(store.get_all_blueprints())
    return schemas.ApiResponse(code=200, message="execute ok", data=blueprints)


@router.get("/{author}", response_model=schemas.ApiResponse[List[schemas.Blueprint]])
def get_blueprints_by_author_endpoint(author: str, store: BlueprintStore = Depends(get_blueprint_store)):
    blueprints = _unwrap(store.get_blueprints_by_author(author))
    return schemas.ApiResponse(code=200, message="execute ok", data=blueprints)


@router.get("/{author}/{bpname}", response_model=schemas.ApiResponse[schemas.Blueprint])
def get_blueprint_endpoint(author: str, bpname: str, store: BlueprintStore = Depends(get_blueprint_store)):
    blueprint = _unwrap(store.get_blueprint(author, bpname))
    return schemas.ApiResponse(code=200, message="execute ok", data=blueprint)


@router.post("", response_model=schemas.ApiResponse[schemas.Blueprint], status_code=status.HTTP_201_CREATED)
def create_blueprint_endpoint(
    blueprint: schemas.BlueprintCreate,
    store: BlueprintStore = Depends(get_blueprint_store),
):
    created = _unwrap(store.save_blueprint(blueprint))
    return schemas.ApiResponse(code=201, message="created", data=created)


@router.put(
    "/{author}/{bpname}/points",
    response_model=schemas.ApiResponse[schemas.Blueprint],
    status_code=status.HTTP_202_ACCEPTED,
)
def append_point_endpoint(
    author: str,
    bpname: str,
    point: schemas.PointCreate,
    store: BlueprintStore = Depends(get_blueprint_store),
):
    _unwrap(store.append_point(author, bpname, point.x, point.y))
    updated = _unwrap(store.get_blueprint(author, bpname))
    return schemas.ApiResponse(code=202, message="accepted", data=updated)


@router.delete("/{author}/{bpname}", response_model=schemas.ApiResponse)
def delete_blueprint_endpoint(author: str, bpname: str, store: BlueprintStore = Depends(get_blueprint_store)):
    _unwrap(store.delete_blueprint(author, bpname))
    return schemas.ApiResponse(code=200, message="deleted", data=None)
