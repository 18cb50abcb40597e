"""
FastAPI Endpoints for the Link Service

This module defines the /link REST endpoints with minimal logic.
Endpoints only handle:
- Request parsing (Pydantic models)
- Error handling and HTTP responses
- Delegating to the link service

Error mapping:
- ValidationError -> 400 with {"field", "message"}
- ConflictError   -> 409
- StorageError    -> 500 (cause is logged, the process keeps serving)
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from shortlinks.api.schemas import (
    DeleteResponse,
    LinkResponse,
    UrlRequest,
    ValidationErrorResponse,
)
from shortlinks.core.exceptions import ConflictError, StorageError, ValidationError
from shortlinks.db.session import get_session
from shortlinks.services.link_service import LinkService
from shortlinks.services.link_store import LinkStore, SQLLinkStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/link")


def get_link_store(session: AsyncSession = Depends(get_session)) -> LinkStore:
    """Per-request store over the request's database session."""
    return SQLLinkStore(session)


def get_link_service(
    request: Request,
    store: LinkStore = Depends(get_link_store)
) -> LinkService:
    """Per-request link service configured from app.state.settings."""
    return LinkService.from_settings(store, request.app.state.settings)


def _storage_failure(action: str, error: StorageError) -> HTTPException:
    logger.error(f"{action} failed: {error} (cause: {error.original_error!r})")
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"Failed to {action}"
    )


@router.get(
    "",
    response_model=List[LinkResponse],
    summary="List links",
    description="Returns every stored link"
)
async def get_links(service: LinkService = Depends(get_link_service)) -> List[LinkResponse]:
    try:
        links = await service.get_all_links()
    except StorageError as e:
        raise _storage_failure("list links", e)

    logger.debug(f"got: {len(links)} links")
    return [LinkResponse.model_validate(link) for link in links]


@router.get(
    "/{code}",
    response_model=Optional[LinkResponse],
    summary="Get link by short code",
    description="Returns the link whose short code contains the given code, or null"
)
async def get_link_by_code(
    code: str,
    service: LinkService = Depends(get_link_service)
) -> Optional[LinkResponse]:
    try:
        link = await service.get_link(code)
    except StorageError as e:
        raise _storage_failure("get link", e)

    logger.debug(f"got: {link}")
    if link is None:
        return None
    return LinkResponse.model_validate(link)


@router.post(
    "",
    response_model=LinkResponse,
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ValidationErrorResponse},
        status.HTTP_409_CONFLICT: {"description": "No free short code was found"},
    },
    summary="Create a short link",
    description="Validates the URL and stores it under a newly generated short code"
)
async def create_link(
    body: UrlRequest,
    service: LinkService = Depends(get_link_service)
):
    try:
        link = await service.create_link(body.url)
    except ValidationError as e:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=e.to_dict()
        )
    except ConflictError as e:
        logger.error(f"create link failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Could not allocate a unique short code, try again"
        )
    except StorageError as e:
        raise _storage_failure("create link", e)

    logger.debug(f"created: {link}")
    return LinkResponse.model_validate(link)


@router.delete(
    "/{link_id}",
    response_model=DeleteResponse,
    summary="Delete a link",
    description="Deletes the link with the given id; deleted is 0 if none existed"
)
async def delete_link(
    link_id: int,
    service: LinkService = Depends(get_link_service)
) -> DeleteResponse:
    try:
        outcome = await service.delete_link(link_id)
    except StorageError as e:
        raise _storage_failure("delete link", e)

    return DeleteResponse(deleted=outcome.rows_affected)
