from uuid import UUID
from fastapi import APIRouter, Depends, Query, Request, Response, status
from fastapi.responses import JSONResponse
from dependency_injector.wiring import Provide, inject

from src.crm.containers import Container
from src.crm.core.services.client_service import ClientService
from src.crm_client.schemas import (
    ClientListResponse,
    ClientResponse,
    CreateClientRequest,
    MessageResponse,
    UpdateClientRequest,
    ValidationErrorResponse,
)
from src.crm.api.mappers import to_client_list_response, to_client_response
from src.shared.exceptions import EntityNotFound, ConflictingEntityFound, ValidationFailed
from src.crm.logging import get_logger

router = APIRouter(prefix="/clients", tags=["clients"])
logger = get_logger(__name__)


def _message(status_code: int, error: Exception) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": str(error)})


def _validation_errors(error: ValidationFailed) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"errors": error.as_dict()})


@router.get("", response_model=ClientListResponse)
@inject
async def list_clients(
    query: str | None = Query(None, description="Search first/last name, email, phone or company"),
    page: int = Query(1),
    page_size: int = Query(10, alias="pageSize"),
    sort: str = Query("lastName", description="firstName, lastName, email, company or createdAt"),
    direction: str = Query("asc", alias="dir"),
    is_active: bool | None = Query(None, alias="isActive"),
    service: ClientService = Depends(Provide[Container.client_service]),
) -> ClientListResponse:
    """List clients with search, sort and pagination."""
    client_page = await service.list_clients(
        term=query,
        is_active=is_active,
        sort=sort,
        direction=direction,
        page=page,
        page_size=page_size,
    )
    return to_client_list_response(client_page)


@router.get(
    "/{client_id}",
    response_model=ClientResponse,
    responses={404: {"model": MessageResponse}},
)
@inject
async def get_client(
    client_id: UUID,
    service: ClientService = Depends(Provide[Container.client_service]),
):
    """Get a client by ID."""
    try:
        client = await service.get_client(client_id)
    except EntityNotFound as e:
        logger.info(f"Client not found: {e}")
        return _message(status.HTTP_404_NOT_FOUND, e)
    return to_client_response(client)


@router.post(
    "",
    response_model=ClientResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ValidationErrorResponse}, 409: {"model": MessageResponse}},
)
@inject
async def create_client(
    request: CreateClientRequest,
    http_request: Request,
    response: Response,
    service: ClientService = Depends(Provide[Container.client_service]),
):
    """
    Create a new client.

    The new contact is synced to Loops.so in the background; the sync never
    affects this response.
    """
    try:
        client = await service.create_client(request)
    except ValidationFailed as e:
        logger.info(f"Rejected client payload: {e.as_dict()}")
        return _validation_errors(e)
    except ConflictingEntityFound as e:
        logger.warning(f"Failed to create client: {e}")
        return _message(status.HTTP_409_CONFLICT, e)

    response.headers["Location"] = http_request.app.url_path_for("get_client", client_id=str(client.id))
    return to_client_response(client)


@router.put(
    "/{client_id}",
    response_model=ClientResponse,
    responses={
        400: {"model": ValidationErrorResponse},
        404: {"model": MessageResponse},
        409: {"model": MessageResponse},
    },
)
@inject
async def update_client(
    client_id: UUID,
    request: UpdateClientRequest,
    service: ClientService = Depends(Provide[Container.client_service]),
):
    """Replace all mutable fields of a client."""
    try:
        client = await service.update_client(client_id, request)
    except ValidationFailed as e:
        logger.info(f"Rejected client payload: {e.as_dict()}")
        return _validation_errors(e)
    except EntityNotFound as e:
        logger.info(f"Client not found: {e}")
        return _message(status.HTTP_404_NOT_FOUND, e)
    except ConflictingEntityFound as e:
        logger.warning(f"Failed to update client {client_id}: {e}")
        return _message(status.HTTP_409_CONFLICT, e)
    return to_client_response(client)


@router.delete(
    "/{client_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={404: {"model": MessageResponse}},
)
@inject
async def delete_client(
    client_id: UUID,
    service: ClientService = Depends(Provide[Container.client_service]),
):
    """Delete a client permanently."""
    try:
        await service.delete_client(client_id)
    except EntityNotFound as e:
        logger.info(f"Client not found: {e}")
        return _message(status.HTTP_404_NOT_FOUND, e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
