"""Customer endpoints."""

from fastapi import APIRouter, Depends, status

from src.api.dependencies import find_customer, get_data
from src.application.dto.requests import CustomerRequest
from src.application.dto.responses import CustomerResponse, ErrorResponse
from src.core.entities.customer import Customer
from src.core.exceptions import PersistenceError
from src.core.interfaces.data_service import IDataService
from src.core.services.catalog import search_customers
from src.core.services.validation import check_customer_fields

router = APIRouter(prefix="/api/customers", tags=["customers"])


@router.get("", response_model=list[CustomerResponse])
async def list_customers(
    q: str | None = None,
    data: IDataService = Depends(get_data),
) -> list[CustomerResponse]:
    """List customers, optionally filtered by name or phone."""
    customers = search_customers(await data.list_user_customers(), q)
    return [CustomerResponse.from_entity(c) for c in customers]


@router.post(
    "",
    response_model=CustomerResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
async def create_customer(
    request: CustomerRequest,
    data: IDataService = Depends(get_data),
) -> CustomerResponse:
    """Add a customer."""
    check_customer_fields(request.name, request.phone, request.email)
    result = await data.create_customer(Customer(**request.model_dump()))
    if not result.success or result.entity is None:
        raise PersistenceError("create_customer", result.message)
    return CustomerResponse.from_entity(result.entity)


@router.put(
    "/{customer_id}",
    response_model=CustomerResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def update_customer(
    customer_id: str,
    request: CustomerRequest,
    data: IDataService = Depends(get_data),
) -> CustomerResponse:
    """Replace a customer's details. Bills already saved keep their snapshot."""
    check_customer_fields(request.name, request.phone, request.email)
    existing = await find_customer(data, customer_id)
    updated = existing.model_copy(update=request.model_dump())
    result = await data.update_customer(updated)
    if not result.success or result.entity is None:
        raise PersistenceError("update_customer", result.message)
    return CustomerResponse.from_entity(result.entity)


@router.delete(
    "/{customer_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
async def delete_customer(
    customer_id: str,
    data: IDataService = Depends(get_data),
) -> None:
    """Delete a customer."""
    await find_customer(data, customer_id)
    result = await data.delete_customer(customer_id)
    if not result.success:
        raise PersistenceError("delete_customer", result.message)
