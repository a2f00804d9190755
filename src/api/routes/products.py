"""Product catalog endpoints."""

from fastapi import APIRouter, Depends, status

from src.api.dependencies import find_product, get_data
from src.application.dto.requests import ProductRequest
from src.application.dto.responses import ErrorResponse, ProductResponse
from src.core.entities.product import Product
from src.core.exceptions import PersistenceError, ValidationError
from src.core.interfaces.data_service import IDataService
from src.core.services.catalog import search_products
from src.core.services.validation import check_unit_price

router = APIRouter(prefix="/api/products", tags=["products"])


def _check_product(request: ProductRequest) -> None:
    if not request.name.strip():
        raise ValidationError("name", "Product name is required", request.name)
    check_unit_price(request.unit_price)


@router.get("", response_model=list[ProductResponse])
async def list_products(
    q: str | None = None,
    data: IDataService = Depends(get_data),
) -> list[ProductResponse]:
    """List products by serial number, optionally filtered by name or code."""
    products = search_products(await data.list_user_products(), q)
    return [ProductResponse.from_entity(p) for p in products]


@router.post(
    "",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
async def create_product(
    request: ProductRequest,
    data: IDataService = Depends(get_data),
) -> ProductResponse:
    """Add a product to the catalog."""
    _check_product(request)
    result = await data.create_product(Product(**request.model_dump()))
    if not result.success or result.entity is None:
        raise PersistenceError("create_product", result.message)
    return ProductResponse.from_entity(result.entity)


@router.put(
    "/{product_id}",
    response_model=ProductResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def update_product(
    product_id: str,
    request: ProductRequest,
    data: IDataService = Depends(get_data),
) -> ProductResponse:
    """Update a product. Existing bills keep the price they were billed at."""
    _check_product(request)
    existing = await find_product(data, product_id)
    result = await data.update_product(existing.model_copy(update=request.model_dump()))
    if not result.success or result.entity is None:
        raise PersistenceError("update_product", result.message)
    return ProductResponse.from_entity(result.entity)


@router.delete(
    "/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
async def delete_product(
    product_id: str,
    data: IDataService = Depends(get_data),
) -> None:
    """Remove a product from the catalog."""
    await find_product(data, product_id)
    result = await data.delete_product(product_id)
    if not result.success:
        raise PersistenceError("delete_product", result.message)
