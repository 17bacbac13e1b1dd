"""Product catalog and stock movement endpoints."""

from fastapi import APIRouter, Depends, Query, Response, status

from stockledger.api.dependencies import (
    get_add_product_use_case,
    get_catalog,
    get_ledger,
    get_register_movement_use_case,
    get_remove_product_use_case,
    get_update_product_use_case,
)
from stockledger.application.dto.requests import (
    CreateProductRequest,
    RegisterMovementRequest,
    UpdateProductRequest,
)
from stockledger.application.dto.responses import (
    ErrorResponse,
    ProductListResponse,
    ProductResponse,
    RegisterMovementResponse,
    StockMovementResponse,
)
from stockledger.application.use_cases import (
    AddProductUseCase,
    RegisterMovementUseCase,
    RemoveProductUseCase,
    UpdateProductUseCase,
)
from stockledger.core.services import MovementLedger, ProductCatalog

router = APIRouter(prefix="/api/products", tags=["products"])


@router.post(
    "",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def add_product(
    request: CreateProductRequest,
    use_case: AddProductUseCase = Depends(get_add_product_use_case),
) -> ProductResponse:
    """Add a product. Perishables need a lot number and a future expiration date."""
    product = await use_case.execute(request)
    return use_case.to_response(product)


@router.get("", response_model=ProductListResponse)
async def list_products(
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    catalog: ProductCatalog = Depends(get_catalog),
) -> ProductListResponse:
    """List tracked products ordered by SKU."""
    products = await catalog.list_products(limit=limit, offset=offset)
    return ProductListResponse(
        items=[ProductResponse.from_entity(p) for p in products],
        total=len(products),
    )


@router.get(
    "/{sku}",
    response_model=ProductResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_product(
    sku: int,
    catalog: ProductCatalog = Depends(get_catalog),
) -> ProductResponse:
    """Get a product by SKU."""
    product = await catalog.get_product(sku)
    return ProductResponse.from_entity(product)


@router.patch(
    "/{sku}",
    response_model=ProductResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def update_product(
    sku: int,
    request: UpdateProductRequest,
    use_case: UpdateProductUseCase = Depends(get_update_product_use_case),
) -> ProductResponse:
    """Update product metadata. Quantity only changes through movements."""
    product = await use_case.execute(sku, request)
    return use_case.to_response(product)


@router.delete(
    "/{sku}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
async def remove_product(
    sku: int,
    use_case: RemoveProductUseCase = Depends(get_remove_product_use_case),
) -> Response:
    """Remove a product. Its movement history is kept."""
    await use_case.execute(sku)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{sku}/movements",
    response_model=RegisterMovementResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def register_movement(
    sku: int,
    request: RegisterMovementRequest,
    use_case: RegisterMovementUseCase = Depends(get_register_movement_use_case),
) -> RegisterMovementResponse:
    """Register an INBOUND or OUTBOUND movement (server-assigned date)."""
    result = await use_case.execute(sku, request)
    return use_case.to_response(result)


@router.get("/{sku}/movements", response_model=list[StockMovementResponse])
async def get_movements(
    sku: int,
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    ledger: MovementLedger = Depends(get_ledger),
) -> list[StockMovementResponse]:
    """Movement history for a SKU, newest first."""
    movements = await ledger.movement_history(sku, limit=limit, offset=offset)
    return [StockMovementResponse.from_entity(m) for m in movements]
