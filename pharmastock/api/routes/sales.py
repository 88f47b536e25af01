"""Sale endpoints."""

from fastapi import APIRouter, Depends, Query, status

from pharmastock.api.dependencies import (
    get_actor,
    get_get_sale_use_case,
    get_inventory_overview_use_case,
    get_list_sales_use_case,
    get_sales_report_use_case,
    get_sell_cart_use_case,
    get_sell_medicine_use_case,
)
from pharmastock.application.dto.requests import ListSalesRequest, SellRequest
from pharmastock.application.dto.responses import (
    ErrorResponse,
    InventoryOverviewResponse,
    SaleListResponse,
    SaleRecordResponse,
    SalesReportResponse,
    SellResponse,
)
from pharmastock.application.use_cases import (
    GetSaleUseCase,
    InventoryOverviewUseCase,
    ListSalesUseCase,
    SalesReportUseCase,
    SellCartUseCase,
    SellMedicineUseCase,
)
from pharmastock.core.entities.audit import Actor
from pharmastock.core.entities.sale import CartLine
from pharmastock.core.services.expiry import SalesRange

router = APIRouter(prefix="/api/sales", tags=["sales"])


@router.post(
    "",
    response_model=SellResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def sell(
    request: SellRequest,
    actor: Actor = Depends(get_actor),
    sell_one: SellMedicineUseCase = Depends(get_sell_medicine_use_case),
    sell_cart: SellCartUseCase = Depends(get_sell_cart_use_case),
) -> SellResponse:
    """
    Sell from the dispenser.

    A single item is a plain sale; several items form a cart that succeeds
    or fails as a whole.
    """
    if len(request.items) == 1:
        item = request.items[0]
        result = await sell_one.execute(item.medicine_id, item.quantity, actor)
        return sell_one.to_response(result)

    cart = [CartLine(medicine_id=i.medicine_id, quantity=i.quantity) for i in request.items]
    results = await sell_cart.execute(cart, actor)
    return sell_cart.to_response(results)


@router.get("/overview", response_model=InventoryOverviewResponse)
async def inventory_overview(
    use_case: InventoryOverviewUseCase = Depends(get_inventory_overview_use_case),
) -> InventoryOverviewResponse:
    """Status counts, top sellers and the six-month expiry trend for the dashboard."""
    overview = await use_case.execute()
    return use_case.to_response(overview)


@router.get(
    "/report", response_model=SalesReportResponse, responses={400: {"model": ErrorResponse}}
)
async def sales_report(
    sales_range: SalesRange | None = Query(default=None, alias="range"),
    use_case: SalesReportUseCase = Depends(get_sales_report_use_case),
) -> SalesReportResponse:
    """Units, revenue and profit with a daily trend and every sold line."""
    report = await use_case.execute(sales_range)
    return use_case.to_response(report)


@router.get("", response_model=SaleListResponse, responses={400: {"model": ErrorResponse}})
async def list_sales(
    sales_range: SalesRange | None = Query(default=None, alias="range"),
    medicine_id: int | None = Query(default=None),
    page: int = Query(default=1),
    limit: int | None = Query(default=None),
    use_case: ListSalesUseCase = Depends(get_list_sales_use_case),
) -> SaleListResponse:
    """Sales history, newest first."""
    result = await use_case.execute(
        ListSalesRequest(range=sales_range, medicine_id=medicine_id, page=page, limit=limit)
    )
    return use_case.to_response(result)


@router.get(
    "/{sale_id}",
    response_model=SaleRecordResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_sale(
    sale_id: int,
    use_case: GetSaleUseCase = Depends(get_get_sale_use_case),
) -> SaleRecordResponse:
    record = await use_case.execute(sale_id)
    return use_case.to_response(record)
