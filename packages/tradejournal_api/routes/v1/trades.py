"""
Trade Journal API Routes
"""
from fastapi import APIRouter, Query, Request, status
from fastapi.responses import Response

from tradejournal_api.dependencies import APIKey, ActiveAccount, TradeRepo
from tradejournal_api.middleware.rate_limiter import limiter, IMPORT_LIMIT
from tradejournal_api.schemas.base import APIResponse, PaginatedResponse
from tradejournal_api.schemas.trades import (
    TradeRecord,
    TradeCreateRequest,
    TradeUpdateRequest,
    WithdrawalRequest,
    ImportResult,
)
from tradejournal_core.errors import InvalidInputError
from tradejournal_core.services.csv_interchange import (
    generate_csv,
    parse_csv,
    rows_to_trade_fields,
    trades_to_rows,
)
from tradejournal_core.utils import get_logger

logger = get_logger("api.trades")

router = APIRouter(prefix="/trades", tags=["Trades"])

EXPORT_FILENAME = "trades.csv"


@router.get("", response_model=APIResponse[PaginatedResponse[TradeRecord]])
async def list_trades(
    api_key: APIKey,
    account: ActiveAccount,
    trade_repo: TradeRepo,
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
):
    """
    List trades of the active account, newest first
    """
    trades = trade_repo.list_for_account(account.id, descending=True)
    total = len(trades)
    
    # Paginate
    start_idx = (page - 1) * page_size
    end_idx = start_idx + page_size
    items = trades[start_idx:end_idx]
    
    return APIResponse(
        data=PaginatedResponse.create(
            items=[TradeRecord.model_validate(t) for t in items],
            total=total,
            page=page,
            page_size=page_size
        )
    )


@router.post("", response_model=APIResponse[TradeRecord], status_code=status.HTTP_201_CREATED)
async def create_trade(
    request: TradeCreateRequest,
    api_key: APIKey,
    account: ActiveAccount,
    trade_repo: TradeRepo,
):
    """
    Log a manual trade on the active account
    """
    trade = trade_repo.create(account_id=account.id, **request.model_dump())
    return APIResponse(data=TradeRecord.model_validate(trade), message="Trade logged")


@router.post("/withdrawals", response_model=APIResponse[TradeRecord], status_code=status.HTTP_201_CREATED)
async def add_withdrawal(
    request: WithdrawalRequest,
    api_key: APIKey,
    account: ActiveAccount,
    trade_repo: TradeRepo,
):
    """
    Record a cash withdrawal (reduces the balance, excluded from trade stats)
    """
    trade = trade_repo.add_withdrawal(account.id, request.amount)
    return APIResponse(data=TradeRecord.model_validate(trade), message="Withdrawal recorded")


async def _read_csv_upload(request: Request) -> str:
    """Read CSV text from a multipart 'file' field or a raw body"""
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("multipart/form-data"):
        form = await request.form()
        upload = form.get("file")
        if upload is None or isinstance(upload, str):
            raise InvalidInputError("Multipart upload requires a 'file' field")
        raw = await upload.read()
    else:
        raw = await request.body()
    
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise InvalidInputError("CSV file must be UTF-8 encoded") from e


@router.post("/import", response_model=APIResponse[ImportResult], status_code=status.HTTP_201_CREATED)
@limiter.limit(IMPORT_LIMIT)
async def import_trades(
    request: Request,
    api_key: APIKey,
    account: ActiveAccount,
    trade_repo: TradeRepo,
):
    """
    Import trades from CSV into the active account
    
    Accepts a `text/csv` body or a multipart upload with a `file` field.
    Either every row is imported or none is.
    """
    text = await _read_csv_upload(request)
    rows = parse_csv(text)
    if not rows:
        raise InvalidInputError("CSV file contains no trades")
    
    fields = rows_to_trade_fields(rows)
    trades = trade_repo.bulk_create(account.id, fields)
    logger.info(f"📥 CSV import: {len(trades)} rows into account {account.id}")
    
    return APIResponse(
        data=ImportResult(
            imported=len(trades),
            trades=[TradeRecord.model_validate(t) for t in trades],
        ),
        message=f"Imported {len(trades)} trades",
    )


@router.get("/export")
async def export_trades(
    api_key: APIKey,
    account: ActiveAccount,
    trade_repo: TradeRepo,
):
    """
    Download the active account's trades as CSV (withdrawals excluded)
    """
    trades = trade_repo.list_for_account(account.id, descending=False)
    content = generate_csv(trades_to_rows(trades), line_separator="\n")
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{EXPORT_FILENAME}"'},
    )


@router.get("/template")
async def import_template(api_key: APIKey):
    """
    Header-only CSV showing the import/export column layout
    """
    return Response(
        content=generate_csv([], line_separator="\n") + "\n",
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="template.csv"'},
    )


@router.get("/{trade_id}", response_model=APIResponse[TradeRecord])
async def get_trade(
    trade_id: int,
    api_key: APIKey,
    account: ActiveAccount,
    trade_repo: TradeRepo,
):
    """
    Get a single trade of the active account
    """
    trade = trade_repo.get_for_account(trade_id, account.id)
    return APIResponse(data=TradeRecord.model_validate(trade))


@router.put("/{trade_id}", response_model=APIResponse[TradeRecord])
async def update_trade(
    trade_id: int,
    request: TradeUpdateRequest,
    api_key: APIKey,
    account: ActiveAccount,
    trade_repo: TradeRepo,
):
    """
    Edit a trade; created_at is never changed
    """
    trade = trade_repo.update(trade_id, account.id, **request.model_dump(exclude_unset=True))
    return APIResponse(data=TradeRecord.model_validate(trade), message="Trade updated")


@router.delete("/{trade_id}", response_model=APIResponse[dict])
async def delete_trade(
    trade_id: int,
    api_key: APIKey,
    account: ActiveAccount,
    trade_repo: TradeRepo,
):
    """
    Delete a trade (or withdrawal)
    """
    trade_repo.delete(trade_id, account.id)
    return APIResponse(data={"deleted": True, "trade_id": trade_id}, message="Trade deleted")
