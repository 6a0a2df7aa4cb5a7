"""
Trading Account API Routes
"""
from fastapi import APIRouter, status
from typing import List

from tradejournal_api.dependencies import APIKey, UserId, AccountRepo
from tradejournal_api.schemas.base import APIResponse
from tradejournal_api.schemas.accounts import (
    AccountRecord,
    AccountCreateRequest,
    ActiveAccountRequest,
    ActiveAccountResponse,
)

router = APIRouter(prefix="/accounts", tags=["Accounts"])


def _record(account, active_id=None) -> AccountRecord:
    record = AccountRecord.model_validate(account)
    record.is_active = account.id == active_id
    return record


@router.get("", response_model=APIResponse[List[AccountRecord]])
async def list_accounts(
    api_key: APIKey,
    user_id: UserId,
    account_repo: AccountRepo,
):
    """
    List the caller's accounts (ordered by name)
    """
    active = account_repo.get_active(user_id)
    active_id = active.id if active else None
    accounts = account_repo.list_for_user(user_id)
    return APIResponse(data=[_record(a, active_id) for a in accounts])


@router.post("", response_model=APIResponse[AccountRecord], status_code=status.HTTP_201_CREATED)
async def create_account(
    request: AccountCreateRequest,
    api_key: APIKey,
    user_id: UserId,
    account_repo: AccountRepo,
):
    """
    Create a trading account
    
    The first account a user creates becomes the active one.
    """
    account = account_repo.create(
        user_id=user_id,
        name=request.name,
        currency=request.currency,
        start_balance=request.start_balance,
    )
    active = account_repo.get_active(user_id)
    return APIResponse(
        data=_record(account, active.id if active else None),
        message=f"Account '{account.name}' created",
    )


@router.get("/active", response_model=APIResponse[ActiveAccountResponse])
async def get_active_account(
    api_key: APIKey,
    user_id: UserId,
    account_repo: AccountRepo,
):
    """
    Get the active account (falls back to the first account by name)
    """
    account = account_repo.get_active(user_id)
    return APIResponse(
        data=ActiveAccountResponse(
            account=_record(account, account.id) if account else None
        )
    )


@router.put("/active", response_model=APIResponse[AccountRecord])
async def set_active_account(
    request: ActiveAccountRequest,
    api_key: APIKey,
    user_id: UserId,
    account_repo: AccountRepo,
):
    """
    Switch the active account
    """
    account = account_repo.set_active(user_id, request.account_id)
    return APIResponse(
        data=_record(account, account.id),
        message=f"Active account: {account.name}",
    )


@router.delete("/{account_id}", response_model=APIResponse[dict])
async def delete_account(
    account_id: int,
    api_key: APIKey,
    user_id: UserId,
    account_repo: AccountRepo,
):
    """
    Delete an account together with all of its trades
    """
    account_repo.delete(user_id, account_id)
    active = account_repo.get_active(user_id)
    return APIResponse(
        data={
            "deleted": True,
            "account_id": account_id,
            "active_account_id": active.id if active else None,
        },
        message=f"Account {account_id} deleted",
    )
