"""/v1/accounts - bank accounts"""

import uuid
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from household_finance.api.v1.schemas import AccountCreateRequest, AccountResponse, AccountUpdateRequest
from household_finance.api.dependencies import get_account_service
from household_finance.infrastructure.database.session import get_db
from household_finance.domain.accounts import AccountService
from household_finance.domain.models import AccountPatch

router = APIRouter()


@router.post("/accounts", response_model=AccountResponse, status_code=201)
def create_account(
    request_body: AccountCreateRequest,
    db: Session = Depends(get_db),
    service: AccountService = Depends(get_account_service),
):
    account = service.create_account(**request_body.model_dump())
    db.commit()
    return AccountResponse.model_validate(account)


@router.get("/accounts", response_model=List[AccountResponse])
def list_accounts(
    user_id: str = Query(..., description="User identifier"),
    type: Optional[str] = Query(None, description="checking, savings, investment or cash"),
    service: AccountService = Depends(get_account_service),
):
    return [AccountResponse.model_validate(a) for a in service.list_accounts(user_id, type)]


@router.get("/accounts/{account_id}", response_model=AccountResponse)
def get_account(account_id: uuid.UUID, service: AccountService = Depends(get_account_service)):
    return AccountResponse.model_validate(service.get_account(account_id))


@router.patch("/accounts/{account_id}", response_model=AccountResponse)
@router.put("/accounts/{account_id}", response_model=AccountResponse)
def update_account(
    account_id: uuid.UUID,
    request_body: AccountUpdateRequest,
    db: Session = Depends(get_db),
    service: AccountService = Depends(get_account_service),
):
    account = service.update_account(account_id, AccountPatch(**request_body.model_dump(exclude_unset=True)))
    db.commit()
    return AccountResponse.model_validate(account)


@router.delete("/accounts/{account_id}", status_code=204)
def delete_account(
    account_id: uuid.UUID,
    db: Session = Depends(get_db),
    service: AccountService = Depends(get_account_service),
):
    """Delete an account. Refused with 409 while transactions reference it."""
    service.delete_account(account_id)
    db.commit()
    return Response(status_code=204)
