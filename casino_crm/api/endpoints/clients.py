"""
Client Endpoints Module

This module provides the paginated client listing and CRUD endpoints. The
single-client read returns the client together with its agent, contact
moments, documents, casino accounts and bank accounts.
"""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy import func
from sqlalchemy.orm import selectinload
from sqlmodel import Session, select
from casino_crm.api import deps
from casino_crm.db.session import get_db
from casino_crm.models import BankClient, CasinoClient, Client, ContactMoment, Document
from casino_crm.models.user import User
from casino_crm.schemas.client import (
    BankAccountRead, CasinoAccountRead, ClientCreate, ClientDetail, ClientRead,
    ClientUpdate, ContactMomentRead,
)
from casino_crm.schemas.common import DataResponse, PageResponse
from casino_crm.schemas.document import DocumentRead
from casino_crm.services import records, validators
from casino_crm.services.pagination import PageRequest
from casino_crm.services.records import ListParams

logger = logging.getLogger(__name__)

router = APIRouter()

NOT_FOUND = "Client not found"


@router.get("", response_model=PageResponse[ClientRead])
def list_clients(
    page: Optional[str] = None,
    limit: Optional[str] = None,
    search: Optional[str] = None,
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    sort_order: Optional[str] = Query("asc", alias="sortOrder"),
    agent_id: Optional[str] = Query(None, alias="agentId"),
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
):
    """
    Retrieve a page of clients.

    Args:
        page: 1-based page number (default 1)
        limit: Page size (default 10, capped at MAX_PAGE_LIMIT)
        search: Case-insensitive substring matched against first name,
            last name and email
        sortBy: Column to sort by (default lastname)
        sortOrder: "asc" (default) or "desc"
        agentId: Only clients assigned to this agent

    Returns:
        Rows with their agent's name, plus pagination meta
    """
    page_request = PageRequest.from_params(page, limit)
    params = ListParams(
        page=page_request,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
        filters={"agentId": agent_id},
    )
    rows, total = records.clients.list_page(db, params)
    return {
        "data": [ClientRead.model_validate(row) for row in rows],
        "meta": page_request.meta(total),
    }


@router.post("", response_model=DataResponse[ClientRead], status_code=status.HTTP_201_CREATED)
def create_client(
    client_in: ClientCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
):
    """
    Create a new client.

    Raises:
        ValidationError: first name or last name missing
        ConflictError: another client already uses this email address
    """
    client_data = client_in.model_dump(exclude_unset=True)
    validators.validate_client_create(db, client_data)

    client = records.clients.insert(db, Client(**client_data))
    logger.info("Client %s created by %s", client.id, current_user.email)
    return {"data": ClientRead.model_validate(client)}


@router.get("/{client_id}", response_model=DataResponse[ClientDetail])
def read_client(
    client_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
):
    """
    Get a client with all related records.

    Documents are ordered newest upload first.
    """
    client = records.clients.get(db, client_id, not_found_message=NOT_FOUND)

    contact_moments = db.exec(
        select(ContactMoment).where(ContactMoment.client_id == client_id)
    ).all()
    documents = db.exec(
        select(Document)
        .where(Document.client_id == client_id)
        .order_by(Document.upload_date.desc())
    ).all()
    casino_accounts = db.exec(
        select(CasinoClient)
        .where(CasinoClient.client_id == client_id)
        .options(selectinload(CasinoClient.casino))
    ).all()
    bank_accounts = db.exec(
        select(BankClient)
        .where(BankClient.client_id == client_id)
        .options(selectinload(BankClient.bank))
    ).all()

    detail = ClientDetail.model_validate(client).model_copy(update={
        "contact_moments": [ContactMomentRead.model_validate(m) for m in contact_moments],
        "documents": [DocumentRead.model_validate(d) for d in documents],
        "casino_accounts": [CasinoAccountRead.model_validate(a) for a in casino_accounts],
        "bank_accounts": [BankAccountRead.model_validate(a) for a in bank_accounts],
    })
    return {"data": detail}


@router.patch("/{client_id}", response_model=DataResponse[ClientRead])
def update_client(
    client_id: str,
    client_update: ClientUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
):
    """
    Update an existing client.

    Only the fields present in the body are changed.

    Raises:
        NotFoundError: the client does not exist
        ValidationError: a name field is blanked
        ConflictError: the new email belongs to another client
    """
    client = records.clients.get(db, client_id, not_found_message=NOT_FOUND)

    changes = client_update.model_dump(exclude_unset=True)
    validators.validate_client_update(db, client_id, changes)

    client = records.clients.update(db, client, changes)
    return {"data": ClientRead.model_validate(client)}


@router.delete("/{client_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_client(
    client_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
):
    """
    Delete a client.

    Related documents and accounts are counted and logged but not removed;
    the database decides whether remaining references block the delete.
    """
    client = records.clients.get(db, client_id, not_found_message=NOT_FOUND)

    related = {
        "documents": db.exec(select(func.count()).select_from(Document).where(Document.client_id == client_id)).one(),
        "casino_accounts": db.exec(select(func.count()).select_from(CasinoClient).where(CasinoClient.client_id == client_id)).one(),
        "bank_accounts": db.exec(select(func.count()).select_from(BankClient).where(BankClient.client_id == client_id)).one(),
    }
    if any(related.values()):
        logger.info("Deleting client %s with related records: %s", client_id, related)

    records.clients.delete(db, client)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
