"""
Document Endpoints Module

Paginated document listing, multipart create/update, delete and signed links
to the stored file. The file handling itself lives in
``casino_crm.services.documents``.
"""
from typing import Optional
from fastapi import APIRouter, Depends, File, Form, Query, Request, Response, UploadFile
from fastapi import status as http_status
from sqlmodel import Session
from starlette.datastructures import UploadFile as StarletteUploadFile
from casino_crm.api import deps
from casino_crm.db.session import get_db
from casino_crm.models.user import User
from casino_crm.schemas.common import DataResponse, PageResponse
from casino_crm.schemas.document import DocumentWithClient, SignedUrl
from casino_crm.services import documents as document_service
from casino_crm.services import records
from casino_crm.services.pagination import PageRequest
from casino_crm.services.records import ListParams
from casino_crm.services.storage import Storage

router = APIRouter()


async def _read_upload(file: Optional[StarletteUploadFile]) -> Optional[document_service.Upload]:
    # Browsers send an empty part when no file was picked
    if file is None or not file.filename:
        return None
    data = await file.read()
    return document_service.Upload(filename=file.filename, data=data, content_type=file.content_type)


@router.get("", response_model=PageResponse[DocumentWithClient])
def list_documents(
    page: Optional[str] = None,
    limit: Optional[str] = None,
    search: Optional[str] = None,
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    sort_order: Optional[str] = Query("desc", alias="sortOrder"),
    client_id: Optional[str] = Query(None, alias="clientId"),
    type: Optional[str] = None,
    status: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
):
    """
    Retrieve a page of documents.

    Args:
        search: Case-insensitive substring matched against type, ID number and notes
        sortBy: Column to sort by (default created_at)
        sortOrder: "desc" (default) or "asc"
        clientId, type, status: Exact-match filters, each applied only when given
    """
    page_request = PageRequest.from_params(page, limit)
    params = ListParams(
        page=page_request,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
        filters={"clientId": client_id, "type": type, "status": status},
    )
    rows, total = records.documents.list_page(db, params)
    return {
        "data": [DocumentWithClient.model_validate(row) for row in rows],
        "meta": page_request.meta(total),
    }


@router.post("", response_model=DataResponse[DocumentWithClient], status_code=http_status.HTTP_201_CREATED)
async def create_document(
    file: Optional[UploadFile] = File(None),
    client_id: Optional[str] = Form(None),
    type: Optional[str] = Form(None),
    valid_until: Optional[str] = Form(None),
    id_number: Optional[str] = Form(None),
    status: Optional[str] = Form(None),
    notes: Optional[str] = Form(None),
    db: Session = Depends(get_db),
    storage: Storage = Depends(deps.get_storage),
    current_user: User = Depends(deps.get_current_user),
):
    """
    Upload a file and create its document record.

    Raises:
        ValidationError: file, client_id or type missing, or unknown type/status
        ReferenceNotFoundError: client_id does not resolve to a client (400)
    """
    upload = await _read_upload(file)
    document = document_service.create_document(
        db,
        storage,
        upload,
        client_id,
        {
            "type": type,
            "valid_until": valid_until,
            "id_number": id_number,
            "status": status,
            "notes": notes,
        },
    )
    return {"data": DocumentWithClient.model_validate(document)}


@router.get("/{document_id}", response_model=DataResponse[DocumentWithClient])
def read_document(
    document_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(deps.get_current_user),
):
    document = document_service.get_document(db, document_id)
    return {"data": DocumentWithClient.model_validate(document)}


@router.patch("/{document_id}", response_model=DataResponse[DocumentWithClient])
async def update_document(
    document_id: str,
    request: Request,
    db: Session = Depends(get_db),
    storage: Storage = Depends(deps.get_storage),
    current_user: User = Depends(deps.get_current_user),
):
    """
    Update document metadata and optionally replace its file.

    Multipart form with an optional ``file`` part and any of type,
    valid_until, id_number, status and notes. Fields left out of the form
    are not touched; a field sent empty is cleared. The raw form is read so
    an empty value stays distinguishable from an absent one.
    """
    form = await request.form()
    file = form.get("file")
    upload = await _read_upload(file if isinstance(file, StarletteUploadFile) else None)
    fields = {
        name: form[name]
        for name in document_service.METADATA_FIELDS
        if name in form and isinstance(form[name], str)
    }
    document = document_service.update_document(db, storage, document_id, upload, fields)
    return {"data": DocumentWithClient.model_validate(document)}


@router.delete("/{document_id}", status_code=http_status.HTTP_204_NO_CONTENT)
def delete_document(
    document_id: str,
    db: Session = Depends(get_db),
    storage: Storage = Depends(deps.get_storage),
    current_user: User = Depends(deps.get_current_user),
):
    """Delete the stored file, then the document record."""
    document_service.delete_document(db, storage, document_id)
    return Response(status_code=http_status.HTTP_204_NO_CONTENT)


@router.get("/{document_id}/file", response_model=DataResponse[SignedUrl])
def document_file_url(
    document_id: str,
    db: Session = Depends(get_db),
    storage: Storage = Depends(deps.get_storage),
    current_user: User = Depends(deps.get_current_user),
):
    """Signed link for viewing the file inline, valid for one hour."""
    return {"data": document_service.signed_url(db, storage, document_id, download=False)}


@router.get("/{document_id}/download", response_model=DataResponse[SignedUrl])
def document_download_url(
    document_id: str,
    db: Session = Depends(get_db),
    storage: Storage = Depends(deps.get_storage),
    current_user: User = Depends(deps.get_current_user),
):
    """Signed link that forces a download, valid for five minutes."""
    return {"data": document_service.signed_url(db, storage, document_id, download=True)}
