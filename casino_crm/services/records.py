"""
Record store adapter.

Turns request-scoped listing parameters into SQLModel statements for one
entity type, and wraps single-row reads and writes so database failures come
out as the CRM error taxonomy.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Type

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import selectinload
from sqlmodel import Session, SQLModel, select

from casino_crm.core.errors import ConflictError, NotFoundError, UpstreamError
from casino_crm.models import Agent, Client, Document
from casino_crm.services import filters
from casino_crm.services.pagination import PageRequest

logger = logging.getLogger(__name__)


@dataclass
class ListParams:
    """Everything a listing request can ask for, already parsed."""
    page: PageRequest = field(default_factory=PageRequest)
    search: Optional[str] = None
    sort_by: Optional[str] = None
    sort_order: Optional[str] = None
    filters: Dict[str, Any] = field(default_factory=dict)


class RecordStore:
    """
    Query builder and row access for a single table.

    Args:
        model: SQLModel table class
        search_columns: attribute names matched by the free-text search
        filter_columns: query parameter name -> attribute name for equality filters
        sortable: attribute names accepted as ``sortBy``
        default_sort / default_order: ordering when the request names none
        relations: relationship attributes eager-loaded on listings
    """

    def __init__(
        self,
        model: Type[SQLModel],
        *,
        search_columns: Sequence[str] = (),
        filter_columns: Optional[Mapping[str, str]] = None,
        sortable: Iterable[str] = (),
        default_sort: str = "created_at",
        default_order: str = "desc",
        relations: Sequence[str] = (),
    ):
        self.model = model
        self.search_columns = [getattr(model, name) for name in search_columns]
        self.filter_columns = {
            param: getattr(model, name) for param, name in (filter_columns or {}).items()
        }
        self.sortable = {name: getattr(model, name) for name in sortable}
        self.default_sort = default_sort
        self.default_order = default_order
        self.relations = [getattr(model, name) for name in relations]

    def where(self, params: ListParams):
        return filters.compose(
            self.search_columns, params.search, self.filter_columns, params.filters
        )

    def ordered_statement(self, params: ListParams):
        """Filtered, ordered SELECT with relations attached, not yet paginated."""
        statement = select(self.model)
        predicate = self.where(params)
        if predicate is not None:
            statement = statement.where(predicate)
        order = filters.sort_clause(
            self.sortable,
            params.sort_by,
            params.sort_order or self.default_order,
            self.default_sort,
        )
        # Primary key as tie-breaker keeps page boundaries stable
        statement = statement.order_by(order, self.model.id)
        for relation in self.relations:
            statement = statement.options(selectinload(relation))
        return statement

    def list_statement(self, params: ListParams):
        """SELECT for one page of rows."""
        return self.ordered_statement(params).offset(params.page.offset).limit(params.page.limit)

    def count_statement(self, params: ListParams):
        statement = select(func.count()).select_from(self.model)
        predicate = self.where(params)
        if predicate is not None:
            statement = statement.where(predicate)
        return statement

    def list_page(self, db: Session, params: ListParams) -> Tuple[List[Any], int]:
        try:
            total = db.exec(self.count_statement(params)).one()
            rows = db.exec(self.list_statement(params)).all()
        except SQLAlchemyError as e:
            logger.exception("Listing %s failed", self.model.__tablename__)
            raise UpstreamError(str(e)) from e
        return list(rows), total

    def list_all(self, db: Session, params: ListParams) -> List[Any]:
        try:
            return list(db.exec(self.ordered_statement(params)).all())
        except SQLAlchemyError as e:
            logger.exception("Listing %s failed", self.model.__tablename__)
            raise UpstreamError(str(e)) from e

    def get(self, db: Session, record_id: Any, *, not_found_message: str = None):
        row = db.get(self.model, record_id)
        if row is None:
            raise NotFoundError(not_found_message or f"{self.model.__name__} not found")
        return row

    def exists(self, db: Session, *, exclude_id: Any = None, **equalities) -> bool:
        """Point lookup: does any row match every ``column == value``?"""
        statement = select(self.model.id)
        for name, value in equalities.items():
            statement = statement.where(getattr(self.model, name) == value)
        if exclude_id is not None:
            statement = statement.where(self.model.id != exclude_id)
        return db.exec(statement.limit(1)).first() is not None

    def insert(self, db: Session, row):
        db.add(row)
        self._commit(db)
        db.refresh(row)
        return row

    def update(self, db: Session, row, changes: Mapping[str, Any]):
        for key, value in changes.items():
            setattr(row, key, value)
        if hasattr(row, "updated_at"):
            row.updated_at = datetime.utcnow().isoformat()
        db.add(row)
        self._commit(db)
        db.refresh(row)
        return row

    def delete(self, db: Session, row) -> None:
        db.delete(row)
        self._commit(db)

    def _commit(self, db: Session) -> None:
        try:
            db.commit()
        except IntegrityError as e:
            db.rollback()
            logger.warning("Constraint violation on %s: %s", self.model.__tablename__, e.orig)
            raise ConflictError(_conflict_message(self.model, e)) from e
        except SQLAlchemyError as e:
            db.rollback()
            logger.exception("Write to %s failed", self.model.__tablename__)
            raise UpstreamError(str(e)) from e


def _conflict_message(model, error: IntegrityError) -> str:
    text = str(error.orig).lower()
    if model is Client and "email_address" in text:
        return "A client with this email already exists"
    if "foreign key" in text:
        return f"{model.__name__} is still referenced by other records"
    return f"{model.__name__} conflicts with an existing record"


clients = RecordStore(
    Client,
    search_columns=("firstname", "lastname", "email_address"),
    filter_columns={"agentId": "agent_id"},
    sortable=(
        "firstname", "lastname", "email_address", "city", "country",
        "created_at", "updated_at", "client_responsive",
    ),
    default_sort="lastname",
    default_order="asc",
    relations=("agent",),
)

documents = RecordStore(
    Document,
    search_columns=("type", "id_number", "notes"),
    filter_columns={"clientId": "client_id", "type": "type", "status": "status"},
    sortable=(
        "type", "status", "id_number", "valid_until",
        "upload_date", "created_at", "updated_at",
    ),
    default_sort="created_at",
    default_order="desc",
    relations=("client",),
)

agents = RecordStore(
    Agent,
    filter_columns={"is_active": "is_active"},
    sortable=("firstname", "lastname", "created_at"),
    default_sort="lastname",
    default_order="asc",
)
