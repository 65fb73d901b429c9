import pytest

from casino_crm.core.errors import ConflictError, NotFoundError, ValidationError
from casino_crm.services import validators


@pytest.mark.parametrize(
    "data",
    [
        {"lastname": "Doe"},
        {"firstname": "John"},
        {"firstname": "", "lastname": "Doe"},
        {"firstname": "John", "lastname": "   "},
        {"firstname": None, "lastname": None, "email_address": "x@example.com", "city": "Malta"},
    ],
)
def test_client_create_requires_both_names(db, data):
    with pytest.raises(ValidationError):
        validators.validate_client_create(db, data)


def test_client_create_rejects_duplicate_email(db, make_client):
    make_client(email_address="john@example.com")
    with pytest.raises(ConflictError):
        validators.validate_client_create(
            db, {"firstname": "Jane", "lastname": "Roe", "email_address": "john@example.com"}
        )


def test_client_email_comparison_is_case_sensitive(db, make_client):
    make_client(email_address="john@example.com")
    validators.validate_client_create(
        db, {"firstname": "Jane", "lastname": "Roe", "email_address": "JOHN@example.com"}
    )


def test_client_update_ignores_own_email(db, make_client):
    client = make_client(email_address="john@example.com")
    validators.validate_client_update(db, client.id, {"email_address": "john@example.com"})


def test_client_update_rejects_email_of_other_client(db, make_client):
    make_client(email_address="john@example.com")
    other = make_client("Jane", "Roe")
    with pytest.raises(ConflictError):
        validators.validate_client_update(db, other.id, {"email_address": "john@example.com"})


def test_client_update_allows_omitted_names_but_not_blank_ones(db, make_client):
    client = make_client()
    validators.validate_client_update(db, client.id, {"city": "Valletta"})
    with pytest.raises(ValidationError):
        validators.validate_client_update(db, client.id, {"lastname": ""})


def test_agent_create_defaults_to_active():
    data = validators.validate_agent_create({"firstname": "A", "lastname": "B"})
    assert data["is_active"] is True
    data = validators.validate_agent_create({"firstname": "A", "lastname": "B", "is_active": False})
    assert data["is_active"] is False


def test_agent_create_requires_names():
    with pytest.raises(ValidationError):
        validators.validate_agent_create({"firstname": "A"})


@pytest.mark.parametrize(
    "file, client_id, doc_type",
    [(None, "c1", "ID"), (b"x", None, "ID"), (b"x", "c1", None), (b"x", "", "ID")],
)
def test_document_create_requires_file_client_and_type(db, file, client_id, doc_type):
    with pytest.raises(ValidationError):
        validators.validate_document_create(db, file, client_id, doc_type)


def test_document_create_requires_existing_client(db):
    with pytest.raises(NotFoundError) as exc_info:
        validators.validate_document_create(db, b"x", "missing-client", "ID")
    assert exc_info.value.status_code == 400
    assert exc_info.value.message == "Client not found"


def test_document_create_rejects_unknown_type_and_status(db, make_client):
    client = make_client()
    with pytest.raises(ValidationError):
        validators.validate_document_create(db, b"x", client.id, "Library Card")
    with pytest.raises(ValidationError):
        validators.validate_document_create(db, b"x", client.id, "ID", status="lost")
    validators.validate_document_create(db, b"x", client.id, "Driver License", status="pending")
