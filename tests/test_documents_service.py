import pytest
from sqlmodel import select

from casino_crm.core.errors import NotFoundError, UpstreamError, ValidationError
from casino_crm.models import Document
from casino_crm.services import documents as service
from casino_crm.services import records
from casino_crm.services.documents import Upload


def _upload(name="passport.pdf", data=b"%PDF-1.4"):
    return Upload(filename=name, data=data, content_type="application/pdf")


def test_storage_key_layout():
    assert service.storage_key("c1", "scan.final.PDF", 1700000000123) == "c1/c1_1700000000123.PDF"
    assert service.storage_key("c1", "noext", 5) == "c1/c1_5.bin"


def test_create_uploads_then_inserts(db, storage, make_client):
    client = make_client()
    document = service.create_document(
        db, storage, _upload(), client.id, {"type": "Passport", "notes": ""}, timestamp_ms=42
    )
    key = f"{client.id}/{client.id}_42.pdf"
    assert document.file_path == key
    assert document.status == "valid"
    assert document.notes is None
    assert storage.uploads == [key]
    assert db.get(Document, document.id) is not None


def test_create_with_unknown_client_uploads_nothing(db, storage):
    with pytest.raises(NotFoundError):
        service.create_document(db, storage, _upload(), "nobody", {"type": "ID"})
    assert storage.events == []


def test_create_removes_blob_when_insert_fails(db, storage, make_client, monkeypatch):
    client = make_client()

    def failing_insert(db, row):
        raise UpstreamError("insert failed")

    monkeypatch.setattr(records.documents, "insert", failing_insert)
    with pytest.raises(UpstreamError):
        service.create_document(db, storage, _upload(), client.id, {"type": "ID"}, timestamp_ms=7)

    key = f"{client.id}/{client.id}_7.pdf"
    assert storage.events == [("upload", key), ("remove", key)]
    assert storage.blobs == {}


def test_failed_compensation_still_reports_original_error(db, storage, make_client, monkeypatch):
    client = make_client()
    storage.fail_remove = True

    def failing_insert(db, row):
        raise UpstreamError("insert failed")

    monkeypatch.setattr(records.documents, "insert", failing_insert)
    with pytest.raises(UpstreamError, match="insert failed"):
        service.create_document(db, storage, _upload(), client.id, {"type": "ID"}, timestamp_ms=7)


def test_upload_failure_creates_no_row(db, storage, make_client):
    client = make_client()
    storage.fail_upload = True
    with pytest.raises(UpstreamError):
        service.create_document(db, storage, _upload(), client.id, {"type": "ID"})
    assert db.exec(select(Document)).all() == []


def test_same_millisecond_upload_collides(db, storage, make_client):
    client = make_client()
    service.create_document(db, storage, _upload(), client.id, {"type": "ID"}, timestamp_ms=1)
    with pytest.raises(UpstreamError):
        service.create_document(db, storage, _upload(), client.id, {"type": "ID"}, timestamp_ms=1)
    assert len(db.exec(select(Document)).all()) == 1


def test_update_metadata_only_leaves_file_alone(db, storage, make_client, make_document):
    client = make_client()
    document = make_document(client, file_path="old/key.pdf", notes="keep", id_number="X1")

    updated = service.update_document(
        db, storage, document.id, None, {"status": "expired", "id_number": "", "notes": None}
    )
    assert updated.status == "expired"
    assert updated.id_number is None
    assert updated.notes == "keep"
    assert updated.file_path == "old/key.pdf"
    assert storage.events == []


def test_update_with_file_replaces_blob(db, storage, make_client, make_document):
    client = make_client()
    document = make_document(client, file_path="old/key.pdf")

    updated = service.update_document(db, storage, document.id, _upload("new.png"), {}, timestamp_ms=99)
    new_key = f"{client.id}/{client.id}_99.png"
    assert updated.file_path == new_key
    assert storage.events == [("upload", new_key), ("remove", "old/key.pdf")]


def test_update_failed_upload_keeps_previous_blob(db, storage, make_client, make_document):
    client = make_client()
    document = make_document(client, file_path="old/key.pdf")
    storage.fail_upload = True

    with pytest.raises(UpstreamError):
        service.update_document(db, storage, document.id, _upload(), {"notes": "x"})
    db.refresh(document)
    assert document.file_path == "old/key.pdf"
    assert storage.removals == []


def test_update_rejects_blank_type(db, storage, make_client, make_document):
    document = make_document(make_client())
    with pytest.raises(ValidationError):
        service.update_document(db, storage, document.id, None, {"type": ""})


def test_update_missing_document(db, storage):
    with pytest.raises(NotFoundError):
        service.update_document(db, storage, "missing", None, {})


def test_delete_removes_blob_before_row(db, storage, make_client, make_document, monkeypatch):
    document = make_document(make_client(), file_path="c/c_1.pdf")
    original_delete = records.documents.delete

    def recording_delete(db, row):
        storage.events.append(("row-delete", row.id))
        original_delete(db, row)

    monkeypatch.setattr(records.documents, "delete", recording_delete)
    document_id = document.id
    service.delete_document(db, storage, document_id)

    assert storage.events == [("remove", "c/c_1.pdf"), ("row-delete", document_id)]
    assert db.get(Document, document_id) is None


def test_delete_proceeds_when_blob_removal_fails(db, storage, make_client, make_document):
    document = make_document(make_client(), file_path="c/c_1.pdf")
    document_id = document.id
    storage.fail_remove = True

    service.delete_document(db, storage, document_id)
    assert storage.removals == ["c/c_1.pdf"]
    assert db.get(Document, document_id) is None


def test_delete_without_file_skips_storage(db, storage, make_client, make_document):
    document = make_document(make_client())
    service.delete_document(db, storage, document.id)
    assert storage.events == []


def test_signed_url_expiry(db, storage, make_client, make_document):
    document = make_document(make_client(), type="Passport", file_path="c/c_1.pdf")

    inline = service.signed_url(db, storage, document.id, download=False)
    assert inline["expires_in"] == 3600
    assert "download" not in inline["url"]

    download = service.signed_url(db, storage, document.id, download=True)
    assert download["expires_in"] == 300
    assert download["url"].endswith("download=Passport.pdf")


def test_signed_url_needs_a_file(db, storage, make_client, make_document):
    document = make_document(make_client())
    with pytest.raises(NotFoundError):
        service.signed_url(db, storage, document.id, download=False)
    with pytest.raises(NotFoundError):
        service.signed_url(db, storage, "missing", download=True)
