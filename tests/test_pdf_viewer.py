import base64

import pytest

from noteflow_ui.pdf_viewer import (
    NOT_A_PDF_MESSAGE,
    NotAPdfError,
    PdfDocument,
    PdfLibrary,
    count_pages,
    is_pdf,
)

THREE_PAGES = (
    b"%PDF-1.4\n1 0 obj << /Type /Catalog /Pages 2 0 R >> endobj\n"
    b"2 0 obj << /Type /Pages /Kids [3 0 R 4 0 R 5 0 R] /Count 3 >> endobj\n"
    b"3 0 obj << /Type /Page >> endobj\n4 0 obj << /Type/Page >> endobj\n5 0 obj << /Type /Page >> endobj\n%%EOF"
)


def test_count_pages_ignores_pages_tree():
    assert count_pages(THREE_PAGES) == 3
    assert count_pages(b"%PDF-1.4 nothing here") == 1


def test_is_pdf():
    assert is_pdf("application/pdf", b"")
    assert is_pdf(None, THREE_PAGES)
    assert not is_pdf("image/png", b"\x89PNG")


def test_from_upload_rejects_non_pdf():
    with pytest.raises(NotAPdfError) as excinfo:
        PdfDocument.from_upload("notes.txt", "text/plain", b"hello")
    assert str(excinfo.value) == NOT_A_PDF_MESSAGE


def test_zoom_bounds():
    doc = PdfDocument.from_upload("a.pdf", "application/pdf", THREE_PAGES)
    for _ in range(20):
        doc.zoom_in()
    assert doc.zoom == 200
    for _ in range(30):
        doc.zoom_out()
    assert doc.zoom == 50
    assert doc.set_zoom(125) == 125
    assert doc.set_zoom(10) == 50


def test_rotation_wraps():
    doc = PdfDocument.from_upload("a.pdf", "application/pdf", THREE_PAGES)
    assert [doc.rotate() for _ in range(4)] == [90, 180, 270, 0]


def test_page_navigation_is_clamped():
    doc = PdfDocument.from_upload("a.pdf", "application/pdf", THREE_PAGES)
    assert doc.previous_page() == 1
    assert doc.go_to(9) == 3
    assert doc.next_page() == 3
    assert doc.go_to("2") == 2
    assert doc.go_to("x") == 1


def test_data_uri_carries_page_and_zoom():
    doc = PdfDocument.from_upload("a.pdf", "application/pdf", THREE_PAGES)
    doc.go_to(2)
    doc.zoom_in()
    uri = doc.data_uri()
    assert uri.startswith("data:application/pdf;base64,")
    assert uri.endswith("#page=2&zoom=110")
    encoded = uri.split(",", 1)[1].split("#", 1)[0]
    assert base64.b64decode(encoded) == THREE_PAGES


def test_library_activation_and_removal():
    library = PdfLibrary()
    first = library.add(PdfDocument.from_upload("a.pdf", "application/pdf", THREE_PAGES))
    second = library.add(PdfDocument.from_upload("b.pdf", "application/pdf", THREE_PAGES))
    assert library.active is second
    library.activate(first.id)
    assert library.active is first
    library.remove(first.id)
    assert library.active is second
    library.remove(second.id)
    assert library.active is None
    with pytest.raises(KeyError):
        library.activate("missing")


def test_closed_document_can_be_uploaded_again():
    library = PdfLibrary()
    first = library.accept_upload("upload-1", "notes.pdf", "application/pdf", THREE_PAGES)
    assert library.accept_upload("upload-1", "notes.pdf", "application/pdf", THREE_PAGES) is None

    library.remove(first.id)
    assert library.accept_upload("upload-1", "notes.pdf", "application/pdf", THREE_PAGES) is None
    again = library.accept_upload("upload-2", "notes.pdf", "application/pdf", THREE_PAGES)
    assert again.total_pages == 3
    assert library.active_id == again.id


def test_rejected_upload_is_reported_once():
    library = PdfLibrary()
    with pytest.raises(NotAPdfError):
        library.accept_upload("upload-1", "notes.txt", "text/plain", b"hello")
    assert library.accept_upload("upload-1", "notes.txt", "text/plain", b"hello") is None
    assert library.documents == []
