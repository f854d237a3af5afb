from __future__ import annotations

import base64
import re
from dataclasses import dataclass
from uuid import uuid4

MIN_ZOOM = 50
MAX_ZOOM = 200
ZOOM_STEP = 10
ROTATION_STEP = 90

NOT_A_PDF_MESSAGE = "Please upload a PDF file."

_PAGE_OBJECT = re.compile(rb"/Type\s*/Page(?![a-zA-Z])")


class NotAPdfError(ValueError):
    pass


def count_pages(data: bytes) -> int:
    """Count ``/Type /Page`` objects; 1 when the document hides them (compressed object streams)."""
    return max(1, len(_PAGE_OBJECT.findall(data or b"")))


def is_pdf(mime_type: str | None, data: bytes) -> bool:
    return (mime_type or "").lower() == "application/pdf" or (data or b"")[:5] == b"%PDF-"


@dataclass
class PdfDocument:
    id: str
    name: str
    data: bytes
    total_pages: int
    current_page: int = 1
    zoom: int = 100
    rotation: int = 0

    @classmethod
    def from_upload(cls, name: str, mime_type: str | None, data: bytes) -> "PdfDocument":
        if not is_pdf(mime_type, data):
            raise NotAPdfError(NOT_A_PDF_MESSAGE)
        return cls(id=uuid4().hex, name=name, data=data, total_pages=count_pages(data))

    @property
    def size_label(self) -> str:
        return f"{len(self.data) / 1024 / 1024:.2f} MB"

    def zoom_in(self) -> int:
        self.zoom = min(self.zoom + ZOOM_STEP, MAX_ZOOM)
        return self.zoom

    def zoom_out(self) -> int:
        self.zoom = max(self.zoom - ZOOM_STEP, MIN_ZOOM)
        return self.zoom

    def set_zoom(self, value: int) -> int:
        self.zoom = min(max(int(value), MIN_ZOOM), MAX_ZOOM)
        return self.zoom

    def rotate(self) -> int:
        self.rotation = (self.rotation + ROTATION_STEP) % 360
        return self.rotation

    def go_to(self, page) -> int:
        try:
            target = int(page)
        except (TypeError, ValueError):
            target = 1
        self.current_page = min(max(1, target), self.total_pages)
        return self.current_page

    def next_page(self) -> int:
        return self.go_to(self.current_page + 1)

    def previous_page(self) -> int:
        return self.go_to(self.current_page - 1)

    def data_uri(self) -> str:
        encoded = base64.b64encode(self.data).decode("ascii")
        return f"data:application/pdf;base64,{encoded}#page={self.current_page}&zoom={self.zoom}"


class PdfLibrary:
    """Uploaded documents with one active at a time."""

    def __init__(self):
        self.documents: list[PdfDocument] = []
        self.active_id: str | None = None
        self.seen_uploads: set[str] = set()

    def accept_upload(self, upload_id: str, name: str, mime_type: str | None, data: bytes) -> PdfDocument | None:
        """Open each uploader file once.

        The uploader returns the same file (same upload_id) on every rerun, even
        after its document is closed; uploading it again yields a new id.
        """
        if upload_id in self.seen_uploads:
            return None
        self.seen_uploads.add(upload_id)
        return self.add(PdfDocument.from_upload(name, mime_type, data))

    def add(self, document: PdfDocument) -> PdfDocument:
        self.documents.append(document)
        self.active_id = document.id
        return document

    def remove(self, document_id: str) -> None:
        self.documents = [doc for doc in self.documents if doc.id != document_id]
        if self.active_id == document_id:
            self.active_id = self.documents[0].id if self.documents else None

    def activate(self, document_id: str) -> None:
        if not any(doc.id == document_id for doc in self.documents):
            raise KeyError(document_id)
        self.active_id = document_id

    @property
    def active(self) -> PdfDocument | None:
        return next((doc for doc in self.documents if doc.id == self.active_id), None)
