"""Shared fixtures: in-memory PDFs and images built with PyMuPDF."""

import pymupdf
import pytest

from propdf.config import reload_config


def build_pdf(page_count=1, label="Page", sizes=None):
    """Create a PDF whose page N carries the text '<label> N'.

    Args:
        page_count: Number of pages
        label: Text prefix written on each page
        sizes: Optional list of (width, height) per page
    """
    doc = pymupdf.open()
    for i in range(page_count):
        width, height = sizes[i] if sizes else (612, 792)
        page = doc.new_page(width=width, height=height)
        page.insert_text(pymupdf.Point(36, 72), f"{label} {i + 1}", fontsize=12)
    pdf_bytes = doc.tobytes()
    doc.close()
    return pdf_bytes


def build_image(width, height, output="png"):
    """Create a solid grey image of the given pixel size."""
    pix = pymupdf.Pixmap(pymupdf.csRGB, pymupdf.IRect(0, 0, width, height), False)
    pix.clear_with(180)
    return pix.tobytes(output)


def page_texts(pdf_bytes):
    """Return the stripped text of every page."""
    doc = pymupdf.open(stream=pdf_bytes, filetype="pdf")
    try:
        return [page.get_text("text").strip() for page in doc]
    finally:
        doc.close()


@pytest.fixture
def make_pdf():
    return build_pdf


@pytest.fixture
def make_image():
    return build_image


@pytest.fixture
def read_texts():
    return page_texts


@pytest.fixture
def encrypted_pdf():
    doc = pymupdf.open()
    doc.new_page()
    data = doc.tobytes(
        encryption=pymupdf.PDF_ENCRYPT_AES_256,
        owner_pw="owner",
        user_pw="user",
    )
    doc.close()
    return data


@pytest.fixture(autouse=True)
def fresh_config(monkeypatch):
    """Isolate tests from the process environment."""
    for name in (
        "MAX_FILE_SIZE_MB", "MAX_MERGE_FILES", "MAX_IMAGES",
        "ALLOWED_IMAGE_FORMATS", "HTTP_HOST", "HTTP_PORT",
    ):
        monkeypatch.delenv(name, raising=False)
    reload_config()
    yield
    reload_config()
