"""Tests for loading uploads and describing documents."""

from io import BytesIO

import pymupdf
import pytest
from PIL import Image

from propdf.core.info import describe_document
from propdf.core.outcomes import UnprocessableSourceError
from propdf.core.sources import SourceFile, load_document, load_image


class TestLoadDocument:

    def test_loads_page_count(self, make_pdf):
        with load_document(SourceFile("doc.pdf", make_pdf(4))) as document:
            assert document.name == "doc.pdf"
            assert document.page_count == 4

    def test_closes_on_exit(self, make_pdf):
        with load_document(SourceFile("doc.pdf", make_pdf(1))) as document:
            pass
        assert document.doc.is_closed

    def test_corrupt_bytes(self):
        with pytest.raises(UnprocessableSourceError) as exc_info:
            load_document(SourceFile("bad.pdf", b"%PDF-1.4 truncated"))
        assert exc_info.value.source == "bad.pdf"

    def test_empty_bytes(self):
        with pytest.raises(UnprocessableSourceError, match="empty"):
            load_document(SourceFile("none.pdf", b""))

    def test_password_protected(self, encrypted_pdf):
        with pytest.raises(UnprocessableSourceError, match="password"):
            load_document(SourceFile("locked.pdf", encrypted_pdf))

    def test_is_value_error(self):
        with pytest.raises(ValueError):
            load_document(SourceFile("none.pdf", b""))


def pillow_image(mode, size, fmt):
    buf = BytesIO()
    Image.new(mode, size).save(buf, format=fmt)
    return buf.getvalue()


class TestLoadImage:

    @pytest.mark.parametrize("mode,fmt,expected", [
        ("RGB", "PNG", "png"),
        ("RGBA", "PNG", "png"),
        ("L", "PNG", "png"),
        ("RGB", "JPEG", "jpeg"),
        ("CMYK", "JPEG", "jpeg"),
    ])
    def test_pixel_modes(self, mode, fmt, expected):
        data = pillow_image(mode, (30, 20), fmt)

        image = load_image(SourceFile("img", data), {"jpeg", "png"})

        assert image.format == expected
        assert (image.width, image.height) == (30, 20)

    def test_gif_outside_default_formats(self):
        data = pillow_image("P", (8, 8), "GIF")

        with pytest.raises(UnprocessableSourceError, match="'gif'"):
            load_image(SourceFile("a.gif", data), {"jpeg", "png"})

    def test_png_dimensions(self, make_image):
        image = load_image(SourceFile("a.png", make_image(120, 45)), {"png"})

        assert (image.width, image.height) == (120, 45)
        assert image.format == "png"

    def test_jpeg_format(self, make_image):
        image = load_image(SourceFile("a.jpg", make_image(30, 20, "jpeg")), {"jpeg", "png"})

        assert image.format == "jpeg"

    def test_disallowed_format(self, make_image):
        with pytest.raises(UnprocessableSourceError, match="unsupported"):
            load_image(SourceFile("a.png", make_image(10, 10)), {"jpeg"})

    def test_garbage(self):
        with pytest.raises(UnprocessableSourceError):
            load_image(SourceFile("a.bin", b"\x00\x01\x02 not an image"), {"png"})


class TestDescribeDocument:

    def test_defaults_for_missing_metadata(self, make_pdf):
        data = make_pdf(3, sizes=[(612, 792), (100, 100), (100, 100)])
        with load_document(SourceFile("doc.pdf", data)) as document:
            info = describe_document(document)

        assert info["filename"] == "doc.pdf"
        assert info["pageCount"] == 3
        assert info["fileSize"] == len(data)
        assert info["fileSizeKB"] == f"{len(data) / 1024:.2f}"
        assert info["title"] == "Untitled"
        assert info["subject"] == "N/A"
        assert info["pageSize"] == {"width": 612, "height": 792, "unit": "points"}

    def test_reads_metadata(self):
        doc = pymupdf.open()
        doc.new_page(width=595, height=842)
        doc.set_metadata({"title": "Report", "author": "Finance"})
        data = doc.tobytes()
        doc.close()

        with load_document(SourceFile("report.pdf", data)) as document:
            info = describe_document(document)

        assert info["title"] == "Report"
        assert info["author"] == "Finance"
        assert info["pageSize"]["width"] == 595
