import io

import docx
import pytest
from PIL import Image, ImageDraw
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

CIRCULAR_PAGE_ONE = [
    "RESERVE BANK OF INDIA",
    "RBI/2025/01 Reference No. DOR.CRE.REC.12/21.01.003/2025-26",
    "To All Scheduled Commercial Banks",
    "Dear Sir/Madam,",
    "Master Direction on Know Your Customer norms - amendments to the framework",
]
CIRCULAR_PAGE_TWO = [
    "Banks are advised to update their KYC policy within 30 days of this circular.",
    "Compliance with these instructions shall be reported to the Board every quarter.",
]


def _pdf(pages: list[list[str]]) -> bytes:
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    for lines in pages:
        y = 720
        for line in lines:
            c.drawString(72, y, line)
            y -= 18
        c.showPage()
    c.save()
    return buf.getvalue()


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Generate a minimal single-page PDF with known text content."""
    return _pdf([["Hello PDF World"]])


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    """Generate a two-page PDF with known text on each page."""
    return _pdf([["Page one content"], ["Page two content"]])


@pytest.fixture()
def empty_pdf_bytes() -> bytes:
    """Generate a valid PDF with no text content (blank page)."""
    return _pdf([[]])


@pytest.fixture()
def blank_three_page_pdf_bytes() -> bytes:
    """Three pages without a text layer, as a scanner would produce."""
    return _pdf([[], [], []])


@pytest.fixture()
def circular_pdf_bytes() -> bytes:
    """Two-page native-text RBI circular; every page is well above 50 chars."""
    return _pdf([CIRCULAR_PAGE_ONE, CIRCULAR_PAGE_TWO])


@pytest.fixture()
def sample_png_bytes() -> bytes:
    image = Image.new("RGB", (200, 60), "white")
    ImageDraw.Draw(image).text((10, 20), "SEBI circular", fill="black")
    buf = io.BytesIO()
    image.save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture()
def sample_docx_bytes() -> bytes:
    document = docx.Document()
    document.add_paragraph("Circular No. 42 issued by SEBI")
    document.add_paragraph("")
    document.add_paragraph("All registered intermediaries must comply.")
    table = document.add_table(rows=1, cols=2)
    table.rows[0].cells[0].text = "Effective date"
    table.rows[0].cells[1].text = "1 April 2025"
    buf = io.BytesIO()
    document.save(buf)
    return buf.getvalue()


@pytest.fixture()
def encrypted_pdf_bytes() -> bytes:
    """A PDF that cannot be opened without its user password."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter, encrypt="secret")
    c.drawString(72, 720, "Confidential circular")
    c.save()
    return buf.getvalue()
