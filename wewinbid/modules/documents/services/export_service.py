"""
Render a document's markdown body to PDF (reportlab) or DOCX (python-docx).

Only the subset of markdown the generator produces is understood: `#`/`##`/
`###` headings, `-`/`*` bullets and plain paragraphs.
"""
import io
import re
from typing import Iterator, Optional, Tuple
from xml.sax.saxutils import escape

from docx import Document as DocxDocument
from docx.shared import Pt
from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_JUSTIFY
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import ListFlowable, ListItem, Paragraph, SimpleDocTemplate, Spacer

from wewinbid.core.helpers import utcnow

_BOLD = re.compile(r"\*\*(.+?)\*\*")


def iter_blocks(markdown: Optional[str]) -> Iterator[Tuple[str, str]]:
    """Yield (kind, text) pairs: h1, h2, h3, bullet or paragraph."""
    paragraph = []
    for raw_line in (markdown or "").splitlines():
        line = raw_line.strip()
        heading = re.match(r"^(#{1,3})\s+(.*)$", line)
        bullet = re.match(r"^[-*]\s+(.*)$", line)
        if heading or bullet or not line:
            if paragraph:
                yield "paragraph", " ".join(paragraph)
                paragraph = []
        if heading:
            yield f"h{len(heading.group(1))}", heading.group(2)
        elif bullet:
            yield "bullet", bullet.group(1)
        elif line:
            paragraph.append(line)
    if paragraph:
        yield "paragraph", " ".join(paragraph)


def _inline(text: str) -> str:
    return _BOLD.sub(r"<b>\1</b>", escape(text))


def export_pdf(title: str, content: Optional[str], company_name: Optional[str] = None) -> bytes:
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        topMargin=0.75 * inch,
        bottomMargin=0.75 * inch,
        leftMargin=0.75 * inch,
        rightMargin=0.75 * inch,
        title=title,
    )
    styles = getSampleStyleSheet()
    header_style = ParagraphStyle("Header", parent=styles["Normal"], fontSize=9, textColor=colors.grey)
    title_style = ParagraphStyle(
        "DocTitle", parent=styles["Heading1"], fontSize=20, alignment=TA_CENTER, spaceAfter=20, fontName="Helvetica-Bold"
    )
    body_style = ParagraphStyle("Body", parent=styles["BodyText"], fontSize=10, leading=14, alignment=TA_JUSTIFY)
    heading_styles = {"h1": styles["Heading1"], "h2": styles["Heading2"], "h3": styles["Heading3"]}

    story = []
    if company_name:
        story.append(Paragraph(escape(company_name), header_style))
        story.append(Spacer(1, 0.2 * inch))
    story.append(Paragraph(escape(title), title_style))

    bullets = []
    for kind, text in iter_blocks(content):
        if kind != "bullet" and bullets:
            story.append(ListFlowable(bullets, bulletType="bullet"))
            bullets = []
        if kind == "bullet":
            bullets.append(ListItem(Paragraph(_inline(text), body_style)))
        elif kind in heading_styles:
            story.append(Paragraph(_inline(text), heading_styles[kind]))
        else:
            story.append(Paragraph(_inline(text), body_style))
            story.append(Spacer(1, 0.08 * inch))
    if bullets:
        story.append(ListFlowable(bullets, bulletType="bullet"))

    story.append(Spacer(1, 0.3 * inch))
    story.append(Paragraph(f"Généré le {utcnow().strftime('%d/%m/%Y')}", header_style))
    doc.build(story)
    return buffer.getvalue()


def export_docx(title: str, content: Optional[str], company_name: Optional[str] = None) -> bytes:
    document = DocxDocument()
    if company_name:
        header = document.sections[0].header.paragraphs[0]
        header.text = company_name
    document.add_heading(title, level=0)

    for kind, text in iter_blocks(content):
        plain = _BOLD.sub(r"\1", text)
        if kind in ("h1", "h2", "h3"):
            document.add_heading(plain, level=int(kind[1]))
        elif kind == "bullet":
            document.add_paragraph(plain, style="List Bullet")
        else:
            paragraph = document.add_paragraph(plain)
            for run in paragraph.runs:
                run.font.size = Pt(11)

    buffer = io.BytesIO()
    document.save(buffer)
    return buffer.getvalue()
