"""
Plain-text extraction from uploaded PDF and DOCX files.
"""
import io
import logging
from pathlib import Path
from typing import Optional

import docx
import pypdf

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = {".pdf", ".docx"}


def extract_text_from_pdf(content: bytes, max_pages: Optional[int] = None) -> str:
    reader = pypdf.PdfReader(io.BytesIO(content))
    pages_to_process = min(len(reader.pages), max_pages) if max_pages else len(reader.pages)
    text_content = []
    for page_num in range(pages_to_process):
        text_content.append(reader.pages[page_num].extract_text() or "")
    return "\n".join(text_content)


def extract_text_from_docx(content: bytes) -> str:
    document = docx.Document(io.BytesIO(content))
    parts = [paragraph.text for paragraph in document.paragraphs if paragraph.text.strip()]
    for table in document.tables:
        for row in table.rows:
            cells = [cell.text.strip() for cell in row.cells if cell.text.strip()]
            if cells:
                parts.append(" | ".join(cells))
    return "\n".join(parts)


def extract_text(filename: str, content: bytes, max_pages: Optional[int] = None) -> str:
    """
    Extract text from a PDF or DOCX payload.

    Raises ValueError for unsupported or unreadable files.
    """
    extension = Path(filename).suffix.lower()
    if extension not in SUPPORTED_EXTENSIONS:
        raise ValueError(f"Unsupported file type '{extension}'. Supported: {', '.join(sorted(SUPPORTED_EXTENSIONS))}")
    try:
        if extension == ".pdf":
            return extract_text_from_pdf(content, max_pages)
        return extract_text_from_docx(content)
    except Exception as e:
        logger.error(f"Error extracting text from {filename}: {e}")
        raise ValueError(f"Could not read {filename}")
