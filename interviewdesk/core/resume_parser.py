"""
Resume extraction for InterviewDesk

Pulls plain text out of PDF and DOCX uploads and picks out the
candidate's name, email and phone number.
"""

import logging
import re
from io import BytesIO

from docx import Document
from pypdf import PdfReader

from interviewdesk.config.settings import get_settings
from interviewdesk.core.errors import FileTooLarge, ParseFailure, UnsupportedFormat
from interviewdesk.models.resume import ResumeData, ResumeMediaType

logger = logging.getLogger(__name__)


EMAIL_PATTERN = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")
PHONE_PATTERN = re.compile(r"(\+?1?[-.\s]?)?\(?([0-9]{3})\)?[-.\s]?([0-9]{3})[-.\s]?([0-9]{4})")


def extract_email(text: str) -> str | None:
    match = EMAIL_PATTERN.search(text)
    return match.group(0) if match else None


def extract_phone(text: str) -> str | None:
    match = PHONE_PATTERN.search(text)
    return match.group(0).strip() if match else None


def extract_name(text: str) -> str | None:
    """First of the opening five lines that reads like a 2-4 word proper name."""
    lines = [line.strip() for line in text.splitlines() if line.strip()]

    for line in lines[:5]:
        words = line.split()
        if not 2 <= len(words) <= 4:
            continue
        if all(
            1 < len(word) < 20
            and word[0].isupper()
            and not re.search(r"[0-9@]", word)
            for word in words
        ):
            return line

    return None


class ResumeParser:
    """
    Validates and parses resume uploads.

    Media type and size are checked before any parsing is attempted.
    """

    def __init__(self, max_bytes: int | None = None):
        if max_bytes is None:
            max_bytes = get_settings().max_resume_bytes
        self.max_bytes = max_bytes

    def validate(self, data: bytes, media_type: str) -> ResumeMediaType:
        """
        Check an upload before parsing.

        Raises:
            UnsupportedFormat: Not a PDF or DOCX
            FileTooLarge: Larger than the configured limit
        """
        try:
            resolved = ResumeMediaType(media_type)
        except ValueError:
            raise UnsupportedFormat(
                f"Unsupported file format '{media_type}'. Please upload a PDF or DOCX file."
            )

        if len(data) > self.max_bytes:
            raise FileTooLarge(
                f"File size must be less than {self.max_bytes // (1024 * 1024)}MB."
            )

        return resolved

    def parse(self, data: bytes, media_type: str, file_name: str | None = None) -> ResumeData:
        """
        Extract text and contact details from a resume.

        Args:
            data: Raw document bytes
            media_type: Declared MIME type
            file_name: Original file name, for logging

        Returns:
            ResumeData with text and whatever contact fields were found
        """
        resolved = self.validate(data, media_type)

        try:
            if resolved == ResumeMediaType.PDF:
                text = self._parse_pdf(data)
            else:
                text = self._parse_docx(data)
        except Exception as e:
            logger.warning(f"Failed to parse resume {file_name or ''}: {e}")
            raise ParseFailure(
                f"Failed to parse {resolved.name} file. Please make sure the file is not corrupted."
            ) from e

        logger.info(f"Parsed resume {file_name or ''} ({len(text)} chars)")
        return ResumeData(
            text=text,
            name=extract_name(text),
            email=extract_email(text),
            phone=extract_phone(text),
        )

    def _parse_pdf(self, data: bytes) -> str:
        reader = PdfReader(BytesIO(data))
        pages = []
        for page in reader.pages:
            page_text = page.extract_text()
            if page_text:
                pages.append(page_text)
        return "\n".join(pages)

    def _parse_docx(self, data: bytes) -> str:
        document = Document(BytesIO(data))
        return "\n".join(p.text for p in document.paragraphs)
