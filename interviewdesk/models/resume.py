"""
Resume models for InterviewDesk
"""

from enum import Enum

from pydantic import BaseModel


class ResumeMediaType(str, Enum):
    """Media types accepted for resume upload."""

    PDF = "application/pdf"
    DOCX = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


class ResumeData(BaseModel):
    """Text and contact details pulled out of a resume."""

    text: str
    name: str | None = None
    email: str | None = None
    phone: str | None = None
