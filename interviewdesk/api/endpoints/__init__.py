"""
API endpoint modules for InterviewDesk
"""

from interviewdesk.api.endpoints import interview, report, metadata

__all__ = ["interview", "report", "metadata"]
