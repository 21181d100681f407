"""
InterviewDesk - Timed Technical Screening Interviews

Runs a single candidate through a timed, easiest-first question set,
scores each answer and produces a final assessment.
"""

__version__ = "0.1.0"
__author__ = "InterviewDesk Team"
