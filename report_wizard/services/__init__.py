"""
Services for the Report Wizard module.

These services encapsulate business logic and external integrations,
keeping components focused on presentation.
"""

from .submission_service import SubmissionService

__all__ = [
    'SubmissionService',
]
