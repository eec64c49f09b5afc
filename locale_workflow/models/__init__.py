"""
Model definitions for locale-workflow
"""

from .client_options import WorkflowClientOptions
from .commit import CommitRecord
from .joins import JoinDescriptor
from .locale import DRAFT_SUFFIX, Locale

__all__ = [
    "CommitRecord",
    "DRAFT_SUFFIX",
    "JoinDescriptor",
    "Locale",
    "WorkflowClientOptions",
]
