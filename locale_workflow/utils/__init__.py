"""
Utility functions for locale-workflow
"""

from .id_generator import generate_id
from .path_utils import first_path_segment, slugify

__all__ = ["generate_id", "first_path_segment", "slugify"]
