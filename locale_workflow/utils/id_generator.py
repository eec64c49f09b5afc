"""
Opaque identifier generation for workflow correlation ids and tokens
"""

from uuid import uuid4


def generate_id() -> str:
    """Collision-resistant opaque id (32 hex characters)."""
    return uuid4().hex
