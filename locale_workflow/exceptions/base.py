"""
Base domain exceptions
"""


class DomainException(Exception):
    """Base class for every locale-workflow error"""

    def __init__(self, message: str, code: str = "DOMAIN_ERROR",
                 details: dict = None):
        super().__init__(message)
        self.code = code
        self.details = details or {}

