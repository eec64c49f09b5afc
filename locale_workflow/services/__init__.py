"""
locale-workflow services

Import services by their module path, e.g.
`from locale_workflow.services.join_scanner import SchemaJoinScanner`,
so only what a caller uses is loaded.
"""

__all__ = []
