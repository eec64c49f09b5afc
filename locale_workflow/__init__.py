"""
locale-workflow

Multi-locale document replication support: locale topology with draft
pairing, correlation identity for new docs, per-locale URL prefixes,
forward join discovery and the permanent commit ledger.
"""

__version__ = "0.1.0"
