"""Ledger1 CMS core: credentials, sessions, authorization and content storage."""

__version__ = "1.0.0"
