"""HTTP API for the Ledger1 CMS."""
