"""Ledger: CSV transaction import service."""
