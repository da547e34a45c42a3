"""Ledger services: admission, verification, collaborators and locking."""
