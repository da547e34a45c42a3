"""Core configuration and logging for the ballot ledger."""
