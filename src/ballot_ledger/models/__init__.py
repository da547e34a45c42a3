"""Ledger record models."""

from ballot_ledger.models.vote import (
    PROOF_HASH_LENGTH,
    LedgerDependencies,
    Vote,
    VoterVoteKey,
)

__all__ = [
    "PROOF_HASH_LENGTH",
    "LedgerDependencies",
    "Vote",
    "VoterVoteKey",
]
