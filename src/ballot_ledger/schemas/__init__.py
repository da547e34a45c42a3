"""Schemas exchanged with ledger callers."""

from ballot_ledger.schemas.vote import BallotSubmission, VoteAttestation

__all__ = [
    "BallotSubmission",
    "VoteAttestation",
]
