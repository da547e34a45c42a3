"""
Ballot Ledger - vote admission and verification ledger.

Records one vote per eligible voter per election, rejects double voting,
checks ballot integrity, and supports verification of a vote against a
claimed candidate and proof as well as one-way challenge of a recorded vote.
Election administration, eligibility and voting tokens are external
collaborators consulted through ``services.collaborators``.
"""

from ballot_ledger.models.vote import LedgerDependencies, Vote, VoterVoteKey
from ballot_ledger.schemas.vote import BallotSubmission, VoteAttestation
from ballot_ledger.services.vote_ledger import (
    AlreadyVotedError,
    ConfigurationMissingError,
    ElectionNotActiveError,
    InvalidBallotError,
    InvalidProofError,
    LedgerError,
    LedgerErrorCode,
    TokenBurnFailedError,
    VoteCastFailedError,
    VoteLedger,
    VoteNotFoundError,
    VoterIneligibleError,
    WrongCandidateError,
    create_vote_ledger,
)

__version__ = "1.0.0"

__all__ = [
    "AlreadyVotedError",
    "BallotSubmission",
    "ConfigurationMissingError",
    "ElectionNotActiveError",
    "InvalidBallotError",
    "InvalidProofError",
    "LedgerDependencies",
    "LedgerError",
    "LedgerErrorCode",
    "TokenBurnFailedError",
    "Vote",
    "VoteAttestation",
    "VoteCastFailedError",
    "VoteLedger",
    "VoteNotFoundError",
    "VoterIneligibleError",
    "VoterVoteKey",
    "WrongCandidateError",
    "create_vote_ledger",
]
