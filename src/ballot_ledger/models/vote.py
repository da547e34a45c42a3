"""
Vote ledger records.

These Pydantic models define what the ledger stores: one Vote per cast
ballot, the composite key of the voter-vote index, and the write-once
dependency configuration.
"""

from typing import NamedTuple

from pydantic import BaseModel, ConfigDict, Field

# Length of the proof commitment accompanying every ballot (SHA-256 sized)
PROOF_HASH_LENGTH = 32


class VoterVoteKey(NamedTuple):
    """Key of the voter-vote index: one slot per voter per election."""

    election_id: int
    voter: str


class Vote(BaseModel):
    """
    One cast ballot.

    Records are frozen: a challenge produces a copy with ``status=False``
    and every other field untouched.
    """

    model_config = ConfigDict(frozen=True)

    vote_id: int = Field(..., ge=0)
    election_id: int
    voter: str
    candidate_id: int
    encrypted_ballot: bytes = Field(..., min_length=1, repr=False)
    proof_hash: bytes = Field(
        ..., min_length=PROOF_HASH_LENGTH, max_length=PROOF_HASH_LENGTH, repr=False
    )
    timestamp: int = Field(..., ge=0, description="Block height at which the vote was recorded")
    nonce: int
    status: bool = True

    @property
    def key(self) -> VoterVoteKey:
        """Voter-vote index key of this vote."""
        return VoterVoteKey(self.election_id, self.voter)

    @property
    def is_active(self) -> bool:
        return self.status


class LedgerDependencies(BaseModel):
    """Addresses of the three external collaborators, set together once."""

    model_config = ConfigDict(frozen=True)

    admin: str = Field(..., min_length=1)
    eligibility_registry: str = Field(..., min_length=1)
    token_service: str = Field(..., min_length=1)
