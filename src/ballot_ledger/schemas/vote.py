"""
Vote-related Pydantic schemas.

These schemas are the shapes callers exchange with the ledger, as opposed to
the stored records in ``ballot_ledger.models``.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class BallotSubmission(BaseModel):
    """
    Ballot handed to the ledger for casting.

    Fields are validated strictly: ``"1"`` is not an election id and a
    bytearray is not a ballot. Ballot and proof lengths are not checked
    here; the ledger checks them after the election, eligibility and
    double-vote checks.
    """

    model_config = ConfigDict(strict=True)

    election_id: int
    candidate_id: int
    encrypted_ballot: bytes = Field(..., repr=False)
    proof_hash: bytes = Field(..., repr=False)
    nonce: int


class VoteAttestation(BaseModel):
    """Result of a successful verification (read projection of a Vote)."""

    election_id: int
    voter: str
    timestamp: int
    verified: Literal[True] = True

    model_config = {"frozen": True}
