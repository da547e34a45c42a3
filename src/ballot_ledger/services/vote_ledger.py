"""
Vote Ledger Service

Admits, verifies and challenges votes:
1. Configuration - collaborator addresses are set once, before any vote
2. Admission - election, eligibility, double-vote, ballot, proof and token
   checks run in a fixed order; the first failure rejects the cast
3. Verification - a stored, unchallenged vote is checked against a claimed
   candidate and the exact proof bytes
4. Challenge - a vote is flagged invalid; its voter's slot stays occupied

Every failure raises a LedgerError carrying a stable numeric code and leaves
the ledger untouched.
"""

import asyncio
import hmac
from enum import IntEnum
from typing import Optional

import structlog
from pydantic import TypeAdapter

from ballot_ledger.core.config import Settings
from ballot_ledger.models.vote import PROOF_HASH_LENGTH, LedgerDependencies, Vote, VoterVoteKey
from ballot_ledger.repositories.provider import VoteRepositoryProtocol, get_vote_repository
from ballot_ledger.repositories.vote_repository import DuplicateVoteKeyError
from ballot_ledger.schemas.vote import BallotSubmission, VoteAttestation
from ballot_ledger.services.block_height import BlockHeightCounter, BlockHeightSource
from ballot_ledger.services.collaborators import (
    CollaboratorsFactory,
    ElectionCollaborators,
    get_collaborators_factory,
)
from ballot_ledger.services.lock_service import KeyedLockService

logger = structlog.get_logger(__name__)

_voter_adapter = TypeAdapter(str)


# =============================================================================
# Errors
# =============================================================================


class LedgerErrorCode(IntEnum):
    """Error codes returned to callers. Values are a stable contract."""

    CONFIGURATION_MISSING = 200
    VOTER_INELIGIBLE = 201
    ELECTION_NOT_ACTIVE = 202
    ALREADY_VOTED = 203
    INVALID_BALLOT = 204
    VOTE_CAST_FAILED = 205
    INVALID_PROOF = 206
    VOTE_NOT_FOUND = 207
    WRONG_CANDIDATE = 208
    TOKEN_BURN_FAILED = 209


class LedgerError(Exception):
    """Base exception for ledger operations."""

    code: LedgerErrorCode
    default_message = "Ledger operation failed"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.default_message)


class ConfigurationMissingError(LedgerError):
    code = LedgerErrorCode.CONFIGURATION_MISSING
    default_message = "Ledger dependencies are not configured"


class ElectionNotActiveError(LedgerError):
    code = LedgerErrorCode.ELECTION_NOT_ACTIVE
    default_message = "Election is not active"


class VoterIneligibleError(LedgerError):
    code = LedgerErrorCode.VOTER_INELIGIBLE
    default_message = "Voter is not eligible for this election"


class AlreadyVotedError(LedgerError):
    code = LedgerErrorCode.ALREADY_VOTED
    default_message = "Voter has already voted in this election"


class InvalidBallotError(LedgerError):
    code = LedgerErrorCode.INVALID_BALLOT
    default_message = "Encrypted ballot is empty"


class InvalidProofError(LedgerError):
    code = LedgerErrorCode.INVALID_PROOF
    default_message = "Proof hash is invalid"


class TokenBurnFailedError(LedgerError):
    code = LedgerErrorCode.TOKEN_BURN_FAILED
    default_message = "Voting token could not be burned"


class VoteCastFailedError(LedgerError):
    code = LedgerErrorCode.VOTE_CAST_FAILED
    default_message = "Vote could not be recorded"


class VoteNotFoundError(LedgerError):
    code = LedgerErrorCode.VOTE_NOT_FOUND
    default_message = "Vote not found or already challenged"


class WrongCandidateError(LedgerError):
    code = LedgerErrorCode.WRONG_CANDIDATE
    default_message = "Vote was cast for a different candidate"


# =============================================================================
# Ledger
# =============================================================================


class VoteLedger:
    """
    One-vote-per-voter-per-election ledger.

    Casts for the same (election, voter) pair are serialized by a keyed
    lock for their whole duration; id allocation and challenges share a
    single commit lock.

    Usage:
        ledger = create_vote_ledger()
        await ledger.configure("admin", "registry", "token")
        vote_id = await ledger.cast_vote("ST1VOTER", 1, 5, ballot, proof, nonce=123)
    """

    def __init__(
        self,
        repository: Optional[VoteRepositoryProtocol] = None,
        collaborators_factory: Optional[CollaboratorsFactory] = None,
        clock: Optional[BlockHeightSource] = None,
        locks: Optional[KeyedLockService] = None,
    ):
        """
        Initialize the ledger.

        Args:
            repository: Vote storage. Defaults to the configured backend.
            collaborators_factory: Builds the oracles from the dependency
                configuration. Defaults to the configured backend.
            clock: Block height source used for vote timestamps
            locks: Per-voter lock service
        """
        self.repository = repository if repository is not None else get_vote_repository()
        self._collaborators_factory = collaborators_factory or get_collaborators_factory()
        self.clock = clock if clock is not None else BlockHeightCounter()
        self._voter_locks = locks if locks is not None else KeyedLockService()
        self._commit_lock = asyncio.Lock()
        self._dependencies: Optional[LedgerDependencies] = None
        self._collaborators: Optional[ElectionCollaborators] = None

    # ========================================================================
    # Configuration
    # ========================================================================

    @property
    def is_configured(self) -> bool:
        return self._dependencies is not None

    @property
    def dependencies(self) -> Optional[LedgerDependencies]:
        return self._dependencies

    async def configure(self, admin: str, eligibility_registry: str, token_service: str) -> bool:
        """
        Set the collaborator addresses.

        Returns:
            True if this call configured the ledger, False if it was
            already configured (nothing changes in that case)
        """
        if self._dependencies is not None:
            logger.warning("ledger_reconfiguration_rejected")
            return False

        dependencies = LedgerDependencies(
            admin=admin,
            eligibility_registry=eligibility_registry,
            token_service=token_service,
        )
        collaborators = self._collaborators_factory(dependencies)

        self._dependencies = dependencies
        self._collaborators = collaborators
        logger.info(
            "ledger_configured",
            admin=admin,
            eligibility_registry=eligibility_registry,
            token_service=token_service,
        )
        return True

    # ========================================================================
    # Casting
    # ========================================================================

    async def cast_vote(
        self,
        voter: str,
        election_id: int,
        candidate_id: int,
        encrypted_ballot: bytes,
        proof_hash: bytes,
        nonce: int,
    ) -> int:
        """
        Cast a vote on behalf of ``voter``.

        Returns:
            The id of the new vote

        Raises:
            ValidationError: An argument has the wrong type; nothing is checked
                or consumed
            LedgerError: The subclass for the first failing admission check
        """
        submission = BallotSubmission(
            election_id=election_id,
            candidate_id=candidate_id,
            encrypted_ballot=encrypted_ballot,
            proof_hash=proof_hash,
            nonce=nonce,
        )
        return await self.cast_submission(voter, submission)

    async def cast_submission(self, voter: str, submission: BallotSubmission) -> int:
        """Cast a vote from a BallotSubmission."""
        voter = _voter_adapter.validate_python(voter, strict=True)
        key = VoterVoteKey(submission.election_id, voter)

        async with self._voter_locks.acquire(key):
            try:
                await self._admit(key, submission.encrypted_ballot, submission.proof_hash)
            except LedgerError as e:
                logger.info(
                    "vote_rejected",
                    election_id=key.election_id,
                    voter=voter,
                    code=e.code.name,
                )
                raise

            async with self._commit_lock:
                try:
                    vote = await self.repository.create(
                        election_id=key.election_id,
                        voter=voter,
                        candidate_id=submission.candidate_id,
                        encrypted_ballot=submission.encrypted_ballot,
                        proof_hash=submission.proof_hash,
                        timestamp=self.clock.current_height(),
                        nonce=submission.nonce,
                    )
                except DuplicateVoteKeyError as e:
                    logger.error("vote_commit_conflict", election_id=key.election_id, voter=voter)
                    raise VoteCastFailedError(str(e)) from e

        logger.info(
            "vote_cast",
            vote_id=vote.vote_id,
            election_id=vote.election_id,
            voter=voter,
            timestamp=vote.timestamp,
        )
        return vote.vote_id

    async def _admit(self, key: VoterVoteKey, encrypted_ballot: bytes, proof_hash: bytes) -> None:
        """Run the admission checks in order, raising on the first failure."""
        collaborators = self._collaborators
        if self._dependencies is None or collaborators is None:
            raise ConfigurationMissingError()

        if not await collaborators.is_election_active(key.election_id):
            raise ElectionNotActiveError()

        if not await collaborators.is_voter_eligible(key.election_id, key.voter):
            raise VoterIneligibleError()

        if await self.repository.exists_for_voter(key):
            raise AlreadyVotedError()

        if len(encrypted_ballot) == 0:
            raise InvalidBallotError()

        if len(proof_hash) != PROOF_HASH_LENGTH:
            raise InvalidProofError(
                f"Proof hash must be {PROOF_HASH_LENGTH} bytes, got {len(proof_hash)}"
            )

        # Last check: the token is only consumed once everything else passed
        if not await collaborators.burn_voting_token(key.election_id, key.voter):
            raise TokenBurnFailedError()

    # ========================================================================
    # Verification and Challenge
    # ========================================================================

    async def verify_vote(
        self,
        vote_id: int,
        expected_candidate: int,
        expected_proof: bytes,
    ) -> VoteAttestation:
        """
        Verify a vote against a claimed candidate and proof.

        Read-only. A challenged vote cannot be verified.

        Raises:
            VoteNotFoundError: Unknown or challenged vote
            WrongCandidateError: Candidate does not match
            InvalidProofError: Proof bytes do not match
        """
        vote = await self.repository.get(vote_id)
        if vote is None or not vote.status:
            raise VoteNotFoundError(f"Vote {vote_id} not found or already challenged")

        if vote.candidate_id != expected_candidate:
            raise WrongCandidateError()

        if not hmac.compare_digest(vote.proof_hash, bytes(expected_proof)):
            raise InvalidProofError("Proof does not match the recorded proof hash")

        return VoteAttestation(
            election_id=vote.election_id,
            voter=vote.voter,
            timestamp=vote.timestamp,
        )

    async def challenge_vote(self, vote_id: int) -> bool:
        """
        Flag a vote as invalid. There is no way back.

        Any caller may challenge; authorization belongs to whoever exposes
        this operation.

        Raises:
            VoteNotFoundError: Unknown or already challenged vote
        """
        async with self._commit_lock:
            vote = await self.repository.get(vote_id)
            if vote is None or not vote.status:
                raise VoteNotFoundError(f"Vote {vote_id} not found or already challenged")
            await self.repository.mark_challenged(vote_id)

        logger.info("vote_challenged", vote_id=vote_id, election_id=vote.election_id)
        return True

    # ========================================================================
    # Queries
    # ========================================================================

    async def get_vote(self, vote_id: int) -> Optional[Vote]:
        return await self.repository.get(vote_id)

    async def has_voted(self, election_id: int, voter: str) -> bool:
        return await self.repository.exists_for_voter(VoterVoteKey(election_id, voter))

    async def next_vote_id(self) -> int:
        return await self.repository.next_vote_id()

    async def count_votes(self) -> int:
        return await self.repository.count()


def create_vote_ledger(config: Optional[Settings] = None) -> VoteLedger:
    """Build a ledger wired to the backends named in settings."""
    return VoteLedger(
        repository=get_vote_repository(config),
        collaborators_factory=get_collaborators_factory(config),
    )
