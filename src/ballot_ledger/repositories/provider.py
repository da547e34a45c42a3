"""
Repository provider.

Defines the storage interface the ledger depends on and returns the
configured implementation.

Usage:
    from ballot_ledger.repositories.provider import get_vote_repository

    repository = get_vote_repository()
    ledger = VoteLedger(repository=repository, ...)
"""

from typing import Optional, Protocol, runtime_checkable

import structlog

from ballot_ledger.core.config import Settings, settings
from ballot_ledger.models.vote import Vote, VoterVoteKey

logger = structlog.get_logger(__name__)


# =============================================================================
# Repository Protocols (Interfaces)
# =============================================================================


@runtime_checkable
class VoteRepositoryProtocol(Protocol):
    """Protocol defining vote repository operations."""

    async def get(self, vote_id: int) -> Optional[Vote]: ...
    async def find_vote_id(self, key: VoterVoteKey) -> Optional[int]: ...
    async def exists_for_voter(self, key: VoterVoteKey) -> bool: ...
    async def next_vote_id(self) -> int: ...
    async def count(self) -> int: ...
    async def create(
        self,
        election_id: int,
        voter: str,
        candidate_id: int,
        encrypted_ballot: bytes,
        proof_hash: bytes,
        timestamp: int,
        nonce: int,
    ) -> Vote: ...
    async def mark_challenged(self, vote_id: int) -> Optional[Vote]: ...


# =============================================================================
# Repository Factory Functions
# =============================================================================


def get_vote_repository(config: Optional[Settings] = None) -> VoteRepositoryProtocol:
    """Get the vote repository named by REPOSITORY_BACKEND."""
    config = config or settings
    if config.REPOSITORY_BACKEND == "memory":
        from ballot_ledger.repositories.vote_repository import InMemoryVoteRepository

        logger.info("vote_repository_initialized", backend="memory")
        return InMemoryVoteRepository()

    raise NotImplementedError(f"Unsupported repository backend: {config.REPOSITORY_BACKEND}")
