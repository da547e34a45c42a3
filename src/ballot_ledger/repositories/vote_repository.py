"""
In-memory vote repository.

Holds the vote table, the voter-vote index and the next-id counter.
"""

from typing import Optional

import structlog

from ballot_ledger.models.vote import Vote, VoterVoteKey

logger = structlog.get_logger(__name__)


class DuplicateVoteKeyError(Exception):
    """Raised when a vote is created for an occupied (election, voter) slot."""

    def __init__(self, key: VoterVoteKey):
        self.key = key
        super().__init__(f"Voter {key.voter} already holds a vote in election {key.election_id}")


class InMemoryVoteRepository:
    """
    Repository for vote operations kept in process memory.

    Write operations run to completion without awaiting anything, so each of
    them is atomic with respect to other coroutines on the same event loop.
    """

    def __init__(self) -> None:
        self._votes: dict[int, Vote] = {}
        self._voter_votes: dict[VoterVoteKey, int] = {}
        self._next_vote_id = 0

    # ========================================================================
    # Read Operations
    # ========================================================================

    async def get(self, vote_id: int) -> Optional[Vote]:
        """Get a vote by id."""
        return self._votes.get(vote_id)

    async def find_vote_id(self, key: VoterVoteKey) -> Optional[int]:
        """Find the id of the vote a voter cast in an election."""
        return self._voter_votes.get(key)

    async def exists_for_voter(self, key: VoterVoteKey) -> bool:
        """Check if the voter already occupies their slot in the election."""
        return key in self._voter_votes

    async def next_vote_id(self) -> int:
        """Id the next created vote will receive."""
        return self._next_vote_id

    async def count(self) -> int:
        """Total number of recorded votes, challenged ones included."""
        return len(self._votes)

    # ========================================================================
    # Write Operations
    # ========================================================================

    async def create(
        self,
        election_id: int,
        voter: str,
        candidate_id: int,
        encrypted_ballot: bytes,
        proof_hash: bytes,
        timestamp: int,
        nonce: int,
    ) -> Vote:
        """
        Create a vote record and its index entry.

        Allocates the next sequential vote id. Nothing is stored if the
        record fails validation or the voter's slot is taken.
        """
        vote = Vote(
            vote_id=self._next_vote_id,
            election_id=election_id,
            voter=voter,
            candidate_id=candidate_id,
            encrypted_ballot=encrypted_ballot,
            proof_hash=proof_hash,
            timestamp=timestamp,
            nonce=nonce,
            status=True,
        )
        if vote.key in self._voter_votes:
            raise DuplicateVoteKeyError(vote.key)

        self._votes[vote.vote_id] = vote
        self._voter_votes[vote.key] = vote.vote_id
        self._next_vote_id += 1

        logger.debug("vote_stored", vote_id=vote.vote_id, election_id=vote.election_id)
        return vote

    async def mark_challenged(self, vote_id: int) -> Optional[Vote]:
        """
        Flag a vote as challenged.

        Returns the updated vote, or None if the id is unknown. The index
        entry is kept so the voter's slot stays occupied.
        """
        vote = self._votes.get(vote_id)
        if vote is None:
            return None
        challenged = vote.model_copy(update={"status": False})
        self._votes[vote_id] = challenged
        return challenged
