"""Repository modules for ledger storage."""

from ballot_ledger.repositories.provider import VoteRepositoryProtocol, get_vote_repository
from ballot_ledger.repositories.vote_repository import (
    DuplicateVoteKeyError,
    InMemoryVoteRepository,
)

__all__ = [
    "DuplicateVoteKeyError",
    "InMemoryVoteRepository",
    "VoteRepositoryProtocol",
    "get_vote_repository",
]
