"""
Tests for the repository provider.
"""

import pytest
from pydantic import ValidationError

from ballot_ledger.core.config import Settings
from ballot_ledger.repositories.provider import VoteRepositoryProtocol, get_vote_repository
from ballot_ledger.repositories.vote_repository import InMemoryVoteRepository


@pytest.mark.unit
class TestRepositoryProvider:
    """Test get_vote_repository."""

    def test_memory_backend(self) -> None:
        repository = get_vote_repository(Settings(REPOSITORY_BACKEND="memory"))

        assert isinstance(repository, InMemoryVoteRepository)
        assert isinstance(repository, VoteRepositoryProtocol)

    def test_each_call_returns_fresh_repository(self) -> None:
        """Test that ledgers never share storage by accident."""
        assert get_vote_repository() is not get_vote_repository()

    def test_unknown_backend_rejected_by_settings(self) -> None:
        with pytest.raises(ValidationError):
            Settings(REPOSITORY_BACKEND="cosmos")
