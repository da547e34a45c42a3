"""
Pytest fixtures for ballot ledger tests.
"""

import os

import pytest

# Set test environment variables before importing the package
os.environ.setdefault("LOG_LEVEL", "DEBUG")
os.environ.setdefault("COLLABORATOR_BACKEND", "static")
os.environ.setdefault("STATIC_ELIGIBLE_VOTERS", "ST1VOTER,ST2VOTER")

from ballot_ledger.repositories.vote_repository import InMemoryVoteRepository  # noqa: E402
from ballot_ledger.services.block_height import BlockHeightCounter  # noqa: E402
from ballot_ledger.services.collaborators import StaticCollaborators  # noqa: E402
from ballot_ledger.services.vote_ledger import VoteLedger  # noqa: E402

@pytest.fixture
def ballot() -> bytes:
    """128-byte encrypted ballot."""
    return bytes([2]) * 128


@pytest.fixture
def proof() -> bytes:
    """32-byte proof hash."""
    return bytes([3]) * 32


@pytest.fixture
def collaborators() -> StaticCollaborators:
    """Collaborators with two eligible voters and every election active."""
    return StaticCollaborators(eligible_voters={"ST1VOTER", "ST2VOTER"})


@pytest.fixture
def repository() -> InMemoryVoteRepository:
    return InMemoryVoteRepository()


@pytest.fixture
def clock() -> BlockHeightCounter:
    return BlockHeightCounter()


@pytest.fixture
def ledger(
    repository: InMemoryVoteRepository,
    collaborators: StaticCollaborators,
    clock: BlockHeightCounter,
) -> VoteLedger:
    """Ledger that has not been configured yet."""
    return VoteLedger(
        repository=repository,
        collaborators_factory=lambda dependencies: collaborators,
        clock=clock,
    )


@pytest.fixture
async def configured_ledger(ledger: VoteLedger) -> VoteLedger:
    """Ledger configured with three distinct collaborator addresses."""
    assert await ledger.configure("ST1ADMIN", "ST1REGISTRY", "ST1TOKEN") is True
    return ledger
