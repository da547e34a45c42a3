"""
External collaborators consulted before a vote is admitted.

The ledger treats election administration, the eligibility registry and the
voting-token service as boolean oracles. Two variants implement the same
Protocol:

- StaticCollaborators: fixed answers, for tests and local development
- HttpCollaborators: calls the services at the addresses the ledger was
  configured with
"""

from functools import partial
from typing import Any, Callable, Iterable, Optional, Protocol, runtime_checkable
from urllib.parse import quote

import httpx
import structlog

from ballot_ledger.core.config import Settings, settings
from ballot_ledger.models.vote import LedgerDependencies, VoterVoteKey

logger = structlog.get_logger(__name__)


@runtime_checkable
class ElectionCollaborators(Protocol):
    """Protocol defining the three oracles the ledger consults."""

    async def is_election_active(self, election_id: int) -> bool: ...
    async def is_voter_eligible(self, election_id: int, voter: str) -> bool: ...
    async def burn_voting_token(self, election_id: int, voter: str) -> bool: ...


CollaboratorsFactory = Callable[[LedgerDependencies], ElectionCollaborators]


class StaticCollaborators:
    """
    Collaborators with fixed answers.

    Args:
        eligible_voters: Voters eligible in every election
        active_elections: Elections considered active; None means all of them
        burn_succeeds: Outcome of every token burn
    """

    def __init__(
        self,
        eligible_voters: Iterable[str] = (),
        active_elections: Optional[Iterable[int]] = None,
        burn_succeeds: bool = True,
    ):
        self.eligible_voters = set(eligible_voters)
        self.active_elections = None if active_elections is None else set(active_elections)
        self.burn_succeeds = burn_succeeds
        self.burned: list[VoterVoteKey] = []

    async def is_election_active(self, election_id: int) -> bool:
        return self.active_elections is None or election_id in self.active_elections

    async def is_voter_eligible(self, election_id: int, voter: str) -> bool:
        return voter in self.eligible_voters

    async def burn_voting_token(self, election_id: int, voter: str) -> bool:
        if self.burn_succeeds:
            self.burned.append(VoterVoteKey(election_id, voter))
        return self.burn_succeeds


class HttpCollaborators:
    """
    Collaborators reached over HTTP.

    Each configured address is the base URL of a service:

    - admin: ``GET /elections/{id}/status`` -> ``{"active": bool}``
    - eligibility registry: ``GET /elections/{id}/voters/{voter}`` -> ``{"eligible": bool}``
    - token service: ``POST /elections/{id}/burn`` with ``{"voter": ...}`` -> ``{"burned": bool}``

    Any failure (transport error, non-200 status, malformed body) answers
    False, so a broken collaborator can never admit a vote.
    """

    def __init__(
        self,
        dependencies: LedgerDependencies,
        timeout: float = 5.0,
        api_key: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize with the collaborator addresses.

        Args:
            dependencies: Configured collaborator base URLs
            timeout: Per-request timeout in seconds
            api_key: Optional bearer token sent to every collaborator
            client: Shared client; a short-lived one is opened per request if None
        """
        self.dependencies = dependencies
        self.timeout = timeout
        self.api_key = api_key
        self._client = client

    def _url(self, base: str, path: str) -> str:
        return f"{base.rstrip('/')}{path}"

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    async def _send(self, client: httpx.AsyncClient, method: str, url: str, **kwargs: Any) -> httpx.Response:
        return await client.request(method, url, headers=self._headers(), timeout=self.timeout, **kwargs)

    async def _request(self, method: str, url: str, **kwargs: Any) -> Optional[dict[str, Any]]:
        """Perform a request and return its JSON object, or None on any failure."""
        try:
            if self._client is not None:
                response = await self._send(self._client, method, url, **kwargs)
            else:
                async with httpx.AsyncClient() as client:
                    response = await self._send(client, method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.warning("collaborator_request_failed", method=method, url=url, error=str(e))
            return None

        if response.status_code != 200:
            logger.warning(
                "collaborator_unexpected_status",
                method=method,
                url=url,
                status_code=response.status_code,
            )
            return None

        try:
            data = response.json()
        except ValueError:
            logger.warning("collaborator_invalid_json", method=method, url=url)
            return None

        if not isinstance(data, dict):
            logger.warning("collaborator_invalid_payload", method=method, url=url)
            return None
        return data

    @staticmethod
    def _flag(data: Optional[dict[str, Any]], field: str) -> bool:
        # Only a literal JSON true counts
        return data is not None and data.get(field) is True

    async def is_election_active(self, election_id: int) -> bool:
        url = self._url(self.dependencies.admin, f"/elections/{election_id}/status")
        return self._flag(await self._request("GET", url), "active")

    async def is_voter_eligible(self, election_id: int, voter: str) -> bool:
        url = self._url(
            self.dependencies.eligibility_registry,
            f"/elections/{election_id}/voters/{quote(voter, safe='')}",
        )
        return self._flag(await self._request("GET", url), "eligible")

    async def burn_voting_token(self, election_id: int, voter: str) -> bool:
        url = self._url(self.dependencies.token_service, f"/elections/{election_id}/burn")
        return self._flag(await self._request("POST", url, json={"voter": voter}), "burned")


def get_collaborators_factory(config: Optional[Settings] = None) -> CollaboratorsFactory:
    """
    Get the collaborator factory named by COLLABORATOR_BACKEND.

    The ledger calls the factory with its dependency configuration once
    ``configure`` succeeds.
    """
    config = config or settings
    if config.COLLABORATOR_BACKEND == "static":
        static = StaticCollaborators(
            eligible_voters=config.static_eligible_voters_list,
            active_elections=config.static_active_elections_list,
        )
        logger.info("collaborators_selected", backend="static")
        return lambda dependencies: static

    if config.COLLABORATOR_BACKEND == "http":
        logger.info("collaborators_selected", backend="http")
        return partial(
            HttpCollaborators,
            timeout=config.COLLABORATOR_TIMEOUT_SECONDS,
            api_key=config.COLLABORATOR_API_KEY,
        )

    raise NotImplementedError(f"Unsupported collaborator backend: {config.COLLABORATOR_BACKEND}")
