"""
Tests for ledger settings.
"""

import pytest
from pydantic import ValidationError

from ballot_ledger.core.config import Settings, get_settings


@pytest.mark.unit
class TestSettings:
    """Test Settings loading and validation."""

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for name in ("COLLABORATOR_BACKEND", "STATIC_ELIGIBLE_VOTERS", "LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)

        config = Settings(_env_file=None)

        assert config.APP_NAME == "BallotLedger"
        assert config.REPOSITORY_BACKEND == "memory"
        assert config.COLLABORATOR_BACKEND == "http"
        assert config.COLLABORATOR_TIMEOUT_SECONDS == 5.0
        assert config.LOG_LEVEL == "INFO"
        assert config.static_eligible_voters_list == []
        assert config.static_active_elections_list is None

    def test_reads_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("COLLABORATOR_BACKEND", "static")
        monkeypatch.setenv("STATIC_ACTIVE_ELECTIONS", "1, 2,3")

        config = Settings(_env_file=None)

        assert config.COLLABORATOR_BACKEND == "static"
        assert config.static_active_elections_list == [1, 2, 3]

    def test_csv_lists_skip_blanks(self) -> None:
        config = Settings(STATIC_ELIGIBLE_VOTERS=" ST1VOTER ,, ST2VOTER ,")

        assert config.static_eligible_voters_list == ["ST1VOTER", "ST2VOTER"]

    def test_unknown_collaborator_backend(self) -> None:
        with pytest.raises(ValidationError):
            Settings(COLLABORATOR_BACKEND="grpc")

    @pytest.mark.parametrize("timeout", [0, -1.5])
    def test_timeout_must_be_positive(self, timeout: float) -> None:
        with pytest.raises(ValidationError):
            Settings(COLLABORATOR_TIMEOUT_SECONDS=timeout)

    def test_settings_are_cached(self) -> None:
        assert get_settings() is get_settings()
