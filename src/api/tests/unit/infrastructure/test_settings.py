"""Unit tests for infrastructure settings."""

from zoneinfo import ZoneInfo

import pytest
from pydantic import ValidationError

from infrastructure.settings import (
    ChangeFeedBackend,
    ChangeFeedSettings,
    DatabaseSettings,
    OIDCSettings,
    ReservationSettings,
)
from reservations.infrastructure.models import ReservationModel


class TestDatabaseSettings:
    def test_pool_max_must_be_at_least_min(self):
        with pytest.raises(ValidationError) as exc_info:
            DatabaseSettings(pool_min_connections=10, pool_max_connections=5)

        assert "pool_max_connections" in str(exc_info.value)

    def test_pool_max_equal_to_min_is_valid(self):
        settings = DatabaseSettings(pool_min_connections=5, pool_max_connections=5)
        assert settings.pool_max_connections == 5

    def test_pool_min_must_be_positive(self):
        with pytest.raises(ValidationError):
            DatabaseSettings(pool_min_connections=0)

    def test_reads_prefixed_environment(self, monkeypatch):
        monkeypatch.setenv("CAMPUS_RESERVE_DB_HOST", "db.internal")
        monkeypatch.setenv("CAMPUS_RESERVE_DB_PASSWORD", "hunter2")

        settings = DatabaseSettings()

        assert settings.host == "db.internal"
        assert settings.password.get_secret_value() == "hunter2"

    def test_connection_string_omits_password(self):
        settings = DatabaseSettings(password="hunter2")

        assert "hunter2" not in settings.connection_string


class TestOIDCSettings:
    def test_claim_defaults(self):
        settings = OIDCSettings()

        assert settings.user_id_claim == "sub"
        assert settings.email_claim == "email"
        assert settings.name_claim == "name"


class TestReservationSettings:
    def test_defaults_match_submission_limits(self):
        settings = ReservationSettings()

        assert settings.time_slot_max_length == 50
        assert settings.notes_max_length == 500
        assert settings.tzinfo == ZoneInfo("UTC")

    def test_accepts_iana_timezone(self):
        settings = ReservationSettings(campus_timezone="Europe/Berlin")

        assert settings.tzinfo == ZoneInfo("Europe/Berlin")

    def test_rejects_unknown_timezone(self):
        with pytest.raises(ValidationError):
            ReservationSettings(campus_timezone="Mars/Olympus_Mons")

    def test_limits_fit_stored_columns(self):
        columns = ReservationModel.__table__.c
        fields = ReservationSettings.model_fields

        time_slot_max = next(
            m.le for m in fields["time_slot_max_length"].metadata if hasattr(m, "le")
        )
        notes_max = next(
            m.le for m in fields["notes_max_length"].metadata if hasattr(m, "le")
        )

        assert time_slot_max <= columns.time_slot.type.length
        assert notes_max <= columns.notes.type.length

    @pytest.mark.parametrize(
        ("variable", "value"),
        [
            ("CAMPUS_RESERVE_RESERVATIONS_TIME_SLOT_MAX_LENGTH", "100"),
            ("CAMPUS_RESERVE_RESERVATIONS_NOTES_MAX_LENGTH", "501"),
        ],
    )
    def test_rejects_limit_wider_than_column(self, monkeypatch, variable, value):
        monkeypatch.setenv(variable, value)

        with pytest.raises(ValidationError):
            ReservationSettings()

    def test_accepts_lowered_limits(self, monkeypatch):
        monkeypatch.setenv("CAMPUS_RESERVE_RESERVATIONS_TIME_SLOT_MAX_LENGTH", "20")

        assert ReservationSettings().time_slot_max_length == 20


class TestChangeFeedSettings:
    def test_defaults_to_memory_backend(self):
        settings = ChangeFeedSettings()

        assert settings.backend is ChangeFeedBackend.MEMORY
        assert settings.channel == "reservation_changes"

    def test_backend_from_environment(self, monkeypatch):
        monkeypatch.setenv("CAMPUS_RESERVE_CHANGE_FEED_BACKEND", "postgres")

        assert ChangeFeedSettings().backend is ChangeFeedBackend.POSTGRES

    @pytest.mark.parametrize("channel", ["Bad-Channel", "1starts_with_digit", ""])
    def test_channel_must_be_identifier(self, channel):
        with pytest.raises(ValidationError):
            ChangeFeedSettings(channel=channel)
