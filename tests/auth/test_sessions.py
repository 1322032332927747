"""Tests for bearer sessions."""

from unittest.mock import patch

import jwt
import pytest

from ridelink import config
from ridelink.exceptions import UnauthorizedError
from ridelink.models import Role


class TestSessions:
    """Test class for current_user and logout."""

    def test_current_user(self, services, rider, sign_in):
        token = sign_in("rider@example.com")

        principal = services.auth.current_user(token)

        assert principal.user.email == "rider@example.com"
        assert principal.user.role == Role.RIDER
        assert principal.driver is None

    def test_bearer_prefix_accepted(self, services, rider, sign_in):
        token = sign_in("rider@example.com")

        assert services.auth.current_user(f"Bearer {token}").user.email == "rider@example.com"

    def test_driver_principal_has_profile(self, services, driver, sign_in):
        token = sign_in("driver@example.com")

        principal = services.auth.current_user(token)

        assert principal.driver.id == driver["driver"]["id"]
        assert principal.to_dict()["driver"]["name"] == "Dan Driver"

    @pytest.mark.parametrize("token", [None, "", "Bearer ", "not-a-jwt"])
    def test_missing_or_malformed_token(self, services, token):
        with pytest.raises(UnauthorizedError):
            services.auth.current_user(token)

    def test_forged_token_rejected(self, services, rider, sign_in):
        sign_in("rider@example.com")
        forged = jwt.encode({"sub": "rider@example.com", "jti": "x"}, "other-secret",
                            algorithm=config.JWT_ALGORITHM)

        with pytest.raises(UnauthorizedError):
            services.auth.current_user(forged)

    def test_unknown_session_rejected(self, services, rider):
        token = jwt.encode({"sub": "rider@example.com", "jti": "never-issued"},
                           services.auth.jwt_secret, algorithm=config.JWT_ALGORITHM)

        with pytest.raises(UnauthorizedError) as excinfo:
            services.auth.current_user(token)

        assert "Unknown session" in str(excinfo.value)

    def test_session_expires(self, services, clock, rider, sign_in):
        token = sign_in("rider@example.com")
        clock.advance(hours=config.SESSION_EXPIRATION_HOURS, seconds=1)

        with pytest.raises(UnauthorizedError) as excinfo:
            services.auth.current_user(token)

        assert "Session expired" in str(excinfo.value)

    def test_logout_invalidates_token(self, services, rider, sign_in):
        token = sign_in("rider@example.com")

        services.auth.logout(token)

        with pytest.raises(UnauthorizedError):
            services.auth.current_user(token)

    def test_sessions_are_independent(self, services, rider, sign_in):
        first = sign_in("rider@example.com")
        second = sign_in("rider@example.com")

        services.auth.logout(first)

        assert services.auth.current_user(second).user.email == "rider@example.com"

    def test_expired_sessions_swept_on_new_login(self, services, clock, rider, driver, sign_in):
        """Sessions nobody presents again are dropped once a later login sweeps."""
        stale = sign_in("rider@example.com")
        clock.advance(hours=config.SESSION_EXPIRATION_HOURS, minutes=1)

        fresh = sign_in("driver@example.com")

        assert len(services.auth.sessions) == 1
        assert services.auth.current_user(fresh).user.email == "driver@example.com"
        with pytest.raises(UnauthorizedError) as excinfo:
            services.auth.current_user(stale)
        assert "Unknown session" in str(excinfo.value)

    def test_sweep_runs_at_most_every_interval(self, services, clock, rider, sign_in):
        sign_in("rider@example.com")
        clock.advance(minutes=1)

        with patch.object(services.auth.sessions, "purge_expired", return_value=0) as purge:
            sign_in("rider@example.com")
            purge.assert_not_called()

            clock.advance(minutes=15)
            sign_in("rider@example.com")
            purge.assert_called_once_with(clock.now())
