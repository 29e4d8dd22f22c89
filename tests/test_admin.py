"""
Tests for the admin gate.
"""

from datetime import date

import pytest

from checkmate.core.models import Settings
from checkmate.services.admin import (
    AdminAuthError,
    AdminGate,
    AdminRequiredError,
    SectionLockedError,
)


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def gate(settings):
    return AdminGate(lambda: settings)


class TestPasswordSetup:

    def test_short_password_is_rejected(self, gate):
        with pytest.raises(AdminAuthError, match="at least 4"):
            gate.set_password("  ab  ")
        assert not gate.has_password

    def test_setup_logs_in(self, gate, settings):
        token = gate.set_password("1234")
        assert gate.has_password
        assert settings.admin_password == "1234"
        assert gate.is_authenticated(token)

    def test_setup_only_once(self, gate):
        gate.set_password("1234")
        with pytest.raises(AdminAuthError):
            gate.set_password("5678")

    def test_password_is_stored_as_typed(self, gate, settings):
        gate.set_password(" pass1 ")
        assert settings.admin_password == " pass1 "
        assert gate.is_authenticated(gate.authenticate(" pass1 "))
        with pytest.raises(AdminAuthError):
            gate.authenticate("pass1")


class TestLogin:

    def test_login_before_setup(self, gate):
        with pytest.raises(AdminAuthError):
            gate.authenticate("1234")

    def test_wrong_password(self, gate):
        gate.set_password("1234")
        with pytest.raises(AdminAuthError, match="Wrong password"):
            gate.authenticate("12345")

    def test_comparison_is_exact(self, gate):
        gate.set_password("abcd")
        with pytest.raises(AdminAuthError):
            gate.authenticate("ABCD")

    def test_login_and_logout(self, gate):
        gate.set_password("1234")
        token = gate.authenticate("1234")
        gate.require(token)

        assert gate.logout(token)
        assert not gate.logout(token)
        with pytest.raises(AdminRequiredError):
            gate.require(token)

    def test_missing_token(self, gate):
        with pytest.raises(AdminRequiredError):
            gate.require(None)


class TestFineSection:

    def test_locked_by_default(self, gate):
        with pytest.raises(SectionLockedError):
            gate.require_fine_access(None)

    def test_admin_always_has_access(self, gate):
        token = gate.set_password("1234")
        gate.require_fine_access(token)

    def test_unlock_opens_it_for_everyone(self, gate):
        token = gate.set_password("1234")
        assert gate.set_fine_section_locked(token, False) is False
        gate.require_fine_access(None)

    def test_only_admin_can_unlock(self, gate):
        with pytest.raises(AdminRequiredError):
            gate.set_fine_section_locked(None, False)


class TestPastDates:

    def test_other_days_locked_by_default(self, gate):
        gate.require_date_editable(date(2024, 1, 3), date(2024, 1, 3))
        with pytest.raises(SectionLockedError, match="today"):
            gate.require_date_editable(date(2024, 1, 1), date(2024, 1, 3))
        with pytest.raises(SectionLockedError):
            gate.require_date_editable(date(2024, 1, 4), date(2024, 1, 3))

    def test_admin_allows_other_days(self, gate):
        token = gate.set_password("1234")
        assert gate.set_past_date_edit_allowed(token, True) is True
        gate.require_date_editable(date(2024, 1, 1), date(2024, 1, 3))

    def test_only_admin_can_allow(self, gate):
        with pytest.raises(AdminRequiredError):
            gate.set_past_date_edit_allowed(None, True)
