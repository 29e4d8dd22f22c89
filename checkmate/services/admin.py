"""
Admin gate for settings and roster mutations
"""

import logging
import secrets
from datetime import date
from typing import Callable, Optional, Set

from checkmate.core.models import Settings
from checkmate.utils.validators import is_valid_password

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 4

class AdminError(Exception):
    """Base admin error"""
    pass

class AdminAuthError(AdminError):
    """Wrong or unusable password; the message is shown to the user"""
    pass

class AdminRequiredError(AdminError):
    """The operation needs an authenticated admin session"""
    pass

class SectionLockedError(AdminRequiredError):
    """The section is locked until an admin unlocks it"""
    pass

class AdminGate:
    """
    Plaintext password check plus session tokens.

    The password lives in the settings document, so `settings` is a getter and
    always returns the current Settings object.
    """

    def __init__(self, settings: Callable[[], Settings]):
        self._settings = settings
        self.sessions: Set[str] = set()
        self.fine_section_locked = True
        self.past_date_edit_allowed = False

    @property
    def has_password(self) -> bool:
        return bool(self._settings().admin_password)

    def _open_session(self) -> str:
        token = secrets.token_urlsafe(24)
        self.sessions.add(token)
        return token

    def set_password(self, password: str) -> str:
        """First-time setup; only allowed while no password exists"""
        if self.has_password:
            raise AdminAuthError("An admin password is already set. Log in instead.")
        if not is_valid_password(password, MIN_PASSWORD_LENGTH):
            raise AdminAuthError(f"The password must be at least {MIN_PASSWORD_LENGTH} characters.")

        self._settings().admin_password = password
        logger.info("🔐 Admin password set")
        return self._open_session()

    def authenticate(self, candidate: str) -> str:
        if not self.has_password:
            raise AdminAuthError("No admin password is set yet.")
        if candidate != self._settings().admin_password:
            logger.warning("⚠️ Rejected admin login")
            raise AdminAuthError("Wrong password.")
        logger.info("🔓 Admin logged in")
        return self._open_session()

    def is_authenticated(self, token: Optional[str]) -> bool:
        return bool(token) and token in self.sessions

    def require(self, token: Optional[str]) -> None:
        if not self.is_authenticated(token):
            raise AdminRequiredError("Admin login required.")

    def logout(self, token: Optional[str]) -> bool:
        if token in self.sessions:
            self.sessions.discard(token)
            logger.info("🔒 Admin logged out")
            return True
        return False

    def logout_all(self) -> None:
        self.sessions.clear()

    # ===== FINE SECTION =====

    def set_fine_section_locked(self, token: Optional[str], locked: bool) -> bool:
        self.require(token)
        self.fine_section_locked = locked
        return self.fine_section_locked

    def require_fine_access(self, token: Optional[str]) -> None:
        """Fines are editable by anyone once unlocked, by admins always"""
        if self.fine_section_locked and not self.is_authenticated(token):
            raise SectionLockedError("The fine section is locked.")

    # ===== PAST DATES =====

    def set_past_date_edit_allowed(self, token: Optional[str], allowed: bool) -> bool:
        self.require(token)
        self.past_date_edit_allowed = allowed
        logger.info(f"📅 Editing checks on other days {'allowed' if allowed else 'locked'}")
        return self.past_date_edit_allowed

    def require_date_editable(self, day: date, today: date) -> None:
        """Checks can only change on today's date unless an admin allowed other days"""
        if day != today and not self.past_date_edit_allowed:
            raise SectionLockedError("Only today's checks can be edited.")
