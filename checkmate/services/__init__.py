# checkmate/services/__init__.py

"""
Checkmate services: persistence, admin gate, scheduling and the application controller
"""

from .checkmate_service import CheckmateService
from .sync_service import PersistenceSync, SaveStatus

__all__ = ["CheckmateService", "PersistenceSync", "SaveStatus"]
