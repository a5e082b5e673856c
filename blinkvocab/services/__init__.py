"""Service layer package."""

from blinkvocab.services.auth import AuthService
from blinkvocab.services.dashboard import DashboardService
from blinkvocab.services.market import MarketService
from blinkvocab.services.progress import ProgressService
from blinkvocab.services.users import UserService
from blinkvocab.services.words import WordService

__all__ = [
    "AuthService",
    "DashboardService",
    "MarketService",
    "ProgressService",
    "UserService",
    "WordService",
]
