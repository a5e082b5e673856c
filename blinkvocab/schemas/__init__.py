"""Pydantic schemas package."""

from blinkvocab.schemas.auth import Token
from blinkvocab.schemas.dashboard import (
    ActivityDay,
    ActivitySummary,
    DashboardOverview,
    DueCounts,
    StatusTotals,
)
from blinkvocab.schemas.market import (
    DictionaryJoinResult,
    DictionaryRead,
    MarketJoinRequest,
    MarketJoinResponse,
)
from blinkvocab.schemas.review import ReviewSubmitRequest, ReviewSubmitResponse
from blinkvocab.schemas.tasks import TaskItem, TodayTasksResponse
from blinkvocab.schemas.user import UserBase, UserCreate, UserLogin, UserRead
from blinkvocab.schemas.words import (
    AddManualWordRequest,
    AddManualWordResponse,
    WordDetailResponse,
    WordListItem,
    WordListResponse,
)

__all__ = [
    "Token",
    "ActivityDay",
    "ActivitySummary",
    "DashboardOverview",
    "DueCounts",
    "StatusTotals",
    "DictionaryJoinResult",
    "DictionaryRead",
    "MarketJoinRequest",
    "MarketJoinResponse",
    "ReviewSubmitRequest",
    "ReviewSubmitResponse",
    "TaskItem",
    "TodayTasksResponse",
    "UserBase",
    "UserCreate",
    "UserLogin",
    "UserRead",
    "AddManualWordRequest",
    "AddManualWordResponse",
    "WordDetailResponse",
    "WordListItem",
    "WordListResponse",
]
