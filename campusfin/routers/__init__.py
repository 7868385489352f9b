"""Routers package for the CampusFin API."""

from .auth import router as auth_router
from .accounts import router as accounts_router
from .credit_cards import router as credit_cards_router
from .categories import router as categories_router
from .savings_categories import router as savings_categories_router
from .transactions import router as transactions_router
from .budget import router as budget_router
from .courses import router as courses_router
from .planner import tasks_router, deadlines_router, exams_router
from .recurring_patterns import router as recurring_patterns_router
from .notifications import router as notifications_router
from .settings import router as settings_router

__all__ = [
    "auth_router",
    "accounts_router",
    "credit_cards_router",
    "categories_router",
    "savings_categories_router",
    "transactions_router",
    "budget_router",
    "courses_router",
    "tasks_router",
    "deadlines_router",
    "exams_router",
    "recurring_patterns_router",
    "notifications_router",
    "settings_router",
]
