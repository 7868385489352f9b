"""SQLModel tables; importing this package registers every table on SQLModel.metadata."""

from .user import User
from .account import Account
from .category import Category
from .savings_category import SavingsCategory
from .transaction import Transaction
from .settings import UserSettings
from .course import Course
from .recurring_pattern import RecurringPattern
from .task import Task
from .deadline import Deadline
from .exam import Exam
from .notification import Notification
from .rate_limit import RateLimit

__all__ = [
    "User",
    "Account",
    "Category",
    "SavingsCategory",
    "Transaction",
    "UserSettings",
    "Course",
    "RecurringPattern",
    "Task",
    "Deadline",
    "Exam",
    "Notification",
    "RateLimit",
]
