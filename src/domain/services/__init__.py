"""Domain services."""

from src.domain.services.audit import AuditLogService, AuditRecorder
from src.domain.services.auth_service import AuthService
from src.domain.services.commissions import CommissionService
from src.domain.services.dashboard import DashboardService
from src.domain.services.goals import GoalService
from src.domain.services.password_reset import PasswordResetService
from src.domain.services.progress import LeaderboardSort, compute_progress
from src.domain.services.users import UserService

__all__ = [
    "AuditLogService",
    "AuditRecorder",
    "AuthService",
    "CommissionService",
    "DashboardService",
    "GoalService",
    "LeaderboardSort",
    "PasswordResetService",
    "UserService",
    "compute_progress",
]
