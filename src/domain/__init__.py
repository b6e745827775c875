from src.domain.models import Active, CallerContext, Deleted, ProgressStats, RecordState

__all__ = ["Active", "CallerContext", "Deleted", "ProgressStats", "RecordState"]
