"""Audit trail of mutating requests."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from nutritrack.models.activity_log import ActivityLog, ActivityType, ActivityStatus

logger = logging.getLogger(__name__)


class AuditService:
    """Stages activity log rows in the caller's unit of work.

    Rows are written, never read back by the application.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def record(
        self,
        user_id: int,
        activity_type: ActivityType,
        description: str,
        status: ActivityStatus = ActivityStatus.success,
    ) -> ActivityLog:
        entry = ActivityLog(
            user_id=user_id,
            activity_type=activity_type.value,
            description=description,
            status=status.value,
        )
        self.db.add(entry)
        logger.debug("audit user=%s type=%s status=%s", user_id, activity_type.value, status.value)
        return entry
