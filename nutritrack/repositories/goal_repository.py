from typing import List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, case

from nutritrack.models.goal import Goal, GoalStatus, GoalPriority, ProgressTracking

PRIORITY_RANK = case(
    (Goal.priority == GoalPriority.high, 3),
    (Goal.priority == GoalPriority.medium, 2),
    else_=1,
)


def _status_count(status: GoalStatus):
    return func.count(case((Goal.status == status, 1)))


class GoalRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_for_user(
        self,
        user_id: int,
        status: Optional[GoalStatus] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Tuple[List[Goal], int]:
        """Highest priority first, then newest."""
        filters = [Goal.user_id == user_id]
        if status is not None:
            filters.append(Goal.status == status)

        total = await self.db.scalar(select(func.count(Goal.id)).where(*filters))
        result = await self.db.execute(
            select(Goal)
            .where(*filters)
            .order_by(PRIORITY_RANK.desc(), Goal.created_at.desc())
            .limit(limit)
            .offset(offset)
        )
        return list(result.scalars().all()), total or 0

    async def get_owned(self, goal_id: int, user_id: int) -> Optional[Goal]:
        result = await self.db.execute(
            select(Goal).where(Goal.id == goal_id, Goal.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def count_with_status(self, user_id: int, status: GoalStatus) -> int:
        count = await self.db.scalar(
            select(func.count(Goal.id)).where(Goal.user_id == user_id, Goal.status == status)
        )
        return count or 0

    async def create_goal(self, goal: Goal) -> Goal:
        self.db.add(goal)
        await self.db.flush()
        return goal

    async def add_progress(self, record: ProgressTracking) -> ProgressTracking:
        self.db.add(record)
        await self.db.flush()
        return record

    async def recent_progress(self, goal_id: int, user_id: int, limit: int = 20) -> List[ProgressTracking]:
        result = await self.db.execute(
            select(ProgressTracking)
            .where(ProgressTracking.goal_id == goal_id, ProgressTracking.user_id == user_id)
            .order_by(ProgressTracking.date_recorded.desc(), ProgressTracking.id.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def status_summary(self, user_id: int) -> dict:
        avg_progress = func.avg(
            case(
                (Goal.target_value > 0, Goal.current_value / Goal.target_value * 100),
                else_=0,
            )
        )
        result = await self.db.execute(
            select(
                func.count(Goal.id),
                _status_count(GoalStatus.active),
                _status_count(GoalStatus.completed),
                _status_count(GoalStatus.paused),
                _status_count(GoalStatus.cancelled),
                avg_progress,
            ).where(Goal.user_id == user_id)
        )
        total, active, completed, paused, cancelled, average = result.one()
        return {
            "total_goals": int(total),
            "active_goals": int(active),
            "completed_goals": int(completed),
            "paused_goals": int(paused),
            "cancelled_goals": int(cancelled),
            "avg_progress": round(float(average), 1) if average is not None else 0.0,
        }

    async def category_breakdown(self, user_id: int) -> List[dict]:
        count = func.count(Goal.id).label("count")
        result = await self.db.execute(
            select(Goal.category, count, _status_count(GoalStatus.completed))
            .where(Goal.user_id == user_id)
            .group_by(Goal.category)
            .order_by(count.desc())
        )
        return [
            {"category": category, "count": int(total), "completed": int(done)}
            for category, total, done in result.all()
        ]

    async def recent_completions(self, user_id: int, limit: int = 5) -> List[Goal]:
        result = await self.db.execute(
            select(Goal)
            .where(Goal.user_id == user_id, Goal.status == GoalStatus.completed)
            .order_by(Goal.completed_date.desc())
            .limit(limit)
        )
        return list(result.scalars().all())
