from typing import List

from sqlalchemy import select, func

from database.models import RoleSkill, UserSkill
from database.repositories.base import BaseRepository


class SkillRepository(BaseRepository):
    def get_role_skills(self, role_name: str) -> List[str]:
        """Canonical skills for a role, matched case-insensitively on the role name."""
        if not role_name or not role_name.strip():
            return []
        stmt = (
            select(RoleSkill.skill_name)
            .where(func.lower(RoleSkill.role_name) == role_name.strip().lower())
            .order_by(RoleSkill.id)
        )
        return list(self.db.execute(stmt).scalars().all())

    def get_user_skills(self, user_id: int) -> List[str]:
        if user_id is None:
            return []
        stmt = (
            select(UserSkill.skill_name)
            .where(UserSkill.user_id == user_id)
            .order_by(UserSkill.id)
        )
        return list(self.db.execute(stmt).scalars().all())
