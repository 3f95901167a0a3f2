"""
Pytest configuration and fixtures.

Database fixtures use a fresh in-memory SQLite per test. StaticPool keeps one
shared connection so worker threads (asyncio.to_thread) see the same tables.
"""

from typing import Dict, Iterable, List, Optional

import pytest

from database.database import create_db_engine, make_session_factory
from database.models import Base, Transition, Insight, RoleSkill, UserSkill


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "db: marks tests as requiring database (deselect with '-m \"not db\"')"
    )


@pytest.fixture
def engine():
    engine = create_db_engine("sqlite://")
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return make_session_factory(engine)


@pytest.fixture
def make_transition(session_factory):
    """Factory fixture: store a transition with its insights and skills, return its id."""

    def _make(
        current_role: str = "Teacher",
        target_role: str = "Data Analyst",
        user_id: Optional[int] = 1,
        insights: Iterable[Dict] = (),
        user_skills: Iterable[str] = (),
        role_skills: Optional[Dict[str, List[str]]] = None
    ) -> int:
        session = session_factory()
        try:
            transition = Transition(user_id=user_id, current_role=current_role, target_role=target_role)
            session.add(transition)
            session.flush()

            for data in insights:
                session.add(Insight(transition_id=transition.id, **data))
            for skill in user_skills:
                session.add(UserSkill(user_id=user_id, skill_name=skill))
            for role, skills in (role_skills or {}).items():
                for skill in skills:
                    session.add(RoleSkill(role_name=role, skill_name=skill))

            session.commit()
            return transition.id
        finally:
            session.close()

    return _make
