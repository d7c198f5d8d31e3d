from abc import ABC, abstractmethod
from typing import Dict

from .models import PlanSession


class PlanSessionRepository(ABC):
    @abstractmethod
    async def save(self, session: PlanSession) -> PlanSession:
        raise NotImplementedError

    @abstractmethod
    async def get(self, session_id: str) -> PlanSession:
        raise NotImplementedError


class InMemoryPlanSessionRepository(PlanSessionRepository):
    """Process-local session state; sessions vanish on restart."""

    def __init__(self):
        self._store: Dict[str, PlanSession] = {}

    async def save(self, session: PlanSession) -> PlanSession:
        self._store[session.id] = session
        return session

    async def get(self, session_id: str) -> PlanSession:
        if session_id not in self._store:
            raise KeyError("Plan session not found")
        return self._store[session_id]
