from abc import ABC, abstractmethod

from pydantic import BaseModel


class BaseExecutor(ABC):
    """
    Base contract for all executors.
    Executors take a validated request and return a response dict.
    Failures leave an executor as fastapi.HTTPException only.
    """

    @abstractmethod
    async def execute(self, request: BaseModel) -> dict:
        pass
