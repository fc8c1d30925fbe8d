import abc
from typing import Any, Dict, Iterable, Optional

from users_api.domain.base import IDomain


class IRepository(abc.ABC):
    @abc.abstractmethod
    async def add(self, data: IDomain) -> Any:
        raise NotImplementedError

    @abc.abstractmethod
    async def list(self) -> Iterable[Dict[str, Any]]:
        raise NotImplementedError

    @abc.abstractmethod
    async def get(self, object_id: Any) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    @abc.abstractmethod
    async def replace(self, object_id: Any, data: IDomain) -> bool:
        raise NotImplementedError

    @abc.abstractmethod
    async def delete(self, object_id: Any) -> bool:
        raise NotImplementedError
