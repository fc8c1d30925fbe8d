from __future__ import annotations

import abc
from typing import Any, Dict


class IDomain(abc.ABC):
    @abc.abstractmethod
    def to_document(self) -> Dict[str, Any]:
        raise NotImplementedError

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, self.__class__):
            return NotImplemented
        return self.__dict__ == other.__dict__
