from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Iterable


class CatalogKind(str, Enum):
    BREED = "breed"
    VACCINE_TYPE = "vaccine_type"
    VACCINE_NAME = "vaccine_name"


class CatalogsRepo(ABC):
    @abstractmethod
    async def existing_ids(self, kind: CatalogKind, ids: Iterable[int]) -> set[int]: ...
