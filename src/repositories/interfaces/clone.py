from abc import ABC, abstractmethod
from typing import List, Optional
from src.database import models

class ICloneRepository(ABC):
    @abstractmethod
    def create(self, clone_model: models.Clone) -> models.Clone:
        pass

    @abstractmethod
    def find_by_location(self, clone_location: str) -> Optional[models.Clone]:
        pass

    @abstractmethod
    def list_clones(self, host_id: Optional[int] = None, sql_instance: Optional[str] = None,
                    database_name: Optional[str] = None) -> List[models.Clone]:
        pass
