from abc import ABC, abstractmethod
from typing import Optional
from src.database import models

class IHostRepository(ABC):
    @abstractmethod
    def find_by_name(self, hostname: str) -> Optional[models.Host]:
        pass

    @abstractmethod
    def get_or_create(self, hostname: str, ip_address: str, fqdn: str) -> models.Host:
        """
        호스트 이름에 해당하는 행을 반환하고, 없으면 새로 생성합니다.
        같은 호스트 이름으로 반복하거나 동시에 호출해도 행은 하나만 생깁니다.
        """
        pass
