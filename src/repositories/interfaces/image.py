from abc import ABC, abstractmethod
from typing import List, Optional
from src.database import models

class IImageRepository(ABC):
    @abstractmethod
    def find_latest_by_database(self, database_name: str) -> Optional[models.Image]:
        """데이터베이스의 가장 최근 이미지를 조회합니다."""
        pass

    @abstractmethod
    def find_by_location(self, image_location: str) -> Optional[models.Image]:
        """주어진 디스크 이미지 경로에 저장된 이미지를 조회합니다."""
        pass

    @abstractmethod
    def list_images(self, database_name: Optional[str] = None) -> List[models.Image]:
        """이미지 목록을 최신순으로 조회합니다. 데이터베이스로 범위를 좁힐 수 있습니다."""
        pass
