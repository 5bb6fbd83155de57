import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError

from src.database import models
from src.repositories.interfaces import IImageRepository
from src.services.exceptions import ImageNotFoundError, PersistenceError

logger = logging.getLogger(__name__)


class ImageService:
    def __init__(self, image_repo: IImageRepository):
        """
        ImageService를 초기화합니다.

        Args:
            image_repo: 캡처된 이미지를 읽기 위한 리포지토리 객체.
        """
        self.image_repo = image_repo

    def get_latest_image(self, database_name: str) -> models.Image:
        """
        데이터베이스의 가장 최근 이미지를 찾습니다.

        Args:
            database_name: 이미지를 캡처한 원본 데이터베이스 이름.

        Returns:
            해당 데이터베이스의 가장 최근 Image 행.

        Raises:
            ImageNotFoundError: 해당 데이터베이스로 캡처된 이미지가 없을 때.
            PersistenceError: 메타데이터 저장소를 조회할 수 없을 때.
        """
        try:
            image = self.image_repo.find_latest_by_database(database_name)
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to look up images for database '{database_name}': {e}") from e

        if not image:
            raise ImageNotFoundError(f"No image found for database '{database_name}'.")

        logger.info("Using image '%s' (id=%s) for database '%s'", image.image_location, image.id, database_name)
        return image

    def list_images(self, database_name: Optional[str] = None) -> List[models.Image]:
        """
        캡처된 이미지 목록을 최신순으로 반환합니다.

        Raises:
            PersistenceError: 메타데이터 저장소를 조회할 수 없을 때.
        """
        try:
            return self.image_repo.list_images(database_name)
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to list images: {e}") from e
