import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError

from src.database import models
from src.repositories.interfaces import ICloneRepository, IHostRepository, IImageRepository
from src.services.exceptions import HostNotFoundError, ImageNotFoundError, PersistenceError

logger = logging.getLogger(__name__)


class MetadataService:
    """메타데이터 저장소의 호스트 등록, 이미지 ID 조회, 클론 기록을 담당합니다."""

    def __init__(self, image_repo: IImageRepository, host_repo: IHostRepository, clone_repo: ICloneRepository):
        self.image_repo = image_repo
        self.host_repo = host_repo
        self.clone_repo = clone_repo

    def resolve_host(self, hostname: str, ip_address: str, fqdn: str) -> int:
        """
        호스트 ID를 반환하며, 처음 사용하는 호스트는 등록합니다.

        반복 호출해도 안전합니다. 호스트 이름 하나는 정확히 한 행에 대응합니다.

        Args:
            hostname: 짧은 호스트 이름 (자연 키).
            ip_address: 처음 등록할 때 기록할 IP 주소.
            fqdn: 처음 등록할 때 기록할 FQDN.

        Returns:
            호스트 ID.

        Raises:
            PersistenceError: 메타데이터 저장소를 읽거나 쓸 수 없을 때.
        """
        try:
            host = self.host_repo.get_or_create(hostname, ip_address, fqdn)
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to register host '{hostname}': {e}") from e
        if host is None or host.id is None:
            raise HostNotFoundError(f"Host '{hostname}' could not be resolved after registration.")
        return host.id

    def get_image_id(self, image_location: str) -> int:
        """
        주어진 경로에 저장된 이미지의 ID를 조회합니다.

        Raises:
            ImageNotFoundError: 이미지 행이 더 이상 존재하지 않을 때.
            PersistenceError: 메타데이터 저장소를 조회할 수 없을 때.
        """
        try:
            image = self.image_repo.find_by_location(image_location)
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to look up image '{image_location}': {e}") from e
        if not image:
            raise ImageNotFoundError(f"Image '{image_location}' is not registered in the metadata store.")
        return image.id

    def record_clone(self, image_id: int, host_id: int, clone_location: str, access_path: str,
                     sql_instance: str, database_name: str, is_enabled: bool) -> int:
        """
        클론 기록을 삽입합니다. 이 호출이 성공하기 전까지 메타데이터 저장소
        관점에서 클론은 존재하지 않습니다.

        Returns:
            새 클론 ID.

        Raises:
            PersistenceError: 기록을 쓸 수 없을 때.
        """
        clone = models.Clone(
            image_id=image_id,
            host_id=host_id,
            clone_location=clone_location,
            access_path=access_path,
            sql_instance=sql_instance,
            database_name=database_name,
            is_enabled=is_enabled,
        )
        try:
            clone = self.clone_repo.create(clone)
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to record clone '{clone_location}': {e}") from e
        logger.info("Recorded clone %s for '%s' on '%s'", clone.id, database_name, sql_instance)
        return clone.id

    def list_clones(self, hostname: Optional[str] = None, sql_instance: Optional[str] = None,
                    database_name: Optional[str] = None) -> List[models.Clone]:
        """
        기록된 클론 목록을 반환합니다. 호스트, 인스턴스, 데이터베이스로 필터링할 수 있습니다.

        Raises:
            PersistenceError: 메타데이터 저장소를 조회할 수 없을 때.
        """
        try:
            host_id = None
            if hostname:
                host = self.host_repo.find_by_name(hostname)
                if host is None:
                    return []
                host_id = host.id
            return self.clone_repo.list_clones(host_id=host_id, sql_instance=sql_instance, database_name=database_name)
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to list clones: {e}") from e
