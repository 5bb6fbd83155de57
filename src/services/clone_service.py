import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence, Union

from src.config.settings import Settings
from src.database import models
from src.services.attachment_service import AttachmentService
from src.services.disk_service import DiskService
from src.services.exceptions import CloneError, CollisionError, ConfigurationError, ProvisioningError
from src.services.image_service import ImageService
from src.services.metadata_service import MetadataService
from src.services.sql_instance_service import SqlInstanceService
from src.utils.host_identity import HostIdentity, get_host_identity
from src.utils.path_utils import (
    access_path as build_access_path,
    clone_file_path,
    derive_clone_name,
    normalize_destination,
    random_suffix,
    to_local_path,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CloneRequest:
    """
    무엇을 어디에 클론할지 정의하는 요청입니다.

    databases(각 데이터베이스의 최신 이미지 사용) 또는 parent_path(인스턴스마다
    해당 이미지로 클론 하나) 중 하나만 지정해야 합니다.
    """
    sql_instances: Sequence[str]
    destination: str
    databases: Sequence[str] = ()
    parent_path: Optional[str] = None
    clone_name: Optional[str] = None
    disabled: bool = False

    def __post_init__(self):
        if not self.sql_instances:
            raise ValueError("At least one SQL instance is required.")
        if not self.destination:
            raise ValueError("A destination directory is required.")
        if self.parent_path and self.databases:
            raise ValueError("Use either databases (latest image) or parent_path, not both.")
        if not self.parent_path and not self.databases:
            raise ValueError("Either databases or parent_path is required.")

    @property
    def use_latest_image(self) -> bool:
        return not self.parent_path


@dataclass(frozen=True)
class CloneResult:
    clone_id: int
    image_id: int
    host_id: int
    clone_location: str
    access_path: str
    sql_instance: str
    database_name: str
    is_enabled: int

    def to_dict(self) -> dict:
        return {
            "imageId": self.image_id,
            "hostId": self.host_id,
            "cloneLocation": self.clone_location,
            "accessPath": self.access_path,
            "instanceId": self.sql_instance,
            "databaseName": self.database_name,
            "isEnabled": self.is_enabled,
        }


@dataclass(frozen=True)
class PairingFailure:
    sql_instance: str
    database_name: Optional[str]
    destination: str
    error: Exception

    @property
    def error_type(self) -> str:
        return type(self.error).__name__

    @property
    def reason(self) -> str:
        return str(self.error)


PairingOutcome = Union[CloneResult, PairingFailure]


@dataclass
class CloneBatch:
    """요청 하나에 대한 (인스턴스, 데이터베이스) 조합별 결과를 순서대로 담습니다."""
    outcomes: List[PairingOutcome] = field(default_factory=list)

    @property
    def results(self) -> List[CloneResult]:
        return [o for o in self.outcomes if isinstance(o, CloneResult)]

    @property
    def failures(self) -> List[PairingFailure]:
        return [o for o in self.outcomes if isinstance(o, PairingFailure)]


class CloneService:
    def __init__(self, settings: Settings, image_service: ImageService, disk_service: DiskService,
                 attachment_service: AttachmentService, metadata_service: MetadataService,
                 sql_service: SqlInstanceService,
                 host_identity_provider: Callable[[], HostIdentity] = get_host_identity):
        self.settings = settings
        self.image_service = image_service
        self.disk_service = disk_service
        self.attachment_service = attachment_service
        self.metadata_service = metadata_service
        self.sql_service = sql_service
        self.host_identity_provider = host_identity_provider

    def create_clones(self, request: CloneRequest) -> CloneBatch:
        """
        (인스턴스, 데이터베이스) 조합마다 클론을 하나씩 생성합니다.

        조합은 요청 순서대로 하나씩 실행됩니다. 실패한 조합은 PairingFailure로
        기록되고 다음 조합으로 넘어가며, 이미 만들어진 디스크나 서버 상태는
        롤백하지 않습니다. 예상하지 못한 예외도 조합 단위에서 기록됩니다.

        Args:
            request: 대상 인스턴스, 데이터베이스 또는 부모 이미지, 목적지, 이름.

        Returns:
            조합별 결과를 담은 CloneBatch.

        Raises:
            ConfigurationError: 목적지를 사용할 수 없을 때. 어떤 조합도 실행되기 전에 발생합니다.
        """
        destination = self._prepare_destination(request.destination)
        databases: Sequence[Optional[str]] = request.databases if request.use_latest_image else [None]

        batch = CloneBatch()
        for sql_instance in request.sql_instances:
            for database in databases:
                try:
                    result = self._create_clone(request, sql_instance, database, destination)
                    batch.outcomes.append(result)
                except Exception as e:
                    if isinstance(e, CloneError):
                        logger.error(
                            "Clone of '%s' on '%s' into '%s' failed (%s): %s",
                            database or request.parent_path, sql_instance, destination, type(e).__name__, e,
                        )
                    else:
                        logger.exception(
                            "Clone of '%s' on '%s' into '%s' failed unexpectedly",
                            database or request.parent_path, sql_instance, destination,
                        )
                    batch.outcomes.append(PairingFailure(
                        sql_instance=sql_instance,
                        database_name=database,
                        destination=destination,
                        error=e,
                    ))
        logger.info("Clone batch finished: %d succeeded, %d failed", len(batch.results), len(batch.failures))
        return batch

    def list_clones(self, hostname: Optional[str] = None, sql_instance: Optional[str] = None,
                    database_name: Optional[str] = None) -> List[models.Clone]:
        return self.metadata_service.list_clones(hostname, sql_instance, database_name)

    def _prepare_destination(self, destination: str) -> str:
        local_destination = to_local_path(destination)
        if local_destination != normalize_destination(destination):
            logger.info("Destination '%s' translated to local path '%s'", destination, local_destination)
        if not self.disk_service.path_exists(local_destination):
            raise ConfigurationError(f"Destination '{local_destination}' does not exist.")
        return local_destination

    def _create_clone(self, request: CloneRequest, sql_instance: str, database: Optional[str],
                      destination: str) -> CloneResult:
        # 1. 부모 이미지 결정
        if request.use_latest_image:
            parent_location = self.image_service.get_latest_image(database).image_location
        else:
            parent_location = request.parent_path

        # 2. 이름 결정 (디스크 파일은 목적지 안에서 클론 이름당 하나)
        clone_name = request.clone_name or derive_clone_name(parent_location)
        suffix = random_suffix(self.settings.mount_suffix_length)
        clone_location = clone_file_path(destination, clone_name, self.settings.clone_disk_extension)
        mount_path = build_access_path(destination, clone_name, suffix)

        # 3-4. 충돌 검사: 아무것도 만들기 전에 수행
        if self.sql_service.database_exists(sql_instance, clone_name):
            raise CollisionError(f"Database '{clone_name}' already exists on '{sql_instance}'.")
        if self.disk_service.path_exists(clone_location):
            raise CollisionError(f"Clone disk '{clone_location}' already exists.")
        if self.disk_service.path_exists(mount_path):
            raise CollisionError(f"Access path '{mount_path}' already exists.")

        # 5. 디스크 준비, 연결, 호스트 등록, 기록
        attached = False
        try:
            self.disk_service.provision(parent_location, clone_location, mount_path)
            self.attachment_service.attach_clone(sql_instance, clone_name, mount_path)
            attached = True

            identity = self.host_identity_provider()
            host_id = self.metadata_service.resolve_host(identity.hostname, identity.ip_address, identity.fqdn)
            image_id = self.metadata_service.get_image_id(parent_location)
            is_enabled = 0 if request.disabled else 1
            clone_id = self.metadata_service.record_clone(
                image_id=image_id,
                host_id=host_id,
                clone_location=clone_location,
                access_path=mount_path,
                sql_instance=sql_instance,
                database_name=clone_name,
                is_enabled=bool(is_enabled),
            )
        except Exception as e:
            # create 단계에서 실패했다면 디스크 파일이 만들어지지 않았음
            if not (isinstance(e, ProvisioningError) and e.step == "create"):
                self._report_orphan(sql_instance, clone_name, clone_location, mount_path, attached)
            raise

        # 6. 결과
        logger.info("Clone '%s' is live on '%s' at '%s'", clone_name, sql_instance, mount_path)
        return CloneResult(
            clone_id=clone_id,
            image_id=image_id,
            host_id=host_id,
            clone_location=clone_location,
            access_path=mount_path,
            sql_instance=sql_instance,
            database_name=clone_name,
            is_enabled=is_enabled,
        )

    def _report_orphan(self, sql_instance: str, clone_name: str, clone_location: str, mount_path: str,
                       attached: bool):
        logger.warning(
            "Orphan candidate: disk '%s' (access path '%s') for '%s' on '%s' was left in place; attached=%s",
            clone_location, mount_path, clone_name, sql_instance, attached,
        )
