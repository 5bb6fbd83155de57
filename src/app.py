# src/app.py
from typing import Optional

from sqlalchemy.orm import Session

from src.config.settings import Settings, load_settings, validate_settings
from src.database.database import create_metadata_engine, create_session_factory
from src.database.db_init import initialize_db
from src.repositories.sqlalchemy import (
    SqlalchemyCloneRepository,
    SqlalchemyHostRepository,
    SqlalchemyImageRepository,
)
from src.services.attachment_service import AttachmentService
from src.services.clone_service import CloneBatch, CloneRequest, CloneService
from src.services.disk_service import DiskService
from src.services.image_service import ImageService
from src.services.metadata_service import MetadataService
from src.services.sql_instance_service import SqlInstanceService
from src.utils.logging_config import setup_logging
from src.utils.powershell import PowerShellRunner

# --------------------------------------------------------------------------
## 의존성 구성
# --------------------------------------------------------------------------

def build_clone_service(settings: Settings, db_session: Session,
                        sql_service: Optional[SqlInstanceService] = None) -> CloneService:
    """리포지토리 -> 서비스 -> 오케스트레이터 순으로 생성하며, 모두 하나의 메타데이터 세션을 공유합니다."""
    image_repo = SqlalchemyImageRepository(db_session)
    host_repo = SqlalchemyHostRepository(db_session)
    clone_repo = SqlalchemyCloneRepository(db_session)

    sql_service = sql_service or SqlInstanceService(settings)
    disk_service = DiskService(PowerShellRunner(settings.powershell_executable), settings.partition_style)

    return CloneService(
        settings=settings,
        image_service=ImageService(image_repo),
        disk_service=disk_service,
        attachment_service=AttachmentService(sql_service),
        metadata_service=MetadataService(image_repo, host_repo, clone_repo),
        sql_service=sql_service,
    )

# --------------------------------------------------------------------------
## 실행 진입점
# --------------------------------------------------------------------------

def run_clones(request: CloneRequest, settings: Optional[Settings] = None) -> CloneBatch:
    """
    클론 요청 하나를 처음부터 끝까지 실행합니다.

    작업 시작 전에 설정을 검증합니다. ConfigurationError는 요청 전체를 중단시키고,
    그 밖의 실패는 배치 결과에 조합별로 기록됩니다.
    """
    settings = validate_settings(settings) if settings else load_settings()
    setup_logging("dbclone", settings.log_level, settings.log_file)

    engine = create_metadata_engine(settings.metadata_url)
    initialize_db(engine)
    db_session = create_session_factory(engine)()
    sql_service = SqlInstanceService(settings)
    try:
        clone_service = build_clone_service(settings, db_session, sql_service)
        return clone_service.create_clones(request)
    finally:
        db_session.close()
        sql_service.dispose()
        engine.dispose()
