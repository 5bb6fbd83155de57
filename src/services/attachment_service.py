import logging
import os
from typing import List

from src.services.exceptions import AttachmentError
from src.services.sql_instance_service import SqlInstanceService

logger = logging.getLogger(__name__)


class AttachmentService:
    def __init__(self, sql_service: SqlInstanceService):
        self.sql_service = sql_service

    def discover_files(self, access_path: str) -> List[str]:
        """
        액세스 경로 아래의 모든 일반 파일을 재귀적으로 나열합니다.

        확장자로 거르지 않습니다. 마운트된 파티션에는 이미지에 캡처된 파일만 있습니다.
        """
        if not os.path.isdir(access_path):
            raise AttachmentError(f"Access path '{access_path}' is not a directory.")

        files = []
        for root, _dirs, filenames in os.walk(access_path):
            for filename in filenames:
                full_path = os.path.join(root, filename)
                if os.path.isfile(full_path):
                    files.append(full_path)
        return sorted(files)

    def attach_clone(self, sql_instance: str, database_name: str, access_path: str) -> List[str]:
        """
        액세스 경로로 노출된 파일들을 새 데이터베이스로 연결(attach)합니다.

        Args:
            sql_instance: 대상 인스턴스.
            database_name: 연결할 데이터베이스 이름.
            access_path: 클론 디스크가 마운트된 디렉터리.

        Returns:
            연결된 파일 목록.

        Raises:
            AttachmentError: 파일이 없거나 연결에 실패했을 때. 어느 경우든 디스크는 마운트된 채로 남습니다.
        """
        files = self.discover_files(access_path)
        if not files:
            raise AttachmentError(f"No database files found below '{access_path}'.")

        logger.info("Attaching %d file(s) from '%s' as '%s' on '%s'", len(files), access_path, database_name, sql_instance)
        self.sql_service.attach_database(sql_instance, database_name, files)
        return files
