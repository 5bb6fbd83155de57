import logging
from typing import Callable, Dict, List, Sequence

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Dialect, Engine, URL
from sqlalchemy.exc import SQLAlchemyError

from src.config.settings import Settings
from src.services.exceptions import AttachmentError, ResolutionError

logger = logging.getLogger(__name__)


def _literal(value: str) -> str:
    return "N'" + value.replace("'", "''") + "'"


def build_attach_statement(dialect: Dialect, database_name: str, files: Sequence[str]) -> str:
    """
    파일 목록으로 CREATE DATABASE ... FOR ATTACH 문을 만듭니다.

    T-SQL은 데이터베이스 이름과 FILENAME에 바인딩 파라미터를 허용하지 않으므로,
    이름은 dialect로 인용하고 각 파일 이름은 이스케이프한 N'' 리터럴로 씁니다.
    """
    name = dialect.identifier_preparer.quote_identifier(database_name)
    file_specs = ",\n    ".join(f"(FILENAME = {_literal(f)})" for f in files)
    return f"CREATE DATABASE {name} ON\n    {file_specs}\nFOR ATTACH"


class SqlInstanceService:
    """실행 중인 SQL Server 인스턴스에 접근합니다. (데이터베이스 조회 및 연결)"""

    def __init__(self, settings: Settings, engine_factory: Callable[..., Engine] = create_engine):
        self.settings = settings
        self.engine_factory = engine_factory
        self._engines: Dict[str, Engine] = {}

    def connection_url(self, sql_instance: str) -> URL:
        query = {"driver": self.settings.sql_driver}
        if self.settings.sql_trust_server_certificate:
            query["TrustServerCertificate"] = "yes"
        password = None
        if self.settings.sql_username:
            password = self.settings.sql_password.get_secret_value() if self.settings.sql_password else None
        else:
            query["Trusted_Connection"] = "yes"
        return URL.create(
            "mssql+pyodbc",
            username=self.settings.sql_username or None,
            password=password,
            host=sql_instance,
            database="master",
            query=query,
        )

    def _engine(self, sql_instance: str) -> Engine:
        engine = self._engines.get(sql_instance)
        if engine is None:
            # CREATE DATABASE는 트랜잭션 안에서 실행할 수 없음
            engine = self.engine_factory(self.connection_url(sql_instance), isolation_level="AUTOCOMMIT")
            self._engines[sql_instance] = engine
        return engine

    def list_databases(self, sql_instance: str) -> List[str]:
        """
        인스턴스에 현재 존재하는 데이터베이스 이름 목록을 반환합니다.

        Raises:
            ResolutionError: 인스턴스를 조회할 수 없을 때.
        """
        try:
            with self._engine(sql_instance).connect() as conn:
                return [row[0] for row in conn.execute(text("SELECT name FROM sys.databases"))]
        except SQLAlchemyError as e:
            raise ResolutionError(f"Failed to list databases on instance '{sql_instance}': {e}") from e

    def database_exists(self, sql_instance: str, database_name: str) -> bool:
        # 기본 collation에서 SQL Server 데이터베이스 이름은 대소문자를 구분하지 않음
        wanted = database_name.lower()
        return any(name.lower() == wanted for name in self.list_databases(sql_instance))

    def attach_database(self, sql_instance: str, database_name: str, files: Sequence[str]):
        """
        데이터 파일과 로그 파일을 새 데이터베이스로 인스턴스에 연결합니다.

        Args:
            sql_instance: 대상 인스턴스.
            database_name: 새 데이터베이스 이름.
            files: 데이터베이스의 모든 파일 (데이터 및 로그).

        Raises:
            AttachmentError: 파일 목록이 비었거나 서버가 연결을 거부했을 때.
        """
        if not files:
            raise AttachmentError(f"No files to attach for database '{database_name}'.")

        engine = self._engine(sql_instance)
        statement = build_attach_statement(engine.dialect, database_name, files)
        try:
            with engine.connect() as conn:
                conn.exec_driver_sql(statement)
        except SQLAlchemyError as e:
            raise AttachmentError(
                f"Failed to attach database '{database_name}' on instance '{sql_instance}': {e}"
            ) from e
        logger.info("Attached database '%s' on '%s' from %d file(s)", database_name, sql_instance, len(files))

    def dispose(self):
        for engine in self._engines.values():
            engine.dispose()
        self._engines.clear()
