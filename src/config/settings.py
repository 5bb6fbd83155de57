# src/config/settings.py
"""환경 변수(접두사 ``DBCLONE_``) 또는 .env 파일에서 읽는 타입 지정 설정입니다.

검증된 ``Settings`` 객체는 생성 시점에 서비스로 전달되며,
파이프라인은 모듈 전역에서 설정을 읽지 않습니다.
"""

from functools import lru_cache
from typing import Optional

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.services.exceptions import ConfigurationError

PARTITION_STYLES = ("GPT", "MBR")


class Settings(BaseSettings):
    """애플리케이션 설정"""

    model_config = SettingsConfigDict(
        env_prefix="DBCLONE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === METADATA STORE ===
    metadata_url: str = ""

    # === SQL SERVER ===
    sql_driver: str = "ODBC Driver 18 for SQL Server"
    sql_username: Optional[str] = None
    sql_password: Optional[SecretStr] = None
    sql_trust_server_certificate: bool = True

    # === DISKS ===
    powershell_executable: str = "powershell.exe"
    clone_disk_extension: str = ".vhdx"
    partition_style: str = "GPT"
    mount_suffix_length: int = 8

    # === LOGGING ===
    log_level: str = "INFO"
    log_file: Optional[str] = None


def validate_settings(settings: Settings) -> Settings:
    """
    설정으로 클론 작업을 실행할 수 있는지 검사합니다.

    Args:
        settings: 검사할 설정.

    Returns:
        변경되지 않은 동일한 설정 객체.

    Raises:
        ConfigurationError: 값이 없거나 범위를 벗어났을 때.
    """
    if not settings.metadata_url.strip():
        raise ConfigurationError("DBCLONE_METADATA_URL is not set; the metadata store is unknown.")
    if settings.partition_style.upper() not in PARTITION_STYLES:
        raise ConfigurationError(f"Unsupported partition style '{settings.partition_style}'.")
    if not settings.clone_disk_extension.startswith("."):
        raise ConfigurationError(f"Clone disk extension '{settings.clone_disk_extension}' must start with '.'.")
    if not 4 <= settings.mount_suffix_length <= 32:
        raise ConfigurationError("Mount suffix length must be between 4 and 32 characters.")
    if settings.sql_username and settings.sql_password is None:
        raise ConfigurationError("DBCLONE_SQL_PASSWORD is required when DBCLONE_SQL_USERNAME is set.")
    return settings


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    """프로세스당 한 번 설정을 읽고 검증합니다."""
    return validate_settings(Settings())
