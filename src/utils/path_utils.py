# src/utils/path_utils.py
import ntpath
import re
import uuid

from src.services.exceptions import ConfigurationError

# \\server\d$\some\dir -> d:\some\dir
_ADMIN_SHARE = re.compile(r'^\\\\[^\\]+\\([A-Za-z])\$(\\.*)?$')
_CAPTURE_TIMESTAMP = re.compile(r'_\d+$')


def normalize_destination(destination: str) -> str:
    """경로 끝의 구분자를 제거합니다. 'D:\\' 같은 드라이브 루트는 그대로 유지합니다."""
    normalized = destination.rstrip('\\/')
    if re.fullmatch(r'[A-Za-z]:', normalized):
        return normalized + '\\'
    return normalized


def is_network_path(path: str) -> bool:
    return path.startswith('\\\\') or path.startswith('//')


def to_local_path(path: str) -> str:
    """
    관리 공유(admin share) UNC 경로를 해당 호스트의 로컬 경로로 변환합니다.

    차등 디스크는 로컬 경로에서만 마운트할 수 있으므로 그 밖의 네트워크 경로는 거부합니다.

    Args:
        path: 로컬 경로 또는 UNC 경로.

    Returns:
        정규화된 로컬 경로.

    Raises:
        ConfigurationError: 로컬 경로로 변환할 수 없는 네트워크 경로일 때.
    """
    path = normalize_destination(path.replace('/', '\\') if is_network_path(path) else path)
    if not is_network_path(path):
        return path

    match = _ADMIN_SHARE.match(path)
    if not match:
        raise ConfigurationError(f"Network path '{path}' cannot be translated to a local path.")
    drive, rest = match.group(1), match.group(2) or '\\'
    return normalize_destination(f"{drive.upper()}:{rest}")


def image_base_name(image_location: str) -> str:
    """확장자를 제외한 이미지 파일 이름"""
    return ntpath.splitext(ntpath.basename(image_location))[0]


def derive_clone_name(image_location: str) -> str:
    """
    부모 이미지 파일 이름에서 클론 이름을 만듭니다.

    이미지는 '<database>_<timestamp>.<ext>' 형식으로 캡처되므로 끝의 타임스탬프를
    제거합니다. (예: 'DB1_20180101.vhdx' -> 'DB1')
    """
    base = image_base_name(image_location)
    stripped = _CAPTURE_TIMESTAMP.sub('', base)
    return stripped or base


def random_suffix(length: int = 8) -> str:
    return uuid.uuid4().hex[:length]


def mount_directory_name(base: str, suffix: str) -> str:
    return f"{base}_{suffix}"


def clone_file_path(destination: str, clone_name: str, extension: str) -> str:
    return ntpath.join(destination, f"{clone_name}{extension}")


def access_path(destination: str, base: str, suffix: str) -> str:
    return ntpath.join(destination, mount_directory_name(base, suffix))
