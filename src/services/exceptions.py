# src/services/exceptions.py

class CloneError(Exception):
    """클론 파이프라인에서 발생하는 모든 오류의 기반 클래스"""
    pass

# --- Invocation-level Exceptions ---
class ConfigurationError(CloneError):
    """설정이나 실행 환경을 사용할 수 없을 때 (전체 실행 중단)"""
    pass

# --- Pairing-level Exceptions ---
class ResolutionError(CloneError):
    """부모 이미지나 메타데이터 행을 찾을 수 없을 때"""
    pass

class ImageNotFoundError(ResolutionError):
    """요청한 데이터베이스나 경로에 해당하는 이미지가 없을 때"""
    pass

class HostNotFoundError(ResolutionError):
    """등록 후 호스트 행을 다시 읽을 수 없을 때"""
    pass

class CollisionError(CloneError):
    """대상 데이터베이스, 클론 파일 또는 액세스 경로가 이미 존재할 때"""
    pass

class ProvisioningError(CloneError):
    """디스크 생성/마운트/초기화/연결 단계 실패 시"""

    def __init__(self, step: str, message: str):
        super().__init__(f"[{step}] {message}")
        self.step = step

class AttachmentError(CloneError):
    """대상 인스턴스에 데이터베이스를 연결(attach)하지 못했을 때"""
    pass

class PersistenceError(CloneError):
    """메타데이터 저장소 읽기/쓰기 실패 시"""
    pass
