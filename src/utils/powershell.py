# src/utils/powershell.py
import json
import logging
import subprocess
from typing import Any, List, Optional

logger = logging.getLogger(__name__)


class PowerShellError(Exception):
    """PowerShell 명령이 0이 아닌 상태로 종료되었거나 실행할 수 없을 때"""

    def __init__(self, message: str, stderr: str = ""):
        super().__init__(message)
        self.stderr = stderr


def quote(value: Any) -> str:
    """값을 작은따옴표로 감싼 PowerShell 리터럴로 만듭니다."""
    return "'" + str(value).replace("'", "''") + "'"


def as_list(payload: Any) -> List[Any]:
    """ConvertTo-Json은 결과가 하나면 배열이 아닌 객체를 내보내므로 항상 리스트로 맞춥니다."""
    if payload is None:
        return []
    if isinstance(payload, list):
        return payload
    return [payload]


class PowerShellRunner:
    def __init__(self, executable: str = "powershell.exe"):
        self.executable = executable

    def run(self, script: str) -> str:
        """
        PowerShell 스크립트를 실행하고 표준 출력을 반환합니다.

        Args:
            script: 실행할 스크립트. 모든 인자는 quote()로 이스케이프되어 있어야 합니다.

        Returns:
            앞뒤 공백을 제거한 표준 출력.

        Raises:
            PowerShellError: 실행 파일이 없거나, 스크립트가 실패했거나, 출력을 디코딩할 수 없을 때.
        """
        command = [
            self.executable,
            '-NoProfile',
            '-NonInteractive',
            '-Command',
            "$ErrorActionPreference = 'Stop'; " + script,
        ]
        logger.debug("Running PowerShell: %s", script)
        try:
            completed = subprocess.run(command, check=True, capture_output=True, text=True)
        except subprocess.CalledProcessError as e:
            stderr = (e.stderr or "").strip()
            raise PowerShellError(f"PowerShell command failed: {stderr or e}", stderr) from e
        except FileNotFoundError as e:
            raise PowerShellError(f"PowerShell executable '{self.executable}' not found.") from e
        except UnicodeDecodeError as e:
            raise PowerShellError(f"PowerShell output could not be decoded: {e}") from e
        return (completed.stdout or "").strip()

    def run_json(self, script: str, depth: int = 3) -> Optional[Any]:
        """파이프라인 결과를 ConvertTo-Json으로 받아 디코딩합니다."""
        output = self.run(f"{script} | ConvertTo-Json -Depth {depth} -Compress")
        if not output:
            return None
        try:
            return json.loads(output)
        except json.JSONDecodeError as e:
            raise PowerShellError(f"PowerShell returned invalid JSON: {output[:200]}") from e
