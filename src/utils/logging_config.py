"""
클론 도구의 로깅 설정
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union

DEFAULT_DATEFMT = '%Y-%m-%d %H:%M:%S'


def setup_logging(
    component_name: str = "dbclone",
    level: Union[int, str] = logging.INFO,
    log_file: Optional[str] = None,
    format_string: Optional[str] = None
) -> logging.Logger:
    """
    클론 실행을 위한 루트 로거를 설정합니다.

    Args:
        component_name: 모든 로그에 표시할 컴포넌트 식별자.
        level: 로깅 레벨. 숫자 또는 'DEBUG' 같은 이름.
        log_file: 로그를 기록할 파일 경로 (선택).
        format_string: 사용자 지정 포맷 문자열 (기본값 제공).

    Returns:
        컴포넌트 이름의 로거.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    if format_string is None:
        format_string = f'[%(asctime)s] [{component_name.upper()}] %(levelname)s - %(message)s'

    logging.basicConfig(
        level=level,
        format=format_string,
        datefmt=DEFAULT_DATEFMT,
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(format_string, datefmt=DEFAULT_DATEFMT))
        logging.getLogger().addHandler(file_handler)

    logger = logging.getLogger(component_name)
    logger.info(f"{component_name.upper()} logging initialized (level={logging.getLevelName(level)})")
    return logger
