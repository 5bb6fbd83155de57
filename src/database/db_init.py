import logging

from sqlalchemy.engine import Engine

from .database import Base
from . import models  # noqa: F401  모델을 import해야 Base.metadata에 테이블이 등록됨

logger = logging.getLogger(__name__)


def initialize_db(engine: Engine):
    """
    이미지, 호스트, 클론 테이블을 생성합니다. (이미 존재하면 생성하지 않음)
    기존 테이블과 데이터는 건드리지 않습니다.
    """
    logger.info("Initializing metadata store tables...")
    Base.metadata.create_all(bind=engine)
    logger.info("Metadata store tables ready.")
