from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

# 모든 메타데이터 모델이 상속받을 Base 클래스
# 이 클래스를 상속받아 모델을 정의하면, SQLAlchemy가 테이블을 인식합니다.
Base = declarative_base()


def create_metadata_engine(url: str) -> Engine:
    """
    메타데이터 저장소용 엔진을 생성합니다.

    connect_args의 check_same_thread는 SQLite에서만 필요합니다.
    """
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_engine(url, connect_args=connect_args)


def create_session_factory(engine: Engine) -> sessionmaker:
    # autocommit=False, autoflush=False로 설정하여, 명시적으로 commit을 호출해야 DB에 반영됩니다.
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)
