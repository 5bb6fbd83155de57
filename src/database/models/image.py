from sqlalchemy import Column, Integer, BigInteger, String, DateTime, func
from sqlalchemy.orm import relationship
from ..database import Base

class Image(Base):
    """
    데이터베이스의 데이터 파일을 특정 시점에 캡처한 읽기 전용 디스크 이미지입니다.
    이미지는 캡처 도구가 기록하며, 클론 파이프라인은 이를 읽기만 하고
    차등 디스크의 부모 경로로 사용합니다.
    """
    __tablename__ = "images"
    id = Column(Integer, primary_key=True, index=True)
    image_name = Column(String, nullable=False)
    image_location = Column(String, unique=True, nullable=False, index=True)
    size_mb = Column(BigInteger)
    database_name = Column(String, nullable=False, index=True)
    database_timestamp = Column(DateTime)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)

    clones = relationship("Clone", back_populates="image")
