from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from ..database import Base

class Clone(Base):
    """
    이미지를 부모로 하는 차등 디스크에서 연결(attach)된 쓰기 가능한 데이터베이스입니다.
    디스크가 마운트되고 데이터베이스 연결까지 끝난 뒤에만 행이 기록됩니다.
    """
    __tablename__ = "clones"
    id = Column(Integer, primary_key=True, index=True)
    clone_location = Column(String, unique=True, nullable=False)
    access_path = Column(String, nullable=False)
    sql_instance = Column(String, nullable=False, index=True)
    database_name = Column(String, nullable=False)
    is_enabled = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, server_default=func.now())

    image_id = Column(Integer, ForeignKey("images.id"), nullable=False)
    host_id = Column(Integer, ForeignKey("hosts.id"), nullable=False)
    image = relationship("Image", back_populates="clones")
    host = relationship("Host", back_populates="clones")
