from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship
from ..database import Base

class Host(Base):
    """
    클론을 소유하는 머신을 나타냅니다.
    호스트 이름당 하나의 행만 존재하며, 처음 클론을 만들 때 생성되고 이후 재사용됩니다.
    """
    __tablename__ = "hosts"
    id = Column(Integer, primary_key=True, index=True)
    hostname = Column(String, unique=True, nullable=False, index=True)
    ip_address = Column(String)
    fqdn = Column(String)

    clones = relationship("Clone", back_populates="host")
