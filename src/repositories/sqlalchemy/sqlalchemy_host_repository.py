from typing import Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from src.database import models
from src.repositories.interfaces import IHostRepository

class SqlalchemyHostRepository(IHostRepository):
    def __init__(self, db_session: Session):
        self.db = db_session

    def find_by_name(self, hostname: str) -> Optional[models.Host]:
        return self.db.query(models.Host).filter(models.Host.hostname == hostname).first()

    def get_or_create(self, hostname: str, ip_address: str, fqdn: str) -> models.Host:
        host = self.find_by_name(hostname)
        if host:
            return host

        host = models.Host(hostname=hostname, ip_address=ip_address, fqdn=fqdn)
        self.db.add(host)
        try:
            self.db.commit()
        except IntegrityError:
            # 다른 프로세스가 같은 호스트 이름을 먼저 삽입한 경우 (hostname은 unique)
            self.db.rollback()
            existing = self.find_by_name(hostname)
            if existing is None:
                raise
            return existing
        self.db.refresh(host)
        return host
