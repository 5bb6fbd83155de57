from typing import List, Optional
from sqlalchemy.orm import Session
from src.database import models
from src.repositories.interfaces import ICloneRepository

class SqlalchemyCloneRepository(ICloneRepository):
    def __init__(self, db_session: Session):
        self.db = db_session

    def create(self, clone_model: models.Clone) -> models.Clone:
        self.db.add(clone_model)
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(clone_model)
        return clone_model

    def find_by_location(self, clone_location: str) -> Optional[models.Clone]:
        return self.db.query(models.Clone).filter(models.Clone.clone_location == clone_location).first()

    def list_clones(self, host_id: Optional[int] = None, sql_instance: Optional[str] = None,
                    database_name: Optional[str] = None) -> List[models.Clone]:
        query = self.db.query(models.Clone)
        if host_id is not None:
            query = query.filter(models.Clone.host_id == host_id)
        if sql_instance:
            query = query.filter(models.Clone.sql_instance == sql_instance)
        if database_name:
            query = query.filter(models.Clone.database_name == database_name)
        return query.order_by(models.Clone.id).all()
