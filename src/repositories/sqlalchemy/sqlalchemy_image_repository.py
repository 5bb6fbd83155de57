from typing import List, Optional
from sqlalchemy.orm import Session
from src.database import models
from src.repositories.interfaces import IImageRepository

class SqlalchemyImageRepository(IImageRepository):
    def __init__(self, db_session: Session):
        self.db = db_session

    def find_latest_by_database(self, database_name: str) -> Optional[models.Image]:
        return self.db.query(models.Image).filter(
            models.Image.database_name == database_name
        ).order_by(models.Image.created_at.desc(), models.Image.id.desc()).first()

    def find_by_location(self, image_location: str) -> Optional[models.Image]:
        return self.db.query(models.Image).filter(models.Image.image_location == image_location).first()

    def list_images(self, database_name: Optional[str] = None) -> List[models.Image]:
        query = self.db.query(models.Image)
        if database_name:
            query = query.filter(models.Image.database_name == database_name)
        return query.order_by(models.Image.created_at.desc(), models.Image.id.desc()).all()
