# tests/services/test_metadata_service.py
from datetime import datetime
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from src.database import models
from src.repositories.interfaces import ICloneRepository, IHostRepository, IImageRepository
from src.repositories.sqlalchemy import (
    SqlalchemyCloneRepository,
    SqlalchemyHostRepository,
    SqlalchemyImageRepository,
)
from src.services.exceptions import ImageNotFoundError, PersistenceError
from src.services.image_service import ImageService
from src.services.metadata_service import MetadataService


@pytest.fixture
def metadata_service(db_session) -> MetadataService:
    return MetadataService(
        SqlalchemyImageRepository(db_session),
        SqlalchemyHostRepository(db_session),
        SqlalchemyCloneRepository(db_session),
    )


@pytest.fixture
def image(db_session) -> models.Image:
    image = models.Image(
        image_name="DB1_20180101.img",
        image_location=r"C:\images\DB1_20180101.img",
        database_name="DB1",
        created_at=datetime(2018, 1, 1),
    )
    db_session.add(image)
    db_session.commit()
    return image


def operational_error() -> OperationalError:
    return OperationalError("SELECT 1", {}, Exception("database is locked"))

# ===================================================================
#  Host resolution
# ===================================================================
class TestResolveHost:
    def test_resolve_host_twice_returns_same_id(self, metadata_service, db_session):
        first = metadata_service.resolve_host("host1", "10.0.0.1", "host1.corp.local")
        second = metadata_service.resolve_host("host1", "10.0.0.1", "host1.corp.local")

        assert first == second
        assert db_session.query(models.Host).filter(models.Host.hostname == "host1").count() == 1

    def test_store_failure_becomes_persistence_error(self):
        host_repo = MagicMock(spec=IHostRepository)
        host_repo.get_or_create.side_effect = operational_error()
        service = MetadataService(MagicMock(spec=IImageRepository), host_repo, MagicMock(spec=ICloneRepository))

        with pytest.raises(PersistenceError):
            service.resolve_host("host1", "10.0.0.1", "host1.corp.local")

# ===================================================================
#  Image lookup and clone persistence
# ===================================================================
class TestImageAndClone:
    def test_get_image_id(self, metadata_service, image):
        assert metadata_service.get_image_id(r"C:\images\DB1_20180101.img") == image.id

    def test_get_image_id_missing(self, metadata_service):
        with pytest.raises(ImageNotFoundError):
            metadata_service.get_image_id(r"C:\images\gone.img")

    def test_record_clone_persists_one_row(self, metadata_service, image, db_session):
        host_id = metadata_service.resolve_host("host1", "10.0.0.1", "host1.corp.local")

        clone_id = metadata_service.record_clone(
            image_id=image.id,
            host_id=host_id,
            clone_location=r"D:\clones\DB1.vhdx",
            access_path=r"D:\clones\DB1_abcd1234",
            sql_instance="SQL1",
            database_name="DB1",
            is_enabled=False,
        )

        stored = db_session.get(models.Clone, clone_id)
        assert stored.image_id == image.id
        assert stored.host_id == host_id
        assert stored.is_enabled is False
        assert [c.id for c in metadata_service.list_clones(hostname="host1")] == [clone_id]
        assert metadata_service.list_clones(hostname="unknown") == []

    def test_duplicate_clone_location_is_persistence_error(self, metadata_service, image):
        host_id = metadata_service.resolve_host("host1", "10.0.0.1", "host1.corp.local")
        kwargs = dict(image_id=image.id, host_id=host_id, clone_location=r"D:\clones\DB1.vhdx",
                      access_path=r"D:\clones\DB1_x", sql_instance="SQL1", database_name="DB1", is_enabled=True)
        metadata_service.record_clone(**kwargs)

        with pytest.raises(PersistenceError):
            metadata_service.record_clone(**kwargs)

# ===================================================================
#  ImageService
# ===================================================================
class TestImageService:
    def test_get_latest_image(self, db_session, image):
        service = ImageService(SqlalchemyImageRepository(db_session))
        assert service.get_latest_image("DB1").id == image.id
        assert [i.id for i in service.list_images("DB1")] == [image.id]

    def test_get_latest_image_missing(self, db_session):
        service = ImageService(SqlalchemyImageRepository(db_session))
        with pytest.raises(ImageNotFoundError):
            service.get_latest_image("DB2")

    def test_get_latest_image_store_failure(self):
        image_repo = MagicMock(spec=IImageRepository)
        image_repo.find_latest_by_database.side_effect = operational_error()
        with pytest.raises(PersistenceError):
            ImageService(image_repo).get_latest_image("DB1")
