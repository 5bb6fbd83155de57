from .sqlalchemy_image_repository import SqlalchemyImageRepository
from .sqlalchemy_host_repository import SqlalchemyHostRepository
from .sqlalchemy_clone_repository import SqlalchemyCloneRepository

__all__ = ["SqlalchemyImageRepository", "SqlalchemyHostRepository", "SqlalchemyCloneRepository"]
