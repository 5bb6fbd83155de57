from .image import IImageRepository
from .host import IHostRepository
from .clone import ICloneRepository

__all__ = ["IImageRepository", "IHostRepository", "ICloneRepository"]
