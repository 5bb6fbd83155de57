from .image import Image
from .host import Host
from .clone import Clone

__all__ = ["Image", "Host", "Clone"]
