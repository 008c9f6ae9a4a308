"""Screenshot upload clients."""

from .imgur import ImgurUploader

__all__ = ["ImgurUploader"]
