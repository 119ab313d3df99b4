from .local_photo_store import LocalPhotoStore

__all__ = ["LocalPhotoStore"]
