"""Object storage for wallpaper images."""

from storage.r2 import R2Storage, UploadResult

__all__ = ["R2Storage", "UploadResult"]
