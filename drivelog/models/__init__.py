from drivelog.models.blob import Blob

__all__ = ["Blob"]
