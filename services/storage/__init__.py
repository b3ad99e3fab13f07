from services.storage.file_store import LocalFileStore

__all__ = ["LocalFileStore"]
