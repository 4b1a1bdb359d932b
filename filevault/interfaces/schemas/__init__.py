from .base import CamelModel, MessageResponse
from .file import FileItem, FileStatsResponse, RenameFileRequest
from .folder import FolderItem, FolderRequest

__all__ = [
    "CamelModel",
    "MessageResponse",
    "FileItem",
    "FileStatsResponse",
    "RenameFileRequest",
    "FolderItem",
    "FolderRequest",
]
