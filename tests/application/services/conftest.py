from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Set

import pytest

from filevault.domain.models.file import File, FileStats
from filevault.domain.models.folder import Folder
from filevault.infrastructure.external.blob_store.local_blob_store import LocalBlobStore


class FakeFileRepo:
    def __init__(self, files: Dict[str, File]) -> None:
        self.files = files

    async def save(self, file: File) -> None:
        self.files[file.id] = file.model_copy()

    async def get_by_id(self, file_id: str, user_id: str) -> Optional[File]:
        file = self.files.get(file_id)
        if file is None or file.user_id != user_id:
            return None
        return file.model_copy()

    async def list_by_user(self, user_id: str, folder_id: Optional[str] = None) -> List[File]:
        files = [
            f
            for f in self.files.values()
            if f.user_id == user_id and (not folder_id or f.folder_id == folder_id)
        ]
        return sorted(files, key=lambda f: f.upload_date, reverse=True)

    async def list_by_folder(self, folder_id: str, user_id: str) -> List[File]:
        return [
            f for f in self.files.values() if f.folder_id == folder_id and f.user_id == user_id
        ]

    async def update_name(
        self, file_id: str, user_id: str, name: str, last_modified: datetime
    ) -> bool:
        file = self.files.get(file_id)
        if file is None or file.user_id != user_id:
            return False
        file.name = name
        file.last_modified = last_modified
        return True

    async def delete(self, file_id: str, user_id: str) -> None:
        file = self.files.get(file_id)
        if file is not None and file.user_id == user_id:
            del self.files[file_id]

    async def delete_by_folder(self, folder_id: str, user_id: str) -> int:
        doomed = [f.id for f in await self.list_by_folder(folder_id, user_id)]
        for file_id in doomed:
            del self.files[file_id]
        return len(doomed)

    async def count_by_folder(self, user_id: str) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for f in self.files.values():
            if f.user_id == user_id and f.folder_id:
                counts[f.folder_id] = counts.get(f.folder_id, 0) + 1
        return counts

    async def get_stats(self, user_id: str, recent_since: datetime) -> FileStats:
        files = [f for f in self.files.values() if f.user_id == user_id]
        return FileStats(
            total_files=len(files),
            total_size=sum(f.size for f in files),
            recent_files=sum(1 for f in files if f.upload_date >= recent_since),
        )

    async def get_all_paths(self) -> Set[str]:
        return {f.path for f in self.files.values()}


class FakeFolderRepo:
    def __init__(self, folders: Dict[str, Folder]) -> None:
        self.folders = folders

    async def save(self, folder: Folder) -> None:
        self.folders[folder.id] = folder.model_copy()

    async def get_by_id(self, folder_id: str, user_id: str) -> Optional[Folder]:
        folder = self.folders.get(folder_id)
        if folder is None or folder.user_id != user_id:
            return None
        return folder.model_copy()

    async def list_by_user(self, user_id: str) -> List[Folder]:
        folders = [f.model_copy() for f in self.folders.values() if f.user_id == user_id]
        return sorted(folders, key=lambda f: f.created_at, reverse=True)

    async def update_name(self, folder_id: str, user_id: str, name: str) -> bool:
        folder = self.folders.get(folder_id)
        if folder is None or folder.user_id != user_id:
            return False
        folder.name = name
        return True

    async def delete(self, folder_id: str, user_id: str) -> None:
        folder = self.folders.get(folder_id)
        if folder is not None and folder.user_id == user_id:
            del self.folders[folder_id]


class FakeUnitOfWork:
    """内存版UoW，fail_on_commit为True时模拟提交失败"""

    def __init__(self) -> None:
        self.files: Dict[str, File] = {}
        self.folders: Dict[str, Folder] = {}
        self.file = FakeFileRepo(self.files)
        self.folder = FakeFolderRepo(self.folders)
        self.fail_on_commit = False
        self.commits = 0

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            if self.fail_on_commit:
                raise RuntimeError("commit failed")
            self.commits += 1
        return None


@pytest.fixture
def uow() -> FakeUnitOfWork:
    return FakeUnitOfWork()


@pytest.fixture
def blob_store(tmp_path: Path) -> LocalBlobStore:
    store = LocalBlobStore(tmp_path / "uploads")
    store.init()
    return store
