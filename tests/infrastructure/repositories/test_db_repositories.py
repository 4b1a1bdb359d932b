from datetime import datetime, timedelta
from pathlib import Path

import pytest

from filevault.core.config import Settings
from filevault.domain.models.file import File
from filevault.domain.models.folder import Folder
from filevault.infrastructure.storage.database import Database

pytestmark = pytest.mark.anyio


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
async def database(tmp_path: Path):
    database = Database(
        Settings(
            env="test",
            sqlalchemy_database_url=f"sqlite+aiosqlite:///{tmp_path / 'repo.db'}",
        )
    )
    await database.init()
    await database.create_all()
    yield database
    await database.shutdown()


def _file(name: str, user_id: str, folder_id=None, uploaded=None, size=1) -> File:
    uploaded = uploaded or datetime.now()
    return File(
        name=name,
        mime_type="text/plain",
        size=size,
        path=f"1_{name}",
        user_id=user_id,
        folder_id=folder_id,
        upload_date=uploaded,
        last_modified=uploaded,
    )


async def test_file_queries_are_owner_scoped(database: Database) -> None:
    now = datetime.now()
    older = _file("old.txt", "alice", uploaded=now - timedelta(days=30), size=5)
    newer = _file("new.txt", "alice", uploaded=now, size=7)
    foreign = _file("bob.txt", "bob", uploaded=now)
    async with database.uow() as uow:
        for file in (older, newer, foreign):
            await uow.file.save(file)

    async with database.uow() as uow:
        files = await uow.file.list_by_user("alice")
        assert [f.id for f in files] == [newer.id, older.id]
        assert await uow.file.get_by_id(foreign.id, "alice") is None
        assert await uow.file.update_name(foreign.id, "alice", "x", now) is False

        stats = await uow.file.get_stats("alice", recent_since=now - timedelta(days=7))
        assert (stats.total_files, stats.total_size, stats.recent_files) == (2, 12, 1)
        assert await uow.file.get_all_paths() == {"1_old.txt", "1_new.txt", "1_bob.txt"}


async def test_folder_counts_and_cascade_delete(database: Database) -> None:
    folder = Folder(name="Receipts", user_id="alice")
    other = Folder(name="Empty", user_id="alice")
    async with database.uow() as uow:
        await uow.folder.save(folder)
        await uow.folder.save(other)
    async with database.uow() as uow:
        await uow.file.save(_file("a.txt", "alice", folder_id=folder.id))
        await uow.file.save(_file("b.txt", "alice", folder_id=folder.id))
        await uow.file.save(_file("c.txt", "alice"))

    async with database.uow() as uow:
        assert await uow.file.count_by_folder("alice") == {folder.id: 2}
        assert {f.id for f in await uow.folder.list_by_user("alice")} == {
            folder.id,
            other.id,
        }
        assert await uow.folder.get_by_id(folder.id, "bob") is None

    async with database.uow() as uow:
        assert await uow.file.delete_by_folder(folder.id, "alice") == 2
        await uow.folder.delete(folder.id, "alice")

    async with database.uow() as uow:
        assert await uow.folder.get_by_id(folder.id, "alice") is None
        assert [f.name for f in await uow.file.list_by_user("alice")] == ["c.txt"]


async def test_failed_unit_of_work_rolls_back(database: Database) -> None:
    folder = Folder(name="Receipts", user_id="alice")

    with pytest.raises(RuntimeError):
        async with database.uow() as uow:
            await uow.folder.save(folder)
            raise RuntimeError("boom")

    async with database.uow() as uow:
        assert await uow.folder.list_by_user("alice") == []
