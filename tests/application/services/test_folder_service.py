import asyncio
import io

import pytest

from filevault.application.errors.exceptions import NotFoundError, ValidationError
from filevault.application.services.file_service import FileService
from filevault.application.services.folder_service import FolderService


def _services(uow, blob_store):
    return (
        FolderService(uow_factory=lambda: uow, blob_store=blob_store),
        FileService(uow_factory=lambda: uow, blob_store=blob_store),
    )


def test_create_folder_trims_name(uow, blob_store) -> None:
    folder_service, _ = _services(uow, blob_store)

    folder = asyncio.run(folder_service.create_folder("alice", "  Receipts "))

    assert folder.name == "Receipts"
    assert folder.files_count == 0
    assert folder.id.startswith("folder_")
    assert uow.folders[folder.id].user_id == "alice"


def test_create_folder_requires_a_name(uow, blob_store) -> None:
    folder_service, _ = _services(uow, blob_store)

    with pytest.raises(ValidationError) as exc:
        asyncio.run(folder_service.create_folder("alice", ""))

    assert exc.value.msg == "Folder name is required"
    assert uow.folders == {}


def test_list_folders_counts_files(uow, blob_store) -> None:
    folder_service, file_service = _services(uow, blob_store)
    receipts = asyncio.run(folder_service.create_folder("alice", "Receipts"))
    empty = asyncio.run(folder_service.create_folder("alice", "Empty"))
    asyncio.run(folder_service.create_folder("bob", "Bob"))
    for name in ("a.txt", "b.txt"):
        asyncio.run(
            file_service.upload_file(
                "alice", name, None, io.BytesIO(b"x"), folder_id=receipts.id
            )
        )

    folders = {f.id: f for f in asyncio.run(folder_service.list_folders("alice"))}

    assert set(folders) == {receipts.id, empty.id}
    assert folders[receipts.id].files_count == 2
    assert folders[empty.id].files_count == 0


def test_rename_folder_keeps_files_count(uow, blob_store) -> None:
    folder_service, file_service = _services(uow, blob_store)
    folder = asyncio.run(folder_service.create_folder("alice", "Receipts"))
    asyncio.run(
        file_service.upload_file("alice", "a.txt", None, io.BytesIO(b"x"), folder_id=folder.id)
    )

    renamed = asyncio.run(folder_service.rename_folder("alice", folder.id, "Bills"))

    assert renamed.name == "Bills"
    assert renamed.files_count == 1


def test_rename_folder_of_another_user_is_not_found(uow, blob_store) -> None:
    folder_service, _ = _services(uow, blob_store)
    folder = asyncio.run(folder_service.create_folder("bob", "Bob"))

    with pytest.raises(NotFoundError):
        asyncio.run(folder_service.rename_folder("alice", folder.id, "Mine"))

    assert uow.folders[folder.id].name == "Bob"


def test_delete_folder_removes_files_and_blobs(uow, blob_store) -> None:
    folder_service, file_service = _services(uow, blob_store)
    folder = asyncio.run(folder_service.create_folder("alice", "Receipts"))
    kept = asyncio.run(file_service.upload_file("alice", "keep.txt", None, io.BytesIO(b"k")))
    doomed = [
        asyncio.run(
            file_service.upload_file(
                "alice", name, None, io.BytesIO(b"x"), folder_id=folder.id
            )
        )
        for name in ("a.txt", "b.txt")
    ]

    deleted = asyncio.run(folder_service.delete_folder("alice", folder.id))

    assert deleted == 2
    assert folder.id not in uow.folders
    assert set(uow.files) == {kept.id}
    for file in doomed:
        assert not blob_store.path_for(file.path).exists()
    assert blob_store.path_for(kept.path).exists()


def test_delete_folder_tolerates_missing_blobs(uow, blob_store) -> None:
    folder_service, file_service = _services(uow, blob_store)
    folder = asyncio.run(folder_service.create_folder("alice", "Receipts"))
    file = asyncio.run(
        file_service.upload_file("alice", "a.txt", None, io.BytesIO(b"x"), folder_id=folder.id)
    )
    blob_store.path_for(file.path).unlink()

    assert asyncio.run(folder_service.delete_folder("alice", folder.id)) == 1
    assert uow.files == {}


def test_delete_folder_of_another_user_is_not_found(uow, blob_store) -> None:
    folder_service, _ = _services(uow, blob_store)
    folder = asyncio.run(folder_service.create_folder("bob", "Bob"))

    with pytest.raises(NotFoundError):
        asyncio.run(folder_service.delete_folder("alice", folder.id))

    assert folder.id in uow.folders
