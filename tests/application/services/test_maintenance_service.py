import asyncio
import io
import os
import time

from filevault.application.services.file_service import FileService
from filevault.application.services.maintenance_service import MaintenanceService


def _age(path, seconds: int) -> None:
    past = time.time() - seconds
    os.utime(path, (past, past))


def test_reconcile_removes_old_orphans_and_reports_missing(uow, blob_store) -> None:
    file_service = FileService(uow_factory=lambda: uow, blob_store=blob_store)
    kept = asyncio.run(file_service.upload_file("alice", "a.txt", None, io.BytesIO(b"a")))
    missing = asyncio.run(file_service.upload_file("alice", "b.txt", None, io.BytesIO(b"b")))
    blob_store.path_for(missing.path).unlink()

    old_orphan = blob_store.path_for("1_old.txt")
    old_orphan.write_bytes(b"old")
    _age(old_orphan, 7200)
    fresh_orphan = blob_store.path_for("2_fresh.txt")
    fresh_orphan.write_bytes(b"fresh")
    _age(blob_store.path_for(kept.path), 7200)

    service = MaintenanceService(
        uow_factory=lambda: uow, blob_store=blob_store, orphan_grace_seconds=3600
    )
    report = asyncio.run(service.reconcile())

    assert report.orphan_blobs == ["1_old.txt"]
    assert report.removed_blobs == ["1_old.txt"]
    assert report.missing_blobs == [missing.path]
    assert not old_orphan.exists()
    assert fresh_orphan.exists()
    assert blob_store.path_for(kept.path).exists()
    assert missing.id in uow.files


def test_reconcile_dry_run_deletes_nothing(uow, blob_store) -> None:
    orphan = blob_store.path_for("1_old.txt")
    orphan.write_bytes(b"old")
    _age(orphan, 7200)

    service = MaintenanceService(
        uow_factory=lambda: uow, blob_store=blob_store, orphan_grace_seconds=60
    )
    report = asyncio.run(service.reconcile(dry_run=True))

    assert report.orphan_blobs == ["1_old.txt"]
    assert report.removed_blobs == []
    assert orphan.exists()
