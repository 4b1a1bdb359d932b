#!/usr/bin/env python3
"""
磁盘文件与文件记录一致性巡检 CLI 脚本

用法示例:
    python scripts/reconcile_blobs.py --dry-run
    python scripts/reconcile_blobs.py --grace-seconds 600

说明:
1. 没有文件记录引用、且修改时间早于宽限期的磁盘文件会被删除。
2. 有记录但磁盘文件缺失的条目只报告，不会删除记录。
3. 指定 --dry-run 时只报告，不做任何删除。
"""

import argparse
import asyncio
import sys
from pathlib import Path

# 添加项目根目录到 Python 路径
sys.path.insert(0, str(Path(__file__).parent.parent))

from filevault.application.services.maintenance_service import MaintenanceService
from filevault.core.config import get_settings
from filevault.infrastructure.external.blob_store.local_blob_store import LocalBlobStore
from filevault.infrastructure.logging import setup_logging
from filevault.infrastructure.storage.database import Database


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="磁盘文件与文件记录一致性巡检")
    parser.add_argument("--dry-run", action="store_true", help="只报告不删除")
    parser.add_argument(
        "--grace-seconds",
        type=int,
        default=None,
        help="孤儿文件宽限期（秒），默认读取配置 orphan_blob_grace_seconds",
    )
    return parser.parse_args()


async def main() -> int:
    args = parse_args()
    settings = get_settings()
    setup_logging(settings)

    blob_store = LocalBlobStore(settings.upload_dir)
    if not blob_store.root.is_dir():
        print(f"❌ 存储目录不存在: {blob_store.root}")
        return 1

    database = Database(settings)
    await database.init()
    try:
        service = MaintenanceService(
            uow_factory=database.uow,
            blob_store=blob_store,
            orphan_grace_seconds=(
                args.grace_seconds
                if args.grace_seconds is not None
                else settings.orphan_blob_grace_seconds
            ),
        )
        report = await service.reconcile(dry_run=args.dry_run)
    finally:
        await database.shutdown()

    print("✅ 一致性巡检完成")
    print(f"   孤儿文件: {len(report.orphan_blobs)}")
    print(f"   已删除: {len(report.removed_blobs)}")
    print(f"   记录存在但文件缺失: {len(report.missing_blobs)}")
    for name in report.missing_blobs:
        print(f"     - {name}")
    return 0


if __name__ == "__main__":
    raise SystemExit(asyncio.run(main()))
