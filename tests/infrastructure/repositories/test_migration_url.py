from filevault.infrastructure.storage.migration import (
    build_alembic_database_url,
    mask_database_url,
)


def test_asyncpg_url_uses_sync_driver_with_timeout() -> None:
    url = build_alembic_database_url("postgresql+asyncpg://u:p@db:5432/filevault")

    assert url == "postgresql+psycopg2://u:p@db:5432/filevault?connect_timeout=5"


def test_existing_connect_timeout_is_kept() -> None:
    url = build_alembic_database_url(
        "postgresql+asyncpg://u:p@db:5432/filevault?connect_timeout=30"
    )

    assert url.endswith("connect_timeout=30")


def test_aiosqlite_url_uses_sync_sqlite() -> None:
    assert build_alembic_database_url("sqlite+aiosqlite:///tmp/t.db") == "sqlite:///tmp/t.db"


def test_mask_database_url_hides_password() -> None:
    masked = mask_database_url("postgresql+psycopg2://u:secret@db:5432/filevault")

    assert "secret" not in masked
    assert masked == "postgresql+psycopg2://u:***@db:5432/filevault"
