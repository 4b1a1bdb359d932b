from filevault.core.config import Settings


def test_database_url_is_built_from_parts() -> None:
    settings = Settings(
        db_host="db",
        db_port=6543,
        db_user="vault",
        db_password="secret",
        db_name="files",
    )

    assert settings.database_url == "postgresql+asyncpg://vault:secret@db:6543/files"


def test_explicit_database_url_takes_precedence() -> None:
    settings = Settings(sqlalchemy_database_url="sqlite+aiosqlite:///tmp/test.db")

    assert settings.database_url == "sqlite+aiosqlite:///tmp/test.db"


def test_defaults() -> None:
    settings = Settings(_env_file=None)

    assert settings.port == 3003
    assert settings.max_upload_size == 50 * 1024 * 1024
    assert settings.upload_dir == "uploads"
