from pathlib import Path
from typing import Dict, Generator, List, Optional

import pytest
from fastapi.testclient import TestClient

from filevault.core.config import Settings
from filevault.domain.models.identity import Credential, Identity
from filevault.interfaces.dependencies import get_identity_validator
from filevault.main import create_app


class FakeIdentityValidator:
    """按token映射身份的鉴权服务替身，记录每次调用"""

    def __init__(self, tokens: Dict[str, str]) -> None:
        self._tokens = tokens
        self.calls: List[Credential] = []

    async def validate(self, credential: Credential) -> Optional[Identity]:
        self.calls.append(credential)
        user_id = self._tokens.get(credential.authorization or "")
        if not user_id:
            return None
        return Identity(user_id=user_id, data={"userId": user_id})

@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        env="test",
        sqlalchemy_database_url=f"sqlite+aiosqlite:///{tmp_path / 'filevault.db'}",
        db_init_mode="create_all",
        upload_dir=str(tmp_path / "uploads"),
        max_upload_size=1024,
    )

@pytest.fixture
def identity_validator() -> FakeIdentityValidator:
    return FakeIdentityValidator(
        {
            "Bearer alice-token": "alice",
            "Bearer bob-token": "bob",
        }
    )

@pytest.fixture
def client(
    settings: Settings, identity_validator: FakeIdentityValidator
) -> Generator[TestClient, None, None]:
    """
    创建一个使用临时sqlite数据库和临时上传目录的 TestClient 客户端，
    鉴权服务替换为 FakeIdentityValidator。
    """
    app = create_app(settings)
    app.dependency_overrides[get_identity_validator] = lambda: identity_validator
    with TestClient(app) as c:
        yield c
