import asyncio
from typing import List, Optional

import pytest

from filevault.application.errors.exceptions import (
    ForbiddenError,
    ServerRequestsError,
    UnauthorizedError,
)
from filevault.domain.external.identity_validator import IdentityServiceError
from filevault.domain.models.identity import Credential, Identity
from filevault.interfaces.dependencies.auth import get_current_identity


class StubValidator:
    def __init__(self, identity: Optional[Identity] = None, fail: bool = False) -> None:
        self.identity = identity
        self.fail = fail
        self.calls: List[Credential] = []

    async def validate(self, credential: Credential) -> Optional[Identity]:
        self.calls.append(credential)
        if self.fail:
            raise IdentityServiceError("connection refused")
        return self.identity


def test_missing_credential_is_rejected_without_calling_validator() -> None:
    validator = StubValidator(identity=Identity(user_id="alice"))

    with pytest.raises(UnauthorizedError) as exc:
        asyncio.run(get_current_identity(validator, authorization=None, cookie=None))

    assert exc.value.status_code == 401
    assert exc.value.msg == "No token provided"
    assert validator.calls == []


def test_rejected_credential_is_forbidden() -> None:
    validator = StubValidator(identity=None)

    with pytest.raises(ForbiddenError) as exc:
        asyncio.run(get_current_identity(validator, authorization="Bearer bad"))

    assert exc.value.msg == "Invalid access token"
    assert validator.calls[0].authorization == "Bearer bad"


def test_validator_failure_is_server_error() -> None:
    validator = StubValidator(fail=True)

    with pytest.raises(ServerRequestsError) as exc:
        asyncio.run(get_current_identity(validator, cookie="sid=1"))

    assert exc.value.status_code == 500


def test_cookie_only_credential_is_forwarded() -> None:
    validator = StubValidator(identity=Identity(user_id="alice"))

    identity = asyncio.run(
        get_current_identity(validator, authorization=None, cookie="sid=abc")
    )

    assert identity.user_id == "alice"
    assert validator.calls == [Credential(authorization=None, cookie="sid=abc")]
