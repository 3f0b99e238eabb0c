import datetime

import pytest
from fastapi import HTTPException
from jose import jwt

from devconnect import security

pytestmark = [pytest.mark.no_db, pytest.mark.anyio]


async def test_get_current_user_resolves_subject():
    token = security.create_access_token("u1")

    user = await security.get_current_user(token)

    assert user.id == "u1"


async def test_expired_token_is_rejected():
    expired = datetime.datetime.now(datetime.timezone.utc) - datetime.timedelta(minutes=1)
    token = jwt.encode({"sub": "u1", "exp": expired, "type": "access"}, security.KEY, algorithm=security.ALGORITHM)

    with pytest.raises(HTTPException) as excinfo:
        await security.get_current_user(token)

    assert excinfo.value.status_code == 401
    assert excinfo.value.detail == "Token has expired"


async def test_wrong_token_type_is_rejected():
    token = jwt.encode({"sub": "u1", "type": "refresh"}, security.KEY, algorithm=security.ALGORITHM)

    with pytest.raises(HTTPException) as excinfo:
        await security.get_current_user(token)

    assert excinfo.value.status_code == 401


async def test_garbage_token_is_rejected():
    with pytest.raises(HTTPException) as excinfo:
        await security.get_current_user("not-a-token")

    assert excinfo.value.detail == "Invalid token"
    assert excinfo.value.headers == {"WWW-Authenticate": "Bearer"}
