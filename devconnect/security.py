import datetime
import logging
from typing import Annotated, Literal

from fastapi import HTTPException, status, Depends
from fastapi.security import OAuth2PasswordBearer
from jose import jwt, ExpiredSignatureError, JWTError
from pydantic import BaseModel

from devconnect.config import config

logger = logging.getLogger(__name__)

KEY = config.SECRET_KEY
ALGORITHM = "HS256"
# Tokens are issued by the auth service; this only points the OpenAPI docs at it
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/users/login")


class AuthenticatedUser(BaseModel):
    id: str


def create_credentials_exception(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )

def access_token_expire_minutes() -> int:
    return config.ACCESS_TOKEN_EXPIRE_MINUTES

def create_access_token(user_id: str):
    expire = datetime.datetime.now(datetime.timezone.utc) + datetime.timedelta(
        minutes=access_token_expire_minutes()
    )
    jwt_data = {"sub": str(user_id), "exp": expire, "type": "access"}
    encoded_jwt = jwt.encode(jwt_data, KEY, algorithm = ALGORITHM)

    return encoded_jwt

def get_subject_for_token_type(
    token: str, type: Literal["access", "refresh"]
) -> str:
    try:
        payload = jwt.decode(token, key=KEY, algorithms=[ALGORITHM])
    except ExpiredSignatureError as e:
        raise create_credentials_exception("Token has expired") from e
    except JWTError as e:
        raise create_credentials_exception("Invalid token") from e

    user_id = payload.get("sub")
    if user_id is None:
        raise create_credentials_exception("Token is missing 'sub' field")

    token_type = payload.get("type")
    if token_type is None or token_type != type:
        raise create_credentials_exception(
            f"Token has incorrect type, expected '{type}'"
        )

    return user_id

#Adding the dependency injection to reduce the amount of code related to adding this scheme
async def get_current_user(token: Annotated[str, Depends(oauth2_scheme)]) -> AuthenticatedUser:
    user_id = get_subject_for_token_type(token, "access")
    logger.debug(f"Authenticated request for user_id={user_id}")
    return AuthenticatedUser(id=user_id)
