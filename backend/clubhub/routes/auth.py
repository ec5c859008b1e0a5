from typing import Any

import jwt
from fastapi import APIRouter, Depends, Request, Response
from fastapi.security import OAuth2PasswordBearer, OAuth2PasswordRequestForm
from heliclockter import datetime_utc, timedelta
from pydantic import BaseModel

from clubhub.config import config
from clubhub.models.db.admin import AdminInDB, AdminPublic
from clubhub.sql.admins import get_admin_by_username
from clubhub.utils.errors import UnauthorizedError
from clubhub.utils.security import verify_password

router = APIRouter(prefix=config.api_prefix)

ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = config.access_token_expire_minutes

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{config.api_prefix}/token", auto_error=False)


class Token(BaseModel):
    access_token: str
    token_type: str


class TokenData(BaseModel):
    username: str


def create_access_token(data: dict[str, Any], expires_delta: timedelta) -> str:
    to_encode = data.copy()
    expire = datetime_utc.now() + expires_delta
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, config.jwt_secret, algorithm=ALGORITHM)


def decode_access_token(token: str) -> TokenData | None:
    try:
        payload = jwt.decode(token, config.jwt_secret, algorithms=[ALGORITHM])
    except jwt.PyJWTError:
        return None

    username = payload.get("admin")
    if not isinstance(username, str):
        return None
    return TokenData(username=username)


def token_from_request(request: Request, bearer_token: str | None) -> str | None:
    return bearer_token or request.cookies.get(config.session_cookie_name)


async def authenticate_admin(username: str, password: str) -> AdminInDB | None:
    admin = await get_admin_by_username(username)
    if admin is None or not verify_password(password, admin.password_hash):
        return None
    return admin


async def admin_authenticated(
    request: Request, bearer_token: str | None = Depends(oauth2_scheme)
) -> AdminPublic:
    token = token_from_request(request, bearer_token)
    token_data = decode_access_token(token) if token is not None else None
    if token_data is None:
        raise UnauthorizedError("Could not validate credentials")

    admin = await get_admin_by_username(token_data.username)
    if admin is None:
        raise UnauthorizedError("Could not validate credentials")

    return AdminPublic.model_validate(admin.model_dump())


def set_session_cookie(response: Response, access_token: str) -> None:
    response.set_cookie(
        config.session_cookie_name,
        access_token,
        max_age=ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        httponly=True,
        secure=config.session_cookie_secure,
        samesite="lax",
    )


def issue_access_token(admin: AdminInDB) -> str:
    return create_access_token(
        data={"admin": admin.username},
        expires_delta=timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES),
    )


@router.post("/token", response_model=Token)
async def login_for_access_token(
    response: Response, form_data: OAuth2PasswordRequestForm = Depends()
) -> Token:
    admin = await authenticate_admin(form_data.username, form_data.password)
    if admin is None:
        raise UnauthorizedError("Incorrect username or password")

    access_token = issue_access_token(admin)
    set_session_cookie(response, access_token)
    return Token(access_token=access_token, token_type="bearer")


@router.post("/logout")
async def logout(response: Response) -> dict[str, bool]:
    response.delete_cookie(config.session_cookie_name)
    return {"success": True}


@router.get("/admins/me", response_model=AdminPublic)
async def get_me(admin: AdminPublic = Depends(admin_authenticated)) -> AdminPublic:
    return admin
