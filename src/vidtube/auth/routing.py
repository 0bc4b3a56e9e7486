import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Request, Response, UploadFile

from vidtube.db.session import get_store
from vidtube.errors import AuthError, ConflictError, NotFoundError, ValidationError
from vidtube.media.storage import LocalMediaStorage, get_media_storage
from vidtube.responses import api_response
from vidtube.store.adapter import Document, DocumentStore, DuplicateRecord
from .models import PasswordChange, RefreshTokenRequest, UserCreate, UserLogin, build
from .utils import (
    REFRESH,
    create_access_token,
    create_refresh_token,
    decode_token,
    get_current_user,
    hash_password,
    verify_password,
)

logger = logging.getLogger("auth")

router = APIRouter(tags=["auth"])

# Both session cookies are only readable and writable by the server.
COOKIE_OPTIONS = {"httponly": True, "secure": True}


def _issue_tokens(store: DocumentStore, user: Document, response: Response) -> dict:
    access_token = create_access_token(user)
    refresh_token = create_refresh_token(user)
    store.update_by_id("users", user["_id"], {"refreshToken": refresh_token})
    response.set_cookie("accessToken", access_token, **COOKIE_OPTIONS)
    response.set_cookie("refreshToken", refresh_token, **COOKIE_OPTIONS)
    return {"accessToken": access_token, "refreshToken": refresh_token}


@router.post("/register", status_code=201)
def register(
    fullName: str = Form(...),
    username: str = Form(...),
    email: str = Form(...),
    password: str = Form(...),
    avatar: Optional[UploadFile] = File(None),
    coverImage: Optional[UploadFile] = File(None),
    store: DocumentStore = Depends(get_store),
    media: LocalMediaStorage = Depends(get_media_storage),
):
    """
    Register a user. Multipart form with a required avatar and an optional cover image.
    """
    user = build(UserCreate, full_name=fullName, username=username, email=email, password=password)

    if avatar is None or not avatar.filename:
        raise ValidationError("Avatar file is required")

    existing = store.find("users", {"username": user.username}, limit=1) or store.find(
        "users", {"email": user.email}, limit=1
    )
    if existing:
        raise ConflictError("User with email or username already exists")

    avatar_asset = media.upload(avatar, "image")
    cover_asset = media.upload(coverImage, "image") if coverImage is not None and coverImage.filename else None

    try:
        created = store.insert(
            "users",
            {
                "fullName": user.full_name,
                "username": user.username,
                "email": user.email,
                "password": hash_password(user.password),
                "avatar": avatar_asset.url,
                "avatarPublicId": avatar_asset.public_id,
                "coverImage": cover_asset.url if cover_asset else "",
                "coverImagePublicId": cover_asset.public_id if cover_asset else None,
            },
        )
    except DuplicateRecord:
        # lost a race with a concurrent registration
        media.delete(avatar_asset.public_id, "image")
        if cover_asset:
            media.delete(cover_asset.public_id, "image")
        raise ConflictError("User with email or username already exists")

    logger.info(f"Registered user {created['_id']} ({created['username']})")
    return api_response(created, "User registered successfully", 201)


@router.post("/login")
def login(payload: UserLogin, response: Response, store: DocumentStore = Depends(get_store)):
    if payload.username and payload.username.strip():
        query = {"username": payload.username.strip().lower()}
    else:
        query = {"email": payload.email.strip().lower()}

    user = store.find_one("users", query, include_hidden=True)
    if user is None:
        raise NotFoundError("User does not exist")
    if not verify_password(payload.password, user["password"]):
        raise AuthError("Invalid user credentials. Invalid password.")

    tokens = _issue_tokens(store, user, response)
    logged_in = store.find_by_id("users", user["_id"])
    logger.info(f"User {user['_id']} logged in")
    return api_response({"user": logged_in, **tokens}, "User logged in successfully")


@router.post("/logout")
def logout(
    response: Response,
    current_user: Document = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
):
    store.update_by_id("users", current_user["_id"], {"refreshToken": None})
    response.delete_cookie("accessToken", **COOKIE_OPTIONS)
    response.delete_cookie("refreshToken", **COOKIE_OPTIONS)
    logger.info(f"User {current_user['_id']} logged out")
    return api_response({}, "User logged out")


@router.post("/refresh-token")
def refresh_access_token(
    request: Request,
    response: Response,
    payload: Optional[RefreshTokenRequest] = None,
    store: DocumentStore = Depends(get_store),
):
    incoming = request.cookies.get("refreshToken") or (payload.refreshToken if payload else None)
    if not incoming:
        raise AuthError("Unauthorized request")

    claims = decode_token(incoming, REFRESH)
    user = store.find_by_id("users", claims["sub"], include_hidden=True)
    if user is None:
        raise AuthError("Invalid refresh token")
    if incoming != user.get("refreshToken"):
        raise AuthError("Refresh token is expired or used")

    tokens = _issue_tokens(store, user, response)
    return api_response(tokens, "Access token refreshed")


@router.post("/change-password")
def change_password(
    payload: PasswordChange,
    current_user: Document = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
):
    user = store.find_by_id("users", current_user["_id"], include_hidden=True)
    if not verify_password(payload.oldPassword, user["password"]):
        raise ValidationError("Invalid old password")
    store.update_by_id("users", user["_id"], {"password": hash_password(payload.newPassword)})
    logger.info(f"User {user['_id']} changed password")
    return api_response({}, "Password changed successfully")


@router.get("/current-user")
def get_me(current_user: Document = Depends(get_current_user)):
    return api_response(current_user, "Current user fetched successfully")
