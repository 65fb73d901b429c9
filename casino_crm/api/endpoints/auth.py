"""
Authentication Endpoints Module

Registration, login and logout for CRM users. Login returns a JWT and also
sets it as an HTTP-only cookie so browser clients are signed in as well.
"""
from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import JSONResponse
from fastapi.security import OAuth2PasswordRequestForm
from sqlmodel import Session, select
from datetime import timedelta
from casino_crm.core.config import settings
from casino_crm.core.errors import ConflictError, Unauthorized
from casino_crm.core.security import verify_password, get_password_hash, create_access_token
from casino_crm.db.session import get_db
from casino_crm.models.user import User
from casino_crm.schemas.auth import Token, UserRegister
from casino_crm.schemas.common import DataResponse
from casino_crm.schemas.user import UserRead

router = APIRouter()


@router.post("/register", response_model=DataResponse[UserRead], status_code=status.HTTP_201_CREATED)
def register_user(user_in: UserRegister, db: Session = Depends(get_db)):
    """
    Register a new user account.

    Raises:
        ConflictError: If a user with this email already exists
    """
    user = db.exec(select(User).where(User.email == user_in.email)).first()
    if user:
        raise ConflictError("User with this email already exists.")

    db_user = User(
        email=user_in.email,
        password=get_password_hash(user_in.password),
        full_name=user_in.full_name,
    )
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    return {"data": UserRead.model_validate(db_user)}


@router.post("/login", response_model=Token)
def login(response: Response, db: Session = Depends(get_db), form_data: OAuth2PasswordRequestForm = Depends()):
    """
    Authenticate a user and issue an access token.

    Note: OAuth2PasswordRequestForm uses 'username' field, but we treat it as email.

    Raises:
        Unauthorized: If credentials are invalid or the account is disabled
    """
    user = db.exec(select(User).where(User.email == form_data.username)).first()

    if not user or not user.is_active or not verify_password(form_data.password, user.password):
        raise Unauthorized("Incorrect email or password")

    access_token_expires = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    access_token = create_access_token(
        subject=user.email, expires_delta=access_token_expires
    )

    # httponly=True prevents JavaScript access to the cookie
    response.set_cookie(
        key="access_token",
        value=f"Bearer {access_token}",
        httponly=True,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        samesite="lax"
    )

    return {"access_token": access_token, "token_type": "bearer"}


@router.get("/logout")
def logout():
    """
    Log out by clearing the authentication cookie.

    API clients can simply discard their token.
    """
    response = JSONResponse({"data": {"success": True}})
    response.delete_cookie("access_token")
    return response
