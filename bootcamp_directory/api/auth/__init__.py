from datetime import datetime, timedelta, timezone

from fastapi import APIRouter, Depends, Request, Response
from pydantic import BaseModel, EmailStr, Field

from bootcamp_directory.models.user import User
from bootcamp_directory.services.auth import TOKEN_COOKIE, TokenResponse, get_current_user
from bootcamp_directory.services.auth_flow import AuthFlow, get_auth_flow
from bootcamp_directory.utils.base import UserRole


router = APIRouter()


def send_token_response(result: TokenResponse, response: Response) -> dict:
    """Attach the session cookie and return the token envelope."""
    response.set_cookie(TOKEN_COOKIE, result.token, **result.cookie.model_dump())
    return result.body()


class RegisterBody(BaseModel):
    name: str = Field(min_length=1)
    email: EmailStr
    password: str = Field(min_length=6)
    role: str = UserRole.USER.value

@router.post("/register")
def register(
    body: RegisterBody,
    response: Response,
    flow: AuthFlow = Depends(get_auth_flow),
) -> dict:
    """PUBLIC: Create an account and log it in."""
    result = flow.register(name=body.name, email=body.email, password=body.password, role=body.role)
    return send_token_response(result, response)


class LoginBody(BaseModel):
    # Presence is checked by the flow so both gaps share one message
    email: str | None = None
    password: str | None = None

@router.post("/login")
def login(
    body: LoginBody,
    response: Response,
    flow: AuthFlow = Depends(get_auth_flow),
) -> dict:
    """PUBLIC: Exchange email and password for a session token."""
    result = flow.login(email=body.email, password=body.password)
    return send_token_response(result, response)


@router.get("/me")
def me(
    current_user: User = Depends(get_current_user),
    flow: AuthFlow = Depends(get_auth_flow),
) -> dict:
    """PROTECTED: Return the logged-in user."""
    return flow.current_user(current_user.id)


class ForgotPasswordBody(BaseModel):
    email: EmailStr


@router.post("/forgotpassword")
def forgot_password(
    body: ForgotPasswordBody,
    request: Request,
    flow: AuthFlow = Depends(get_auth_flow),
) -> dict:
    """PUBLIC: Mail a password reset link."""
    return flow.forgot_password(
        email=body.email,
        build_reset_url=lambda token: str(request.url_for("reset_password", resettoken=token)),
    )


class ResetPasswordBody(BaseModel):
    password: str = Field(min_length=6)

@router.put("/resetpassword/{resettoken}")
def reset_password(
    resettoken: str,
    body: ResetPasswordBody,
    response: Response,
    flow: AuthFlow = Depends(get_auth_flow),
) -> dict:
    """PUBLIC: Set a new password using the token from the reset mail."""
    result = flow.reset_password(reset_token=resettoken, password=body.password)
    return send_token_response(result, response)


class UpdateDetailsBody(BaseModel):
    name: str | None = Field(default=None, min_length=1)
    email: EmailStr | None = None

@router.put("/updatedetails")
def update_details(
    body: UpdateDetailsBody,
    current_user: User = Depends(get_current_user),
    flow: AuthFlow = Depends(get_auth_flow),
) -> dict:
    """PROTECTED: Change name and/or email."""
    return flow.update_details(current_user.id, name=body.name, email=body.email)


class UpdatePasswordBody(BaseModel):
    current_password: str
    new_password: str = Field(min_length=6)

@router.put("/updatepassword")
def update_password(
    body: UpdatePasswordBody,
    response: Response,
    current_user: User = Depends(get_current_user),
    flow: AuthFlow = Depends(get_auth_flow),
) -> dict:
    """PROTECTED: Change password; previously issued tokens stop working."""
    result = flow.update_password(current_user.id, body.current_password, body.new_password)
    return send_token_response(result, response)


@router.get("/logout")
def logout(
    response: Response,
    current_user: User = Depends(get_current_user),
    flow: AuthFlow = Depends(get_auth_flow),
) -> dict:
    """PROTECTED: Revoke issued tokens and clear the cookie."""
    response.set_cookie(
        TOKEN_COOKIE,
        "none",
        expires=datetime.now(timezone.utc) + timedelta(seconds=10),
        httponly=True,
    )
    return flow.logout(current_user.id)
