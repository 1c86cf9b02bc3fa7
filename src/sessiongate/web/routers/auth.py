from fastapi import APIRouter, Response
from pydantic import BaseModel, Field

from sessiongate.core.modules.user.models import UserView
from sessiongate.web.deps import SESSION_COOKIE_NAME, AppDep, AuthTokenDep, ConfigDep
from sessiongate.web.openapi import ErrorResponse

router = APIRouter(tags=["auth"])


class RegisterRequest(BaseModel):
    """Account registration request."""

    email: str = Field(..., description="Email address, used as the login name")
    password: str = Field(..., description="Password meeting the strength policy")


class LoginRequest(BaseModel):
    """Authentication request."""

    email: str = Field(..., description="Email address")
    password: str = Field(..., description="Password")


class LoginResponse(BaseModel):
    """Authentication response."""

    token: str = Field(..., description="Session token for subsequent requests")


@router.post(
    "/auth/register",
    summary="Register account",
    description="Create an account with email and password.",
    operation_id="register",
    status_code=201,
    responses={
        201: {"description": "Account created"},
        400: {"model": ErrorResponse, "description": "Invalid email or password, or registration failed"},
    },
)
async def register(register_data: RegisterRequest, app: AppDep) -> UserView:
    return await app.register(register_data.email, register_data.password)


@router.post(
    "/auth/login",
    summary="Authenticate user",
    description="Authenticate with email and password to receive a session token.",
    operation_id="login",
    responses={
        200: {"description": "Successfully authenticated"},
        401: {"model": ErrorResponse, "description": "Invalid credentials"},
        503: {"model": ErrorResponse, "description": "Session store unavailable"},
    },
)
async def login(login_data: LoginRequest, app: AppDep, config: ConfigDep, response: Response) -> LoginResponse:
    """Authenticate user and create session."""
    token = await app.login(login_data.email, login_data.password)

    # Set cookie for browser-based clients
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=token,
        path="/",
        httponly=True,
        samesite="strict",
        secure=config.session_cookie_secure,
        max_age=int(app.session_lifetime.total_seconds()),
    )

    return LoginResponse(token=token)


@router.post(
    "/auth/logout",
    summary="End session",
    description="Invalidate the current session.",
    operation_id="logout",
    status_code=204,
    responses={
        204: {"description": "Successfully logged out"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def logout(app: AppDep, config: ConfigDep, auth_token: AuthTokenDep, response: Response) -> None:
    await app.logout(auth_token)
    response.delete_cookie(
        SESSION_COOKIE_NAME, path="/", httponly=True, samesite="strict", secure=config.session_cookie_secure
    )
