from typing import Annotated, cast

from fastapi import Depends, Request
from fastapi.security import APIKeyCookie, HTTPAuthorizationCredentials, HTTPBearer

from sessiongate.app import App
from sessiongate.config import Config
from sessiongate.core.modules.session.models import AuthToken, Session

SESSION_COOKIE_NAME = "session_id"

# Security schemes
bearer_scheme = HTTPBearer(auto_error=False)
cookie_scheme = APIKeyCookie(name=SESSION_COOKIE_NAME, auto_error=False)


async def get_app(request: Request) -> App:
    return cast(App, request.app.state.app)


async def get_config(request: Request) -> Config:
    return cast(Config, request.app.state.config)


async def get_auth_token(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)] = None,
    token_cookie: Annotated[str | None, Depends(cookie_scheme)] = None,
) -> AuthToken | None:
    """Get auth token from Authorization Bearer header or session cookie."""
    if credentials and credentials.scheme.lower() == "bearer":
        return AuthToken(credentials.credentials)
    if token_cookie:
        return AuthToken(token_cookie)
    return None


async def get_current_session(
    request: Request,
    app: Annotated[App, Depends(get_app)],
    auth_token: Annotated[AuthToken | None, Depends(get_auth_token)],
) -> Session:
    """Admit the request only with a live session and expose its user id on request.state."""
    session = await app.authenticate(auth_token)
    request.state.user_id = session.user_id
    return session


# Type aliases for dependencies
AppDep = Annotated[App, Depends(get_app)]
ConfigDep = Annotated[Config, Depends(get_config)]
AuthTokenDep = Annotated[AuthToken | None, Depends(get_auth_token)]
SessionDep = Annotated[Session, Depends(get_current_session)]
