"""HTTP routes for cashier sign-in."""

from fastapi import APIRouter, Request, Response
from pydantic import BaseModel, Field

from auth.config import AuthConfig
from auth.service import AuthService
from api.base import success_response


class SignInRequest(BaseModel):
    """Cashier credentials."""

    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


def create_auth_router(auth_service: AuthService, config: AuthConfig) -> APIRouter:
    """Create sign-in router with injected service."""
    router = APIRouter(tags=["auth"])

    @router.post("/login")
    async def login(body: SignInRequest, response: Response):
        """Sign a cashier in.

        Sets the session cookie on success. Bad credentials are a 401.
        """
        session = auth_service.sign_in(body.username, body.password)

        response.set_cookie(
            key=config.session_cookie_name,
            value=session.token,
            httponly=True,
            secure=config.session_cookie_secure,
            samesite="lax",
            max_age=int((session.expires_at - session.created_at).total_seconds()),
        )

        return success_response({
            "user": session.actor.model_dump(mode="json", by_alias=True),
        }).model_dump(mode="json")

    @router.post("/logout")
    async def logout(request: Request, response: Response):
        """Sign out - revoke session and clear cookie."""
        session_token = request.cookies.get(config.session_cookie_name)
        if session_token:
            auth_service.sign_out(session_token)

        response.delete_cookie(key=config.session_cookie_name)
        return success_response({"message": "Signed out"}).model_dump(mode="json")

    @router.get("/me")
    async def get_current_cashier(request: Request):
        """The signed-in cashier (middleware sets request.state.actor)."""
        return success_response({
            "user": request.state.actor.model_dump(mode="json", by_alias=True),
        }).model_dump(mode="json")

    return router
