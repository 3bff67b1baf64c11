from typing import Annotated

from fastapi import APIRouter, Depends, Header, HTTPException
from pydantic import BaseModel

from energysim.services.auth import AuthClient, AuthUser, Session, SessionContext

router = APIRouter(prefix="/auth", tags=["auth"])


def get_auth_client() -> AuthClient:
    return AuthClient()


def get_session_context(
    authorization: Annotated[str | None, Header()] = None,
    client: AuthClient = Depends(get_auth_client),
) -> SessionContext:
    """Build the request's session context, restoring it from a bearer token."""
    context = SessionContext(client)
    if authorization and authorization.lower().startswith("bearer "):
        context.restore(authorization[7:].strip())
    return context


def require_user(context: SessionContext = Depends(get_session_context)) -> AuthUser:
    if not context.is_authenticated:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return context.user


def _user_payload(user: AuthUser | None) -> dict | None:
    return {"id": user.id, "email": user.email} if user else None


def _session_payload(session: Session | None) -> dict | None:
    if session is None:
        return None
    return {
        "access_token": session.access_token,
        "refresh_token": session.refresh_token,
        "expires_at": session.expires_at,
        "user": _user_payload(session.user),
    }


class Credentials(BaseModel):
    email: str
    password: str


class SignUpRequest(Credentials):
    confirm_password: str | None = None


class VerifyRequest(BaseModel):
    email: str
    token: str


class ResendRequest(BaseModel):
    email: str


@router.post("/sign-in")
def sign_in(req: Credentials, client: AuthClient = Depends(get_auth_client)):
    result = client.sign_in(req.email, req.password)
    if not result.ok:
        raise HTTPException(status_code=401, detail=result.error)
    return {"session": _session_payload(result.session)}


@router.post("/sign-up")
def sign_up(req: SignUpRequest, client: AuthClient = Depends(get_auth_client)):
    result = client.sign_up(req.email, req.password, req.confirm_password)
    if not result.ok:
        raise HTTPException(status_code=400, detail=result.error)
    return {
        "user": _user_payload(result.user),
        "session": _session_payload(result.session),
        "verification_required": result.session is None,
    }


@router.post("/verify")
def verify(req: VerifyRequest, client: AuthClient = Depends(get_auth_client)):
    result = client.verify_otp(req.email, req.token)
    if not result.ok:
        raise HTTPException(status_code=400, detail=result.error)
    return {"session": _session_payload(result.session)}


@router.post("/resend")
def resend(req: ResendRequest, client: AuthClient = Depends(get_auth_client)):
    result = client.resend_verification(req.email)
    if not result.ok:
        raise HTTPException(status_code=400, detail=result.error)
    return {"status": "sent"}


@router.post("/sign-out")
def sign_out(context: SessionContext = Depends(get_session_context)):
    # imported here to keep the wizard registry out of the dependency module
    from energysim.api.wizard import discard_wizard

    user = context.user
    result = context.clear()
    if user is not None:
        discard_wizard(user.id)
    if not result.ok:
        raise HTTPException(status_code=400, detail=result.error)
    return {"status": "signed_out"}


@router.get("/session")
def current_session(user: AuthUser = Depends(require_user)):
    return {"user": _user_payload(user)}
