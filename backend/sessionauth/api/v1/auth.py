"""Authentication endpoints using the service layer."""

from __future__ import annotations

from flask import Blueprint, g

from sessionauth.api.deps import (
    json_body,
    json_response,
    require_identity,
    require_token_owner,
    timing,
)
from sessionauth.schemas import (
    IdentitySchema,
    LoginResponseSchema,
    RefreshResponseSchema,
    RegistrationResponseSchema,
)
from sessionauth.services._shared.ports import Identity
from sessionauth.services.credentials.dto import IdentityPublicOut
from sessionauth.services.validation import load_login, load_refresh_token, load_registration
from sessionauth.services.wiring import get_services

bp = Blueprint("auth", __name__, url_prefix="/auth")

identity_schema = IdentitySchema()
registration_schema = RegistrationResponseSchema()
login_response_schema = LoginResponseSchema()
refresh_response_schema = RefreshResponseSchema()


@bp.post("/register")
@timing
def register():
    """Register a new user and return the created representation."""

    dto = load_registration(json_body())
    result = get_services().credentials.register(dto)
    return json_response({"data": registration_schema.dump(result)}, status=201)


@bp.post("/login")
@timing
def login():
    """Authenticate credentials and issue a credential pair."""

    dto = load_login(json_body())
    result = get_services().credentials.login(dto)
    return json_response({"data": login_response_schema.dump(result)})


@bp.post("/refresh")
@timing
def refresh():
    """Rotate a refresh token into a new credential pair."""

    secret = load_refresh_token(json_body())
    result = get_services().credentials.refresh(secret)
    return json_response({"data": refresh_response_schema.dump(result)})


@bp.post("/logout")
@require_token_owner
@timing
def logout(identity: Identity):
    """End every session of the caller and revoke the presented access token."""

    get_services().credentials.logout(identity.id, g.access_token)
    return json_response({"data": {"message": "Logged out"}})


@bp.get("/profile")
@require_identity
@timing
def profile(identity: Identity):
    """Return the authenticated user profile."""

    body = {"data": identity_schema.dump(IdentityPublicOut.from_identity(identity))}
    return json_response(body)
