"""Authentication-related Marshmallow schemas."""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, fields, validate

#: At least one lowercase, one uppercase, one digit and one of ``@$!%*?&``.
PASSWORD_PATTERN = r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[@$!%*?&])[A-Za-z\d@$!%*?&]+$"
PASSWORD_RULE_MESSAGE = (
    "Password must contain an uppercase letter, a lowercase letter, "
    "a digit and one of @$!%*?&."
)


class _InputSchema(Schema):
    class Meta:
        unknown = EXCLUDE


class RegisterSchema(_InputSchema):
    """Input payload for account registration."""

    email = fields.Email(required=True, validate=validate.Length(max=254))
    first_name = fields.String(required=True, validate=validate.Length(min=2, max=50))
    last_name = fields.String(required=True, validate=validate.Length(min=2, max=50))
    password = fields.String(
        required=True,
        validate=[
            validate.Length(min=8, max=128),
            validate.Regexp(PASSWORD_PATTERN, error=PASSWORD_RULE_MESSAGE),
        ],
    )


class LoginSchema(_InputSchema):
    """Input payload for authenticating a user."""

    email = fields.Email(required=True, validate=validate.Length(max=254))
    password = fields.String(required=True, validate=validate.Length(min=1, max=128))


class RefreshSchema(_InputSchema):
    """Input payload carrying an opaque refresh secret."""

    refresh_token = fields.String(required=True, validate=validate.Length(min=1, max=256))


class IdentitySchema(Schema):
    """Response payload exposing identity details for the authenticated user."""

    id = fields.String(required=True)
    email = fields.Email(required=True)
    first_name = fields.String(required=True)
    last_name = fields.String(required=True)
    is_active = fields.Boolean(required=True)
    last_login_at = fields.DateTime(allow_none=True)


class RegistrationResponseSchema(Schema):
    """Response payload for a created identity."""

    user = fields.Nested(IdentitySchema, attribute="identity")
    expires_in = fields.Integer(attribute="access_token_expiry_seconds")


class LoginResponseSchema(Schema):
    """Response payload containing a credential pair."""

    access_token = fields.String(required=True)
    refresh_token = fields.String(required=True)
    token_type = fields.Constant("bearer")
    expires_in = fields.Integer(attribute="access_token_expiry_seconds")
    user = fields.Nested(IdentitySchema, attribute="identity")


class RefreshResponseSchema(Schema):
    """Response payload for a rotated credential pair."""

    access_token = fields.String(required=True)
    refresh_token = fields.String(required=True)
    token_type = fields.Constant("bearer")
    expires_in = fields.Integer(attribute="access_token_expiry_seconds")
