"""Auth module initialization."""

from .exceptions import (
    AuthError,
    MissingCredentialError,
    MalformedCredentialError,
    InvalidCredentialError,
)
from .models import ANONYMOUS_SUBJECT, Identity, PropagatedHeader
from .verifier import verify, decode_jwt, extract_token, identity_from_claims, validate_auth_settings
from .dependencies import get_identity

__all__ = [
    # Exceptions
    "AuthError",
    "MissingCredentialError",
    "MalformedCredentialError",
    "InvalidCredentialError",
    # Models
    "ANONYMOUS_SUBJECT",
    "Identity",
    "PropagatedHeader",
    # Verifier
    "verify",
    "decode_jwt",
    "extract_token",
    "identity_from_claims",
    "validate_auth_settings",
    # Dependencies
    "get_identity",
]
