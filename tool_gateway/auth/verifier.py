"""JWT verification for the tool routes."""

from jose import JWTError, jwt

from tool_gateway.config import Settings, get_settings
from tool_gateway.exceptions import ConfigurationError
from .exceptions import InvalidCredentialError, MalformedCredentialError, MissingCredentialError
from .models import Identity


# Tried in order after the configured user id claim
_FALLBACK_SUBJECT_CLAIMS = ("id", "user_id")


def _get_allowed_algorithms(settings: Settings) -> list[str]:
    items = [item.strip().upper() for item in settings.JWT_ALLOWED_ALGORITHMS.split(",") if item.strip()]
    if not items or "NONE" in items:
        raise ConfigurationError("JWT allowed algorithms misconfigured")
    if settings.JWT_ALGORITHM.upper() not in items:
        raise ConfigurationError("JWT algorithm not in allowed list")
    return items


def validate_auth_settings(settings: Settings) -> None:
    """Fail fast when the verification secret or algorithms are unusable.

    Raises:
        ConfigurationError: If JWT_SECRET_KEY is empty or algorithms are misconfigured.
    """
    if not settings.JWT_SECRET_KEY:
        raise ConfigurationError("JWT_SECRET_KEY is not configured")
    _get_allowed_algorithms(settings)


def extract_token(raw_header: str | None) -> str:
    """Strip the scheme from an Authorization header value.

    Args:
        raw_header: Authorization header value (format: '<scheme> <token>').

    Returns:
        The token segment.

    Raises:
        MissingCredentialError: If the header is absent or empty.
        MalformedCredentialError: If there is no token segment.
    """
    if raw_header is None or not raw_header.strip():
        raise MissingCredentialError()

    parts = raw_header.split()
    if len(parts) != 2:
        raise MalformedCredentialError()
    return parts[1]


def decode_jwt(token: str, settings: Settings | None = None) -> dict:
    """Decode and validate a JWT token.

    Args:
        token: JWT token string (without scheme prefix).
        settings: Settings override, defaults to the process settings.

    Returns:
        Decoded JWT payload as a dictionary.

    Raises:
        InvalidCredentialError: If the signature does not match or the token expired.
    """
    settings = settings or get_settings()
    validate_auth_settings(settings)

    try:
        return jwt.decode(
            token,
            settings.JWT_SECRET_KEY,
            algorithms=_get_allowed_algorithms(settings),
            options={
                "verify_signature": True,
                "verify_exp": True,
                "verify_aud": False,
                "require_exp": settings.JWT_REQUIRE_EXP,
                "leeway": max(0, settings.JWT_CLOCK_SKEW_SECONDS),
            },
        )
    except jwt.ExpiredSignatureError as e:
        raise InvalidCredentialError("Token has expired") from e
    except JWTError as e:
        raise InvalidCredentialError(f"Invalid token: {e}") from e


def identity_from_claims(payload: dict, settings: Settings | None = None) -> Identity:
    """Build an Identity from a verified claim set.

    Raises:
        InvalidCredentialError: If no subject claim is present.
    """
    settings = settings or get_settings()

    subject = payload.get(settings.JWT_USER_ID_CLAIM)
    for claim in _FALLBACK_SUBJECT_CLAIMS:
        if subject not in (None, ""):
            break
        subject = payload.get(claim)
    if subject in (None, ""):
        raise InvalidCredentialError(f"Token missing required '{settings.JWT_USER_ID_CLAIM}' claim")

    role = payload.get("role")
    if role is None:
        roles = payload.get("roles")
        if isinstance(roles, list) and roles:
            role = roles[0]

    return Identity(
        subject_id=str(subject),
        role=str(role) if role is not None else None,
        claims=payload,
    )


def verify(raw_header: str | None, settings: Settings | None = None) -> Identity:
    """Verify a raw Authorization header value and return the caller identity.

    Args:
        raw_header: The raw Authorization header value, or None when absent.
        settings: Settings override, defaults to the process settings.

    Returns:
        Identity built from the verified claims.

    Raises:
        MissingCredentialError: Header absent or empty.
        MalformedCredentialError: Header has no token segment.
        InvalidCredentialError: Signature mismatch, expiry or missing subject.
    """
    token = extract_token(raw_header)
    payload = decode_jwt(token, settings)
    return identity_from_claims(payload, settings)
