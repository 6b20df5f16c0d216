"""
Jose JWT adapter.

Wraps python-jose so the rest of the service never imports jose directly.
Verification keys may be a plain key or a JWKS document, in which case the
key is selected by the token's ``kid`` header.
"""

from typing import Any, cast

from jose import ExpiredSignatureError, JWTError, jwt
from jose.exceptions import JWTClaimsError

# Re-exported so callers can catch jose errors without importing jose
__all__ = [
    "ExpiredSignatureError",
    "JWTClaimsError",
    "JWTError",
    "decode",
    "select_signing_key",
]


def select_signing_key(token: str, keys: Any) -> Any:
    """
    Pick the verification key for ``token``.

    A JWKS document (``{"keys": [...]}``) is narrowed to the entry whose
    ``kid`` matches the token header; a token without ``kid`` is checked
    against the whole set. Any other value is returned unchanged.

    Raises:
        JWTError: If the header is unreadable or no key carries its ``kid``
    """
    if not isinstance(keys, dict) or "keys" not in keys:
        return keys

    kid = jwt.get_unverified_header(token).get("kid")
    if kid is None:
        return keys
    for jwk in keys["keys"]:
        if jwk.get("kid") == kid:
            return jwk
    raise JWTError(f"No signing key matches kid {kid}")


def decode(
    token: str,
    keys: Any,
    algorithms: list[str] | None = None,
    audience: str | None = None,
    issuer: str | None = None,
) -> dict[str, Any]:
    """
    Verify ``token`` and return its claims.

    Signature, expiry, not-before and issued-at are always checked; audience
    and issuer only when expected values are given.

    Raises:
        ExpiredSignatureError: If the token has expired
        JWTError: If the token is malformed, badly signed or fails a claim check
    """
    options = {
        "verify_signature": True,
        "verify_aud": audience is not None,
        "verify_iss": issuer is not None,
        "verify_exp": True,
        "verify_nbf": True,
        "verify_iat": True,
        "leeway": 0,
    }
    return cast(dict[str, Any], jwt.decode(
        token,
        select_signing_key(token, keys),
        algorithms=algorithms or ["RS256"],
        audience=audience,
        issuer=issuer,
        options=options,
    ))
