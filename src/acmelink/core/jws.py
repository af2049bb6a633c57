"""JWK helpers for account key material (RFC 7517 / 7638, RFC 8555 §8.1).

Uses the ``cryptography`` library directly -- no josepy dependency.
Only the public half of a key pair is ever serialised here.
"""

from __future__ import annotations

import base64
import hashlib
import json
import logging
from typing import Any

from cryptography.hazmat.primitives.asymmetric import ec, rsa

from acmelink.errors import AcmeError

log = logging.getLogger(__name__)

# cryptography curve name -> (JWK "crv", coordinate size in bytes)
_EC_CURVES: dict[str, tuple[str, int]] = {
    "secp256r1": ("P-256", 32),
    "secp384r1": ("P-384", 48),
    "secp521r1": ("P-521", 66),
}


# --- Base64url helpers (RFC 7515 S2) -------------------------------------


def b64url_encode(b: bytes) -> str:
    """Encode bytes to base64url without padding.

    Parameters
    ----------
    b:
        Raw bytes to encode.

    Returns
    -------
    str
        Base64url-encoded string.

    """
    return base64.urlsafe_b64encode(b).rstrip(b"=").decode("ascii")


def _int_to_b64url(value: int, length: int | None = None) -> str:
    if length is None:
        length = max(1, (value.bit_length() + 7) // 8)
    return b64url_encode(value.to_bytes(length, "big"))


# --- Public JWK ----------------------------------------------------------


def public_jwk(key: Any) -> dict[str, str]:  # noqa: ANN401
    """Return the public JWK for an RSA or EC key.

    Parameters
    ----------
    key:
        A ``cryptography`` private or public key object.

    Raises
    ------
    AcmeError
        If the key type or EC curve is not supported by ACME.

    """
    if isinstance(key, (rsa.RSAPrivateKey, ec.EllipticCurvePrivateKey)):
        key = key.public_key()

    if isinstance(key, rsa.RSAPublicKey):
        numbers = key.public_numbers()
        return {
            "kty": "RSA",
            "n": _int_to_b64url(numbers.n),
            "e": _int_to_b64url(numbers.e),
        }

    if isinstance(key, ec.EllipticCurvePublicKey):
        curve = _EC_CURVES.get(key.curve.name)
        if curve is None:
            msg = f"Unsupported EC curve '{key.curve.name}'"
            raise AcmeError(msg)
        crv, size = curve
        numbers = key.public_numbers()
        return {
            "kty": "EC",
            "crv": crv,
            "x": _int_to_b64url(numbers.x, size),
            "y": _int_to_b64url(numbers.y, size),
        }

    msg = f"Unsupported key type '{type(key).__name__}'"
    raise AcmeError(msg)


# --- JWK thumbprint (RFC 7638) -------------------------------------------


def compute_thumbprint(jwk_dict: dict[str, Any]) -> str:
    """Compute the RFC 7638 JWK Thumbprint using SHA-256.

    Construct the canonical JSON representation with required members
    in lexicographic order, then return the base64url-encoded SHA-256
    hash.
    """
    kty = jwk_dict.get("kty")

    if kty == "RSA":
        canonical = {
            "e": jwk_dict["e"],
            "kty": "RSA",
            "n": jwk_dict["n"],
        }
    elif kty == "EC":
        canonical = {
            "crv": jwk_dict["crv"],
            "kty": "EC",
            "x": jwk_dict["x"],
            "y": jwk_dict["y"],
        }
    else:
        msg = f"Cannot compute thumbprint for kty '{kty}'"
        raise AcmeError(msg)

    canonical_json = json.dumps(
        canonical,
        sort_keys=True,
        separators=(",", ":"),
    )
    digest = hashlib.sha256(canonical_json.encode("ascii")).digest()
    return b64url_encode(digest)


# --- Key authorization (RFC 8555 S8.1) ------------------------------------


def key_authorization(token: str, jwk_dict: dict[str, Any]) -> str:
    """Compute the key authorization string: ``token.thumbprint``."""
    return f"{token}.{compute_thumbprint(jwk_dict)}"
