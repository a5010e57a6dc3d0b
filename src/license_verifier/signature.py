"""ECDSA P-256 / SHA-256 signature verification for compact tokens.

Signatures arrive either as the fixed 64 byte ``r || s`` concatenation used by
JOSE (ES256) or as an ASN.1 DER ``Ecdsa-Sig-Value``. Both are normalised to DER
before being handed to ``cryptography``.
"""
from __future__ import annotations

import base64
from typing import Union

from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.asymmetric.utils import decode_dss_signature, encode_dss_signature
from jwt.utils import raw_to_der_signature

from .encoding import b64url_decode
from .errors import FailureReason, SignatureError

CURVE = ec.SECP256R1()
RAW_SIGNATURE_LENGTH = 2 * ((CURVE.key_size + 7) // 8)
PEM_MARKER = "-----BEGIN"

TrustAnchor = Union[str, bytes, ec.EllipticCurvePublicKey]


def _load_public_key(material: Union[str, bytes]) -> object:
    if isinstance(material, str):
        text = material.strip()
        if text.startswith(PEM_MARKER):
            return serialization.load_pem_public_key(text.encode("ascii"))
        # Bare base64 body of a SubjectPublicKeyInfo, as stored in env vars.
        return serialization.load_der_public_key(base64.b64decode("".join(text.split()), validate=True))
    if isinstance(material, (bytes, bytearray)):
        data = bytes(material)
        if data.lstrip().startswith(PEM_MARKER.encode("ascii")):
            return serialization.load_pem_public_key(data)
        return serialization.load_der_public_key(data)
    raise TypeError(f"Unsupported trust anchor type: {type(material).__name__}")


def load_trust_anchor(trust_anchor: TrustAnchor) -> ec.EllipticCurvePublicKey:
    if isinstance(trust_anchor, ec.EllipticCurvePublicKey):
        key: object = trust_anchor
    else:
        try:
            key = _load_public_key(trust_anchor)
        except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
            raise SignatureError(FailureReason.INVALID_PUBLIC_KEY, f"Invalid public key: {exc}") from exc

    if not isinstance(key, ec.EllipticCurvePublicKey):
        raise SignatureError(FailureReason.INVALID_PUBLIC_KEY, "Public key is not an elliptic-curve key")
    if not isinstance(key.curve, ec.SECP256R1):
        raise SignatureError(
            FailureReason.INVALID_PUBLIC_KEY,
            f"Public key uses curve {key.curve.name}, expected {CURVE.name}",
        )
    return key


def decode_signature(signature_segment: str) -> bytes:
    """Return the DER form of the signature carried by ``signature_segment``."""
    try:
        signature = b64url_decode(signature_segment)
    except ValueError as exc:
        raise SignatureError(
            FailureReason.INVALID_SIGNATURE_ENCODING, f"Invalid base64 signature: {exc}"
        ) from exc

    if len(signature) == RAW_SIGNATURE_LENGTH:
        return raw_to_der_signature(signature, CURVE)

    try:
        r, s = decode_dss_signature(signature)
    except ValueError as exc:
        raise SignatureError(
            FailureReason.INVALID_SIGNATURE_FORMAT,
            f"Signature is neither {RAW_SIGNATURE_LENGTH} raw bytes nor DER ({len(signature)} bytes)",
        ) from exc
    if r <= 0 or s <= 0:
        raise SignatureError(FailureReason.INVALID_SIGNATURE_FORMAT, "DER signature integers must be positive")
    return encode_dss_signature(r, s)


def verify_signature(signing_input: bytes, signature_segment: str, trust_anchor: TrustAnchor) -> None:
    signature = decode_signature(signature_segment)
    public_key = load_trust_anchor(trust_anchor)
    try:
        public_key.verify(signature, signing_input, ec.ECDSA(hashes.SHA256()))
    except InvalidSignature as exc:
        raise SignatureError(FailureReason.SIGNATURE_INVALID, "Signature verification failed") from exc


__all__ = [
    "CURVE",
    "RAW_SIGNATURE_LENGTH",
    "TrustAnchor",
    "decode_signature",
    "load_trust_anchor",
    "verify_signature",
]
