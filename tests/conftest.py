"""Shared fixtures: throwaway P-256 keys and token factories."""
from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

import jwt
import pytest
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from jwt.utils import base64url_encode, der_to_raw_signature

NOW = datetime(2029, 6, 1, 12, 0, 0, tzinfo=timezone.utc)

BASE_CLAIMS: Dict[str, Any] = {
    "customerName": "Acme Manufacturing",
    "type": "PRO",
    "maxProductLines": 5,
    "maxUsers": 50,
    "expiresAt": "2030-01-01T00:00:00Z",
}


def b64(data: bytes) -> str:
    return base64url_encode(data).decode("ascii")


def sign_segments(header_segment: str, payload_segment: str, key: ec.EllipticCurvePrivateKey, *, der: bool = False) -> str:
    """Sign ``header.payload`` and return the full compact token."""
    signing_input = f"{header_segment}.{payload_segment}".encode("utf-8")
    der_signature = key.sign(signing_input, ec.ECDSA(hashes.SHA256()))
    signature = der_signature if der else der_to_raw_signature(der_signature, key.curve)
    return f"{header_segment}.{payload_segment}.{b64(signature)}"


@pytest.fixture(scope="session")
def signing_key() -> ec.EllipticCurvePrivateKey:
    return ec.generate_private_key(ec.SECP256R1())


@pytest.fixture(scope="session")
def other_key() -> ec.EllipticCurvePrivateKey:
    return ec.generate_private_key(ec.SECP256R1())


@pytest.fixture(scope="session")
def public_pem(signing_key: ec.EllipticCurvePrivateKey) -> str:
    return signing_key.public_key().public_bytes(
        serialization.Encoding.PEM, serialization.PublicFormat.SubjectPublicKeyInfo
    ).decode("ascii")


@pytest.fixture
def make_token(signing_key: ec.EllipticCurvePrivateKey) -> Callable[..., str]:
    """Mint an ES256 token with PyJWT (raw ``r||s`` signature)."""

    def factory(key: Optional[ec.EllipticCurvePrivateKey] = None, **overrides: Any) -> str:
        claims = dict(BASE_CLAIMS)
        for name, value in overrides.items():
            if value is None:
                claims.pop(name, None)
            else:
                claims[name] = value
        return jwt.encode(claims, key or signing_key, algorithm="ES256")

    return factory


@pytest.fixture
def make_raw_token(signing_key: ec.EllipticCurvePrivateKey) -> Callable[..., str]:
    """Sign an arbitrary payload (bytes or JSON-able object)."""

    def factory(payload: Any, *, der: bool = False, header: Optional[Dict[str, Any]] = None) -> str:
        body = payload if isinstance(payload, bytes) else json.dumps(payload).encode("utf-8")
        header_segment = b64(json.dumps(header or {"alg": "ES256", "typ": "JWT"}).encode("utf-8"))
        return sign_segments(header_segment, b64(body), signing_key, der=der)

    return factory
