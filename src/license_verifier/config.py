"""Settings for the host integration around the verifier."""
from __future__ import annotations

import base64
import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

APP_NAME = "license-verifier"

ENV_PUBLIC_KEY = "LICENSE_VERIFIER_PUBLIC_KEY"
ENV_PUBLIC_KEY_FILE = "LICENSE_VERIFIER_PUBLIC_KEY_FILE"
ENV_CONFIG_FILE = "LICENSE_VERIFIER_CONFIG"
ENV_LICENSE_KEY = "LICENSE_KEY"
ENV_FINGERPRINT = "LICENSE_VERIFIER_FINGERPRINT"
ENV_LOG_LEVEL = "LICENSE_VERIFIER_LOG_LEVEL"
ENV_LOG_FILE = "LICENSE_VERIFIER_LOG_FILE"

# Trust anchor compiled into the distribution (P-256, SubjectPublicKeyInfo).
DEFAULT_PUBLIC_KEY = """
-----BEGIN PUBLIC KEY-----
MFkwEwYHKoZIzj0CAQYIKoZIzj0DAQcDQgAEYh8ZBILV1mxv++YzjQhxOYKMS4XX
9FgGNsfwFWjPvWAw4h76tM11Rw4I9qSr8a+4bdUW0etJEX/S2SBk53/Wtw==
-----END PUBLIC KEY-----
""".strip()


def _clean(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def load_config_file(path: Path) -> Dict[str, Any]:
    """Read the optional JSON config document; unreadable files count as empty."""
    if not path.is_file():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def _read_key_file(path: Path) -> Optional[str]:
    try:
        raw = path.read_bytes()
    except OSError:
        return None
    try:
        text = raw.decode("ascii")
    except UnicodeDecodeError:
        # DER file; hand the bytes over as the bare base64 body.
        return base64.b64encode(raw).decode("ascii")
    return _clean(text)


@dataclass(frozen=True)
class VerifierSettings:
    public_key: str
    license_key: Optional[str] = None
    system_fingerprint: Optional[str] = None
    log_level: str = "INFO"
    log_file: Optional[Path] = None

    @property
    def uses_default_key(self) -> bool:
        return self.public_key == DEFAULT_PUBLIC_KEY

    @staticmethod
    def from_env(
        environ: Optional[Mapping[str, str]] = None, *, public_key: Optional[str] = None
    ) -> "VerifierSettings":
        env = os.environ if environ is None else environ
        config_path = _clean(env.get(ENV_CONFIG_FILE))
        document = load_config_file(Path(config_path).expanduser()) if config_path else {}

        return VerifierSettings(
            public_key=resolve_public_key(public_key, env, document),
            license_key=_clean(env.get(ENV_LICENSE_KEY)) or _clean(document.get("license_key")),
            system_fingerprint=_clean(env.get(ENV_FINGERPRINT)) or _clean(document.get("system_fingerprint")),
            log_level=(_clean(env.get(ENV_LOG_LEVEL)) or "INFO").upper(),
            log_file=Path(env[ENV_LOG_FILE]).expanduser() if _clean(env.get(ENV_LOG_FILE)) else None,
        )


def resolve_public_key(
    provided_key: Optional[str], env: Mapping[str, str], document: Mapping[str, Any]
) -> str:
    explicit = _clean(provided_key)
    if explicit:
        return explicit
    env_key = _clean(env.get(ENV_PUBLIC_KEY))
    if env_key:
        return env_key
    key_file = _clean(env.get(ENV_PUBLIC_KEY_FILE))
    if key_file:
        from_file = _read_key_file(Path(key_file).expanduser())
        if from_file:
            return from_file
    stored = _clean(document.get("public_key"))
    if stored:
        return stored
    return DEFAULT_PUBLIC_KEY


__all__ = [
    "APP_NAME",
    "DEFAULT_PUBLIC_KEY",
    "ENV_CONFIG_FILE",
    "ENV_FINGERPRINT",
    "ENV_LICENSE_KEY",
    "ENV_LOG_FILE",
    "ENV_LOG_LEVEL",
    "ENV_PUBLIC_KEY",
    "ENV_PUBLIC_KEY_FILE",
    "VerifierSettings",
    "load_config_file",
    "resolve_public_key",
]
