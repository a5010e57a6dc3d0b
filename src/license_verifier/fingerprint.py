"""Host fingerprint used for machine-bound licenses.

The fingerprint is ``machine_id|hostname|system|arch``. Only the first field
takes part in license binding; the rest is diagnostic context.
"""
from __future__ import annotations

import hashlib
import platform
import subprocess
import uuid
from pathlib import Path
from typing import List, Optional

from .validator import FINGERPRINT_DELIMITER

MACHINE_ID_FILES = (Path("/etc/machine-id"), Path("/var/lib/dbus/machine-id"))


def _read_machine_guid() -> Optional[str]:
    if platform.system().lower() != "windows":
        return None
    try:
        output = subprocess.check_output(
            ["reg", "query", r"HKLM\SOFTWARE\Microsoft\Cryptography", "/v", "MachineGuid"],
            stderr=subprocess.STDOUT,
            text=True,
        )
    except (OSError, subprocess.CalledProcessError):
        return None
    for line in output.splitlines():
        if "MachineGuid" in line:
            parts = line.split()
            if parts:
                return parts[-1].strip()
    return None


def _read_machine_id_file() -> Optional[str]:
    for candidate in MACHINE_ID_FILES:
        try:
            value = candidate.read_text(encoding="utf-8").strip()
        except OSError:
            continue
        if value:
            return value
    return None


def machine_id() -> str:
    """Stable identifier for this machine (hex SHA-256)."""
    components: List[str] = [platform.node(), platform.machine(), platform.system()]
    mac = uuid.getnode()
    # uuid.getnode() falls back to a random number with the multicast bit set.
    if not (mac >> 40) & 1:
        components.append(f"{mac:012x}")
    os_id = _read_machine_guid() or _read_machine_id_file()
    if os_id:
        components.append(os_id)

    joined = FINGERPRINT_DELIMITER.join(component for component in components if component)
    return hashlib.sha256(joined.encode("utf-8")).hexdigest()


def system_fingerprint() -> str:
    fields = [machine_id(), platform.node(), platform.system(), platform.machine()]
    # Delimiters inside host names would shift the machine id field.
    return FINGERPRINT_DELIMITER.join(field.replace(FINGERPRINT_DELIMITER, "_") for field in fields)


__all__ = ["machine_id", "system_fingerprint"]
