"""Runtime environment detection.

A Python process has no browser document to sniff, so the environment is
declared through variables instead:

- FRONTLOAD_RUNTIME: "server" (default) or "client"
- FRONTLOAD_ENV: "production" turns default logging off
"""

import os

from frontload.contracts.enums import Environment

RUNTIME_ENV_VAR = "FRONTLOAD_RUNTIME"
DEPLOYMENT_ENV_VAR = "FRONTLOAD_ENV"


def detect_environment() -> Environment:
    """Return the environment declared by FRONTLOAD_RUNTIME.

    Raises:
        ValueError: If the variable holds anything but "server" or "client".
    """
    raw = os.environ.get(RUNTIME_ENV_VAR, Environment.SERVER.value).strip().lower()
    try:
        return Environment(raw)
    except ValueError:
        raise ValueError(
            f"{RUNTIME_ENV_VAR} must be 'server' or 'client', got {raw!r}"
        ) from None


def detect_is_server() -> bool:
    """True unless the process declares itself a client runtime."""
    return detect_environment() is Environment.SERVER


def is_production() -> bool:
    return os.environ.get(DEPLOYMENT_ENV_VAR, "").strip().lower() == "production"
