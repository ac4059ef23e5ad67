"""Application configuration.

AppConfig is a frozen dataclass: immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from snippetbox.errors import ConfigurationError

# Bundled UI assets
PACKAGE_DIR = Path(__file__).resolve().parent

ENV_PREFIX = "SNIPPETBOX_"

DEFAULT_ADDR = ":4000"
DEFAULT_DSN = "sqlite:///snippetbox.db"


def parse_addr(addr: str) -> tuple[str, int]:
    """Split a ``host:port`` listen address.

    An empty host means all interfaces::

        parse_addr(":4000")          -> ("0.0.0.0", 4000)
        parse_addr("127.0.0.1:8080") -> ("127.0.0.1", 8080)

    Raises ``ConfigurationError`` for a missing or invalid port.
    """
    host, sep, port_text = addr.rpartition(":")
    if not sep:
        msg = f"Invalid listen address {addr!r}: expected host:port"
        raise ConfigurationError(msg)
    host = host.strip("[]") or "0.0.0.0"
    try:
        port = int(port_text)
    except ValueError:
        msg = f"Invalid port in listen address {addr!r}"
        raise ConfigurationError(msg) from None
    if not 0 <= port <= 65535:
        msg = f"Port out of range in listen address {addr!r}"
        raise ConfigurationError(msg)
    return host, port


def _env_bool(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AppConfig(debug=True, port=3000)
    """

    # Server
    host: str = "0.0.0.0"
    port: int = 4000
    debug: bool = False

    # Templates
    template_dir: str | Path | None = PACKAGE_DIR / "ui" / "html"

    # Static files
    static_dir: str | Path | None = PACKAGE_DIR / "ui" / "static"
    static_url: str = "/static"

    # Database
    dsn: str = DEFAULT_DSN
    migrations_dir: str | Path | None = None  # None: bundled migrations for the dsn's dialect

    # Response headers
    server_header: str = "Go"

    # Logging
    log_level: str = "info"

    @property
    def addr(self) -> str:
        return f"{self.host}:{self.port}"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None, **overrides: object) -> AppConfig:
        """Build a config from ``SNIPPETBOX_*`` environment variables.

        Recognised variables: ``SNIPPETBOX_ADDR``, ``SNIPPETBOX_DSN``,
        ``SNIPPETBOX_DEBUG``, ``SNIPPETBOX_TEMPLATE_DIR``,
        ``SNIPPETBOX_STATIC_DIR``, ``SNIPPETBOX_LOG_LEVEL``.
        Keyword *overrides* win over the environment.
        """
        env = os.environ if environ is None else environ

        def get(name: str) -> str | None:
            return env.get(ENV_PREFIX + name)

        host, port = parse_addr(get("ADDR") or DEFAULT_ADDR)
        values: dict[str, object] = {
            "host": host,
            "port": port,
            "dsn": get("DSN") or DEFAULT_DSN,
        }
        if (debug := get("DEBUG")) is not None:
            values["debug"] = _env_bool(debug)
        if template_dir := get("TEMPLATE_DIR"):
            values["template_dir"] = Path(template_dir)
        if static_dir := get("STATIC_DIR"):
            values["static_dir"] = Path(static_dir)
        if log_level := get("LOG_LEVEL"):
            values["log_level"] = log_level.lower()
        values.update(overrides)
        return cls(**values)  # type: ignore[arg-type]
