from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv


RESPONDER_KINDS = ("echo", "openai")

DEFAULT_GREETING = "Welcome to the WebSocket server!"
DEFAULT_FALLBACK_TEXT = "Error processing your request. Please try again later."
DEFAULT_PROMPT_PREFIX = (
    "Hi chat, can you analise my trading data and give me some feedback. "
    "Please dont read me back the data i send you: "
)


class ConfigError(RuntimeError):
    """Raised at startup when the relay cannot be configured safely."""


def _get_env(env: Mapping[str, str], name: str, default: str | None = None) -> str | None:
    value = env.get(name, default)
    if value is None:
        return None
    value = value.strip()
    return value or default


TRUE_TOKENS = frozenset({"1", "true", "yes", "on"})
FALSE_TOKENS = frozenset({"0", "false", "no", "off"})


def _parse_bool(name: str, raw: str | None, default: bool) -> bool:
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in TRUE_TOKENS:
        return True
    if value in FALSE_TOKENS:
        return False
    raise ConfigError(f"{name} must be true or false, got {raw!r}")


def parse_origins(raw: str | None) -> frozenset[str]:
    if not raw:
        return frozenset()
    return frozenset(part.strip() for part in raw.split(",") if part.strip())


@dataclass(frozen=True)
class RelayConfig:
    host: str = "0.0.0.0"
    port: int = 4000

    # Origin check
    allowed_origins: frozenset[str] = field(default_factory=frozenset)
    check_origin: bool = True

    # TLS (both set -> wss://)
    ssl_cert_path: Optional[str] = None
    ssl_key_path: Optional[str] = None

    # Responder
    responder: str = "echo"
    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-3.5-turbo"
    openai_base_url: Optional[str] = None
    prompt_prefix: str = DEFAULT_PROMPT_PREFIX
    responder_timeout: float = 30.0

    greeting: str = DEFAULT_GREETING
    fallback_text: str = DEFAULT_FALLBACK_TEXT

    log_level: str = "INFO"

    @property
    def use_tls(self) -> bool:
        return bool(self.ssl_cert_path and self.ssl_key_path)

    @property
    def scheme(self) -> str:
        return "wss" if self.use_tls else "ws"

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        env_file: str | None = None,
    ) -> "RelayConfig":
        """Build the config from the process environment (plus ``.env``).

        Passing ``environ`` skips ``.env`` loading and reads only the mapping,
        which keeps tests independent of the host environment.
        """
        if environ is None:
            load_dotenv(env_file)
            environ = os.environ
        env = environ

        try:
            port = int(_get_env(env, "PORT", "4000"))
            timeout = float(_get_env(env, "RESPONDER_TIMEOUT", "30"))
        except ValueError as exc:
            raise ConfigError(f"Invalid numeric setting: {exc}") from exc

        return cls(
            host=_get_env(env, "HOST", "0.0.0.0"),
            port=port,
            allowed_origins=parse_origins(_get_env(env, "ALLOWED_ORIGINS")),
            check_origin=_parse_bool("CHECK_ORIGIN", _get_env(env, "CHECK_ORIGIN"), True),
            ssl_cert_path=_get_env(env, "SSL_CERT_PATH"),
            ssl_key_path=_get_env(env, "SSL_KEY_PATH"),
            responder=(_get_env(env, "RESPONDER", "echo")).lower(),
            openai_api_key=_get_env(env, "OPENAI_API_KEY"),
            openai_model=_get_env(env, "OPENAI_MODEL", "gpt-3.5-turbo"),
            openai_base_url=_get_env(env, "OPENAI_BASE_URL"),
            # Prefix keeps its trailing space, so it is read without stripping.
            prompt_prefix=env.get("OPENAI_PROMPT_PREFIX") or DEFAULT_PROMPT_PREFIX,
            responder_timeout=timeout,
            greeting=_get_env(env, "GREETING", DEFAULT_GREETING),
            fallback_text=_get_env(env, "FALLBACK_TEXT", DEFAULT_FALLBACK_TEXT),
            log_level=_get_env(env, "LOG_LEVEL", "INFO").upper(),
        )

    def with_overrides(self, **changes) -> "RelayConfig":
        """Copy with the given fields replaced; ``None`` values are ignored."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})

    def validate(self) -> "RelayConfig":
        if self.port <= 0 or self.port > 65535:
            raise ConfigError(f"PORT must be between 1 and 65535, got {self.port}.")
        if self.responder_timeout <= 0:
            raise ConfigError("RESPONDER_TIMEOUT must be a positive number of seconds.")

        if self.check_origin and not self.allowed_origins:
            raise ConfigError(
                "ALLOWED_ORIGINS is empty while the origin check is enabled; "
                "set at least one origin or disable the check explicitly."
            )

        if bool(self.ssl_cert_path) != bool(self.ssl_key_path):
            raise ConfigError("Set both SSL_CERT_PATH and SSL_KEY_PATH, or neither.")
        for path in (self.ssl_cert_path, self.ssl_key_path):
            if path and not Path(path).expanduser().is_file():
                raise ConfigError(f"TLS file not found: {path}")

        if self.responder not in RESPONDER_KINDS:
            raise ConfigError(
                f"Unsupported RESPONDER {self.responder!r}; expected one of {RESPONDER_KINDS}."
            )
        if self.responder == "openai" and not self.openai_api_key:
            raise ConfigError("Missing OPENAI_API_KEY for the openai responder.")
        return self
