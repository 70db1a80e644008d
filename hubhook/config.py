"""Environment configuration for the webhook service.

Usage
-----
Build configuration explicitly:

>>> config = WebhookConfig(secret=WebhookSecret("s3cr3t"))
>>> config.webhook_path
'/'

Or load it from environment variables:

>>> import os
>>> os.environ["HUBHOOK_WEBHOOK_SECRET"] = "s3cr3t"
>>> os.environ["HUBHOOK_WEBHOOK_PATH"] = "/hooks/github"
>>> WebhookConfig.from_env().webhook_path
'/hooks/github'

"""

from __future__ import annotations

import dataclasses as dc
import importlib
import os
import typing as typ

from hubhook.errors import WebhookConfigError
from hubhook.signature import WebhookSecret

if typ.TYPE_CHECKING:
    import collections.abc as cabc

DEFAULT_WEBHOOK_PATH = "/"
DEFAULT_HOST = "0.0.0.0"  # noqa: S104 - bind all interfaces for container
DEFAULT_PORT = 8080
DEFAULT_LOG_LEVEL = "INFO"
_PORT_RANGE = range(1, 65536)


def _read_optional(env_var: str) -> str | None:
    stripped = os.environ.get(env_var, "").strip()
    return stripped or None


@dc.dataclass(frozen=True, slots=True)
class WebhookConfig:
    """Settings needed to build the webhook application.

    Attributes
    ----------
    secret
        Shared secret configured on the GitHub webhook.
    webhook_path
        Route that receives deliveries. Must start with ``/``.
    handlers_target
        Optional ``package.module:callable`` reference. The callable is
        given the application builder at start-up and registers handlers
        on it.

    """

    secret: WebhookSecret
    webhook_path: str = DEFAULT_WEBHOOK_PATH
    handlers_target: str | None = None

    def __post_init__(self) -> None:
        """Validate the webhook path."""
        if not self.webhook_path.startswith("/"):
            raise WebhookConfigError.invalid_path(self.webhook_path)

    @classmethod
    def from_env(cls) -> WebhookConfig:
        """Create configuration from environment variables.

        Reads:

        - ``HUBHOOK_WEBHOOK_SECRET``: required shared secret. Used verbatim;
          surrounding whitespace is significant.
        - ``HUBHOOK_WEBHOOK_PATH``: delivery route, default ``/``.
        - ``HUBHOOK_HANDLERS``: optional ``module:callable`` registering
          handlers.

        Raises
        ------
        WebhookConfigError
            If the secret is unset or empty, or the path is not absolute.

        """
        raw_secret = os.environ.get("HUBHOOK_WEBHOOK_SECRET")
        if raw_secret is None:
            raise WebhookConfigError.missing_secret()

        return cls(
            secret=WebhookSecret(raw_secret),
            webhook_path=_read_optional("HUBHOOK_WEBHOOK_PATH")
            or DEFAULT_WEBHOOK_PATH,
            handlers_target=_read_optional("HUBHOOK_HANDLERS"),
        )

    def load_handlers_hook(self) -> cabc.Callable[..., object] | None:
        """Import and return the callable named by ``handlers_target``.

        Raises
        ------
        WebhookConfigError
            If the target is not in ``module:attribute`` form, cannot be imported
            or does not resolve to a callable.

        """
        if self.handlers_target is None:
            return None

        module_name, sep, attr_path = self.handlers_target.partition(":")
        if not sep or not module_name or not attr_path:
            raise WebhookConfigError.invalid_handlers_target(self.handlers_target)

        try:
            target: object = importlib.import_module(module_name)
            for attr in attr_path.split("."):
                target = getattr(target, attr)
        except (ImportError, AttributeError) as exc:
            raise WebhookConfigError.invalid_handlers_target(
                self.handlers_target
            ) from exc
        if not callable(target):
            raise WebhookConfigError.invalid_handlers_target(self.handlers_target)
        return target


@dc.dataclass(frozen=True, slots=True)
class ServerSettings:
    """Bind address and log level for the Granian server."""

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls) -> ServerSettings:
        """Read ``HUBHOOK_HOST``, ``HUBHOOK_PORT`` and ``HUBHOOK_LOG_LEVEL``.

        Raises
        ------
        WebhookConfigError
            If the port is not an integer between 1 and 65535.

        """
        raw_port = _read_optional("HUBHOOK_PORT")
        port = DEFAULT_PORT
        if raw_port is not None:
            try:
                port = int(raw_port)
            except ValueError as exc:
                raise WebhookConfigError.invalid_port(raw_port) from exc
            if port not in _PORT_RANGE:
                raise WebhookConfigError.invalid_port(raw_port)

        return cls(
            host=_read_optional("HUBHOOK_HOST") or DEFAULT_HOST,
            port=port,
            log_level=_read_optional("HUBHOOK_LOG_LEVEL") or DEFAULT_LOG_LEVEL,
        )


__all__ = ["DEFAULT_WEBHOOK_PATH", "ServerSettings", "WebhookConfig"]
