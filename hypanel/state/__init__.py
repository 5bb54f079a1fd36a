"""Typed application runtime context shared by routes and services."""
from dataclasses import dataclass
from typing import Any, Callable

from hypanel.core.action_logging import build_loggers
from hypanel.core.config import PanelConfig
from hypanel.core.scoped_paths import ScopedPathResolver
from hypanel.services.command_runner import CommandRunner


@dataclass(frozen=True)
class PanelState:
    """Collaborators built once per app from a ``PanelConfig``."""
    config: PanelConfig
    resolver: ScopedPathResolver
    runner: Any
    log_action: Callable[..., None]
    log_exception: Callable[[str, BaseException], None]

    @classmethod
    def from_config(cls, config: PanelConfig, runner: Any = None) -> "PanelState":
        """Wire the resolver, command runner and loggers for ``config``."""
        log_action, log_exception = build_loggers(config)
        if runner is None:
            runner = CommandRunner(
                timeout_seconds=config.command_timeout_seconds,
                use_sudo=config.use_sudo,
            )
        return cls(
            config=config,
            resolver=ScopedPathResolver(config.server_dir, resolve_symlinks=config.resolve_symlinks),
            runner=runner,
            log_action=log_action,
            log_exception=log_exception,
        )
