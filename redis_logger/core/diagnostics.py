"""Side channel for delivery failures.

A failed dispatch cannot be reported through ``logging`` because the Redis
handler may be attached to the very logger it would report to.  Failures
go straight to stderr through a Rich console instead.
"""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape

_stderr_console = Console(stderr=True)


def default_console() -> Console:
    """Return the shared stderr console."""
    return _stderr_console


def report_delivery_failure(exc: BaseException, console: Console | None = None) -> None:
    """Print a one-line report of a failed dispatch.  Never raises."""
    target = console or _stderr_console
    try:
        target.print(
            f"[bold red]Error logging to Redis:[/bold red] {escape(str(exc))}",
            highlight=False,
        )
    except Exception:  # noqa: BLE001
        pass  # stderr itself is gone; nothing left to report to


def report_config_error(exc: BaseException, console: Console | None = None) -> None:
    """Print a configuration error before an intentional abort."""
    target = console or _stderr_console
    target.print(
        f"[bold red]Invalid Redis logger configuration:[/bold red] {escape(str(exc))}",
        highlight=False,
    )
