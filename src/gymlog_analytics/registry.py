import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from .models import WorkoutSession
from .taxonomy import DEFAULT_TAXONOMY, MuscleGroupTaxonomy

logger = logging.getLogger(__name__)

# "period": handler receives the window-filtered subset
# "log": handler receives the complete, unfiltered session log
SCOPES: tuple[str, ...] = ("period", "log")


@dataclass(frozen=True)
class ViewContext:
    """Request-level inputs shared by every view handler."""

    now: datetime
    window: str
    taxonomy: MuscleGroupTaxonomy = DEFAULT_TAXONOMY
    nominal_session_minutes: float = 60.0
    weekly_target: int = 5


# Handler signature: def handler(sessions, ctx) -> view
ViewFn = Callable[[Sequence[WorkoutSession], ViewContext], Any]

# scope -> [(view name, handler)] in registration order
_view_handlers: dict[str, list[tuple[str, ViewFn]]] = {scope: [] for scope in SCOPES}

# view name -> metadata declared at registration time
_view_metadata: dict[str, dict[str, Any]] = {}


def view_handler(
    name: str,
    *,
    scope: str,
    view_meta: dict[str, Any] | None = None,
) -> Callable[[ViewFn], ViewFn]:
    """Register a pure view handler under ``name`` for one input scope.

    Usage:
        @view_handler("summary", scope="period", view_meta={
            "description": "Counts and extremes over the selected window",
        })
        def build_summary(sessions, ctx):
            ...
    """
    if scope not in SCOPES:
        raise ValueError(f"Unknown scope {scope!r} for view {name!r}")

    def decorator(fn: ViewFn) -> ViewFn:
        if name in _view_metadata:
            raise ValueError(f"Duplicate view name={name!r}")
        _view_handlers[scope].append((name, fn))
        _view_metadata[name] = {
            **(view_meta or {}),
            "scope": scope,
            "handler": fn.__name__,
        }
        logger.debug("Registered view handler %s for view=%s scope=%s", fn.__name__, name, scope)
        return fn

    return decorator


def get_view_handlers(scope: str) -> list[tuple[str, ViewFn]]:
    return list(_view_handlers.get(scope, []))


def registered_views() -> list[str]:
    return list(_view_metadata.keys())


def get_view_metadata() -> dict[str, dict[str, Any]]:
    return {name: dict(meta) for name, meta in _view_metadata.items()}
