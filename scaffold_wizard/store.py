"""In-memory configuration store.

Holds the current :class:`ScaffoldConfiguration` snapshot, applies the
framework auto-adjustments an update calls for and notifies subscribers
synchronously so that dependent caches are invalidated before the next
read. Persisting the configuration is somebody else's job.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, Optional

from scaffold_wizard.compatibility.rules import is_ai_template_compatible
from scaffold_wizard.models import ScaffoldConfiguration

Listener = Callable[[ScaffoldConfiguration, ScaffoldConfiguration], None]

_SEPARATE_BACKENDS = {"express", "fastify", "nestjs"}
_ADJUSTMENT_TRIGGERS = ("frontend_framework", "backend_framework", "project_structure")


# ---------------------------------------------------------------------------
# Auto-adjustments
# ---------------------------------------------------------------------------


def adjust_backend_framework(frontend: Optional[str], backend: Optional[str]) -> Optional[str]:
    """Next.js API routes only exist with a Next.js frontend."""
    if frontend is not None and frontend != "nextjs" and backend == "nextjs-api":
        return "none"
    return backend


def adjust_project_structure(
    frontend: Optional[str], backend: Optional[str], current: Optional[str]
) -> Optional[str]:
    """Derive the project layout from the frontend/backend pair.

    Leaves *current* alone while either framework is still unset.
    """
    if frontend is None or backend is None:
        return current
    if frontend == "nextjs" and backend == "nextjs-api":
        return "nextjs-only"
    if frontend != "nextjs" and backend == "none":
        return "react-spa"
    if frontend == "nextjs" and backend in _SEPARATE_BACKENDS:
        return "fullstack-monorepo"
    if backend in _SEPARATE_BACKENDS and current in ("nextjs-only", "react-spa"):
        return "express-api-only"
    return current


def apply_auto_adjustments(
    config: ScaffoldConfiguration,
    previous: Optional[ScaffoldConfiguration] = None,
    changed: Optional[Iterable[str]] = None,
) -> ScaffoldConfiguration:
    """Return *config* with dependent fields brought in line with the frameworks.

    Args:
        config: The configuration after the user's edit.
        previous: The configuration before the edit. Needed to clear AI
            selections when the edit makes them unusable.
        changed: Field names the edit touched. ``None`` treats every field
            as touched.
    """
    touched = set(_ADJUSTMENT_TRIGGERS if changed is None else changed)
    adjustments: dict[str, Any] = {}

    backend = config.backend_framework
    if "frontend_framework" in touched:
        backend = adjust_backend_framework(config.frontend_framework, backend)
        if backend != config.backend_framework:
            adjustments["backend_framework"] = backend

    structure = config.project_structure
    if touched & {"frontend_framework", "backend_framework"}:
        structure = adjust_project_structure(config.frontend_framework, backend, structure)
        if structure != config.project_structure:
            adjustments["project_structure"] = structure

    if previous is not None and touched & {"frontend_framework", "project_structure"}:
        current = config.with_changes(**adjustments) if adjustments else config
        if is_ai_template_compatible(previous) and not is_ai_template_compatible(current):
            if config.ai_templates:
                adjustments["ai_templates"] = []
            if config.ai_provider is not None:
                adjustments["ai_provider"] = None

    if not adjustments:
        return config
    return config.with_changes(**adjustments)


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------


class ConfigStore:
    """Single source of truth for the wizard's configuration."""

    def __init__(self, initial: Optional[ScaffoldConfiguration] = None) -> None:
        self._initial = initial or ScaffoldConfiguration()
        self._config = self._initial
        self._listeners: list[Listener] = []

    @property
    def snapshot(self) -> ScaffoldConfiguration:
        """The current immutable configuration."""
        return self._config

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register *listener* for ``(previous, current)`` change notifications.

        Returns a callable that removes the listener again.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def update(self, **changes: Any) -> ScaffoldConfiguration:
        """Apply *changes*, auto-adjust dependent fields and notify listeners.

        Updates that leave every field unchanged are ignored.
        """
        previous = self._config
        candidate = apply_auto_adjustments(previous.with_changes(**changes), previous, changes)
        if candidate == previous:
            return previous
        self._config = candidate
        self._notify(previous, candidate)
        return candidate

    def replace(self, config: ScaffoldConfiguration) -> ScaffoldConfiguration:
        """Swap in a whole snapshot (for example one restored by the caller)."""
        previous = self._config
        if config == previous:
            return previous
        self._config = config
        self._notify(previous, config)
        return config

    def reset(self) -> ScaffoldConfiguration:
        """Return to the initial configuration."""
        return self.replace(self._initial)

    def _notify(self, previous: ScaffoldConfiguration, current: ScaffoldConfiguration) -> None:
        for listener in list(self._listeners):
            listener(previous, current)
