"""Visible-step navigation over the static step catalog.

The set of visible steps depends on the configuration, so every query takes
the current snapshot and recomputes from scratch. The catalog is a dozen
entries long; recomputation is cheap and can never go stale.

``None`` is the "no such step" sentinel throughout.
"""

from __future__ import annotations

from typing import Optional

from scaffold_wizard.models import ScaffoldConfiguration
from scaffold_wizard.steps.catalog import StepCatalog, StepDescriptor, default_catalog


class StepNavigator:
    """Translates between absolute catalog indices and visible positions."""

    def __init__(self, catalog: Optional[StepCatalog] = None) -> None:
        self.catalog = catalog if catalog is not None else default_catalog()

    # -- Visibility --------------------------------------------------------

    def is_visible(self, index: int, config: ScaffoldConfiguration) -> bool:
        step = self.catalog.find(index)
        return step is not None and step.is_visible(config)

    def get_visible_steps(self, config: ScaffoldConfiguration) -> list[StepDescriptor]:
        """Ordered subsequence of steps whose visibility condition holds."""
        return [step for step in self.catalog if step.is_visible(config)]

    def count_visible(self, config: ScaffoldConfiguration) -> int:
        return len(self.get_visible_steps(config))

    def _visible_indices(self, config: ScaffoldConfiguration) -> list[int]:
        return [i for i, step in enumerate(self.catalog) if step.is_visible(config)]

    # -- Forward / backward ------------------------------------------------

    def get_next_visible_step_index(
        self, index: int, config: ScaffoldConfiguration
    ) -> Optional[int]:
        """First visible absolute index after *index*, or ``None`` at the end."""
        for candidate in range(max(index + 1, 0), len(self.catalog)):
            if self.catalog.steps[candidate].is_visible(config):
                return candidate
        return None

    def get_previous_visible_step_index(
        self, index: int, config: ScaffoldConfiguration
    ) -> Optional[int]:
        """Last visible absolute index before *index*, or ``None`` at the start."""
        for candidate in range(min(index - 1, len(self.catalog) - 1), -1, -1):
            if self.catalog.steps[candidate].is_visible(config):
                return candidate
        return None

    # -- Index translation -------------------------------------------------

    def get_visible_step_index(
        self, index: int, config: ScaffoldConfiguration
    ) -> Optional[int]:
        """Rank of absolute *index* among visible steps, or ``None`` if hidden."""
        if not self.is_visible(index, config):
            return None
        return self._visible_indices(config).index(index)

    def get_absolute_step_index(
        self, visible_index: int, config: ScaffoldConfiguration
    ) -> Optional[int]:
        """Absolute index of the *visible_index*-th visible step, or ``None``."""
        indices = self._visible_indices(config)
        if 0 <= visible_index < len(indices):
            return indices[visible_index]
        return None
