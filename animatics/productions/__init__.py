"""
Registered productions.

Each production module exposes ``COMPOSITION_ID``, ``SCHEDULE_NAME`` and
``build(schedule_path=None)`` returning a SceneComposer. ``register_all``
loads every production into a registry.
"""

from pathlib import Path
from typing import Optional, Union

from animatics.engine.composer import CompositionRegistry, default_registry

from . import brandos_promo, brick_by_brick

PRODUCTIONS = {
    brick_by_brick.COMPOSITION_ID: brick_by_brick,
    brandos_promo.COMPOSITION_ID: brandos_promo,
}


def register_all(
    registry: Optional[CompositionRegistry] = None,
    schedules_dir: Optional[Union[str, Path]] = None,
) -> CompositionRegistry:
    """Register every production not already present in ``registry``."""
    registry = registry if registry is not None else default_registry
    for composition_id, module in PRODUCTIONS.items():
        if composition_id in registry:
            continue
        schedule_path = Path(schedules_dir) / f"{module.SCHEDULE_NAME}.json" if schedules_dir else None
        registry.register(module.build(schedule_path=schedule_path))
    return registry


def build_registry(assets=None, schedules_dir=None) -> CompositionRegistry:
    """Fresh registry holding every production."""
    return register_all(CompositionRegistry(assets=assets), schedules_dir)
