"""Transform registry — every analysis stage is a standalone function registered via decorator.

Usage:
    @transform(id="T2.03", layer=Layer.LAYOUT, dependencies=["T1.01"])
    def spacing(ctx: AnalysisContext) -> None:
        ctx.spacing = analyze_spacing(ctx.edges, ctx.width, ctx.height, ctx.config)

Adding a new stage = creating one file with the decorator. Nothing else changes.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from uisight.engine.context import AnalysisContext

logger = logging.getLogger(__name__)


class Layer(enum.IntEnum):
    SAMPLING = 0
    DETECTION = 1
    LAYOUT = 2
    SEMANTICS = 3
    AUDIT = 4


@dataclass
class TransformSpec:
    id: str
    layer: Layer
    fn: Callable[["AnalysisContext"], None]
    dependencies: list[str] = field(default_factory=list)
    tags: set[str] = field(default_factory=set)
    description: str = ""


class TransformRegistry:
    """Registry of all transforms. Populated at import time, read-only afterwards."""

    def __init__(self) -> None:
        self._transforms: dict[str, TransformSpec] = {}

    def register(self, spec: TransformSpec) -> None:
        if spec.id in self._transforms:
            raise ValueError(f"Duplicate transform ID: {spec.id}")
        self._transforms[spec.id] = spec
        logger.debug("Registered transform %s (%s)", spec.id, spec.layer.name)

    def get(self, transform_id: str) -> TransformSpec:
        return self._transforms[transform_id]

    def get_layer(self, layer: Layer) -> list[TransformSpec]:
        specs = [s for s in self._transforms.values() if s.layer == layer]
        return sorted(specs, key=lambda s: s.id)

    def all(self) -> list[TransformSpec]:
        return sorted(self._transforms.values(), key=lambda s: (s.layer, s.id))

    def dependents_of(self, transform_ids: set[str]) -> set[str]:
        """``transform_ids`` plus every transform that transitively depends on them."""
        closed = set(transform_ids)
        changed = True
        while changed:
            changed = False
            for spec in self._transforms.values():
                if spec.id not in closed and closed.intersection(spec.dependencies):
                    closed.add(spec.id)
                    changed = True
        return closed

    def resolve_order(self, requested_ids: set[str] | None = None) -> list[TransformSpec]:
        """Topological sort respecting dependencies. If requested_ids is None, run all.

        Requested transforms pull in their transitive dependencies; ties are
        broken by transform ID so the order is deterministic.
        """
        pool = self._transforms
        if requested_ids is not None:
            needed: set[str] = set()
            stack = list(requested_ids)
            while stack:
                tid = stack.pop()
                if tid in needed or tid not in pool:
                    continue
                needed.add(tid)
                stack.extend(pool[tid].dependencies)
            pool = {tid: spec for tid, spec in pool.items() if tid in needed}

        # Kahn's algorithm over the in-pool dependency edges
        pending = {tid: {d for d in spec.dependencies if d in pool} for tid, spec in pool.items()}
        ready = sorted(tid for tid, deps in pending.items() if not deps)
        ordered: list[TransformSpec] = []

        while ready:
            tid = ready.pop(0)
            ordered.append(pool[tid])
            del pending[tid]
            for other_id, deps in pending.items():
                if tid in deps:
                    deps.discard(tid)
                    if not deps:
                        ready.append(other_id)
            ready.sort()

        if pending:
            raise ValueError(f"Circular dependency detected among: {set(pending)}")

        return ordered

    @property
    def count(self) -> int:
        return len(self._transforms)


# Module-level singleton
_registry = TransformRegistry()


def get_registry() -> TransformRegistry:
    return _registry


def transform(
    *,
    id: str,
    layer: Layer,
    dependencies: list[str] | None = None,
    tags: set[str] | None = None,
    description: str = "",
):
    """Decorator to register a transform function."""

    def decorator(fn: Callable[["AnalysisContext"], None]):
        spec = TransformSpec(
            id=id,
            layer=layer,
            fn=fn,
            dependencies=dependencies or [],
            tags=tags or set(),
            description=description,
        )
        _registry.register(spec)
        return fn

    return decorator
