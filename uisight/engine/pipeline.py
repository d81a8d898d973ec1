"""Pipeline orchestrator — runs transforms in dependency order with option gating."""

from __future__ import annotations

import importlib
import logging
import pkgutil
import time
from collections.abc import Generator
from typing import Any

from uisight.engine.config import AnalysisConfig
from uisight.engine.context import AnalysisContext
from uisight.engine.registry import Layer, TransformRegistry, get_registry

logger = logging.getLogger(__name__)

_LAYER_PACKAGES = ["layer0", "layer1", "layer2", "layer3", "layer4"]

# Per-request switches → leaf transforms they turn off.
OPTION_GATES: dict[str, set[str]] = {
    "skip_patterns": {"T3.02"},
    "skip_structure": {"T3.03"},
    "skip_accessibility": {"T4.01"},
    "skip_responsiveness": {"T4.02"},
}


def register_transforms() -> None:
    """Import all transform modules so @transform decorators fire. Idempotent."""
    for layer_name in _LAYER_PACKAGES:
        package = importlib.import_module(f"uisight.engine.{layer_name}")
        for _, module_name, _ in pkgutil.iter_modules(package.__path__):
            importlib.import_module(f"{package.__name__}.{module_name}")


class Pipeline:
    """Orchestrates the transform pipeline."""

    def __init__(
        self,
        registry: TransformRegistry | None = None,
        config: AnalysisConfig | None = None,
    ) -> None:
        self.registry = registry or get_registry()
        self.config = config or AnalysisConfig()

    def _plan(self, ctx: AnalysisContext, targets: set[str] | None) -> tuple[list, set[str]]:
        skip_ids = self._option_gate(ctx)
        requested = targets if targets is not None else {s.id for s in self.registry.all()}
        ordered = self.registry.resolve_order(requested - skip_ids)
        # A skipped transform must not be pulled back in as someone's dependency.
        ordered = [spec for spec in ordered if spec.id not in skip_ids]
        return ordered, skip_ids

    def run(self, ctx: AnalysisContext, targets: set[str] | None = None) -> AnalysisContext:
        """Run the pipeline on ``ctx``.

        ``targets`` limits the run to those transforms and their dependencies.
        A failing transform is recorded in ``ctx.errors`` and the run continues.
        """
        start = time.perf_counter()
        ordered, skip_ids = self._plan(ctx, targets)

        logger.info(
            "Pipeline: %d transforms queued (%d skipped) for %dx%d image",
            len(ordered),
            len(skip_ids),
            ctx.width,
            ctx.height,
        )

        for spec in ordered:
            t0 = time.perf_counter()
            try:
                spec.fn(ctx)
                ctx.completed_transforms.add(spec.id)
                elapsed = (time.perf_counter() - t0) * 1000
                logger.debug("  %s completed in %.1fms", spec.id, elapsed)
            except Exception as e:
                ctx.errors[spec.id] = str(e)
                logger.warning("  %s FAILED: %s", spec.id, e)

        total = (time.perf_counter() - start) * 1000
        logger.info(
            "Pipeline complete: %d/%d transforms in %.0fms",
            len(ctx.completed_transforms),
            len(ordered),
            total,
        )
        return ctx

    def run_streaming(self, ctx: AnalysisContext) -> Generator[dict[str, Any], None, None]:
        """Run the pipeline, yielding a progress dict before and after each transform.

        The caller's ``ctx`` is mutated in-place, so after the generator is
        exhausted the context contains all results (same as ``run()``).
        """
        ordered, _ = self._plan(ctx, None)
        total = len(ordered)

        for i, spec in enumerate(ordered):
            event = {
                "transform_id": spec.id,
                "description": spec.description,
                "layer": spec.layer.name,
                "index": i,
                "total": total,
            }
            yield {**event, "elapsed_ms": 0.0, "status": "running", "error": ""}

            t0 = time.perf_counter()
            status = "ok"
            error = ""
            try:
                spec.fn(ctx)
                ctx.completed_transforms.add(spec.id)
            except Exception as e:
                ctx.errors[spec.id] = str(e)
                status = "error"
                error = str(e)
                logger.warning("  %s FAILED: %s", spec.id, e)

            elapsed_ms = round((time.perf_counter() - t0) * 1000, 1)
            yield {**event, "elapsed_ms": elapsed_ms, "status": status, "error": error}

    def run_layer(self, ctx: AnalysisContext, layer: Layer) -> AnalysisContext:
        """Run only transforms in a specific layer."""
        specs = self.registry.get_layer(layer)
        for spec in specs:
            try:
                spec.fn(ctx)
                ctx.completed_transforms.add(spec.id)
            except Exception as e:
                ctx.errors[spec.id] = str(e)
                logger.warning("  %s FAILED: %s", spec.id, e)
        return ctx

    def _option_gate(self, ctx: AnalysisContext) -> set[str]:
        """Transforms switched off by per-request options, plus their dependents."""
        skip: set[str] = set()
        for option, transform_ids in OPTION_GATES.items():
            if ctx.options.get(option):
                skip.update(transform_ids)
        if not skip:
            return skip
        return self.registry.dependents_of(skip)


def create_pipeline(config: AnalysisConfig | None = None) -> Pipeline:
    """Factory function for creating a pipeline instance with all transforms loaded."""
    register_transforms()
    return Pipeline(config=config)
