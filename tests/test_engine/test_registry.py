"""Tests for the transform registry."""

import pytest

from uisight.engine.context import AnalysisContext
from uisight.engine.pipeline import register_transforms
from uisight.engine.registry import Layer, TransformRegistry, TransformSpec, get_registry


def _noop(ctx: AnalysisContext) -> None:
    pass


def test_register_and_get():
    reg = TransformRegistry()
    spec = TransformSpec(id="T0.01", layer=Layer.SAMPLING, fn=_noop)
    reg.register(spec)
    assert reg.get("T0.01") is spec
    assert reg.count == 1


def test_duplicate_id_rejected():
    reg = TransformRegistry()
    reg.register(TransformSpec(id="T0.01", layer=Layer.SAMPLING, fn=_noop))
    with pytest.raises(ValueError, match="Duplicate"):
        reg.register(TransformSpec(id="T0.01", layer=Layer.SAMPLING, fn=_noop))


def test_get_layer():
    reg = TransformRegistry()
    reg.register(TransformSpec(id="T0.01", layer=Layer.SAMPLING, fn=_noop))
    reg.register(TransformSpec(id="T1.01", layer=Layer.DETECTION, fn=_noop))
    layer0 = reg.get_layer(Layer.SAMPLING)
    assert len(layer0) == 1
    assert layer0[0].id == "T0.01"


def test_resolve_order_with_deps():
    reg = TransformRegistry()
    reg.register(TransformSpec(id="T1.01", layer=Layer.DETECTION, fn=_noop))
    reg.register(TransformSpec(id="T2.03", layer=Layer.LAYOUT, fn=_noop, dependencies=["T1.01"]))
    reg.register(TransformSpec(id="T3.01", layer=Layer.SEMANTICS, fn=_noop))
    ids = [s.id for s in reg.resolve_order({"T2.03"})]
    assert ids == ["T1.01", "T2.03"]


def test_resolve_order_all_is_deterministic():
    reg = TransformRegistry()
    for tid in ["T0.03", "T0.01", "T0.02"]:
        reg.register(TransformSpec(id=tid, layer=Layer.SAMPLING, fn=_noop))
    assert [s.id for s in reg.resolve_order(None)] == ["T0.01", "T0.02", "T0.03"]


def test_resolve_order_detects_cycle():
    reg = TransformRegistry()
    reg.register(TransformSpec(id="A", layer=Layer.SAMPLING, fn=_noop, dependencies=["B"]))
    reg.register(TransformSpec(id="B", layer=Layer.SAMPLING, fn=_noop, dependencies=["A"]))
    with pytest.raises(ValueError, match="Circular"):
        reg.resolve_order(None)


def test_dependents_of():
    reg = TransformRegistry()
    reg.register(TransformSpec(id="T3.01", layer=Layer.SEMANTICS, fn=_noop))
    reg.register(TransformSpec(id="T3.02", layer=Layer.SEMANTICS, fn=_noop, dependencies=["T3.01"]))
    reg.register(TransformSpec(id="T4.09", layer=Layer.AUDIT, fn=_noop, dependencies=["T3.02"]))
    reg.register(TransformSpec(id="T4.01", layer=Layer.AUDIT, fn=_noop, dependencies=["T3.01"]))
    assert reg.dependents_of({"T3.02"}) == {"T3.02", "T4.09"}


def test_all_engine_transforms_registered():
    register_transforms()
    reg = get_registry()
    ids = {s.id for s in reg.all()}
    assert ids == {
        "T0.01",
        "T1.01", "T1.02",
        "T2.01", "T2.02", "T2.03", "T2.04", "T2.05",
        "T3.01", "T3.02", "T3.03",
        "T4.01", "T4.02",
    }
    # Every declared dependency exists and the graph is acyclic.
    assert len(reg.resolve_order(None)) == reg.count
