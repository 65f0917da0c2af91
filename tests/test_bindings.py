"""
Tests for bindings, the binding registry and the resolver.
"""

import logging

import pytest
from jointcad.bindings import (
    BindingRegistry,
    BindingResolver,
    ExpressionBinding,
    InvalidBindingJSON,
    LiteralBinding,
    MissingResolver,
    ParameterBinding,
    UnknownBindingType,
    create_binding_from_json,
)
from jointcad.expr import DiagnosticCollector, ExpressionEngine, ParseError
from jointcad.parameters import Parameter, ParameterStore


@pytest.fixture
def store():
    return ParameterStore([
        Parameter("p-w", "width", 24.0),
        Parameter("p-t", "thickness", 3.0),
    ])


@pytest.fixture
def engine():
    return ExpressionEngine()


class TestLiteralBinding:

    def test_resolves_unconditionally(self):
        assert LiteralBinding(7.5).resolve() == 7.5

    def test_json(self):
        assert LiteralBinding(2.0).to_json() == {"type": "literal", "value": 2.0}


class TestParameterBinding:

    def test_resolves_current_value(self, store):
        binding = ParameterBinding("p-w")
        assert binding.resolve(store) == 24.0
        store.set_value("p-w", 30)
        assert binding.resolve(store) == 30.0

    def test_missing_parameter_is_zero_with_warning(self, store, caplog):
        diagnostics = DiagnosticCollector()
        with caplog.at_level(logging.WARNING, logger="jointcad"):
            value = ParameterBinding("p-gone").resolve(store, diagnostics=diagnostics)
        assert value == 0
        assert "p-gone" in caplog.text
        assert diagnostics.warnings[0].code == "W202"

    def test_requires_store(self):
        with pytest.raises(MissingResolver):
            ParameterBinding("p-w").resolve(None)

    def test_json(self):
        assert ParameterBinding("p-w").to_json() == {"type": "parameter", "parameterId": "p-w"}


class TestExpressionBinding:

    def test_resolves_against_parameter_names(self, store, engine):
        binding = ExpressionBinding("width / 2 - thickness")
        assert binding.resolve(store, engine) == pytest.approx(9.0)

    def test_requires_store_and_engine(self, store, engine):
        binding = ExpressionBinding("1 + 1")
        with pytest.raises(MissingResolver):
            binding.resolve(store, None)
        with pytest.raises(MissingResolver):
            binding.resolve(None, engine)

    def test_ast_is_cached(self, store, engine):
        binding = ExpressionBinding("width * 2")
        binding.resolve(store, engine)
        cached = binding._cached_ast
        assert cached is not None
        store.set_value("p-w", 10)
        assert binding.resolve(store, engine) == pytest.approx(20.0)
        assert binding._cached_ast is cached

    def test_cache_refreshed_when_text_changes(self, store, engine):
        binding = ExpressionBinding("width")
        binding.resolve(store, engine)
        binding.expression = "thickness"
        assert binding.resolve(store, engine) == pytest.approx(3.0)

    def test_parse_error_surfaces(self, store, engine):
        with pytest.raises(ParseError):
            ExpressionBinding("width +").resolve(store, engine)

    def test_store_with_only_lookup_methods(self, engine):
        class LookupOnlyStore:
            def __init__(self, params):
                self._params = {p.id: p for p in params}

            def get(self, parameter_id):
                return self._params.get(parameter_id)

            def get_all(self):
                return list(self._params.values())

        lookup = LookupOnlyStore([Parameter("p-w", "width", 24.0)])
        assert ExpressionBinding("width / 2").resolve(lookup, engine) == pytest.approx(12.0)
        assert ParameterBinding("p-w").resolve(lookup) == pytest.approx(24.0)

    def test_cache_ignored_for_equality(self, store, engine):
        a = ExpressionBinding("width")
        b = ExpressionBinding("width")
        a.resolve(store, engine)
        assert a == b


class TestBindingRegistry:

    def test_builtin_types(self):
        registry = BindingRegistry()
        assert registry.available_types()[:3] == ["literal", "parameter", "expression"]
        assert registry.is_registered("processed")

    @pytest.mark.parametrize("data,cls", [
        ({"type": "literal", "value": 3}, LiteralBinding),
        ({"type": "parameter", "parameterId": "p-w"}, ParameterBinding),
        ({"type": "expression", "expression": "width"}, ExpressionBinding),
    ])
    def test_create_from_json(self, data, cls):
        assert isinstance(create_binding_from_json(data), cls)

    def test_unknown_type_lists_available(self):
        registry = BindingRegistry()
        with pytest.raises(UnknownBindingType) as exc_info:
            registry.create_from_json({"type": "spline"})
        err = exc_info.value
        assert err.binding_type == "spline"
        assert "literal" in err.available
        assert str(err).startswith('Unknown binding type: "spline". Available types: literal, parameter, expression')

    def test_missing_type(self):
        with pytest.raises(InvalidBindingJSON):
            create_binding_from_json({"value": 1})

    def test_parameter_requires_id(self):
        with pytest.raises(InvalidBindingJSON):
            create_binding_from_json({"type": "parameter"})

    def test_expression_requires_text(self):
        with pytest.raises(InvalidBindingJSON):
            create_binding_from_json({"type": "expression", "expression": ""})

    def test_register_custom_type(self, store):
        registry = BindingRegistry()
        registry.register("double", lambda data: LiteralBinding(2 * data["value"]))
        binding = registry.create_from_json({"type": "double", "value": 4})
        assert binding.resolve(store) == 8

    def test_unregister(self):
        registry = BindingRegistry()
        assert registry.unregister("literal") is True
        assert registry.unregister("literal") is False
        with pytest.raises(UnknownBindingType):
            registry.create_from_json({"type": "literal", "value": 1})

    def test_registries_are_independent(self):
        registry = BindingRegistry()
        registry.unregister("expression")
        assert BindingRegistry().is_registered("expression")


class TestRoundTrip:
    """to_json -> create_from_json -> resolve yields the same value."""

    @pytest.mark.parametrize("binding", [
        LiteralBinding(12.5),
        ParameterBinding("p-t"),
        ExpressionBinding("max(width, 30) / thickness"),
    ])
    def test_round_trip(self, binding, store, engine):
        before = binding.resolve(store, engine)
        restored = create_binding_from_json(binding.to_json())
        assert restored.resolve(store, engine) == pytest.approx(before)


class TestBindingResolver:

    def test_resolve_value(self, store):
        resolver = BindingResolver(store)
        assert resolver.resolve_value(ExpressionBinding("width + 1")) == pytest.approx(25.0)

    def test_collects_warnings(self, store):
        resolver = BindingResolver(store)
        resolver.resolve_value(ParameterBinding("p-missing"))
        resolver.resolve_value(ExpressionBinding("nobody * 2"))
        assert [d.code for d in resolver.diagnostics.warnings] == ["W202", "W201"]
