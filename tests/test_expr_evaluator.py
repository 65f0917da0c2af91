"""
Unit tests for expression evaluation.
"""

import logging
import math

import pytest
from jointcad.expr import (
    ArityError,
    BinaryOp,
    BuiltinFunction,
    DiagnosticCollector,
    DivisionByZero,
    DomainError,
    EvaluationError,
    ExpressionEngine,
    FunctionRegistry,
    Number,
    UnknownFunction,
)


@pytest.fixture
def engine():
    return ExpressionEngine()


class TestArithmetic:
    """Hand-computed results."""

    @pytest.mark.parametrize("source,expected", [
        ("2 + 3 * 4", 14.0),
        ("(2 + 3) * 4", 20.0),
        ("10 - 4 - 3", 3.0),
        ("8 / 4 / 2", 1.0),
        ("-5 + 2", -3.0),
        ("--2", 2.0),
        ("7 / 2", 3.5),
    ])
    def test_arithmetic(self, engine, source, expected):
        assert engine.evaluate_source(source) == pytest.approx(expected)

    def test_parameters(self, engine):
        ctx = {"width": 10, "offset": 3}
        assert engine.evaluate_source("width * 2 + offset", ctx) == pytest.approx(23.0)

    def test_ast_reuse_with_different_contexts(self, engine):
        ast = engine.parse("w / 2")
        assert engine.evaluate(ast, {"w": 10}) == pytest.approx(5.0)
        assert engine.evaluate(ast, {"w": 30}) == pytest.approx(15.0)

    def test_deterministic(self, engine):
        ast = engine.parse("sin(a) * cos(a) + sqrt(b)")
        ctx = {"a": 0.7, "b": 2.0}
        results = {engine.evaluate(ast, ctx) for _ in range(5)}
        assert len(results) == 1


class TestFunctions:
    """Whitelisted functions."""

    @pytest.mark.parametrize("source,expected", [
        ("sqrt(16) - abs(-2)", 2.0),
        ("min(3,1,2)", 1.0),
        ("max(3,1,2)", 3.0),
        ("min(5)", 5.0),
        ("max(-4)", -4.0),
        ("sin(0)", 0.0),
        ("cos(0)", 1.0),
        ("abs(-7.5)", 7.5),
        ("SQRT(9)", 3.0),
    ])
    def test_function_values(self, engine, source, expected):
        assert engine.evaluate_source(source) == pytest.approx(expected)

    def test_sin_of_half_pi(self, engine):
        assert engine.evaluate_source("sin(p)", {"p": math.pi / 2}) == pytest.approx(1.0)

    def test_supported_functions(self, engine):
        assert list(engine.supported_functions) == ["sin", "cos", "sqrt", "abs", "min", "max"]

    def test_custom_registry(self):
        registry = FunctionRegistry()
        registry.register(BuiltinFunction("double", lambda x: 2 * x))
        engine = ExpressionEngine(registry)
        assert engine.evaluate_source("double(4)") == pytest.approx(8.0)
        assert "double" not in ExpressionEngine().supported_functions


class TestEvaluationErrors:
    """Hard failures."""

    def test_division_by_zero(self, engine):
        with pytest.raises(DivisionByZero) as exc_info:
            engine.evaluate_source("5 / 0")
        assert exc_info.value.code == "E201"

    def test_division_by_zero_parameter(self, engine):
        with pytest.raises(DivisionByZero):
            engine.evaluate_source("5 / (w - w)", {"w": 3})

    def test_division_by_zero_is_evaluation_error(self, engine):
        with pytest.raises(EvaluationError):
            engine.evaluate_source("1 / 0")

    def test_unknown_function(self, engine):
        with pytest.raises(UnknownFunction) as exc_info:
            engine.evaluate_source("unknown_fn(1)")
        assert exc_info.value.code == "E202"

    def test_unknown_function_lists_supported(self, engine):
        with pytest.raises(UnknownFunction) as exc_info:
            engine.evaluate_source("tan(1)")
        message = exc_info.value.diagnostic.message
        for name in ("sin", "cos", "sqrt", "abs", "min", "max"):
            assert name in message

    @pytest.mark.parametrize("source", ["sin()", "cos(1, 2)", "sqrt(1, 2, 3)", "abs()", "min()", "max()"])
    def test_arity(self, engine, source):
        with pytest.raises(ArityError) as exc_info:
            engine.evaluate_source(source)
        assert exc_info.value.code == "E203"

    def test_arity_message(self, engine):
        with pytest.raises(ArityError) as exc_info:
            engine.evaluate_source("sin(1, 2)")
        assert "sin() requires exactly 1 argument, got 2" in exc_info.value.diagnostic.message

    def test_arity_checked_before_arguments(self, engine):
        """A bad call fails on arity even when an argument would divide by zero."""
        with pytest.raises(ArityError):
            engine.evaluate_source("sin(1/0, 2)")

    def test_sqrt_negative(self, engine):
        with pytest.raises(DomainError) as exc_info:
            engine.evaluate_source("sqrt(-1)")
        assert exc_info.value.code == "E204"
        assert exc_info.value.diagnostic.span is not None

    def test_missing_ast(self, engine):
        with pytest.raises(EvaluationError) as exc_info:
            engine.evaluate(None, {})
        assert exc_info.value.code == "E200"

    def test_unknown_operator_in_handbuilt_ast(self, engine):
        with pytest.raises(EvaluationError) as exc_info:
            engine.evaluate(BinaryOp("^", Number(2.0), Number(3.0)))
        assert exc_info.value.code == "E205"


class TestMissingParameters:
    """Missing names degrade to 0 with a warning."""

    def test_missing_parameter_is_zero(self, engine):
        assert engine.evaluate_source("missing + 2", {}) == pytest.approx(2.0)

    def test_missing_parameter_logs_warning(self, engine, caplog):
        with caplog.at_level(logging.WARNING, logger="jointcad"):
            engine.evaluate_source("ghost * 3", {})
        assert "ghost" in caplog.text

    def test_missing_parameter_diagnostic(self, engine):
        diagnostics = DiagnosticCollector()
        engine.evaluate_source("a + ghost", {"a": 1}, diagnostics)
        assert [d.code for d in diagnostics.diagnostics] == ["W201"]
        assert "ghost" in diagnostics.warnings[0].message

    def test_parameter_names(self, engine):
        assert engine.parameter_names("w * h + w") == ("w", "h")


class TestDiagnosticCollector:
    """Collector bookkeeping."""

    def test_one_warning_per_missing_name(self, engine):
        diagnostics = DiagnosticCollector()
        engine.evaluate_source("x + y", {}, diagnostics)
        assert [d.code for d in diagnostics.warnings] == ["W201", "W201"]
        assert [d.to_json()["severity"] for d in diagnostics.diagnostics] == ["warning", "warning"]

    def test_hard_failure_not_collected(self, engine):
        diagnostics = DiagnosticCollector()
        with pytest.raises(DivisionByZero):
            engine.evaluate_source("ghost + 1/0", {}, diagnostics)
        assert [d.code for d in diagnostics.warnings] == ["W201"]

    def test_warnings_filter_by_severity(self, engine):
        diagnostics = DiagnosticCollector()
        with pytest.raises(DivisionByZero) as exc_info:
            engine.evaluate_source("1/0")
        diagnostics.add(exc_info.value.diagnostic)
        assert diagnostics.diagnostics == [exc_info.value.diagnostic]
        assert diagnostics.warnings == []
