"""
Built-in function registry for expression evaluation.

Only whitelisted math functions may be called from an expression.  Each
function carries its arity so the evaluator can reject a bad call before
computing any argument.
"""

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional
import math

from .errors import error_domain


@dataclass(frozen=True)
class BuiltinFunction:
    """
    A whitelisted function with its implementation and arity.

    ``max_args`` of None means variadic.
    """
    name: str
    implementation: Callable[..., float]
    min_args: int = 1
    max_args: Optional[int] = 1
    doc: str = ""

    def accepts(self, count: int) -> bool:
        if count < self.min_args:
            return False
        return self.max_args is None or count <= self.max_args

    def describe_arity(self) -> str:
        """Human-readable arity, used in error messages."""
        if self.max_args is None:
            plural = "argument" if self.min_args == 1 else "arguments"
            return f"at least {self.min_args} {plural}"
        if self.min_args == self.max_args:
            plural = "argument" if self.min_args == 1 else "arguments"
            return f"exactly {self.min_args} {plural}"
        return f"{self.min_args} to {self.max_args} arguments"


def _sqrt(x: float) -> float:
    if x < 0:
        raise error_domain("sqrt", "argument must be non-negative")
    return math.sqrt(x)


class FunctionRegistry:
    """
    Registry of the functions an expression may call.

    Names are matched case-insensitively; the parser lowercases call names.
    """

    def __init__(self):
        self._functions: Dict[str, BuiltinFunction] = {}
        self._register_all()

    def get_function(self, name: str) -> Optional[BuiltinFunction]:
        return self._functions.get(name.lower())

    def register(self, func: BuiltinFunction) -> None:
        self._functions[func.name.lower()] = func

    def names(self) -> List[str]:
        """Supported function names in registration order."""
        return list(self._functions)

    def __contains__(self, name: str) -> bool:
        return name.lower() in self._functions

    def _register_all(self) -> None:
        self.register(BuiltinFunction("sin", math.sin, doc="Sine of x (radians)"))
        self.register(BuiltinFunction("cos", math.cos, doc="Cosine of x (radians)"))
        self.register(BuiltinFunction("sqrt", _sqrt, doc="Square root; x must be >= 0"))
        self.register(BuiltinFunction("abs", abs, doc="Absolute value"))
        self.register(BuiltinFunction("min", lambda *args: min(args), min_args=1, max_args=None,
                                      doc="Smallest of one or more values"))
        self.register(BuiltinFunction("max", lambda *args: max(args), min_args=1, max_args=None,
                                      doc="Largest of one or more values"))


_default_registry: Optional[FunctionRegistry] = None


def get_function_registry() -> FunctionRegistry:
    """Get the shared function registry."""
    global _default_registry
    if _default_registry is None:
        _default_registry = FunctionRegistry()
    return _default_registry
