"""
Value-processing handler chain for bindings.

A ``ProcessedBinding`` wraps another binding and passes its resolved value
through an ordered list of handlers (validate, clamp, round, scale, map).
Each handler returns a ``HandlerResult``; the first invalid result stops the
chain.

Example:
    binding = ProcessedBinding(ParameterBinding("size"))
    binding.add_handler(ValidationHandler(0, 1000))
    binding.add_handler(ClampHandler(10, 500))
    binding.add_handler(RoundHandler())
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from ..expr.errors import warning_value_rejected
from .base import Binding, BindingError, InvalidBindingJSON

logger = logging.getLogger(__name__)


def _bound_to_json(value: float) -> Optional[float]:
    return None if math.isinf(value) else value


def _bound_from_json(value, default: float) -> float:
    return default if value is None else float(value)


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and not math.isnan(value)


@dataclass(frozen=True)
class HandlerResult:
    value: Optional[float]
    valid: bool = True
    error: Optional[str] = None


class BindingHandler:
    """Base handler: passes values through unchanged."""

    type = "passthrough"

    def process(self, value):
        return HandlerResult(value)

    def to_json(self) -> dict:
        return {"type": self.type}

    @classmethod
    def from_json(cls, data: dict) -> "BindingHandler":
        return cls()


class ValidationHandler(BindingHandler):
    """Rejects non-numbers and values outside [min, max]."""

    type = "validation"

    def __init__(self, min: float = -math.inf, max: float = math.inf,
                 allow_null: bool = False, error_message: Optional[str] = None):
        self.min = min
        self.max = max
        self.allow_null = allow_null
        self.error_message = error_message

    def _fail(self, default_message: str, value) -> HandlerResult:
        message = default_message
        if self.error_message:
            message = (self.error_message
                       .replace("{value}", str(value))
                       .replace("{min}", str(self.min))
                       .replace("{max}", str(self.max)))
        return HandlerResult(value, valid=False, error=message)

    def process(self, value):
        if value is None:
            if self.allow_null:
                return HandlerResult(value)
            return self._fail("Value cannot be null", value)
        if not _is_number(value):
            return self._fail("Value must be a number", value)
        if value < self.min:
            return self._fail(f"Value {value} is below minimum {self.min}", value)
        if value > self.max:
            return self._fail(f"Value {value} is above maximum {self.max}", value)
        return HandlerResult(value)

    def to_json(self) -> dict:
        return {
            "type": self.type,
            "min": _bound_to_json(self.min),
            "max": _bound_to_json(self.max),
            "allowNull": self.allow_null,
            "errorMessage": self.error_message,
        }

    @classmethod
    def from_json(cls, data: dict) -> "ValidationHandler":
        return cls(
            _bound_from_json(data.get("min"), -math.inf),
            _bound_from_json(data.get("max"), math.inf),
            allow_null=bool(data.get("allowNull", False)),
            error_message=data.get("errorMessage"),
        )


class ClampHandler(BindingHandler):
    type = "clamp"

    def __init__(self, min: float = -math.inf, max: float = math.inf):
        self.min = min
        self.max = max

    def process(self, value):
        if not _is_number(value):
            return HandlerResult(value)
        return HandlerResult(max(self.min, min(self.max, value)))

    def to_json(self) -> dict:
        return {"type": self.type, "min": _bound_to_json(self.min), "max": _bound_to_json(self.max)}

    @classmethod
    def from_json(cls, data: dict) -> "ClampHandler":
        return cls(_bound_from_json(data.get("min"), -math.inf),
                   _bound_from_json(data.get("max"), math.inf))


def _round_half_up(x: float) -> float:
    # JavaScript-style rounding: halves go towards +inf
    return math.floor(x + 0.5)


ROUND_MODES: Dict[str, Callable[[float], float]] = {
    "round": _round_half_up,
    "floor": math.floor,
    "ceil": math.ceil,
    "trunc": math.trunc,
}


class RoundHandler(BindingHandler):
    """Rounds to ``decimals`` places using one of ``ROUND_MODES``."""

    type = "round"

    def __init__(self, decimals: int = 0, mode: str = "round"):
        self.decimals = decimals
        self.mode = mode if mode in ROUND_MODES else "round"

    def process(self, value):
        if not _is_number(value):
            return HandlerResult(value)
        multiplier = 10 ** self.decimals
        return HandlerResult(ROUND_MODES[self.mode](value * multiplier) / multiplier)

    def to_json(self) -> dict:
        return {"type": self.type, "decimals": self.decimals, "mode": self.mode}

    @classmethod
    def from_json(cls, data: dict) -> "RoundHandler":
        return cls(int(data.get("decimals", 0)), data.get("mode", "round"))


class ScaleHandler(BindingHandler):
    type = "scale"

    def __init__(self, scale: float = 1.0, offset: float = 0.0):
        self.scale = scale
        self.offset = offset

    def process(self, value):
        if not _is_number(value):
            return HandlerResult(value)
        return HandlerResult(value * self.scale + self.offset)

    def to_json(self) -> dict:
        return {"type": self.type, "scale": self.scale, "offset": self.offset}

    @classmethod
    def from_json(cls, data: dict) -> "ScaleHandler":
        return cls(float(data.get("scale", 1.0)), float(data.get("offset", 0.0)))


class MapRangeHandler(BindingHandler):
    """Linearly maps [in_min, in_max] onto [out_min, out_max]."""

    type = "mapRange"

    def __init__(self, in_min: float = 0.0, in_max: float = 100.0,
                 out_min: float = 0.0, out_max: float = 1.0, clamp: bool = True):
        self.in_min = in_min
        self.in_max = in_max
        self.out_min = out_min
        self.out_max = out_max
        self.clamp = clamp

    def process(self, value):
        if not _is_number(value) or self.in_max == self.in_min:
            return HandlerResult(value)
        normalized = (value - self.in_min) / (self.in_max - self.in_min)
        mapped = self.out_min + normalized * (self.out_max - self.out_min)
        if self.clamp:
            lo = min(self.out_min, self.out_max)
            hi = max(self.out_min, self.out_max)
            mapped = max(lo, min(hi, mapped))
        return HandlerResult(mapped)

    def to_json(self) -> dict:
        return {
            "type": self.type,
            "inMin": self.in_min,
            "inMax": self.in_max,
            "outMin": self.out_min,
            "outMax": self.out_max,
            "clamp": self.clamp,
        }

    @classmethod
    def from_json(cls, data: dict) -> "MapRangeHandler":
        return cls(
            float(data.get("inMin", 0.0)),
            float(data.get("inMax", 100.0)),
            float(data.get("outMin", 0.0)),
            float(data.get("outMax", 1.0)),
            bool(data.get("clamp", True)),
        )


def run_chain(handlers: List[BindingHandler], value) -> HandlerResult:
    """Pass ``value`` through ``handlers`` in order, stopping at the first rejection."""
    result = HandlerResult(value)
    for handler in handlers:
        result = handler.process(result.value)
        if not result.valid:
            break
    return result


class HandlerRegistry:
    """Maps handler type tags to handler classes for deserialization."""

    def __init__(self):
        self._handlers: Dict[str, type] = {}
        self._register_all()

    def register(self, handler_type: str, handler_cls: type) -> None:
        self._handlers[handler_type] = handler_cls

    def is_registered(self, handler_type: str) -> bool:
        return handler_type in self._handlers

    def create(self, data: dict) -> BindingHandler:
        handler_cls = self._handlers.get(data.get("type"))
        if handler_cls is None:
            raise BindingError(
                f'Unknown handler type: "{data.get("type")}". '
                f'Available types: {", ".join(self._handlers)}'
            )
        return handler_cls.from_json(data)

    def _register_all(self) -> None:
        for handler_cls in (BindingHandler, ValidationHandler, ClampHandler,
                            RoundHandler, ScaleHandler, MapRangeHandler):
            self.register(handler_cls.type, handler_cls)


default_handler_registry = HandlerRegistry()


class ProcessedBinding(Binding):
    """
    A binding whose value is post-processed by a handler chain.

    When a handler rejects the value, resolution returns the raw wrapped
    value instead, records the message in ``last_error`` and emits a W203
    warning.
    """

    type = "processed"

    def __init__(self, wrapped: Binding, handlers: Optional[List[BindingHandler]] = None):
        if wrapped is None:
            raise BindingError("ProcessedBinding requires a binding to wrap")
        self.wrapped = wrapped
        self.handlers: List[BindingHandler] = list(handlers or [])
        self.last_error: Optional[str] = None

    def __eq__(self, other):
        if not isinstance(other, ProcessedBinding):
            return NotImplemented
        return self.to_json() == other.to_json()

    def add_handler(self, handler: BindingHandler) -> "ProcessedBinding":
        if not isinstance(handler, BindingHandler):
            raise BindingError("Handler must be a BindingHandler")
        self.handlers.append(handler)
        return self

    def remove_handler(self, handler_type: str) -> "ProcessedBinding":
        self.handlers = [h for h in self.handlers if h.type != handler_type]
        return self

    def clear_handlers(self) -> "ProcessedBinding":
        self.handlers = []
        return self

    @property
    def has_error(self) -> bool:
        return self.last_error is not None

    def validate(self, value) -> HandlerResult:
        """Run the chain on ``value`` without resolving anything."""
        return run_chain(self.handlers, value)

    def resolve(self, parameter_store=None, engine=None, diagnostics=None) -> float:
        raw = self.wrapped.resolve(parameter_store, engine, diagnostics)
        result = run_chain(self.handlers, raw)
        if not result.valid:
            self.last_error = result.error
            logger.warning("Binding validation failed: %s", result.error)
            if diagnostics is not None:
                diagnostics.add(warning_value_rejected(result.error))
            return raw
        self.last_error = None
        return result.value

    def to_json(self) -> dict:
        return {
            "type": self.type,
            "wrappedBinding": self.wrapped.to_json(),
            "handlers": [h.to_json() for h in self.handlers],
        }

    @classmethod
    def from_json(cls, data: dict, create_binding: Callable[[dict], Binding],
                  handler_registry: Optional[HandlerRegistry] = None) -> "ProcessedBinding":
        registry = handler_registry or default_handler_registry
        wrapped_data = data.get("wrappedBinding")
        if not isinstance(wrapped_data, dict):
            raise InvalidBindingJSON("processed binding requires wrappedBinding")
        processed = cls(create_binding(wrapped_data))
        for handler_data in data.get("handlers") or []:
            processed.add_handler(registry.create(handler_data))
        return processed
