"""Named numeric parameters and the store that owns them.

Parameters are the user-adjustable values (sliders) that bindings read.
Bindings only ever read the store; all mutation goes through
``ParameterStore.set_value`` so that range/step constraints and change
notification are applied in one place.
"""

from __future__ import annotations

import math
import uuid
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional


class ParameterError(Exception):
    """Raised for duplicate or unknown parameter ids."""


@dataclass
class Parameter:
    """A named parameter with an optional range and step.

    Attributes:
        id: Stable identifier used by parameter bindings
        name: Name used inside expressions
        value: Current value
        min: Inclusive lower bound
        max: Inclusive upper bound
        step: Snap increment; 0 allows any value
    """
    id: str
    name: str
    value: float = 0.0
    min: float = -math.inf
    max: float = math.inf
    step: float = 0.0

    def __post_init__(self):
        if not self.name:
            raise ParameterError("Parameter name is required")

    def get_value(self) -> float:
        return self.value

    def set_value(self, new_value: float) -> None:
        """Set a new value, clamped to [min, max] then snapped to step."""
        value = max(self.min, min(self.max, float(new_value)))
        if self.step > 0:
            value = round(value / self.step) * self.step
        self.value = value

    def to_json(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "value": self.value,
            "min": None if math.isinf(self.min) else self.min,
            "max": None if math.isinf(self.max) else self.max,
            "step": self.step,
        }

    @classmethod
    def from_json(cls, data: dict) -> "Parameter":
        lo = data.get("min")
        hi = data.get("max")
        return cls(
            id=data["id"],
            name=data["name"],
            value=float(data.get("value", 0.0)),
            min=-math.inf if lo is None else float(lo),
            max=math.inf if hi is None else float(hi),
            step=float(data.get("step") or 0.0),
        )


def new_parameter(name: str, value: float = 0.0, **kwargs) -> Parameter:
    """Create a parameter with a generated id."""
    return Parameter(id=f"param-{uuid.uuid4().hex[:12]}", name=name, value=value, **kwargs)


ParameterListener = Callable[[Parameter, float, float], None]


class ParameterStore:
    """Repository of parameters keyed by id.

    Listeners registered with ``subscribe`` are called with
    ``(parameter, old_value, new_value)`` whenever ``set_value`` actually
    changes a value.
    """

    def __init__(self, parameters: Optional[List[Parameter]] = None):
        self._parameters: Dict[str, Parameter] = {}
        self._listeners: List[ParameterListener] = []
        for param in parameters or []:
            self.add(param)

    def add(self, parameter: Parameter) -> Parameter:
        if parameter.id in self._parameters:
            raise ParameterError(f"Parameter with id {parameter.id} already exists")
        self._parameters[parameter.id] = parameter
        return parameter

    def remove(self, parameter_id: str) -> None:
        self._parameters.pop(parameter_id, None)

    def get(self, parameter_id: str) -> Optional[Parameter]:
        return self._parameters.get(parameter_id)

    def get_by_name(self, name: str) -> Optional[Parameter]:
        for param in self._parameters.values():
            if param.name == name:
                return param
        return None

    def get_all(self) -> List[Parameter]:
        return list(self._parameters.values())

    def set_value(self, parameter_id: str, value: float) -> None:
        param = self._parameters.get(parameter_id)
        if param is None:
            raise ParameterError(f"Parameter with id {parameter_id} not found")
        old_value = param.get_value()
        param.set_value(value)
        if old_value != param.get_value():
            for listener in list(self._listeners):
                listener(param, old_value, param.get_value())

    def context(self) -> Dict[str, float]:
        """Name -> value map used as an expression evaluation context."""
        return {param.name: param.get_value() for param in self._parameters.values()}

    def subscribe(self, listener: ParameterListener) -> Callable[[], None]:
        """Register a change listener; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)
        return _unsubscribe

    def __len__(self) -> int:
        return len(self._parameters)

    def __contains__(self, parameter_id: str) -> bool:
        return parameter_id in self._parameters

    def to_json(self) -> dict:
        return {"parameters": [param.to_json() for param in self._parameters.values()]}

    @classmethod
    def from_json(cls, data: dict) -> "ParameterStore":
        if not isinstance(data, dict) or "parameters" not in data:
            raise ParameterError("Invalid ParameterStore JSON")
        return cls([Parameter.from_json(item) for item in data["parameters"]])
