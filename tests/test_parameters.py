"""
Tests for parameters and the parameter store.
"""

import pytest
from jointcad.parameters import Parameter, ParameterError, ParameterStore, new_parameter


@pytest.fixture
def store():
    return ParameterStore([
        Parameter("p-width", "width", 100.0, min=10, max=500, step=1),
        Parameter("p-thick", "thickness", 3.0),
    ])


class TestParameter:
    """Clamping and snapping."""

    def test_clamps_to_range(self):
        p = Parameter("p1", "w", 5.0, min=0, max=10)
        p.set_value(25)
        assert p.value == 10
        p.set_value(-3)
        assert p.value == 0

    def test_snaps_to_step(self):
        p = Parameter("p1", "w", 0.0, step=0.5)
        p.set_value(2.3)
        assert p.value == pytest.approx(2.5)

    def test_clamp_then_snap(self):
        p = Parameter("p1", "w", 0.0, min=0, max=9.9, step=2)
        p.set_value(100)
        assert p.value == pytest.approx(10.0)

    def test_no_step(self):
        p = Parameter("p1", "w")
        p.set_value(1.2345)
        assert p.value == pytest.approx(1.2345)

    def test_name_required(self):
        with pytest.raises(ParameterError):
            Parameter("p1", "")

    def test_json_round_trip_with_open_range(self):
        p = Parameter("p1", "w", 4.0)
        data = p.to_json()
        assert data["min"] is None and data["max"] is None
        assert Parameter.from_json(data) == p

    def test_new_parameter_generates_id(self):
        a = new_parameter("a")
        b = new_parameter("b")
        assert a.id != b.id
        assert a.id.startswith("param-")


class TestParameterStore:
    """Store operations."""

    def test_get_and_get_by_name(self, store):
        assert store.get("p-width").name == "width"
        assert store.get_by_name("thickness").id == "p-thick"
        assert store.get("nope") is None
        assert store.get_by_name("nope") is None

    def test_get_all_preserves_order(self, store):
        assert [p.id for p in store.get_all()] == ["p-width", "p-thick"]

    def test_duplicate_id(self, store):
        with pytest.raises(ParameterError):
            store.add(Parameter("p-width", "other"))

    def test_set_value_unknown_id(self, store):
        with pytest.raises(ParameterError):
            store.set_value("missing", 1)

    def test_set_value_applies_constraints(self, store):
        store.set_value("p-width", 1000)
        assert store.get("p-width").value == 500

    def test_remove(self, store):
        store.remove("p-thick")
        assert "p-thick" not in store
        store.remove("p-thick")  # no error
        assert len(store) == 1

    def test_context(self, store):
        assert store.context() == {"width": 100.0, "thickness": 3.0}

    def test_json_round_trip(self, store):
        data = store.to_json()
        assert list(data) == ["parameters"]
        restored = ParameterStore.from_json(data)
        assert restored.get_all() == store.get_all()

    def test_from_json_invalid(self):
        with pytest.raises(ParameterError):
            ParameterStore.from_json({"shapes": []})


class TestChangeListeners:
    """Listeners fire only on actual changes."""

    def test_listener_called_with_old_and_new(self, store):
        calls = []
        store.subscribe(lambda p, old, new: calls.append((p.id, old, new)))
        store.set_value("p-thick", 4)
        assert calls == [("p-thick", 3.0, 4.0)]

    def test_no_event_when_unchanged(self, store):
        calls = []
        store.subscribe(lambda *args: calls.append(args))
        store.set_value("p-thick", 3.0)
        store.set_value("p-width", 100.2)  # snaps back to 100
        assert calls == []

    def test_unsubscribe(self, store):
        calls = []
        unsubscribe = store.subscribe(lambda *args: calls.append(args))
        unsubscribe()
        store.set_value("p-thick", 5)
        assert calls == []
