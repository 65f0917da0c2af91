"""
Tests for the design document: shapes, resolution and joinery layout together.
"""

import json

import pytest
from jointcad.bindings import ExpressionBinding, ParameterBinding
from jointcad.config import JoineryDefaults, JointcadConfig
from jointcad.design import Design
from jointcad.expr import DiagnosticCollector
from jointcad.parameters import Parameter
from jointcad.shapes import Rectangle, ShapeError, ShapeRegistry


@pytest.fixture
def design():
    d = Design(shape_registry=ShapeRegistry())
    d.parameters.add(Parameter("p-len", "length", 100.0, min=20, max=400))
    d.parameters.add(Parameter("p-t", "thickness", 10.0))
    rect = d.create_shape("rectangle", width=100, height=50)
    rect.set_binding("width", ParameterBinding("p-len"))
    return d


class TestShapes:

    def test_generated_ids(self, design):
        second = design.create_shape("rectangle")
        assert [s.id for s in design.shapes] == ["rectangle-1", "rectangle-2"]
        assert design.get_shape("rectangle-2") is second

    def test_add_shape_without_id(self, design):
        shape = design.add_shape(Rectangle())
        assert shape.id == "rectangle-2"

    def test_duplicate_id(self, design):
        with pytest.raises(ShapeError):
            design.add_shape(Rectangle(id="rectangle-1"))

    def test_remove_cascades_to_joinery(self, design):
        for edge in design.edges("rectangle-1"):
            design.joinery.assign(edge)
        other = design.create_shape("polygon", sides=4)
        design.joinery.assign(design.edges(other.id)[0])
        assert len(design.joinery) == 5

        removed = design.remove_shape("rectangle-1")
        assert removed is not None
        assert len(design.joinery) == 1
        assert design.remove_shape("rectangle-1") is None

    def test_ids_independent_between_designs(self):
        first, second = Design(), Design()
        assert first.create_shape("rectangle").id == "rectangle-1"
        assert second.create_shape("rectangle").id == "rectangle-1"
        assert first.shape_registry is not second.shape_registry


class TestResolution:

    def test_get_resolved_follows_parameters(self, design):
        assert design.get_resolved("rectangle-1").width == 100
        design.parameters.set_value("p-len", 250)
        assert design.get_resolved("rectangle-1").width == 250
        assert design.get_shape("rectangle-1").width == 100

    def test_get_resolved_unknown(self, design):
        assert design.get_resolved("nothing") is None
        assert design.edges("nothing") == []

    def test_find_edge(self, design):
        edge = design.find_edge("rectangle-1", 0, 2)
        assert edge.key == "rectangle-1:0:2"
        assert design.find_edge("rectangle-1", 0, 9) is None

    def test_warnings_collected(self, design):
        design.get_shape("rectangle-1").set_binding("height", ExpressionBinding("missing * 2"))
        diagnostics = DiagnosticCollector()
        design.resolved_shapes(diagnostics)
        assert [d.code for d in diagnostics.warnings] == ["W201"]


class TestJoineryLayout:

    def test_layout_for_jointed_edge(self, design):
        bottom = design.find_edge("rectangle-1", 0, 0)
        design.joinery.assign(bottom, thickness_mm=10, finger_count=5)
        layout = design.joinery_layout()
        assert len(layout) == 1
        item = layout[0]
        assert item.key == "rectangle-1:0:0"
        assert [t.index for t in item.teeth] == [0, 2, 4]
        assert len(item.outlines) == 3
        # bottom edge of a rectangle: teeth point away from the center
        assert item.teeth[0].outward_offset.y == pytest.approx(-10)

    def test_teeth_follow_parameters(self, design):
        design.joinery.assign(design.find_edge("rectangle-1", 0, 0), finger_count=5)
        design.parameters.set_value("p-len", 200)
        tooth = design.joinery_layout()[0].teeth[0]
        assert tooth.width == pytest.approx(40)

    def test_shape_filter(self, design):
        other = design.create_shape("rectangle", x=200)
        design.joinery.assign(design.find_edge("rectangle-1", 0, 1))
        design.joinery.assign(design.find_edge(other.id, 0, 1))
        assert [item.key for item in design.joinery_layout(shape_id=other.id)] == [
            f"{other.id}:0:1",
        ]

    def test_config_defaults_used(self):
        config = JointcadConfig(joinery=JoineryDefaults(type="dovetail", finger_count=3))
        design = Design(config=config, shape_registry=ShapeRegistry())
        rect = design.create_shape("rectangle", width=90)
        design.joinery.assign(design.find_edge(rect.id, 0, 0))
        item = design.joinery_layout()[0]
        assert item.record.type == "dovetail"
        assert [t.index for t in item.teeth] == [0, 2]
        assert item.teeth[0].taper > 0

    def test_no_joinery(self, design):
        assert design.joinery_layout() == []


class TestPersistence:

    def test_document_shape(self, design):
        design.joinery.assign(design.find_edge("rectangle-1", 0, 2))
        data = design.to_json()
        assert list(data) == ["parameters", "shapes", "edgeJoinery"]
        assert data["shapes"][0]["bindings"] == {
            "width": {"type": "parameter", "parameterId": "p-len"},
        }
        assert data["edgeJoinery"][0]["key"] == "rectangle-1:0:2"

    def test_save_and_load(self, design, tmp_path):
        design.joinery.assign(design.find_edge("rectangle-1", 0, 0), "dovetail", thickness_mm=4)
        path = tmp_path / "box.json"
        design.save(path)
        assert json.loads(path.read_text())["shapes"][0]["id"] == "rectangle-1"

        loaded = Design.load(path)
        assert loaded.to_json() == design.to_json()
        before = [t.to_json() for t in design.joinery_layout()[0].teeth]
        after = [t.to_json() for t in loaded.joinery_layout()[0].teeth]
        assert after == before

    def test_legacy_joinery_keys_still_apply(self, design):
        data = design.to_json()
        data["edgeJoinery"] = [{"key": "0:1", "type": "male", "thicknessMm": 3, "fingerCount": 4}]
        loaded = Design.from_json(data)
        layout = loaded.joinery_layout()
        assert [item.key for item in layout] == ["rectangle-1:0:1"]
        assert len(layout[0].teeth) == 2

    def test_invalid_document(self):
        with pytest.raises(ShapeError):
            Design.from_json({"shapes": "nope"})
        with pytest.raises(ShapeError):
            Design.from_json([])
