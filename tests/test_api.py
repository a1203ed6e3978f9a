"""Tests for api.py and cli.py — flow documents in, layouts out."""

from __future__ import annotations

import io
import json
from pathlib import Path

import pytest

from flow_layout.api import layout_flow, layout_flow_json, parse_edges, parse_nodes, saved_positions
from flow_layout.cli import main
from flow_layout.options import LayoutOptions
from flow_layout.types import FlowNode, Point

EXAMPLES_DIR = Path(__file__).parent.parent / "examples"

# ─── Helpers ──────────────────────────────────────────────────────────────────


def simple_flow(**extra) -> dict:
    flow = {
        "nodes": [
            {"id": "t", "type": "trigger", "title": "Signed up"},
            {"id": "m", "type": "message", "channel": "email"},
            {"id": "o", "type": "outcome"},
        ],
        "edges": [
            {"id": "e1", "from": "t", "to": "m"},
            {"id": "e2", "from": "m", "to": "o"},
        ],
    }
    flow.update(extra)
    return flow


# ─── Parsing Tests ────────────────────────────────────────────────────────────


class TestParsing:
    def test_node_payload_kept(self):
        (node,) = parse_nodes([{"id": "m", "type": "message", "title": "Hi", "channel": "sms"}])
        assert node == FlowNode(id="m", type="message", title="Hi", payload={"channel": "sms"})

    def test_malformed_records_skipped(self):
        nodes = parse_nodes([{"type": "message"}, "nope", {"id": "a", "type": "wait"}])
        assert [n.id for n in nodes] == ["a"]

    def test_edges_accept_source_target(self):
        (edge,) = parse_edges([{"id": "e", "source": "a", "target": "b", "label": "Yes"}])
        assert (edge.source, edge.target, edge.label) == ("a", "b", "Yes")

    def test_not_a_list(self):
        assert parse_nodes({"id": "a"}) == []
        assert parse_edges(None) == []

    def test_saved_positions(self):
        spec = {"ui": {"nodePositions": {"a": {"x": 5, "y": 6}}}}
        assert saved_positions(spec) == {"a": Point(5, 6)}
        assert saved_positions({"ui": "none"}) == {}


# ─── layout_flow Tests ────────────────────────────────────────────────────────


class TestLayoutFlow:
    def test_simple_flow(self):
        result = layout_flow(simple_flow())
        assert [n.id for n in result.nodes] == ["t", "m", "o"]
        assert result.node("t").title == "Signed up"
        assert result.node("o").title == "outcome"

    def test_saved_positions_applied(self):
        result = layout_flow(simple_flow(ui={"nodePositions": {"m": {"x": 900, "y": 40}}}))
        m = result.node("m")
        assert (m.x, m.y) == (900, 40)

    def test_option_overrides_beat_saved_positions(self):
        flow = simple_flow(ui={"nodePositions": {"m": {"x": 900, "y": 40}, "o": {"x": 1, "y": 2}}})
        options = LayoutOptions(position_overrides={"m": Point(10, 20)})
        result = layout_flow(flow, options)
        assert (result.node("m").x, result.node("m").y) == (10, 20)
        assert (result.node("o").x, result.node("o").y) == (1, 2)
        # The caller's options are left alone.
        assert options.position_overrides == {"m": Point(10, 20)}

    def test_edges_routed_against_overrides(self):
        result = layout_flow(simple_flow(ui={"nodePositions": {"o": {"x": 1000, "y": 900}}}))
        end = result.edge("e2").waypoints[-1]
        assert (end.x, end.y) == (1000 + 36, 900)

    def test_not_a_mapping(self):
        result = layout_flow(["nodes"])
        assert result.nodes == [] and result.edges == []

    def test_missing_sections(self):
        assert layout_flow({}).nodes == []


class TestLayoutFlowJson:
    def test_output_shape(self):
        data = json.loads(layout_flow_json(json.dumps(simple_flow())))
        assert set(data) == {"nodes", "edges"}
        assert set(data["nodes"][0]) == {"id", "type", "title", "width", "height", "x", "y", "lane"}
        assert data["edges"][0]["from"] == "t"
        assert data["edges"][0]["to"] == "m"
        assert "label" not in data["edges"][0]
        assert data["edges"][0]["points"][0] == {"x": 260, "y": 174}

    def test_byte_identical_runs(self):
        src = (EXAMPLES_DIR / "welcome_series.flow.json").read_text(encoding="utf-8")
        assert layout_flow_json(src) == layout_flow_json(src)

    def test_invalid_json_raises(self):
        with pytest.raises(json.JSONDecodeError):
            layout_flow_json("{nodes: ")


# ─── CLI Tests ────────────────────────────────────────────────────────────────


class TestCli:
    def test_writes_output_file(self, tmp_path):
        out = tmp_path / "layout.json"
        code = main([str(EXAMPLES_DIR / "annotated.flow.json"), "-o", str(out)])
        assert code == 0
        data = json.loads(out.read_text(encoding="utf-8"))
        assert "note_loose" in {n["id"] for n in data["nodes"]}

    def test_stdout(self, tmp_path, capsys):
        src = tmp_path / "flow.json"
        src.write_text(json.dumps(simple_flow()), encoding="utf-8")
        assert main([str(src), "--indent", "0"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert [n["id"] for n in data["nodes"]] == ["t", "m", "o"]

    def test_stdin(self, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", io.StringIO(json.dumps(simple_flow())))
        assert main(["-", "--row-spacing", "10"]) == 0
        data = json.loads(capsys.readouterr().out)
        ys = {n["id"]: n["y"] for n in data["nodes"]}
        assert ys["m"] - ys["t"] == 94 + 10

    def test_lane_spacing_flag(self, capsys):
        assert main([str(EXAMPLES_DIR / "shared_outcome.flow.json"), "--lane-spacing", "600"]) == 0
        data = json.loads(capsys.readouterr().out)
        xs = {n["id"]: n["x"] for n in data["nodes"]}
        assert xs["no_email_1"] - xs["yes_email_1"] == 600

    def test_invalid_json_exit_code(self, tmp_path, capsys):
        src = tmp_path / "broken.json"
        src.write_text("{", encoding="utf-8")
        assert main([str(src)]) == 2
        assert "invalid JSON" in capsys.readouterr().err

    def test_missing_file_exit_code(self, tmp_path, capsys):
        assert main([str(tmp_path / "absent.json")]) == 2
        assert "cannot read" in capsys.readouterr().err
