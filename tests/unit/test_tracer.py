"""
Tests for the tracer module.

These tests verify the debug tracing infrastructure used to capture
detailed information about a layout pass.
"""

import os
import tempfile

from diagramflow.tracer import LayoutTrace, PipelineStage, RouteDecision


class TestRouteDecision:
    """Tests for RouteDecision dataclass."""

    def test_creation_defaults(self):
        decision = RouteDecision(
            source="A", target="B", kind="connect", mode="straight", segments=1
        )
        assert decision.index_on_side == 0
        assert decision.total_on_side == 1

    def test_str(self):
        decision = RouteDecision(
            source="A",
            target="B",
            kind="connect",
            mode="step",
            segments=3,
            index_on_side=1,
            total_on_side=2,
        )
        result = str(decision)
        assert "A -> B" in result
        assert "[connect]" in result
        assert "step" in result
        assert "3 segment(s)" in result
        assert "anchor 2/2" in result


class TestPipelineStage:
    """Tests for PipelineStage dataclass."""

    def test_str_lists_data(self):
        stage = PipelineStage(name="layering", data={"layers": [["A"], ["B"]]})
        result = str(stage)
        assert "=== Stage: layering ===" in result
        assert "layers: [['A'], ['B']]" in result

    def test_str_truncates_long_values(self):
        stage = PipelineStage(name="placement", data={"positions": "x" * 500})
        result = str(stage)
        assert "..." in result
        assert len(result) < 200


class TestLayoutTrace:
    """Tests for LayoutTrace."""

    def _trace(self):
        trace = LayoutTrace()
        trace.add_stage("layering", {"layers": [["A"], ["B"]]})
        trace.add_stage("routing", {"routed": 2})
        trace.add_decision(RouteDecision("A", "B", "connect", "step", 3))
        trace.add_decision(RouteDecision("B", "A", "connect", "bypass", 4))
        trace.add_decision(RouteDecision("A", "C", "connect", "step", 3))
        return trace

    def test_empty(self):
        trace = LayoutTrace()
        assert trace.stages == []
        assert trace.decisions == []

    def test_add_stage_copies_data(self):
        data = {"layers": []}
        trace = LayoutTrace()
        trace.add_stage("layering", data)
        data["layers"] = None
        assert trace.get_stage("layering").data == {"layers": []}

    def test_get_stage(self):
        trace = self._trace()
        assert trace.get_stage("routing").data == {"routed": 2}
        assert trace.get_stage("missing") is None

    def test_get_decisions_by_mode(self):
        trace = self._trace()
        assert len(trace.get_decisions_by_mode("step")) == 2
        assert trace.get_decisions_by_mode("bypass")[0].source == "B"
        assert trace.get_decisions_by_mode("boundary") == []

    def test_get_decisions_for(self):
        trace = self._trace()
        decisions = trace.get_decisions_for("B", "A")
        assert [d.mode for d in decisions] == ["bypass"]

    def test_summary(self):
        summary = self._trace().summary()
        assert "LAYOUT TRACE SUMMARY" in summary
        assert "Pipeline stages: 2" in summary
        assert "Connectors routed: 3" in summary
        assert "step: 2" in summary
        assert "bypass: 1" in summary
        # Most frequent mode first
        assert summary.index("step: 2") < summary.index("bypass: 1")

    def test_dump_contains_everything(self):
        dump = self._trace().dump()
        assert "DETAILED TRACE" in dump
        assert "=== Stage: layering ===" in dump
        assert "B -> A [connect] bypass" in dump

    def test_dump_to_file(self):
        trace = self._trace()
        with tempfile.NamedTemporaryFile(mode="w", suffix=".txt", delete=False) as f:
            filename = f.name
        try:
            trace.dump_to_file(filename)
            with open(filename, encoding="utf-8") as f:
                assert f.read() == trace.dump()
        finally:
            os.unlink(filename)
