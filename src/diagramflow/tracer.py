"""
Debug tracing infrastructure for diagramflow.

This module provides data structures for capturing a trace of one layout
pass. When debug mode is enabled, the engine records every pipeline stage and
the routing decision taken for every connector.

This is primarily useful for:
1. Debugging routing issues (why a connector took the path it did)
2. Understanding the pipeline flow (seeing intermediate states)
3. Writing targeted tests (verifying specific routing decisions)

Usage:
    >>> engine = DiagramEngine(debug=True)
    >>> result = engine.recompute(diagram)
    >>> trace = engine.get_trace()
    >>> print(trace.summary())
    >>> trace.dump_to_file("layout_trace.txt")
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class RouteDecision:
    """
    Record of how one connector was routed.

    Attributes:
        source: Source node id.
        target: Target node id.
        kind: Connector kind value ("left", "connect", ...).
        mode: Routing mode chosen ("boundary", "straight", "step",
              "bypass" or "skipped").
        segments: Number of segments produced.
        index_on_side: Anchor index assigned by the allocator.
        total_on_side: Anchor group size assigned by the allocator.
    """

    source: str
    target: str
    kind: str
    mode: str
    segments: int
    index_on_side: int = 0
    total_on_side: int = 1

    def __str__(self) -> str:
        return (
            f"{self.source} -> {self.target} [{self.kind}] {self.mode}: "
            f"{self.segments} segment(s), anchor {self.index_on_side + 1}"
            f"/{self.total_on_side}"
        )


@dataclass
class PipelineStage:
    """
    Snapshot of state at a pipeline stage.

    The layout pipeline has these stages:
    1. layering - Assign nodes to layers
    2. placement - Calculate node coordinates
    3. placeholders - Materialise external anchors
    4. allocation - Order connectors on shared anchors
    5. routing - Build connector geometry

    Attributes:
        name: Name of this pipeline stage
        data: Dictionary of relevant data at this stage
    """

    name: str
    data: Dict[str, Any]

    def __str__(self) -> str:
        lines = [f"=== Stage: {self.name} ==="]
        for key, value in self.data.items():
            # Truncate long values
            str_val = str(value)
            if len(str_val) > 100:
                str_val = str_val[:100] + "..."
            lines.append(f"  {key}: {str_val}")
        return "\n".join(lines)


@dataclass
class LayoutTrace:
    """
    Complete trace of a layout pass.

    Attributes:
        stages: List of pipeline stages with their data
        decisions: Routing decision for every connector
    """

    stages: List[PipelineStage] = field(default_factory=list)
    decisions: List[RouteDecision] = field(default_factory=list)

    def add_stage(self, name: str, data: Dict[str, Any]) -> None:
        """Add a pipeline stage snapshot."""
        self.stages.append(PipelineStage(name, dict(data)))

    def add_decision(self, decision: RouteDecision) -> None:
        self.decisions.append(decision)

    def get_stage(self, name: str) -> Optional[PipelineStage]:
        """Get a specific pipeline stage by name."""
        for stage in self.stages:
            if stage.name == name:
                return stage
        return None

    def get_decisions_by_mode(self, mode: str) -> List[RouteDecision]:
        return [d for d in self.decisions if d.mode == mode]

    def get_decisions_for(self, source: str, target: str) -> List[RouteDecision]:
        """Get the decisions for connectors between two nodes."""
        return [
            d for d in self.decisions if d.source == source and d.target == target
        ]

    def summary(self) -> str:
        """
        Generate a human-readable summary of the trace.

        Returns a string with:
        - Pipeline stages overview
        - Routing decision statistics
        """
        lines = [
            "=" * 60,
            "LAYOUT TRACE SUMMARY",
            "=" * 60,
            "",
            f"Pipeline stages: {len(self.stages)}",
        ]

        for stage in self.stages:
            lines.append(f"  - {stage.name}")

        lines.extend(["", f"Connectors routed: {len(self.decisions)}", ""])

        # Count by mode
        mode_counts: Dict[str, int] = {}
        for decision in self.decisions:
            mode_counts[decision.mode] = mode_counts.get(decision.mode, 0) + 1

        lines.append("Connectors by mode:")
        for mode, count in sorted(mode_counts.items(), key=lambda x: (-x[1], x[0])):
            lines.append(f"  {mode}: {count}")

        return "\n".join(lines)

    def dump(self) -> str:
        """
        Generate a complete human-readable dump of the trace, including all
        stages with their data and every routing decision.
        """
        lines = [self.summary(), "", "=" * 60, "DETAILED TRACE", "=" * 60, ""]

        lines.append("PIPELINE STAGES:")
        lines.append("-" * 40)
        for stage in self.stages:
            lines.append(str(stage))
            lines.append("")

        lines.append("ROUTING DECISIONS:")
        lines.append("-" * 40)
        for decision in self.decisions:
            lines.append(str(decision))

        return "\n".join(lines)

    def dump_to_file(self, filename: str) -> None:
        """Write the complete trace dump to a file."""
        with open(filename, "w", encoding="utf-8") as f:
            f.write(self.dump())
