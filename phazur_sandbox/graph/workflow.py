"""
Workflow Graph - The immutable description of one learner workflow.

A graph is a flat list of nodes; edges are the ``successors`` lists on the
nodes themselves. The graph is authored in the editor and handed over whole,
so this module only parses and inspects it. Problems that do not stop a run
(dangling successor ids, duplicate triggers) are reported by ``validate()``
and left to the caller.
"""

from typing import Any

from pydantic import BaseModel, Field, ValidationError

from phazur_sandbox.errors import WorkflowValidationError
from phazur_sandbox.graph.node import NodeKind, NodeSpec


class WorkflowGraph(BaseModel):
    """A set of typed nodes and their successor links."""

    nodes: list[NodeSpec] = Field(default_factory=list, description="All nodes, in editor order")

    model_config = {"extra": "allow"}

    @classmethod
    def from_payload(cls, payload: Any) -> "WorkflowGraph":
        """
        Parse a graph from an API payload.

        Accepts a bare node list, ``{"workflow": [...]}`` or ``{"nodes": [...]}``.

        Raises:
            WorkflowValidationError: if the payload is missing, not a list of
                nodes, or a node fails validation
        """
        nodes = payload
        if isinstance(payload, dict):
            nodes = payload.get("workflow", payload.get("nodes"))
        if nodes is None:
            raise WorkflowValidationError("workflow is missing")
        if not isinstance(nodes, list):
            raise WorkflowValidationError("invalid workflow: expected a list of nodes")
        try:
            return cls(nodes=nodes)
        except ValidationError as e:
            errors = [
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
            ]
            raise WorkflowValidationError(f"invalid workflow: {'; '.join(errors)}", errors) from e

    def get_node(self, node_id: str) -> NodeSpec | None:
        """Get a node by ID."""
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    @property
    def trigger_nodes(self) -> list[NodeSpec]:
        return [n for n in self.nodes if n.kind == NodeKind.TRIGGER]

    @property
    def output_nodes(self) -> list[NodeSpec]:
        return [n for n in self.nodes if n.kind == NodeKind.OUTPUT]

    def get_trigger(self) -> NodeSpec | None:
        """Return the first trigger node in list order, or None."""
        triggers = self.trigger_nodes
        return triggers[0] if triggers else None

    def unknown_variants(self) -> list[NodeSpec]:
        """Nodes whose (kind, service) pair has no dedicated executor."""
        return [n for n in self.nodes if not n.is_known_variant]

    def validate(self, strict_services: bool = False) -> list[str]:  # type: ignore[override]
        """
        Validate the graph structure.

        Args:
            strict_services: Also report nodes with an unknown (kind, service)
                pair. Without it those nodes run as pass-through no-ops.

        Returns:
            Human-readable error strings; empty if the graph is well formed
        """
        errors = []

        if not self.nodes:
            errors.append("Workflow has no nodes")

        triggers = self.trigger_nodes
        if not triggers and self.nodes:
            errors.append("no trigger node found")
        elif len(triggers) > 1:
            errors.append(
                f"Workflow has {len(triggers)} trigger nodes "
                f"({', '.join(t.id for t in triggers)}); only '{triggers[0].id}' will run"
            )

        seen: set[str] = set()
        for node in self.nodes:
            if node.id in seen:
                errors.append(f"Duplicate node ID: '{node.id}'")
            seen.add(node.id)

        for node in self.nodes:
            for successor in node.successors:
                if successor not in seen:
                    errors.append(f"Node '{node.id}' references missing successor '{successor}'")

        if strict_services:
            for node in self.unknown_variants():
                errors.append(
                    f"Node '{node.id}' has unsupported service '{node.service}' "
                    f"for kind '{node.kind}'"
                )

        return errors
