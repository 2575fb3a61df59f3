"""
Checks for per-AKU verification criteria.

Output rules look at the value the workflow's output node captured (the
``data`` of its last ``success`` log entry). Execution requirements look at
the execution log only.
"""

from datetime import datetime
from typing import Any

from phazur_sandbox.graph.context import LogEntry, LogEvent
from phazur_sandbox.graph.node import NodeKind
from phazur_sandbox.nodes.llm_action import stringify_value
from phazur_sandbox.schemas.sandbox import (
    ExecutionRequirement,
    OutputRule,
    OutputRuleType,
    OutputValidation,
    RequirementCheck,
    RequirementType,
    SandboxState,
)

DEPLOY_NODE_ID = "deploy"


def get_nested_value(obj: Any, path: str) -> Any:
    """Follow a dot path through maps (and list indexes). Missing keys give None."""
    current = obj
    for key in path.split("."):
        if isinstance(current, dict):
            current = current.get(key)
        elif isinstance(current, list) and key.isdigit() and int(key) < len(current):
            current = current[int(key)]
        else:
            return None
    return current


def extract_final_output(state: SandboxState) -> Any:
    """Data logged by the first output node on its last success, or ``{}``."""
    output_node = next((n for n in state.workflow if n.kind == NodeKind.OUTPUT), None)
    if output_node is None:
        return {}
    for entry in reversed(state.execution_log):
        if entry.node_id == output_node.id and entry.event == LogEvent.SUCCESS:
            return entry.data or {}
    return {}


def value_type_name(value: Any) -> str:
    """Type names used by ``type_check`` rules."""
    if value is None:
        return "undefined"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    return "object"


def check_output_rule(rule: OutputRule, output: Any) -> OutputValidation:
    actual = get_nested_value(output, rule.field)
    if rule.type == OutputRuleType.EXISTS:
        passed = actual is not None
    elif rule.type == OutputRuleType.MATCHES:
        passed = actual == rule.expected
    elif rule.type == OutputRuleType.CONTAINS:
        passed = isinstance(actual, str) and stringify_value(rule.expected) in actual
    else:
        passed = value_type_name(actual) == rule.expected
    return OutputValidation(field=rule.field, passed=passed, actual=actual)


def _parse_timestamp(value: str) -> datetime | None:
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None


def _run_span_ms(log: list[LogEntry]) -> float | None:
    """Milliseconds between the first and last log entry, if both timestamps parse."""
    if not log:
        return None
    first = _parse_timestamp(log[0].timestamp)
    last = _parse_timestamp(log[-1].timestamp)
    if first is None or last is None:
        return None
    try:
        return (last - first).total_seconds() * 1000
    except TypeError:
        # naive and aware timestamps mixed
        return None


def _latency_under(requirement: ExecutionRequirement, log: list[LogEntry]) -> bool:
    if not any(e.event == LogEvent.SUCCESS for e in log):
        return False
    try:
        budget_ms = float(requirement.target)
    except ValueError:
        return True
    span = _run_span_ms(log)
    return span is not None and span <= budget_ms


def check_requirement(requirement: ExecutionRequirement, log: list[LogEntry]) -> RequirementCheck:
    successes = [e for e in log if e.event == LogEvent.SUCCESS]
    if requirement.type == RequirementType.API_CALLED:
        passed = any(requirement.target in e.node_id for e in successes)
    elif requirement.type == RequirementType.WORKFLOW_DEPLOYED:
        passed = any(e.node_id == DEPLOY_NODE_ID for e in successes)
    elif requirement.type == RequirementType.RESPONSE_RECEIVED:
        passed = any(e.data is not None for e in successes)
    else:
        passed = _latency_under(requirement, log)
    return RequirementCheck(requirement=requirement.label, passed=passed)
