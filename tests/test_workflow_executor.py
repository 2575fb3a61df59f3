"""
Tests for WorkflowExecutor execution paths: traversal order, branching,
structural failures and error aborts.
"""

from types import SimpleNamespace

import litellm
import pytest
from conftest import FakeFetcher

from phazur_sandbox.config import RuntimeConfig
from phazur_sandbox.graph.context import SYSTEM_NODE_ID, LogEvent
from phazur_sandbox.graph.executor import (
    BranchMode,
    ExecutionResult,
    ExecutorConfig,
    WorkflowExecutor,
)
from phazur_sandbox.graph.workflow import WorkflowGraph
from phazur_sandbox.llm.litellm import LiteLLMProvider
from phazur_sandbox.llm.mock import MockLLMProvider
from phazur_sandbox.net.http_client import HttpxFetcher
from phazur_sandbox.nodes.base import NodeExecutor
from phazur_sandbox.nodes.registry import ExecutorRegistry, NodeServices


def graph(*nodes):
    return WorkflowGraph.from_payload(list(nodes))


def executor(**kwargs):
    kwargs.setdefault("llm", MockLLMProvider(responses="hi there"))
    kwargs.setdefault("http", FakeFetcher())
    return WorkflowExecutor(**kwargs)


def events_for(result: ExecutionResult, node_id: str):
    return [e.event for e in result.log if e.node_id == node_id]


@pytest.mark.asyncio
async def test_trigger_stringify_output_end_to_end():
    result = await executor().execute(
        graph(
            {"id": "t", "type": "trigger", "service": "manual",
             "config": {"inputData": {"a": 1}}, "connections": ["c"]},
            {"id": "c", "type": "action", "service": "code",
             "config": {"transform": "stringify"}, "connections": ["o"]},
            {"id": "o", "type": "output", "connections": []},
        )
    )

    assert result.success is True
    assert result.final_output == '{\n  "a": 1\n}'
    assert result.outputs == {"t": {"a": 1}, "c": '{\n  "a": 1\n}', "o": '{\n  "a": 1\n}'}
    assert result.path == ["t", "c", "o"]
    assert result.steps_executed == 3
    assert [(e.node_id, e.event) for e in result.log] == [
        ("t", LogEvent.SUCCESS),
        ("c", LogEvent.START),
        ("c", LogEvent.SUCCESS),
        ("o", LogEvent.SUCCESS),
    ]


@pytest.mark.asyncio
async def test_llm_pipeline_projects_response():
    llm = MockLLMProvider(responses="Bonjour")
    result = await executor(llm=llm).execute(
        graph(
            {"id": "t", "type": "trigger", "service": "manual",
             "config": {"inputData": {"word": "hello"}}, "connections": ["ai"]},
            {"id": "ai", "type": "action", "service": "openai",
             "config": {"prompt": "Translate {{word}}"}, "connections": ["up"]},
            {"id": "up", "type": "action", "service": "code",
             "config": {"transform": "uppercase"}, "connections": ["o"]},
            {"id": "o", "type": "output"},
        )
    )

    assert result.success is True
    assert llm.calls[0]["messages"][0]["content"] == "Translate hello"
    assert result.outputs["up"]["response"] == "BONJOUR"
    assert result.final_output == "BONJOUR"


@pytest.mark.asyncio
async def test_cycles_execute_each_node_once():
    result = await executor().execute(
        graph(
            {"id": "t", "type": "trigger", "service": "manual", "connections": ["a"]},
            {"id": "a", "type": "action", "service": "code", "connections": ["b"]},
            {"id": "b", "type": "action", "service": "code", "connections": ["a", "t", "o"]},
            {"id": "o", "type": "output"},
        )
    )

    assert result.success is True
    assert result.path == ["t", "a", "b", "o"]
    assert events_for(result, "a") == [LogEvent.START, LogEvent.SUCCESS]
    assert events_for(result, "t") == [LogEvent.SUCCESS]


@pytest.mark.asyncio
async def test_diamond_runs_shared_node_once_depth_first():
    result = await executor().execute(
        graph(
            {"id": "t", "type": "trigger", "service": "manual", "connections": ["l", "r"]},
            {"id": "l", "type": "action", "service": "code", "connections": ["join"]},
            {"id": "r", "type": "action", "service": "code", "connections": ["join"]},
            {"id": "join", "type": "output"},
        )
    )

    assert result.path == ["t", "l", "join", "r"]
    assert events_for(result, "join") == [LogEvent.SUCCESS]


@pytest.mark.asyncio
async def test_no_trigger_is_a_structural_failure():
    result = await executor().execute(
        graph(
            {"id": "a", "type": "action", "service": "code", "connections": ["o"]},
            {"id": "o", "type": "output"},
        )
    )

    assert result.success is False
    assert result.error == "no trigger node found"
    assert result.outputs == {}
    assert len(result.log) == 1
    assert result.log[0].node_id == SYSTEM_NODE_ID
    assert result.log[0].event == LogEvent.ERROR


@pytest.mark.asyncio
async def test_empty_and_malformed_payloads_run_nothing():
    empty = await executor().execute([])
    missing = await executor().execute({})
    malformed = await executor().execute({"workflow": [{"id": "x", "type": "loop"}]})

    for result in (empty, missing, malformed):
        assert result.success is False
        assert [e.node_id for e in result.log] == [SYSTEM_NODE_ID]
    assert missing.error == "workflow is missing"
    assert empty.error == "workflow is empty"


@pytest.mark.asyncio
async def test_legacy_branch_follows_first_successor_with_result():
    result = await executor().execute(
        graph(
            {"id": "t", "type": "trigger", "service": "manual",
             "config": {"inputData": {"response": ""}}, "connections": ["if"]},
            {"id": "if", "type": "logic", "service": "if-else",
             "config": {"condition": "hasResponse"}, "connections": ["yes", "no"]},
            {"id": "yes", "type": "output"},
            {"id": "no", "type": "output"},
        )
    )

    assert result.outputs["if"]["branch"] == "false"
    assert result.path == ["t", "if", "yes"]
    assert result.outputs["yes"] == {"response": ""}
    assert "no" not in result.outputs


@pytest.mark.asyncio
async def test_strict_branch_selects_by_branch():
    nodes = [
        {"id": "t", "type": "trigger", "service": "manual",
         "config": {"inputData": {"status": 500}}, "connections": ["if"]},
        {"id": "if", "type": "logic", "service": "if-else",
         "config": {"condition": "isSuccess"}, "connections": ["ok", "failed"]},
        {"id": "ok", "type": "output"},
        {"id": "failed", "type": "output"},
    ]
    strict = executor(config=ExecutorConfig(branch_mode=BranchMode.STRICT))

    result = await strict.execute(graph(*nodes))

    assert result.path == ["t", "if", "failed"]
    assert result.final_output == {"status": 500}


@pytest.mark.asyncio
async def test_strict_false_branch_without_second_successor_stops():
    strict = executor(config=ExecutorConfig(branch_mode=BranchMode.STRICT))

    result = await strict.execute(
        graph(
            {"id": "t", "type": "trigger", "service": "manual", "connections": ["if"]},
            {"id": "if", "type": "logic", "service": "if-else",
             "config": {"condition": "false"}, "connections": ["only"]},
            {"id": "only", "type": "output"},
        )
    )

    assert result.success is True
    assert result.path == ["t", "if"]
    assert result.final_output is None


@pytest.mark.asyncio
async def test_node_error_aborts_and_keeps_partial_state():
    llm = MockLLMProvider(error="rate limited")
    result = await executor(llm=llm).execute(
        graph(
            {"id": "t", "type": "trigger", "service": "manual", "connections": ["ai", "o"]},
            {"id": "ai", "type": "action", "service": "openai", "connections": ["o"]},
            {"id": "o", "type": "output"},
        )
    )

    assert result.success is False
    assert result.error == "rate limited"
    assert "t" in result.outputs
    assert "ai" not in result.outputs
    assert "o" not in result.outputs
    assert result.log[-1].node_id == "ai"
    assert result.log[-1].event == LogEvent.ERROR


class ExplodingExecutor(NodeExecutor):
    async def execute(self, node, context, input_data):
        raise RuntimeError("kaboom")


@pytest.mark.asyncio
async def test_unexpected_exception_gets_error_entry():
    registry = ExecutorRegistry.default(NodeServices(llm=MockLLMProvider(), http=FakeFetcher()))
    registry.register("action", "code", ExplodingExecutor())

    result = await WorkflowExecutor(registry=registry).execute(
        graph(
            {"id": "t", "type": "trigger", "service": "manual", "connections": ["c"]},
            {"id": "c", "type": "action", "service": "code"},
        )
    )

    assert result.success is False
    assert result.error == "kaboom"
    assert events_for(result, "c") == [LogEvent.ERROR]


@pytest.mark.asyncio
async def test_dangling_successor_is_ignored():
    result = await executor().execute(
        graph(
            {"id": "t", "type": "trigger", "service": "manual", "connections": ["ghost", "o"]},
            {"id": "o", "type": "output"},
        )
    )

    assert result.success is True
    assert result.path == ["t", "o"]


@pytest.mark.asyncio
async def test_last_output_node_wins():
    result = await executor().execute(
        graph(
            {"id": "t", "type": "trigger", "service": "manual",
             "config": {"inputData": "payload"}, "connections": ["o1", "c"]},
            {"id": "o1", "type": "output"},
            {"id": "c", "type": "action", "service": "code",
             "config": {"transform": "uppercase"}, "connections": ["o2"]},
            {"id": "o2", "type": "output"},
        )
    )

    assert result.outputs["o1"] == "payload"
    assert result.final_output == "PAYLOAD"


@pytest.mark.asyncio
async def test_unknown_services_are_simulated():
    result = await executor().execute(
        graph(
            {"id": "t", "type": "trigger", "service": "schedule", "connections": ["s"]},
            {"id": "s", "type": "action", "service": "slack", "connections": ["o"]},
            {"id": "o", "type": "output"},
        )
    )

    assert result.success is True
    assert result.final_output == {"triggered": True}
    assert [e.message for e in result.log if e.node_id == "s"] == ["Action slack simulated"]


@pytest.mark.asyncio
async def test_strict_services_rejects_unknown_services():
    strict = executor(config=ExecutorConfig(strict_services=True))

    result = await strict.execute(
        graph(
            {"id": "t", "type": "trigger", "service": "manual", "connections": ["s"]},
            {"id": "s", "type": "action", "service": "slack"},
        )
    )

    assert result.success is False
    assert "unsupported node services" in result.error
    assert result.outputs == {}
    assert [e.node_id for e in result.log] == [SYSTEM_NODE_ID]


@pytest.mark.asyncio
async def test_first_trigger_runs_when_several_exist():
    result = await executor().execute(
        graph(
            {"id": "t1", "type": "trigger", "service": "manual", "connections": []},
            {"id": "t2", "type": "trigger", "service": "webhook", "connections": []},
        )
    )

    assert result.path == ["t1"]


@pytest.mark.asyncio
async def test_runs_do_not_share_state():
    runner = executor()
    nodes = graph(
        {"id": "t", "type": "trigger", "service": "manual", "connections": ["o"]},
        {"id": "o", "type": "output"},
    )

    first = await runner.execute(nodes)
    second = await runner.execute(nodes)

    assert len(first.log) == len(second.log) == 2
    assert first.log is not second.log


@pytest.mark.asyncio
async def test_to_dict_wire_shape():
    ok = await executor().execute(
        graph(
            {"id": "t", "type": "trigger", "service": "manual",
             "config": {"inputData": {"x": 1}}, "connections": ["o"]},
            {"id": "o", "type": "output"},
        )
    )
    failed = await executor().execute(graph({"id": "o", "type": "output"}))

    ok_dict = ok.to_dict()
    assert ok_dict["success"] is True
    assert ok_dict["finalOutput"] == {"x": 1}
    assert "error" not in ok_dict
    assert ok_dict["logs"][0]["nodeId"] == "t"
    assert ok_dict["logs"][0]["event"] == "success"

    failed_dict = failed.to_dict()
    assert failed_dict["success"] is False
    assert failed_dict["error"] == "no trigger node found"
    assert "finalOutput" not in failed_dict


def test_from_config_wires_litellm_and_httpx():
    runtime = RuntimeConfig(
        model="gpt-4o",
        api_key="sk-test",
        llm_timeout_seconds=12.0,
        http_timeout_seconds=3.0,
        branch_mode="strict",
    )

    built = WorkflowExecutor.from_config(runtime)

    assert built.config.branch_mode == BranchMode.STRICT
    assert built.config.default_model == "gpt-4o"
    assert built.config.llm_timeout_seconds == 12.0
    openai = built.registry.resolve(
        WorkflowGraph.from_payload([{"id": "a", "type": "action", "service": "openai"}]).nodes[0]
    )
    assert isinstance(openai.llm, LiteLLMProvider)
    assert openai.llm.api_key == "sk-test"
    http = built.registry.resolve(
        WorkflowGraph.from_payload([{"id": "h", "type": "action", "service": "http"}]).nodes[0]
    )
    assert isinstance(http.fetcher, HttpxFetcher)
    assert http.fetcher.timeout == 3.0


@pytest.mark.asyncio
async def test_from_config_llm_defaults_reach_the_model(monkeypatch):
    seen = {}

    async def acompletion(**kwargs):
        seen.update(kwargs)
        return SimpleNamespace(
            model="gpt-4o-mini",
            choices=[SimpleNamespace(message=SimpleNamespace(content="ok"), finish_reason="stop")],
            usage=SimpleNamespace(prompt_tokens=4, completion_tokens=1),
        )

    monkeypatch.setattr(litellm, "acompletion", acompletion)
    built = WorkflowExecutor.from_config(
        RuntimeConfig(api_key="sk-test", max_tokens=900, temperature=0.1)
    )

    result = await built.execute(
        graph(
            {"id": "t", "type": "trigger", "service": "manual", "connections": ["ai"]},
            {"id": "ai", "type": "action", "service": "openai"},
        )
    )

    assert result.success
    assert built.config.default_max_tokens == 900
    assert seen["max_tokens"] == 900
    assert seen["temperature"] == 0.1


@pytest.mark.asyncio
async def test_node_config_overrides_configured_llm_defaults():
    llm = MockLLMProvider(responses="ok")
    runner = executor(
        llm=llm, config=ExecutorConfig(default_max_tokens=900, default_temperature=0.1)
    )

    await runner.execute(
        graph(
            {"id": "t", "type": "trigger", "service": "manual", "connections": ["ai"]},
            {"id": "ai", "type": "action", "service": "openai", "config": {"maxTokens": 50}},
        )
    )

    assert llm.calls[0]["max_tokens"] == 50
    assert llm.calls[0]["temperature"] == 0.1
