"""
Node Protocol - One task in a learner-authored workflow.

A node has a closed ``kind`` and a free-form ``service`` that selects the
concrete executor within that kind. Its ``config`` arrives from the editor as
an untyped map; executors read it through the typed config model registered
for their ``(kind, service)`` pair, so a bad value (``maxTokens: "lots"``)
surfaces as a validation error on that node instead of deep inside a call.

Known variants:
- trigger/manual, trigger/webhook
- action/openai, action/http, action/code
- logic/if-else
- output (any service)
"""

from enum import StrEnum
from typing import Any

from pydantic import AliasChoices, BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel


class NodeKind(StrEnum):
    """Category of a node."""

    TRIGGER = "trigger"
    ACTION = "action"
    LOGIC = "logic"
    OUTPUT = "output"


class Service(StrEnum):
    """Services with a dedicated executor."""

    MANUAL = "manual"
    WEBHOOK = "webhook"
    OPENAI = "openai"
    HTTP = "http"
    CODE = "code"
    IF_ELSE = "if-else"


# ---------------------------------------------------------------------------
# Typed config, one model per variant
# ---------------------------------------------------------------------------


class NodeConfig(BaseModel):
    """Base for per-variant config. Keys arrive camelCased from the editor."""

    model_config = {"extra": "allow", "populate_by_name": True, "alias_generator": to_camel}


class ManualTriggerConfig(NodeConfig):
    input_data: Any = None


class WebhookTriggerConfig(NodeConfig):
    test_data: Any = None


class OpenAIConfig(NodeConfig):
    prompt: str | None = None
    model: str | None = None
    system_prompt: str | None = None
    max_tokens: int | None = Field(default=None, gt=0)
    temperature: float | None = Field(default=None, ge=0.0, le=2.0)


class HttpConfig(NodeConfig):
    url: str | None = None
    method: str | None = None
    headers: dict[str, str] = Field(default_factory=dict)

    @field_validator("headers", mode="before")
    @classmethod
    def _none_headers(cls, value: Any) -> Any:
        return value or {}


class CodeConfig(NodeConfig):
    transform: str | None = None


class IfElseConfig(NodeConfig):
    condition: str | None = None


def variant_key(kind: NodeKind | str, service: str) -> tuple[str, str]:
    """Plain-string dispatch key for a (kind, service) pair."""
    return (str(kind), str(service))


CONFIG_MODELS: dict[tuple[str, str], type[NodeConfig]] = {
    variant_key(NodeKind.TRIGGER, Service.MANUAL): ManualTriggerConfig,
    variant_key(NodeKind.TRIGGER, Service.WEBHOOK): WebhookTriggerConfig,
    variant_key(NodeKind.ACTION, Service.OPENAI): OpenAIConfig,
    variant_key(NodeKind.ACTION, Service.HTTP): HttpConfig,
    variant_key(NodeKind.ACTION, Service.CODE): CodeConfig,
    variant_key(NodeKind.LOGIC, Service.IF_ELSE): IfElseConfig,
}


# ---------------------------------------------------------------------------
# Node specification
# ---------------------------------------------------------------------------


class NodeSpec(BaseModel):
    """
    Specification for a node in a workflow graph.

    Examples:
        NodeSpec(id="start", kind=NodeKind.TRIGGER, service="manual", successors=["ask"])

        # Editor payloads use ``type`` and ``connections``
        NodeSpec.model_validate(
            {"id": "ask", "type": "action", "service": "openai",
             "config": {"prompt": "Summarise {{input}}"}, "connections": ["show"]}
        )
    """

    id: str
    kind: NodeKind = Field(validation_alias=AliasChoices("kind", "type"))
    service: str = ""
    config: dict[str, Any] = Field(default_factory=dict)
    successors: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("successors", "connections"),
        description="Node IDs this node hands control to, in order",
    )

    # Editor canvas coordinates, never interpreted
    position: dict[str, Any] | None = None

    model_config = {"extra": "allow", "populate_by_name": True}

    @field_validator("config", mode="before")
    @classmethod
    def _none_config(cls, value: Any) -> Any:
        return value or {}

    @field_validator("successors", mode="before")
    @classmethod
    def _none_successors(cls, value: Any) -> Any:
        return value or []

    @property
    def variant(self) -> tuple[str, str]:
        return variant_key(self.kind, self.service)

    @property
    def is_known_variant(self) -> bool:
        """True if a dedicated executor exists for this (kind, service) pair."""
        return self.kind == NodeKind.OUTPUT or self.variant in CONFIG_MODELS

    @property
    def is_branching(self) -> bool:
        return self.service == Service.IF_ELSE
