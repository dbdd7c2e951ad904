"""Platform config models.

This module defines the Pydantic models for the agent platform's JSON5
config file. Only the top level and the gateway section are closed;
the other sections belong to platform subsystems and accept any keys.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator


class MetaSection(BaseModel):
    """Bookkeeping written by the CLI on every config write.

    Attributes:
        last_touched_version: configward version that last wrote the file.
        last_touched_at: ISO-8601 UTC timestamp of the last write.
    """

    model_config = ConfigDict(extra="forbid")

    last_touched_version: Annotated[str | None, Field(description="Writer version")] = None
    last_touched_at: Annotated[str | None, Field(description="Last write timestamp")] = None


class AgentEntry(BaseModel):
    """A single configured agent."""

    model_config = ConfigDict(extra="allow")

    id: Annotated[str, Field(min_length=1, description="Unique agent identifier")]
    name: Annotated[str | None, Field(description="Display name")] = None
    model: Annotated[str | None, Field(description="Model reference or alias")] = None


class AgentsSection(BaseModel):
    """Agent list and defaults shared by every agent.

    Attributes:
        agents: Configured agents, serialized under the ``list`` key.
        defaults: Settings inherited by agents that do not override them.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    agents: Annotated[
        list[AgentEntry],
        Field(default_factory=list, alias="list", description="Configured agents"),
    ]
    defaults: Annotated[
        dict[str, Any],
        Field(default_factory=dict, description="Defaults applied to every agent"),
    ]

    @model_validator(mode="after")
    def validate_unique_ids(self) -> AgentsSection:
        """Validate that no two agents share an id."""
        seen: set[str] = set()
        duplicates: list[str] = []
        for agent in self.agents:
            if agent.id in seen and agent.id not in duplicates:
                duplicates.append(agent.id)
            seen.add(agent.id)
        if duplicates:
            msg = f"Duplicate agent ids: {', '.join(duplicates)}"
            raise ValueError(msg)
        return self


class GatewayAuth(BaseModel):
    """Gateway client authentication."""

    model_config = ConfigDict(extra="forbid")

    mode: Literal["token", "password", "none"] = "token"
    token: str | None = None
    password: str | None = None


class GatewaySection(BaseModel):
    """Local or remote gateway the CLI talks to.

    Attributes:
        mode: "local" runs the gateway on this machine, "remote" connects to one.
        port: TCP port of the gateway.
        bind: Bind address for local mode.
        auth: Client authentication settings.
        remote: Connection settings for remote mode.
    """

    model_config = ConfigDict(extra="forbid")

    mode: Literal["local", "remote"] = "local"
    port: Annotated[int, Field(ge=1, le=65535)] = 18789
    bind: str | None = None
    auth: GatewayAuth | None = None
    remote: dict[str, Any] | None = None


class ModelsSection(BaseModel):
    """Model registry: default model, aliases and provider settings."""

    model_config = ConfigDict(extra="allow")

    default: str | None = None
    aliases: Annotated[dict[str, str], Field(default_factory=dict)]
    providers: Annotated[dict[str, dict[str, Any]], Field(default_factory=dict)]


class PlatformConfig(BaseModel):
    """Complete platform config file.

    Unknown top-level keys are rejected so that typos and keys from
    older releases surface as validation issues instead of being ignored.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    meta: MetaSection | None = None
    agents: AgentsSection | None = None
    gateway: GatewaySection | None = None
    models: ModelsSection | None = None
    channels: dict[str, Any] | None = None
    auth: dict[str, Any] | None = None
    plugins: dict[str, Any] | None = None
    tools: dict[str, Any] | None = None
    skills: dict[str, Any] | None = None
    session: dict[str, Any] | None = None
    messages: dict[str, Any] | None = None
    commands: dict[str, Any] | None = None
    logging: dict[str, Any] | None = None
    ui: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the on-disk key layout, omitting unset sections."""
        return self.model_dump(by_alias=True, exclude_none=True)
