"""Models for the capability manifest.

Idea:
- Instead of hard-coding which tools the agent may mention, read the same JSON
  shape MCP clients use (`mcpServers` + `allowedTools`) and advertise the names.

Important:
- Only names are used. No server is started and no MCP session is opened.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, model_validator
from pydantic.config import ConfigDict


class CapabilityServer(BaseModel):
    model_config = ConfigDict(extra="ignore")

    command: str | None = None
    args: list[str] = Field(default_factory=list)
    env: dict[str, Any] = Field(default_factory=dict)
    url: str | None = None
    description: str | None = Field(default=None, max_length=500)

    @model_validator(mode="after")
    def _needs_command_or_url(self) -> "CapabilityServer":
        if not (self.command or self.url):
            raise ValueError("a capability server needs either 'command' or 'url'")
        return self


class CapabilityManifest(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    servers: dict[str, CapabilityServer] = Field(default_factory=dict, alias="mcpServers")
    allowed_tools: list[str] = Field(default_factory=list, alias="allowedTools")

    def names(self) -> list[str]:
        """Server names then tool names, each sorted, without duplicates."""

        out: list[str] = []
        seen: set[str] = set()
        for name in sorted(self.servers) + sorted(t.strip() for t in self.allowed_tools):
            if not name or name in seen:
                continue
            seen.add(name)
            out.append(name)
        return out
