"""Best-effort agent configuration lookup for the player detail panel.

Each player may have a YAML sidecar describing the agent behind it::

    agent:
      model:
        provider: openai
        name: gpt-4o
        params: {temperature: 0.2}
      prompts:
        system_prompt: ...
        step_wise_prompt: ...

The player name is resolved to a file through an injected mapping (from
configuration); there is no filename guessing.  Any failure is logged and
reported as ``None`` so the leaderboard never depends on enrichment.

Prompt text is untrusted and returned verbatim; callers must escape it
before rendering it inside markup.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping

import streamlit as st
import yaml

logger = logging.getLogger(__name__)

_TTL_AGENT_CONFIG = 600

Scalar = str | int | float | bool | None


class EnrichmentFailure(RuntimeError):
    """A per-player agent configuration was missing or malformed."""


@dataclass(frozen=True)
class AgentConfig:
    provider: str | None = None
    model_name: str | None = None
    params: dict[str, Scalar] = field(default_factory=dict)
    system_prompt: str | None = None
    step_wise_prompt: str | None = None


def _section(parent: Mapping, key: str) -> Mapping:
    value = parent.get(key)
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise EnrichmentFailure(f"'{key}' section must be a mapping, got {type(value).__name__}")
    return value


def _optional_str(value: object) -> str | None:
    return None if value is None else str(value)


def parse_agent_config(text: str) -> AgentConfig:
    """Parse a YAML agent document.

    Raises
    ------
    EnrichmentFailure
        When the YAML is invalid, the ``agent`` section is missing or not a
        mapping, or ``model.params`` holds non-scalar values.
    """
    try:
        doc = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise EnrichmentFailure(f"invalid YAML: {exc}") from exc

    if not isinstance(doc, Mapping) or not isinstance(doc.get("agent"), Mapping):
        raise EnrichmentFailure("document has no 'agent' mapping")

    agent = doc["agent"]
    model = _section(agent, "model")
    prompts = _section(agent, "prompts")
    params = _section(model, "params")

    clean_params: dict[str, Scalar] = {}
    for key, value in params.items():
        if value is not None and not isinstance(value, (str, int, float, bool)):
            raise EnrichmentFailure(f"model.params[{key!r}] is not a scalar")
        clean_params[str(key)] = value

    return AgentConfig(
        provider=_optional_str(model.get("provider")),
        model_name=_optional_str(model.get("name")),
        params=clean_params,
        system_prompt=_optional_str(prompts.get("system_prompt")),
        step_wise_prompt=_optional_str(prompts.get("step_wise_prompt")),
    )


def resolve_agent_config_path(
    name: str,
    resource_map: Mapping[str, str],
    base_dir: str | Path,
) -> Path | None:
    """Return the sidecar path for *name*, or None when the map has no entry."""
    resource = resource_map.get(name)
    if not resource:
        return None
    return Path(base_dir) / resource


def load_agent_config(
    name: str,
    resource_map: Mapping[str, str],
    base_dir: str | Path,
) -> AgentConfig | None:
    """Return the parsed agent config for *name*, or None on any failure."""
    path = resolve_agent_config_path(name, resource_map, base_dir)
    if path is None:
        logger.debug("No agent config mapped for player %r", name)
        return None

    try:
        return parse_agent_config(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, EnrichmentFailure) as exc:
        logger.warning("Skipping agent config for %r (%s): %s", name, path, exc)
        return None


@st.cache_data(ttl=_TTL_AGENT_CONFIG, show_spinner=False)
def get_agent_config(
    name: str,
    resource_map: dict[str, str],
    base_dir: str,
) -> AgentConfig | None:
    """Cached wrapper around ``load_agent_config`` for the detail panel."""
    return load_agent_config(name, resource_map, base_dir)
