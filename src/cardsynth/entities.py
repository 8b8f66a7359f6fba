"""Entity state lookup contract.

The engine never owns entity state. Callers pass a lookup that is either
a callable ``lookup(entity_id)`` or any object with ``get(entity_id)``
(a plain ``dict`` of entity id -> snapshot works). The lookup may return
an :class:`EntityState`, a mapping with ``state``/``attributes`` keys, or
None when the entity is unknown.
"""

import logging
from collections.abc import Callable, Mapping
from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)


class EntityState(BaseModel):
    """Read-only snapshot of one entity."""

    model_config = ConfigDict(frozen=True)

    state: str | None = None
    attributes: dict[str, Any] = Field(default_factory=dict)


class SupportsGet(Protocol):
    def get(self, entity_id: str, /) -> Any: ...


EntityLookup = Callable[[str], Any] | SupportsGet | None


def coerce_entity_state(raw: Any) -> EntityState | None:
    """Turn whatever the lookup returned into an EntityState (or None)."""
    if raw is None:
        return None
    if isinstance(raw, EntityState):
        return raw
    if isinstance(raw, Mapping):
        state = raw.get("state")
        attributes = raw.get("attributes")
        return EntityState(
            state=None if state is None else str(state),
            attributes=dict(attributes) if isinstance(attributes, Mapping) else {},
        )
    logger.debug("Ignoring unsupported entity snapshot of type %s", type(raw).__name__)
    return None


def resolve_entity(lookup: EntityLookup, entity_id: str | None) -> EntityState | None:
    """Look up ``entity_id``; a missing lookup or unknown id yields None."""
    if lookup is None or not entity_id:
        return None
    getter = lookup.get if hasattr(lookup, "get") else lookup
    return coerce_entity_state(getter(entity_id))  # type: ignore[operator]


def resolve_state(lookup: EntityLookup, entity_id: str | None) -> str | None:
    entity = resolve_entity(lookup, entity_id)
    return entity.state if entity else None


def resolve_attributes(lookup: EntityLookup, entity_id: str | None) -> dict[str, Any]:
    entity = resolve_entity(lookup, entity_id)
    return entity.attributes if entity else {}
