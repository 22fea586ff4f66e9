"""Adapter for the add-on selection blob stored on order items.

Two payload shapes have been written historically::

    {"adicionaisIds": ["add_1", "add_2"]}
    {"adicionais": ["add_1", {"id": "add_2", "name": "Bacon"}]}

Everything past this module only sees :class:`Customizations`.
"""

from __future__ import annotations

import json
from typing import Any

from tableflow.application.errors import InvalidInputError
from tableflow.domain.catalog.entities import Customizations
from tableflow.domain.common.ids import AddonId

CANONICAL_KEY = "adicionaisIds"
_ACCEPTED_KEYS = (CANONICAL_KEY, "adicionais")


def parse_customizations(raw: Any) -> Customizations:
    if raw is None or raw == "":
        return Customizations()

    payload = raw
    if isinstance(raw, str):
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise InvalidInputError("customizations must be valid JSON") from exc

    if not isinstance(payload, dict):
        raise InvalidInputError("customizations must be an object")

    for key in _ACCEPTED_KEYS:
        values = payload.get(key)
        if values is None:
            continue
        if not isinstance(values, list):
            raise InvalidInputError(f"customizations.{key} must be a list")
        return Customizations(addon_ids=tuple(_addon_id(value, key) for value in values))

    return Customizations()


def serialize_customizations(customizations: Customizations) -> str | None:
    if customizations.is_empty:
        return None
    return json.dumps(
        {CANONICAL_KEY: [str(addon_id) for addon_id in customizations.addon_ids]},
        separators=(",", ":"),
    )


def _addon_id(value: Any, key: str) -> AddonId:
    if isinstance(value, dict):
        value = value.get("id")
    if not isinstance(value, str) or not value:
        raise InvalidInputError(f"customizations.{key} contains an invalid add-on id")
    return AddonId(value)
