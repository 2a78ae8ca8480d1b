"""Display-name aliases for air conditioners.

The rename table is an ordered list of ``{nickname, alias}`` pairs taken
from the config entry options. It is turned into a read-only mapping once
at setup and passed to whoever needs it.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import Any

import voluptuous as vol

from .const import CONF_ALIAS, CONF_NICKNAME

_LOGGER = logging.getLogger(__name__)

RENAME_ENTRY_SCHEMA = vol.Schema(
    {
        vol.Required(CONF_NICKNAME): vol.All(str, vol.Length(min=1)),
        vol.Required(CONF_ALIAS): vol.All(str, vol.Length(min=1)),
    }
)
RENAME_SCHEMA = vol.Schema([RENAME_ENTRY_SCHEMA])

NicknameMap = Mapping[str, str]


def build_nickname_map(entries: Iterable[Mapping[str, Any]] | None) -> NicknameMap:
    """Build the nickname -> alias mapping.

    Later entries for the same nickname overwrite earlier ones. Aliases are
    not checked for uniqueness.

    Raises:
        vol.Invalid: If an entry is missing its nickname or alias.

    """
    nickname_map: dict[str, str] = {}
    for entry in RENAME_SCHEMA(list(entries or [])):
        nickname_map[entry[CONF_NICKNAME]] = entry[CONF_ALIAS]
    return MappingProxyType(nickname_map)


def resolve_nickname(nickname: str, nickname_map: NicknameMap) -> str:
    """Return the configured alias for ``nickname``, or ``nickname`` itself."""
    alias = nickname_map.get(nickname)
    if alias is None:
        return nickname

    _LOGGER.info('Renaming Air Conditioner "%s" to "%s"', nickname, alias)
    return alias


def parse_rename_table(text: str) -> list[dict[str, str]]:
    """Parse the options form text into rename entries.

    One ``nickname = alias`` pair per line, blank lines ignored.

    Raises:
        vol.Invalid: If a line has no ``=`` or an empty side.

    """
    entries = []
    for line_number, raw_line in enumerate(text.splitlines(), start=1):
        line = raw_line.strip()
        if not line:
            continue

        nickname, sep, alias = line.partition("=")
        if not sep:
            error_msg = f"Line {line_number}: expected 'nickname = alias'"
            raise vol.Invalid(error_msg)

        entries.append({CONF_NICKNAME: nickname.strip(), CONF_ALIAS: alias.strip()})

    return RENAME_SCHEMA(entries)


def format_rename_table(entries: Iterable[Mapping[str, Any]] | None) -> str:
    return "\n".join(
        f"{entry[CONF_NICKNAME]} = {entry[CONF_ALIAS]}" for entry in entries or []
    )
