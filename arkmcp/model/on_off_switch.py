"""An on/off switch value accepting several spellings."""

from __future__ import annotations

from enum import Enum


class OnOffSwitch(str, Enum):
    """A two-state switch written as ``on`` or ``off``."""

    ON = "on"
    OFF = "off"

    @classmethod
    def parse(cls, value: str) -> OnOffSwitch:
        """Return the switch named by ``value``; raise ValueError if unknown."""
        try:
            return _ALIASES[value]
        except (KeyError, TypeError):
            raise ValueError(
                f"invalid value: \"{value}\". Allowed values are 'on', 'off'"
            ) from None

    def __bool__(self) -> bool:
        return self is OnOffSwitch.ON

    def __str__(self) -> str:
        return self.value


_ALIASES: dict[str, OnOffSwitch] = {
    "on": OnOffSwitch.ON,
    "ON": OnOffSwitch.ON,
    "YES": OnOffSwitch.ON,
    "yes": OnOffSwitch.ON,
    "y": OnOffSwitch.ON,
    "off": OnOffSwitch.OFF,
    "OFF": OnOffSwitch.OFF,
    "NO": OnOffSwitch.OFF,
    "no": OnOffSwitch.OFF,
    "n": OnOffSwitch.OFF,
}


def bool_to_on_off(value: bool) -> OnOffSwitch:
    """Return ``ON`` for a true value and ``OFF`` otherwise."""
    return OnOffSwitch.ON if value else OnOffSwitch.OFF