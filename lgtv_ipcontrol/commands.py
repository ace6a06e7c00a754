"""
Command table for LG IP Control.

Maps (command, action) pairs to the plain text commands sent to the TV.
A "{}" in a template is replaced by the user supplied parameters.

Examples:
    ("set", "volume"), ["12"]       -> ["VOLUME_CONTROL 12"]
    ("query", "mac-addresses"), []  -> ["GET_MACADDRESS wired", "GET_MACADDRESS wifi"]
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Sequence, Tuple

from .errors import ValidationError

PLACEHOLDER = "{}"


@dataclass(frozen=True)
class Command:
    """
    One CLI command and its actions.

    Attributes:
        name: Command name (e.g. "query")
        info: One line description
        actions: action name -> command templates, sent in order
    """

    name: str
    info: str
    actions: Mapping[str, Tuple[str, ...]]

    @property
    def after_help(self) -> str:
        lines = ["  The possible options for <action> are:"]
        lines.extend(f"    + {action}" for action in self.actions)
        return "\n".join(lines) + "\n"

    def templates(self, action: str) -> Tuple[str, ...]:
        try:
            return self.actions[action]
        except KeyError:
            raise ValidationError(
                f"Invalid action '{action}' for command '{self.name}' "
                f"(expected one of: {', '.join(self.actions)})"
            ) from None


def _command(name: str, info: str, actions: Sequence[Tuple[str, Sequence[str]]]) -> Command:
    return Command(
        name=name,
        info=info,
        actions=MappingProxyType({action: tuple(templates) for action, templates in actions}),
    )


COMMANDS: Mapping[str, Command] = MappingProxyType({
    command.name: command
    for command in (
        _command("power", "Change the TV power state", [
            ("off", ["POWER off"]),
        ]),
        _command("query", "Read a value from the TV", [
            ("current-app", ["CURRENT_APP"]),
            ("mac-addresses", ["GET_MACADDRESS wired", "GET_MACADDRESS wifi"]),
            ("mute", ["MUTE_STATE"]),
            ("volume", ["CURRENT_VOL"]),
        ]),
        _command("set", "Change a TV setting", [
            ("volume", ["VOLUME_CONTROL {}"]),
            ("mute", ["VOLUME_MUTE {}"]),
            ("input", ["INPUT_SELECT {}"]),
        ]),
        _command("key", "Simulate a remote control key", [
            ("press", ["KEY_ACTION {}"]),
        ]),
        _command("custom", "Send a raw command", [
            ("command", ["{}"]),
        ]),
    )
})


def get_command(name: str) -> Command:
    try:
        return COMMANDS[name]
    except KeyError:
        raise ValidationError(
            f"Invalid command '{name}' (expected one of: {', '.join(COMMANDS)})"
        ) from None


def resolve_command(name: str, action: str, parameters: Sequence[str] = ()) -> Tuple[str, ...]:
    """
    Turn a (command, action, parameters) triple into the commands to send.

    Parameters are joined with single spaces, so "custom command VOLUME_CONTROL 5"
    sends "VOLUME_CONTROL 5".

    Raises:
        ValidationError: Unknown command/action, or a placeholder with no parameter
    """
    templates = get_command(name).templates(action)
    argument = " ".join(parameters)

    resolved = []
    for template in templates:
        if PLACEHOLDER in template:
            if not argument:
                raise ValidationError(f"'{name} {action}' requires a parameter")
            template = template.replace(PLACEHOLDER, argument)
        resolved.append(template)
    return tuple(resolved)
