"""Line framing and dispatch for CAT control commands."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Dict, Optional

MAX_ARGS = 12
TERMINATOR = ";"
AMP_PREFIX = "^"

_LINE_END = re.compile(r"[\r\n]")


class CatError(Exception):
    """A CAT command line or command is invalid."""


class IncompleteCommand(CatError):
    """The command line has not been terminated yet."""


@dataclass(frozen=True)
class CatCommand:
    """One command verb, its handler and the argument lengths it accepts."""

    verb: str
    handler: Callable[[Optional[str]], str]
    min_args: int
    max_args: int


class CatParser:
    """Frames CAT lines and sends them to the rig or amplifier parser.

    Lines starting with ``^`` go to ``amp_parser`` (without the prefix),
    when one is given; everything else goes to the rig parser.
    """

    def __init__(
        self, amp_parser: Optional[Callable[[str], Optional[str]]] = None
    ) -> None:
        self.amp_parser = amp_parser
        # Rig command table; no rig commands are defined yet.
        self.rig_commands: Dict[str, CatCommand] = {}

    def parse_line(self, line: Optional[str]) -> Optional[str]:
        """Parse one command line and return the reply, if any.

        Raises CatError for an empty line and IncompleteCommand when the
        line lacks its ``;`` terminator.
        """
        if not line:
            raise CatError("empty command line")
        line = _LINE_END.split(line, maxsplit=1)[0]
        if not line:
            raise CatError("empty command line")
        if not line.endswith(TERMINATOR):
            raise IncompleteCommand(line)
        body = line[: -len(TERMINATOR)]
        if body.startswith(AMP_PREFIX) and self.amp_parser is not None:
            return self.amp_parser(body[len(AMP_PREFIX) :])
        return self.parse_rig_line(body)

    def parse_rig_line(self, line: str) -> Optional[str]:
        """Handle a rig command from the rig command table.

        Lines whose verb is not in the table are accepted without a reply.
        """
        for verb in sorted(self.rig_commands, key=len, reverse=True):
            if line.upper().startswith(verb):
                command = self.rig_commands[verb]
                args = line[len(verb) :] or None
                return command.handler(args)
        return None