"""Skyline Bounded Context - Directional Views and View Composition.

Map orientation (y grows southwards, x eastwards):

          N
        [a b]
      W       E
        [d c]
          S

N looks across edge ab, E across bc, S across cd and W across da. Each view
samples every line between the observer and that edge, nearest line first,
with columns ordered left to right as seen when facing the direction.

A composition command chains views with ">", e.g. "N(1,2)>S(1,2,30)>W(1,2,10,-1)",
where each call is D(x, y[, z[, void]]).
"""

from __future__ import annotations

import re
from enum import Enum

from pydantic import BaseModel, ConfigDict

from domain.skyline.errors import DegenerateRegionError, InvalidCommandError
from domain.skyline.services import ScanOrder
from domain.skyline.value_objects import DEFAULT_VOID, ScanRegion

COMMAND_SEPARATOR = ">"

_ALLOWED_COMMAND = re.compile(r"[0-9NSEWe.,()>+\-\s]*")
_CALL = re.compile(r"^\s*([NSEW])\s*\((.*)\)\s*$")


class Direction(str, Enum):
    NORTH = "N"
    EAST = "E"
    SOUTH = "S"
    WEST = "W"


def view_region(
    direction: Direction | str, x: int, y: int, width: int, height: int
) -> tuple[ScanOrder, ScanRegion]:
    """Return (scan order, region) for a view from (x, y).

    Raises:
        DegenerateRegionError: If nothing lies between the observer and the
            map edge in that direction
    """
    direction = Direction(direction)
    x, y = int(x), int(y)

    if direction is Direction.NORTH:
        order, corners = ScanOrder.VERTICAL, (0, y - 1, width - 1, 0)
        depth = y
    elif direction is Direction.SOUTH:
        order, corners = ScanOrder.VERTICAL, (width - 1, y + 1, 0, height - 1)
        depth = height - 1 - y
    elif direction is Direction.EAST:
        order, corners = ScanOrder.HORIZONTAL, (x + 1, 0, width - 1, height - 1)
        depth = width - 1 - x
    else:
        order, corners = ScanOrder.HORIZONTAL, (x - 1, height - 1, 0, 0)
        depth = x

    x1, y1, x2, y2 = corners
    if depth < 1 or height < 1:
        raise DegenerateRegionError(
            (x1, y1), (x2, y2), f"nothing to see facing {direction.name.lower()}"
        )
    return order, ScanRegion(x1=x1, y1=y1, x2=x2, y2=y2)


# ---------------------------------------------------------------------------
# View Composition Command
# ---------------------------------------------------------------------------
class ViewCall(BaseModel):
    """One directional view request parsed from a command (Value Object)."""

    direction: Direction
    x: int
    y: int
    z: float | None = None
    void: float = DEFAULT_VOID

    model_config = ConfigDict(frozen=True)


def _number(text: str, call: str) -> float:
    try:
        return float(text)
    except ValueError as e:
        raise InvalidCommandError(f"syntax error in \"{call}\"") from e


def _coordinate(text: str, call: str) -> int:
    value = _number(text, call)
    if not value.is_integer():
        raise InvalidCommandError(f"non-integer coordinate in \"{call}\"")
    return int(value)


def parse_call(call: str) -> ViewCall:
    """Parse a single D(x, y[, z[, void]]) call.

    An empty z (e.g. "N(1,2,,-1)") keeps the map elevation at the observer.
    """
    match = _CALL.match(call)
    if match is None:
        raise InvalidCommandError(f"syntax error in \"{call}\"")

    args = [a.strip() for a in match.group(2).split(",")]
    if not 2 <= len(args) <= 4:
        raise InvalidCommandError(
            f"expected 2 to 4 arguments in \"{call}\", got {len(args)}"
        )

    z = None
    void = DEFAULT_VOID
    if len(args) > 2 and args[2]:
        z = _number(args[2], call)
    if len(args) > 3:
        void = _number(args[3], call)

    return ViewCall(
        direction=Direction(match.group(1)),
        x=_coordinate(args[0], call),
        y=_coordinate(args[1], call),
        z=z,
        void=void,
    )


def parse_command(command: str) -> list[ViewCall]:
    """Split a composition command on ">" and parse each view call.

    Raises:
        InvalidCommandError: On characters outside the command alphabet,
            empty commands or malformed calls
    """
    if not _ALLOWED_COMMAND.fullmatch(command):
        raise InvalidCommandError(f"Error: syntax error in \"{command}\"")
    if not command.strip():
        raise InvalidCommandError("empty command")
    return [parse_call(call) for call in command.split(COMMAND_SEPARATOR)]
