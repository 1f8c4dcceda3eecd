from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple, Union

from .engine import to_index


class CommandError(ValueError):
    pass


class ParseError(CommandError):
    def __init__(self):
        super().__init__('Failed to parse the input. Please try again')


class InvalidCoordinates(CommandError):
    def __init__(self, coords: Tuple[int, int]):
        super().__init__(f'The coords {coords} are invalid')
        self.coords = coords


@dataclass(frozen=True)
class FlagAction:
    index: int


@dataclass(frozen=True)
class OpenAction:
    index: int


@dataclass(frozen=True)
class ExitAction:
    pass


Action = Union[FlagAction, OpenAction, ExitAction]

VERBS = {'f': FlagAction, 'x': OpenAction}


def _parse_coord(token: str) -> int:
    # Unsigned: an optional '+' then ASCII digits, never '-' or whitespace
    digits = token[1:] if token.startswith('+') else token
    if not (digits.isascii() and digits.isdigit()):
        raise ParseError()
    return int(digits)


def parse_command(line: str, row_count: int, col_count: int) -> Action:
    text = line.strip().lower()
    if text == 'exit':
        return ExitAction()

    parts = text.split(' ')
    if len(parts) != 3:
        raise ParseError()

    row = _parse_coord(parts[1])
    col = _parse_coord(parts[2])
    if row >= row_count or col >= col_count:
        raise InvalidCoordinates((row, col))

    action_cls = VERBS.get(parts[0])
    if action_cls is None:
        raise ParseError()
    return action_cls(to_index(row, col, col_count))


def menu_text() -> str:
    return '\n'.join([
        "Type 'x <row> <col>' to open a tile",
        "Type 'f <row> <col>' to set a flag",
        "Type 'exit' to exit",
    ])
