from __future__ import annotations
import argparse
import csv
import sys
from pathlib import Path
from typing import Callable, Optional, TextIO

from gridsweep.engine import GameSession, Outcome, new_session, to_coords
from gridsweep.commands import CommandError, ExitAction, FlagAction, menu_text, parse_command
from gridsweep.snapshot import board_stats, snapshot_array

CLEAR_SCREEN = '\033[2J\033[H'
LOG_HEADER = ['turn', 'action', 'row', 'col', 'outcome', 'opened', 'concealed']


def log_move(log_csv: Path, session: GameSession, turn: int, kind: str, index: int, outcome: Outcome) -> None:
    row, col = to_coords(index, session.col_count)
    stats = board_stats(snapshot_array(session))
    log_csv.parent.mkdir(parents=True, exist_ok=True)
    # Header only goes into a new or empty log so repeated games share one file
    fresh = not log_csv.exists() or log_csv.stat().st_size == 0
    with log_csv.open('a', newline='') as f:
        writer = csv.DictWriter(f, fieldnames=LOG_HEADER)
        if fresh:
            writer.writeheader()
        writer.writerow({
            'turn': turn, 'action': kind, 'row': row, 'col': col, 'outcome': outcome.value,
            'opened': stats['open'], 'concealed': stats['concealed'],
        })


def draw(session: GameSession, out: TextIO, clear: bool = True) -> None:
    if clear:
        out.write(CLEAR_SCREEN)
    out.write(session.render_ascii() + '\n')
    stats = board_stats(snapshot_array(session))
    out.write(f"\n[play] open {stats['open']} | flagged {stats['flagged']} | concealed {stats['concealed']}\n")
    out.write('\n' + menu_text() + '\n\n')
    out.flush()


def run(session: GameSession, read_line: Callable[[], str], out: TextIO,
        clear: bool = True, log_csv: Optional[Path] = None) -> Outcome:
    turn = 0
    while True:
        draw(session, out, clear=clear)
        line = read_line()
        if line == '':
            # EOF
            return session.exit()
        try:
            action = parse_command(line, session.row_count, session.col_count)
        except CommandError as exc:
            out.write(f'\n{exc}\n')
            out.flush()
            # Wait for acknowledgement before redrawing
            if read_line() == '':
                return session.exit()
            continue

        if isinstance(action, ExitAction):
            return session.exit()
        turn += 1
        if isinstance(action, FlagAction):
            session.flag(action.index)
            kind, outcome = 'flag', Outcome.CONTINUED
        else:
            kind, outcome = 'open', session.open(action.index)

        if log_csv is not None:
            log_move(log_csv, session, turn, kind, action.index, outcome)

        if outcome is Outcome.LOST:
            out.write('You lost!\n')
            out.flush()
            return outcome


def main(argv: Optional[list[str]] = None):
    parser = argparse.ArgumentParser()
    parser.add_argument('--rows', type=int, default=10)
    parser.add_argument('--cols', type=int, default=5)
    parser.add_argument('--mines', type=int, default=1)
    parser.add_argument('--no_clear', action='store_true', help='Do not clear the screen between turns')
    parser.add_argument('--log_csv', type=str, default='', help='Append every move to this CSV file')
    args = parser.parse_args(argv)

    if args.rows <= 0 or args.cols <= 0:
        parser.error('--rows and --cols must be positive')
    if args.mines < 0 or args.mines >= args.rows * args.cols:
        parser.error('--mines must be between 0 and rows*cols - 1')

    session = new_session(args.rows, args.cols, args.mines)
    log_csv = Path(args.log_csv) if args.log_csv else None
    print(f"[play] New {args.rows}x{args.cols} game with {args.mines} mine(s)")
    try:
        run(session, sys.stdin.readline, sys.stdout, clear=not args.no_clear, log_csv=log_csv)
    except KeyboardInterrupt:
        session.exit()
        print("\n[play] Interrupted.")
    return 0


if __name__ == '__main__':
    sys.exit(main())
