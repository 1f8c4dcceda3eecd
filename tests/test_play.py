import csv
import io

import pytest

import play
from gridsweep.engine import GameSession, Outcome, Phase


def scripted(*lines):
    it = iter(lines)
    return lambda: next(it, '')


def test_open_then_lose():
    session = GameSession(3, 3, mines={8})
    out = io.StringIO()
    outcome = play.run(session, scripted('x 0 0\n', 'x 2 2\n'), out, clear=False)
    assert outcome is Outcome.LOST
    assert session.phase is Phase.LOST
    text = out.getvalue()
    assert '0 0 0\n0 1 1\n0 1 #' in text
    assert text.endswith('You lost!\n')


def test_exit_command_stops_loop():
    session = GameSession(3, 3, mines={8})
    out = io.StringIO()
    assert play.run(session, scripted('f 1 1\n', 'exit\n'), out, clear=False) is Outcome.EXITED
    assert session.board[4].is_flagged
    assert session.phase is Phase.EXITED


def test_errors_are_reported_and_loop_reprompts():
    session = GameSession(3, 3, mines={8})
    out = io.StringIO()
    outcome = play.run(session, scripted('hello\n', '\n', 'x 7 7\n', '\n', 'exit\n'), out, clear=False)
    assert outcome is Outcome.EXITED
    text = out.getvalue()
    assert 'Failed to parse the input. Please try again' in text
    assert 'The coords (7, 7) are invalid' in text
    assert all(c.is_concealed for c in session.snapshot())


def test_end_of_input_exits():
    session = GameSession(3, 3, 1)
    assert play.run(session, scripted(), io.StringIO(), clear=False) is Outcome.EXITED


def test_screen_is_cleared_before_each_draw():
    out = io.StringIO()
    play.run(GameSession(2, 2, 0), scripted('exit\n'), out)
    assert out.getvalue().startswith(play.CLEAR_SCREEN)


def test_moves_are_logged_to_csv(tmp_path):
    log = tmp_path / 'logs' / 'moves.csv'
    session = GameSession(3, 3, mines={8})
    play.run(session, scripted('f 2 2\n', 'x 0 0\n', 'exit\n'), io.StringIO(), clear=False, log_csv=log)
    with log.open() as f:
        rows = list(csv.DictReader(f))
    assert [r['action'] for r in rows] == ['flag', 'open']
    assert rows[0]['row'] == '2' and rows[0]['col'] == '2'
    assert rows[1]['outcome'] == 'continued'
    assert rows[1]['opened'] == '8'
    assert rows[1]['concealed'] == '0'


def test_move_log_is_shared_across_games(tmp_path):
    log = tmp_path / 'moves.csv'
    for _ in range(2):
        session = GameSession(3, 3, mines={8})
        play.run(session, scripted('x 2 2\n'), io.StringIO(), clear=False, log_csv=log)
    lines = log.read_text().splitlines()
    assert lines[0] == ','.join(play.LOG_HEADER)
    assert lines.count(lines[0]) == 1
    with log.open() as f:
        rows = list(csv.DictReader(f))
    assert [r['outcome'] for r in rows] == ['lost', 'lost']
    assert all(r['opened'] == '0' for r in rows)


def test_log_move_writes_header_into_empty_file(tmp_path):
    log = tmp_path / 'moves.csv'
    log.touch()
    session = GameSession(2, 2, mines=set())
    session.open(0)
    play.log_move(log, session, 1, 'open', 3, Outcome.CONTINUED)
    with log.open() as f:
        rows = list(csv.DictReader(f))
    assert rows == [{
        'turn': '1', 'action': 'open', 'row': '1', 'col': '1', 'outcome': 'continued',
        'opened': '4', 'concealed': '0',
    }]


def test_main_rejects_too_many_mines():
    with pytest.raises(SystemExit):
        play.main(['--rows', '2', '--cols', '2', '--mines', '4'])


def test_main_plays_from_stdin(monkeypatch, capsys):
    monkeypatch.setattr('sys.stdin', io.StringIO('x 0 0\nexit\n'))
    assert play.main(['--rows', '4', '--cols', '3', '--mines', '0', '--no_clear']) == 0
    captured = capsys.readouterr().out
    assert '[play] New 4x3 game with 0 mine(s)' in captured
    assert '0 0 0\n0 0 0\n0 0 0\n0 0 0' in captured
