import pytest

from linequeue.cli import Options, UsageError, main, parse_args


def test_parse_port_only():
    assert parse_args(["-p", "8080"]) == Options(port=8080, timeout=0)


def test_parse_port_and_timeout():
    assert parse_args(["-p", "9000", "-t", "3"]) == Options(port=9000, timeout=3)


def test_parse_options_in_any_order():
    assert parse_args(["-t", "2", "-p", "7000"]) == Options(port=7000, timeout=2)


def test_parse_attached_values():
    assert parse_args(["-p7000", "-t2"]) == Options(port=7000, timeout=2)


@pytest.mark.parametrize(
    "argv",
    [
        [],
        ["-p"],
        ["-p7000"],
        ["-t", "5"],
        ["-x", "1"],
        ["-p", "abc"],
        ["-p", "7000", "-t", "soon"],
        ["-p", "-1"],
    ],
)
def test_parse_rejects_bad_command_lines(argv):
    with pytest.raises(UsageError):
        parse_args(argv)


def test_main_reports_usage(capsys):
    assert main(["-x", "1"]) == 1
    captured = capsys.readouterr()
    assert "Usage:" in captured.err
    assert "-p <port> [-t timeout_seconds]" in captured.err


def test_main_runs_until_timeout(capsys):
    assert main(["-p", "0", "-t", "1"]) == 0
    out = capsys.readouterr().out
    lines = out.splitlines()
    assert lines.count(".") == 1
    assert "Stop server!" in lines
    assert lines.index(".") < lines.index("Stop server!")