import sys
import json

import pytest
from loguru import logger

from bitflip import cli


@pytest.fixture(autouse=True)
def restore_logger():
    yield
    logger.remove()
    logger.add(sys.stderr)


def test_no_arguments_prints_welcome(capsys):
    assert cli.main([]) == 1
    assert "Welcome!" in capsys.readouterr().out


def test_writes_rendered_output(tmp_path):
    out = tmp_path / "flips.json"
    code = cli.main([
        "--quiet", "--mode", "iteration", "--count", "4",
        "--rates", "1.0", "--value", "0xff", "--output", str(out),
    ])
    assert code == 0

    data = json.loads(out.read_text())["data"]
    assert len(data) == 1
    events = data[0]["flip_data"]
    assert len(events) == 1
    assert events[0]["previous_value"] == 0xff
    assert events[0]["error_value"] == 0
    assert events[0]["iteration"] == 8


def test_prints_output_without_file(capsys):
    code = cli.main([
        "--quiet", "--mode", "variable", "--count", "2", "--rates", "0.0", "0.0", "--value", "7",
    ])
    assert code == 0
    data = json.loads(capsys.readouterr().out)["data"]
    assert [len(b["flip_data"]) for b in data] == [2, 2]


def test_invalid_rate_exit_code():
    assert cli.main(["--quiet", "--rates", "2.0"]) == 2


def test_bad_count_for_mode():
    with pytest.raises(SystemExit):
        cli.main(["--quiet", "--mode", "iteration", "--count", "1.5"])


def test_parse_count():
    assert cli.parse_count("iteration", "3") == 3
    assert cli.parse_count("variable", "3") == 3
    assert cli.parse_count("time", "0.5") == 0.5
    assert cli.parse_count("anything", "2") == 2.0


def test_verbose_run_prints_banner_and_output(capsys):
    assert cli.main(["--mode", "iteration", "--count", "1", "--rates", "1.0", "--value", "1"]) == 0
    captured = capsys.readouterr()
    assert captured.err.strip()
    data = json.loads(captured.out)["data"]
    assert data[0]["flip_data"][0]["error_value"] == 254
