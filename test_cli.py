"""
CLI Tests
=========

End-to-end runs of the `gpsval` command on small survey files.

Usage:
    pytest test_cli.py -v
"""

from pathlib import Path

import pytest

from gpsval_cli.cli import (
    EXIT_INPUT_ERROR,
    EXIT_INVALID,
    EXIT_OK,
    MESSAGE_INPUT_ERROR,
    main,
)
from gpsval_mqtt import VerdictPublisher

SAMPLE = Path(__file__).parent / "data" / "sample_survey.csv"
HEADER = "AreaID,ALat1,ALon1,ALat2,ALon2,SectorID,c1,d1,c2,d2,c3,d3,c4,d4\n"


def test_validate_sample_survey(capsys):
    code = main(["validate", str(SAMPLE)])

    out = capsys.readouterr().out.splitlines()
    assert code == EXIT_INVALID
    assert out == [
        f"Processing file: {SAMPLE.resolve()}",
        "",
        "Area ID = A1",
        "Succes: Area Coordinates Valid",
        "Success: All sectors within area and clear of overlap",
        "",
        "Area ID = A2",
        "Error: Invalid Area Coordinates",
        "Error: A sector is outside the area or overlaps with another sector",
        "",
        "Area ID = A3",
        "Succes: Area Coordinates Valid",
        "Error: A sector is outside the area or overlaps with another sector",
        "",
        "Finished processing file.",
    ]


def test_validate_all_valid_exit_code(tmp_path, capsys):
    path = tmp_path / "survey.csv"
    path.write_text(HEADER + "A,0,0,10,10,S1,1,1,1,2,2,2,2,1\n")

    assert main(["validate", str(path)]) == EXIT_OK
    assert "Finished processing file." in capsys.readouterr().out


def test_validate_with_progress(tmp_path, capsys):
    path = tmp_path / "survey.csv"
    path.write_text(
        HEADER
        + "A,0,0,10,10,S1,1,1,1,2,2,2,2,1\n"
        + "A,0,0,10,10,S2,3,3,3,4,4,4,4,3\n"
    )

    main(["validate", str(path), "--progress"])

    out = capsys.readouterr().out.splitlines()
    assert [line for line in out if line.startswith("Progress:")] == [
        "Progress: 50%", "Progress: 100%",
    ]


def test_validate_missing_file(tmp_path, capsys):
    code = main(["validate", str(tmp_path / "missing.csv")])

    assert code == EXIT_INPUT_ERROR
    assert capsys.readouterr().out.splitlines()[-1] == MESSAGE_INPUT_ERROR


def test_validate_malformed_file(tmp_path, capsys):
    path = tmp_path / "survey.csv"
    path.write_text(HEADER + "A,0,0,10,10,S1,1,1,1,oops,2,2,2,1\n")

    code = main(["validate", str(path)])

    assert code == EXIT_INPUT_ERROR
    assert capsys.readouterr().out.splitlines()[-1] == MESSAGE_INPUT_ERROR


def test_validate_invalid_log_level(capsys):
    code = main(["validate", str(SAMPLE), "--log-level", "LOUD"])

    assert code == EXIT_INPUT_ERROR
    assert "Error:" in capsys.readouterr().err


def test_validate_continues_when_broker_unavailable(capsys):
    code = main(["validate", str(SAMPLE), "--mqtt-broker", "127.0.0.1", "--mqtt-port", "1"])

    assert code == EXIT_INVALID
    assert "Finished processing file." in capsys.readouterr().out


def test_order_prints_perimeter(capsys):
    code = main(["order", "2", "3", "0", "0", "2", "0", "0", "3"])

    assert code == EXIT_OK
    assert capsys.readouterr().out.splitlines() == [
        "(0.0, 0.0)",
        "(2.0, 0.0)",
        "(2.0, 3.0)",
        "(0.0, 3.0)",
    ]


def test_no_command_prints_help(capsys):
    assert main([]) == EXIT_INPUT_ERROR
    assert "usage" in capsys.readouterr().out


@pytest.fixture
def fake_broker(monkeypatch):
    """VerdictPublisher that 'connects' without a network and records disconnects."""
    disconnects = []
    monkeypatch.setattr(VerdictPublisher, "connect", lambda self, timeout=10.0: True)
    monkeypatch.setattr(VerdictPublisher, "disconnect", lambda self: disconnects.append(self.broker))
    return disconnects


def test_publisher_disconnected_when_file_missing(tmp_path, fake_broker):
    code = main(["validate", str(tmp_path / "missing.csv"), "--mqtt-broker", "localhost"])

    assert code == EXIT_INPUT_ERROR
    assert fake_broker == ["localhost:1883"]


def test_publisher_disconnected_when_file_malformed(tmp_path, fake_broker):
    path = tmp_path / "survey.csv"
    path.write_text(HEADER + "A,0,0,10,10,S1,1,1,1,oops,2,2,2,1\n")

    assert main(["validate", str(path), "--mqtt-broker", "localhost"]) == EXIT_INPUT_ERROR
    assert fake_broker == ["localhost:1883"]


def test_publisher_disconnected_after_run(fake_broker, capsys):
    code = main(["validate", str(SAMPLE), "--mqtt-broker", "localhost", "--mqtt-port", "1884"])

    assert code == EXIT_INVALID
    assert fake_broker == ["localhost:1884"]
    assert "Finished processing file." in capsys.readouterr().out
