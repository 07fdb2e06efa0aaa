"""
Records / Config Tests
======================

CSV source, column mapping and YAML configuration.

Usage:
    pytest test_config.py -v
"""

import logging
from pathlib import Path

import pytest

from gpsval_geometry import Coordinates
from gpsval_validation import (
    ColumnMapping,
    MQTTConfig,
    RecordError,
    SurveyRecord,
    ValidatorConfig,
    count_records,
    read_records,
    records_from_dicts,
)

HEADER = "AreaID,ALat1,ALon1,ALat2,ALon2,SectorID,c1,d1,c2,d2,c3,d3,c4,d4\n"
ROW = "A1,0,0,10,10,S1,1,1,1,2,2,2,2,1\n"

SAMPLE = Path(__file__).parent / "data" / "sample_survey.csv"


def write(tmp_path, text, name="survey.csv"):
    path = tmp_path / name
    path.write_text(text)
    return path


# --- Records ---

def test_read_records(tmp_path):
    path = write(tmp_path, HEADER + ROW + "\n" + ROW.replace("S1", "S2"))

    records = list(read_records(path))

    assert [r.sector_id for r in records] == ["S1", "S2"]
    first = records[0]
    assert first.area_id == "A1"
    assert first.area_corners == (Coordinates(0, 0), Coordinates(10, 10))
    assert first.sector_corners == (
        Coordinates(1, 1), Coordinates(1, 2), Coordinates(2, 2), Coordinates(2, 1),
    )
    assert first.line_number == 2


def test_read_records_strips_whitespace(tmp_path):
    path = write(tmp_path, HEADER + " A1 , 0, 0,10,10, S1 ,1,1,1,2,2,2,2,1\n")

    record = next(read_records(path))

    assert record.area_id == "A1"
    assert record.sector_id == "S1"


def test_read_records_bad_number(tmp_path):
    path = write(tmp_path, HEADER + ROW + "A1,0,0,10,north,S2,1,1,1,2,2,2,2,1\n")

    with pytest.raises(RecordError, match=r"Line 3: column 'ALon2' is not a number"):
        list(read_records(path))


def test_read_records_missing_header_column(tmp_path):
    path = write(tmp_path, HEADER.replace("SectorID", "Sector") + ROW)

    with pytest.raises(RecordError, match="SectorID"):
        list(read_records(path))


def test_read_records_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        list(read_records(tmp_path / "missing.csv"))


def test_read_records_custom_columns(tmp_path):
    columns = ColumnMapping.from_dict({'area_id': "Zone", 'sector_id': "Plot"})
    header = HEADER.replace("AreaID", "Zone").replace("SectorID", "Plot")
    path = write(tmp_path, header + ROW)

    record = next(read_records(path, columns))

    assert (record.area_id, record.sector_id) == ("A1", "S1")


def test_count_records(tmp_path):
    assert count_records(write(tmp_path, HEADER + ROW + "\n" + ROW)) == 2
    assert count_records(write(tmp_path, HEADER, name="empty.csv")) == 0
    assert count_records(write(tmp_path, "", name="blank.csv")) == 0


def test_sample_survey_reads():
    records = list(read_records(SAMPLE))

    assert count_records(SAMPLE) == len(records) == 5
    assert [r.area_id for r in records] == ["A1", "A1", "A2", "A3", "A3"]


def test_records_from_dicts():
    row = dict(zip(HEADER.strip().split(","), ROW.strip().split(",")))

    records = records_from_dicts([row, row])

    assert [r.line_number for r in records] == [2, 3]


def test_record_from_row_missing_column():
    with pytest.raises(RecordError, match="missing column 'AreaID'"):
        SurveyRecord.from_row({}, line_number=7)


def test_record_requires_corner_counts():
    c = Coordinates(0, 0)
    with pytest.raises(ValueError):
        SurveyRecord("A", (c,), "S", (c, c, c, c))
    with pytest.raises(ValueError):
        SurveyRecord("A", (c, c), "S", (c, c, c))


def test_column_mapping_validation():
    assert ColumnMapping.from_dict(None) == ColumnMapping()
    assert len(ColumnMapping().headers()) == 14

    with pytest.raises(ValueError, match="Unknown"):
        ColumnMapping.from_dict({'zone': "Zone"})
    with pytest.raises(ValueError, match="unique"):
        ColumnMapping(sector_id="AreaID")
    with pytest.raises(ValueError, match="empty"):
        ColumnMapping(area_id="")


# --- Config ---

def test_validator_config_defaults():
    config = ValidatorConfig()

    assert config.log_level == "INFO"
    assert config.logging_level == logging.INFO
    assert config.mqtt_config is None
    assert not config.show_progress


def test_validator_config_normalizes_log_level():
    assert ValidatorConfig(log_level="debug").logging_level == logging.DEBUG

    with pytest.raises(ValueError, match="log_level"):
        ValidatorConfig(log_level="LOUD")


def test_validator_config_overrides_skip_none():
    config = ValidatorConfig(log_level="WARNING")

    updated = config.with_overrides(log_level=None, show_progress=True, log_file="out.log")

    assert updated.log_level == "WARNING"
    assert updated.show_progress
    assert updated.log_file == Path("out.log")
    assert config.with_overrides(log_level=None) is config


def test_validator_config_from_yaml(tmp_path):
    path = write(tmp_path, """
log_level: "debug"
log_file: "logs/run.log"
show_progress: true
columns:
  area_id: "Zone"
mqtt_config:
  broker: "localhost"
  port: 1884
  qos: 0
""", name="config.yaml")

    config = ValidatorConfig.from_yaml(path)

    assert config.log_level == "DEBUG"
    assert config.log_file == Path("logs/run.log")
    assert config.show_progress
    assert config.columns.area_id == "Zone"
    assert config.columns.sector_id == "SectorID"
    assert config.mqtt_config.broker == "localhost"
    assert config.mqtt_config.port == 1884
    assert config.mqtt_config.progress_topic == "gpsval/verdicts/progress"


def test_validator_config_from_empty_yaml(tmp_path):
    config = ValidatorConfig.from_yaml(write(tmp_path, "", name="config.yaml"))

    assert config == ValidatorConfig()


def test_validator_config_rejects_non_mapping(tmp_path):
    with pytest.raises(ValueError, match="mapping"):
        ValidatorConfig.from_yaml(write(tmp_path, "- a\n- b\n", name="config.yaml"))


def test_shipped_config_loads():
    config = ValidatorConfig.from_yaml(Path(__file__).parent / "config" / "validator_config.yaml")

    assert config.columns == ColumnMapping()
    assert config.mqtt_config is None


@pytest.mark.parametrize("kwargs, match", [
    ({'broker': ""}, "broker"),
    ({'broker': "localhost", 'port': 0}, "port"),
    ({'broker': "localhost", 'qos': 3}, "QoS"),
    ({'broker': "localhost", 'verdict_topic': ""}, "verdict_topic"),
])
def test_mqtt_config_validation(kwargs, match):
    with pytest.raises(ValueError, match=match):
        MQTTConfig(**kwargs)
