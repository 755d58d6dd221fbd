"""
Tests for csq_reader.models.
"""
import dataclasses

import numpy as np
import pytest

from csq_reader.constants import REQUIRED_FIELDS
from csq_reader.exceptions import CalibrationError, MalformedField, MissingField
from csq_reader.models import CalibrationParameters, ThermalFrame, parse_leading_float


def test_from_metadata(metadata):
    cal = CalibrationParameters.from_metadata(metadata)
    assert cal.emissivity == 1.0
    assert cal.object_distance == 0.0
    assert cal.reflected_temperature == 25.0
    assert cal.relative_humidity == 0.0
    assert cal.planck_r1 == pytest.approx(21106.77)
    assert cal.planck_o == -7340.0
    assert cal.trans_x == 1.9
    assert cal.camera_model == "FLIR T540"
    assert cal.image_width == 5
    assert cal.image_height == 4


def test_missing_emissivity(metadata):
    del metadata["Emissivity"]
    with pytest.raises(MissingField) as excinfo:
        CalibrationParameters.from_metadata(metadata)
    assert excinfo.value.field == "Emissivity"
    assert "Emissivity" in str(excinfo.value)


@pytest.mark.parametrize("tag", sorted(REQUIRED_FIELDS))
def test_every_required_field_checked(metadata, tag):
    del metadata[tag]
    with pytest.raises(MissingField, match=tag):
        CalibrationParameters.from_metadata(metadata)


@pytest.mark.parametrize("value", ["abc", "", "   ", "m 1.0"])
def test_malformed_emissivity(metadata, value):
    metadata["Emissivity"] = value
    with pytest.raises(MalformedField) as excinfo:
        CalibrationParameters.from_metadata(metadata)
    assert excinfo.value.field == "Emissivity"


def test_calibration_errors_are_value_errors(metadata):
    metadata["PlanckB"] = "n/a"
    with pytest.raises(ValueError):
        CalibrationParameters.from_metadata(metadata)
    assert issubclass(MissingField, CalibrationError)


@pytest.mark.parametrize(
    "value, expected",
    [
        ("1.0 (calculated)", 1.0),
        ("0.95", 0.95),
        ("20.0 C", 20.0),
        ("  1.50 m", 1.5),
        ("-7340", -7340.0),
        ("1e-3 x", 0.001),
    ],
)
def test_first_token_parsed(value, expected):
    assert parse_leading_float("Emissivity", value) == pytest.approx(expected)


def test_optional_fields(metadata):
    metadata["GPSLatitude"] = "45 deg 30' 0.00\" N"
    metadata["SomethingElse"] = "ignored"
    cal = CalibrationParameters.from_metadata(metadata)
    assert cal.get("GPSLatitude") == "45 deg 30' 0.00\" N"
    assert cal.get("LensModel") is None
    assert cal.get("LensModel", "unknown") == "unknown"
    assert "SomethingElse" not in cal.extras


def test_calibration_is_immutable(metadata):
    cal = CalibrationParameters.from_metadata(metadata)
    with pytest.raises(dataclasses.FrozenInstanceError):
        cal.emissivity = 0.5


def test_thermal_frame_helpers(metadata):
    cal = CalibrationParameters.from_metadata(metadata)
    temps = np.array([[20.0, 21.0, 22.0], [23.0, np.nan, 25.0]], dtype=np.float32)
    frame = ThermalFrame(index=3, temperature_data=temps, calibration=cal)

    assert frame.get_image_shape() == (2, 3)
    assert frame.get_temperature_range() == (20.0, 25.0)
    assert frame.get_average_temperature() == pytest.approx(22.2)
    assert frame.get_temperature_at_pixel(2, 1) == 25.0
    with pytest.raises(IndexError, match="out of image bounds"):
        frame.get_temperature_at_pixel(3, 0)


def test_thermal_frame_statistics_skip_infinities(metadata):
    cal = CalibrationParameters.from_metadata(metadata)
    temps = np.array([[20.0, 30.0], [np.inf, -np.inf]], dtype=np.float32)
    frame = ThermalFrame(index=0, temperature_data=temps, calibration=cal)

    assert frame.get_temperature_range() == (20.0, 30.0)
    assert frame.get_average_temperature() == 25.0


def test_thermal_frame_statistics_without_finite_values(metadata):
    cal = CalibrationParameters.from_metadata(metadata)
    temps = np.array([[np.nan, np.inf]], dtype=np.float32)
    frame = ThermalFrame(index=0, temperature_data=temps, calibration=cal)

    t_min, t_max = frame.get_temperature_range()
    assert np.isnan(t_min) and np.isnan(t_max)
    assert np.isnan(frame.get_average_temperature())
