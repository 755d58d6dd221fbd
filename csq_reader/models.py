"""
Data models for .csq thermal frames.
"""

from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional
import numpy as np

from .constants import REQUIRED_FIELDS, OPTIONAL_FIELDS
from .exceptions import MissingField, MalformedField


def parse_leading_float(name: str, value) -> float:
    """Parse the first whitespace-delimited token of value ("1.0 (calculated)" -> 1.0)."""
    if value is None:
        raise MissingField(name)
    tokens = str(value).split()
    if not tokens:
        raise MalformedField(name, value)
    try:
        return float(tokens[0])
    except ValueError:
        raise MalformedField(name, value) from None


@dataclass(frozen=True)
class CalibrationParameters:
    """Per-frame radiometric calibration, as reported by the camera."""

    emissivity: float
    object_distance: float
    reflected_temperature: float
    atmospheric_temperature: float
    window_temperature: float
    window_transmission: float
    relative_humidity: float

    # Planck constants
    planck_r1: float
    planck_r2: float
    planck_b: float
    planck_f: float
    planck_o: float

    # Atmospheric transmission
    alpha1: float
    alpha2: float
    beta1: float
    beta2: float
    trans_x: float

    # Descriptive fields (camera, lens, GPS, palette), not used by the conversion
    extras: Dict[str, str] = field(default_factory=dict, compare=False)

    @classmethod
    def from_metadata(cls, metadata: Mapping[str, str]) -> "CalibrationParameters":
        """Build parameters from an exiftool tag -> string mapping.

        Raises MissingField if a required tag is absent and MalformedField if
        its first token is not a number.
        """
        values = {}
        for tag, attr in REQUIRED_FIELDS.items():
            if tag not in metadata:
                raise MissingField(tag)
            values[attr] = parse_leading_float(tag, metadata[tag])
        extras = {tag: str(metadata[tag]) for tag in OPTIONAL_FIELDS if tag in metadata}
        return cls(extras=extras, **values)

    def get(self, tag: str, default: Optional[str] = None) -> Optional[str]:
        """Return a descriptive field by exiftool tag name."""
        return self.extras.get(tag, default)

    @property
    def camera_model(self) -> Optional[str]:
        return self.extras.get("CameraModel")

    @property
    def image_width(self) -> Optional[int]:
        return self._int_extra("RawThermalImageWidth")

    @property
    def image_height(self) -> Optional[int]:
        return self._int_extra("RawThermalImageHeight")

    def _int_extra(self, tag: str) -> Optional[int]:
        value = self.extras.get(tag)
        if value is None:
            return None
        try:
            return int(value.split()[0])
        except (IndexError, ValueError):
            return None


@dataclass
class ThermalFrame:
    """One converted frame of a .csq sequence."""

    index: int
    temperature_data: np.ndarray
    calibration: CalibrationParameters

    def get_image_shape(self) -> tuple:
        """Return the image dimensions (height, width)."""
        return self.temperature_data.shape

    def finite_temperatures(self) -> np.ndarray:
        """Return the flattened temperatures without NaN and ±inf."""
        temps = np.asarray(self.temperature_data)
        return temps[np.isfinite(temps)]

    def get_temperature_range(self) -> tuple:
        """Return the temperature range (min, max) of the finite values; (nan, nan) if there are none."""
        finite = self.finite_temperatures()
        if finite.size == 0:
            return float("nan"), float("nan")
        return float(finite.min()), float(finite.max())

    def get_average_temperature(self) -> float:
        """Return the average of the finite temperatures; nan if there are none."""
        finite = self.finite_temperatures()
        if finite.size == 0:
            return float("nan")
        return float(finite.mean())

    def get_temperature_at_pixel(self, x: int, y: int) -> float:
        """Return the temperature at the given pixel."""
        height, width = self.temperature_data.shape
        if 0 <= x < width and 0 <= y < height:
            return float(self.temperature_data[y, x])
        raise IndexError(f"Pixel coordinates ({x}, {y}) out of image bounds")
