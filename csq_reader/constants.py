"""
Constants for FLIR .csq thermal sequences.

Marker, block size, and the registry of metadata fields read per frame.
Field names are exiftool tag names; each required field maps to the
attribute it fills on CalibrationParameters.

To carry a new descriptive field: add its exiftool tag name to
OPTIONAL_FIELDS. Required fields feed the radiometric conversion and must
be present on every frame.
"""
import os
import re

# -----------------------------------------------------------------------------
# Container layout
# -----------------------------------------------------------------------------

# Every embedded frame starts with "FFF\0RT"
MAGIC_SEQUENCE = b"\x46\x46\x46\x00\x52\x54"
MAGIC_PATTERN = re.compile(re.escape(MAGIC_SEQUENCE))

# Bytes read from the stream per refill
BLOCKSIZE = 1_000_000

# Largest leftover kept while waiting for the next marker; a longer run is dropped
MAX_LEFTOVER = 16 * BLOCKSIZE

# -----------------------------------------------------------------------------
# External tools
# -----------------------------------------------------------------------------
EXIFTOOL_ENV_VAR = "CSQ_READER_EXIFTOOL"
DEFAULT_EXIFTOOL = "exiftool"
RAW_THERMAL_IMAGE_TAG = "RawThermalImage"


def get_exiftool_command() -> str:
    """Return the exiftool executable, honouring CSQ_READER_EXIFTOOL."""
    return os.environ.get(EXIFTOOL_ENV_VAR) or DEFAULT_EXIFTOOL


# -----------------------------------------------------------------------------
# Calibration fields: exiftool tag -> CalibrationParameters attribute
# -----------------------------------------------------------------------------
REQUIRED_FIELDS = {
    "Emissivity": "emissivity",
    "ObjectDistance": "object_distance",
    "ReflectedApparentTemperature": "reflected_temperature",
    "AtmosphericTemperature": "atmospheric_temperature",
    "IRWindowTemperature": "window_temperature",
    "IRWindowTransmission": "window_transmission",
    "RelativeHumidity": "relative_humidity",
    "PlanckR1": "planck_r1",
    "PlanckR2": "planck_r2",
    "PlanckB": "planck_b",
    "PlanckF": "planck_f",
    "PlanckO": "planck_o",
    "AtmosphericTransAlpha1": "alpha1",
    "AtmosphericTransAlpha2": "alpha2",
    "AtmosphericTransBeta1": "beta1",
    "AtmosphericTransBeta2": "beta2",
    "AtmosphericTransX": "trans_x",
}

# Descriptive fields, copied through as strings when present
OPTIONAL_FIELDS = (
    "FileName",
    "Directory",
    "FileSize",
    "FileType",
    "FileTypeExtension",
    "MIMEType",
    "ExifToolVersionNumber",
    "CreatorSoftware",
    "DateTimeOriginal",
    "FrameRate",
    "CameraModel",
    "CameraPartNumber",
    "CameraSerialNumber",
    "CameraSoftware",
    "CameraTemperatureRangeMax",
    "CameraTemperatureRangeMin",
    "CameraTemperatureMaxClip",
    "CameraTemperatureMinClip",
    "CameraTemperatureMaxWarn",
    "CameraTemperatureMinWarn",
    "CameraTemperatureMaxSaturated",
    "CameraTemperatureMinSaturated",
    "LensModel",
    "LensPartNumber",
    "LensSerialNumber",
    "FieldOfView",
    "FilterModel",
    "FilterSerialNumber",
    "FocusStepCount",
    "FocusDistance",
    "PeakSpectralSensitivity",
    "RawThermalImageWidth",
    "RawThermalImageHeight",
    "RawThermalImageType",
    "RawValueMedian",
    "RawValueRange",
    "RawValueRangeMin",
    "RawValueRangeMax",
    "GPSValid",
    "GPSLatitude",
    "GPSLatitudeRef",
    "GPSLongitude",
    "GPSLongitudeRef",
    "GPSAltitude",
    "GPSPosition",
    "GPSMapDatum",
    "GPSDilutionOfPrecision",
    "GPSImgDirection",
    "GPSImgDirectionRef",
    "Palette",
    "PaletteColors",
    "PaletteFileName",
    "PaletteMethod",
    "PaletteName",
    "PaletteStretch",
    "AboveColor",
    "BelowColor",
    "OverflowColor",
    "UnderflowColor",
    "Isotherm1Color",
    "Isotherm2Color",
)

# Absolute zero offset used by the Planck relation
KELVIN_OFFSET = 273.15
