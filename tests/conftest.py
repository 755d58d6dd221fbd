"""
Shared fixtures: synthetic .csq streams and fake exiftool / JPEG collaborators.
"""
import re

import numpy as np
import pytest

from csq_reader.constants import MAGIC_SEQUENCE
from csq_reader.utilities import planck_raw

PLANCK = {
    "PlanckR1": "21106.77",
    "PlanckR2": "0.012545258",
    "PlanckB": "1501",
    "PlanckF": "1",
    "PlanckO": "-7340",
}

# Blackbody conditions: no emissivity, window or atmosphere losses
IDEAL_METADATA = {
    "Emissivity": "1.00",
    "ObjectDistance": "0.00 m",
    "ReflectedApparentTemperature": "25.0 C",
    "AtmosphericTemperature": "25.0 C",
    "IRWindowTemperature": "25.0 C",
    "IRWindowTransmission": "1.00",
    "RelativeHumidity": "0.0 %",
    "AtmosphericTransAlpha1": "0.006569",
    "AtmosphericTransAlpha2": "0.012620",
    "AtmosphericTransBeta1": "-0.002276",
    "AtmosphericTransBeta2": "-0.006670",
    "AtmosphericTransX": "1.9",
    "CameraModel": "FLIR T540",
    "RawThermalImageWidth": "5",
    "RawThermalImageHeight": "4",
    **PLANCK,
}

FRAME_ID = re.compile(rb"<frame (\d+)>")


def make_frame(frame_id: int, size: int = 200) -> bytes:
    """A frame: marker, an id tag, then filler up to size bytes."""
    body = MAGIC_SEQUENCE + b"<frame %d>" % frame_id
    return body + b"." * max(0, size - len(body))


def frame_id(frame: bytes) -> int:
    return int(FRAME_ID.search(frame).group(1))


def frame_temperature(frame_id: int) -> float:
    """Temperature the fake decoder encodes for a given frame."""
    return 20.0 + frame_id


def ideal_raw(temp_c: float) -> float:
    constants = [float(PLANCK[k]) for k in ("PlanckR1", "PlanckR2", "PlanckB", "PlanckF", "PlanckO")]
    return float(planck_raw(temp_c, *constants))


class FakeMetadataExtractor:
    """Returns canned metadata; fails on the frame ids in fail_on."""

    def __init__(self, metadata=None, fail_on=()):
        self.metadata = dict(IDEAL_METADATA if metadata is None else metadata)
        self.fail_on = set(fail_on)
        self.calls = []

    def extract(self, frame):
        from csq_reader.exceptions import MetadataToolError

        fid = frame_id(frame)
        self.calls.append(fid)
        if fid in self.fail_on:
            raise MetadataToolError(f"exiftool failed on frame {fid}")
        return dict(self.metadata, FileName=f"frame{fid}.fff")


class FakeDecoder:
    """Returns a 4x5 grid of the blackbody raw value for frame_temperature(id)."""

    def __init__(self, shape=(4, 5), fail_on=()):
        self.shape = shape
        self.fail_on = set(fail_on)

    def decode(self, frame):
        from csq_reader.exceptions import DecodeError

        fid = frame_id(frame)
        if fid in self.fail_on:
            raise DecodeError(f"bad jpeg in frame {fid}")
        return np.full(self.shape, ideal_raw(frame_temperature(fid)), dtype=np.float32)


@pytest.fixture
def metadata():
    return dict(IDEAL_METADATA)


@pytest.fixture
def extractor():
    return FakeMetadataExtractor()


@pytest.fixture
def decoder():
    return FakeDecoder()


@pytest.fixture
def frames():
    sizes = [180, 250, 97, 310, 64]
    return [make_frame(i, size) for i, size in enumerate(sizes)]


@pytest.fixture
def stream_bytes(frames):
    return b"".join(frames)
