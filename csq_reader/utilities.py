"""Radiometric conversion of raw sensor counts to temperature, and temperature units."""

import numpy as np

from .constants import KELVIN_OFFSET
from .models import CalibrationParameters

_f32 = np.float32
_KELVIN = _f32(KELVIN_OFFSET)
_ONE = _f32(1.0)


def planck_raw(temp_c, r1, r2, b, f, o):
    """Raw counts a blackbody at temp_c (°C) produces: R1 / (R2 * (exp(B / T) - F)) - O."""
    return _f32(r1) / (_f32(r2) * (np.exp(_f32(b) / (_f32(temp_c) + _KELVIN)) - _f32(f))) - _f32(o)


def planck_temperature(raw, r1, r2, b, f, o):
    """Inverse of planck_raw: °C for raw counts."""
    raw = np.asarray(raw, dtype=np.float32)
    return _f32(b) / np.log(_f32(r1) / (_f32(r2) * (raw + _f32(o))) + _f32(f)) - _KELVIN


def water_vapour_pressure(relative_humidity, atm_temp_c):
    """Partial pressure of water vapour from relative humidity (%) and air temperature (°C)."""
    t = _f32(atm_temp_c)
    return (_f32(relative_humidity) / _f32(100.0)) * np.exp(
        _f32(1.5587)
        + _f32(0.06939) * t
        - _f32(0.00027816) * t * t
        + _f32(0.00000068455) * t * t * t
    )


def atmospheric_transmission(distance, h2o, alpha1, alpha2, beta1, beta2, trans_x):
    """Transmission over a path of the given length (m)."""
    root_d = np.sqrt(_f32(distance))
    root_h2o = np.sqrt(_f32(h2o))
    x = _f32(trans_x)
    return (
        x * np.exp(-root_d * (_f32(alpha1) + _f32(beta1) * root_h2o))
        + (_ONE - x) * np.exp(-root_d * (_f32(alpha2) + _f32(beta2) * root_h2o))
    )


def raw_to_temperature(raw: np.ndarray, cal: CalibrationParameters) -> np.ndarray:
    """
    Convert a grid of raw sensor counts to °C.

    Corrects for emissivity, atmospheric absorption between object and
    camera, and an external IR window. The window is taken to sit half way
    between object and camera, so both atmospheric paths span half the
    object distance. All arithmetic is float32; invalid physical inputs give
    NaN or inf in the output rather than an error.
    """
    raw = np.asarray(raw, dtype=np.float32)
    with np.errstate(all="ignore"):
        e = _f32(cal.emissivity)
        irt = _f32(cal.window_transmission)
        planck = (cal.planck_r1, cal.planck_r2, cal.planck_b, cal.planck_f, cal.planck_o)

        emiss_wind = _ONE - irt
        refl_wind = _f32(0.0)

        h2o = water_vapour_pressure(cal.relative_humidity, cal.atmospheric_temperature)
        half_distance = _f32(cal.object_distance) / _f32(2.0)
        coefficients = (cal.alpha1, cal.alpha2, cal.beta1, cal.beta2, cal.trans_x)
        tau1 = atmospheric_transmission(half_distance, h2o, *coefficients)
        tau2 = atmospheric_transmission(half_distance, h2o, *coefficients)

        raw_refl1 = planck_raw(cal.reflected_temperature, *planck)
        raw_refl1_attn = (_ONE - e) / e * raw_refl1

        raw_atm1 = planck_raw(cal.atmospheric_temperature, *planck)
        raw_atm1_attn = (_ONE - tau1) / e / tau1 * raw_atm1

        raw_wind = planck_raw(cal.window_temperature, *planck)
        raw_wind_attn = emiss_wind / e / tau1 / irt * raw_wind

        raw_refl2 = planck_raw(cal.reflected_temperature, *planck)
        raw_refl2_attn = refl_wind / e / tau1 / irt * raw_refl2

        raw_atm2 = planck_raw(cal.atmospheric_temperature, *planck)
        raw_atm2_attn = (_ONE - tau2) / e / tau1 / irt / tau2 * raw_atm2

        raw_obj = (
            raw / e / tau1 / irt / tau2
            - raw_atm1_attn
            - raw_atm2_attn
            - raw_wind_attn
            - raw_refl1_attn
            - raw_refl2_attn
        )
        temp_c = planck_temperature(raw_obj, *planck)
    return np.asarray(temp_c, dtype=np.float32)


TEMPERATURE_UNITS = ("C", "F", "K")


def convert_temperature(temp_c, unit: str = "C", diff: bool = False):
    """Express °C values in unit ("C", "F" or "K"); diff=True converts a temperature difference."""
    if unit == "C":
        return temp_c
    if unit == "K":
        return temp_c if diff else temp_c + KELVIN_OFFSET
    if unit == "F":
        return temp_c * 1.8 + (0.0 if diff else 32.0)
    raise ValueError(f"Unknown temperature unit: {unit}. Supported units: {', '.join(TEMPERATURE_UNITS)}")
