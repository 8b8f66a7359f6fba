"""Seeded, reproducible noise for preview data.

None of this is random in any statistical or security sense. A stable
string (usually an entity id) becomes a 32-bit seed, and a seed becomes
a value in [0, 1) through a closed-form trigonometric generator, so the
same card always renders the same fake history.
"""

import math

_FNV_OFFSET_BASIS = 2166136261
_FNV_PRIME = 16777619
_UINT32_MASK = 0xFFFFFFFF


def hash_string(value: str) -> int:
    """FNV-1a over UTF-16 code units, wrapped to an unsigned 32-bit int."""
    encoded = value.encode("utf-16-le", "surrogatepass")
    hash_value = _FNV_OFFSET_BASIS
    for offset in range(0, len(encoded), 2):
        code_unit = encoded[offset] | (encoded[offset + 1] << 8)
        hash_value ^= code_unit
        hash_value = (hash_value * _FNV_PRIME) & _UINT32_MASK
    return hash_value


def seeded_unit(seed: float) -> float:
    """``frac(sin(seed) * 10000)``, always in [0, 1)."""
    x = math.sin(seed) * 10000
    return x - math.floor(x)


def centered_noise(seed: float, amplitude: float) -> float:
    """Seeded noise spread evenly around zero: ``(unit - 0.5) * amplitude``."""
    return (seeded_unit(seed) - 0.5) * amplitude
