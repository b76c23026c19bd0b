"""Band-limited impulse table generation for the sound synthesis."""

from __future__ import annotations

import math
import sys
from typing import Optional, Sequence

__all__ = [
    "IMPULSE_HEIGHT",
    "IMPULSE_N_SHIFT",
    "IMPULSE_W_SHIFT",
    "IMPULSE_CUTOFF",
    "gen_impulsetab",
    "format_impulse_header",
    "main",
]

IMPULSE_HEIGHT = float(1 << 24)

IMPULSE_N_SHIFT = 7  # 128 shifted impulses
IMPULSE_W_SHIFT = 5  # 32 samples per impulse
IMPULSE_CUTOFF = 1.0  # cutoff at the Nyquist limit

_MAX_CORRECTIONS = 20


def _sinc(x: float) -> float:
    a = math.pi * x
    if a == 0.0:
        return 1.0
    return math.sin(a) / a


def _blackman(n: float, m: float) -> float:
    return 0.42 - 0.5 * math.cos(2 * n * math.pi / m) + 0.08 * math.cos(4 * n * math.pi / m)


def _impulse_row(shift: float, dcorr: float, cutoff: float, width: int) -> list[int]:
    m = width // 2
    row = []
    for i in range(-m + 1, m + 1):
        xd = dcorr * IMPULSE_HEIGHT * _sinc((i - shift) * cutoff) * _blackman(i - shift + width // 2, width)
        row.append(round(xd))
    return row


def gen_impulsetab(w_shift: int, n_shift: int, cutoff: float) -> list[int]:
    """Return ``2**n_shift`` impulses of ``2**w_shift`` samples, row by row.

    Row ``k`` is a windowed sinc shifted by ``k / 2**n_shift`` samples and
    scaled so its samples sum to :data:`IMPULSE_HEIGHT`.
    """
    width = 1 << w_shift
    n = 1 << n_shift
    m = width // 2
    height = int(IMPULSE_HEIGHT)

    table = [0] * (width * n)
    # Row 0 is an unshifted impulse; computing it would need sinc(0).
    table[m - 1] = height

    for j_l in range(1, n):
        shift = j_l / n
        div = IMPULSE_HEIGHT
        dcorr = cutoff
        attempts = 0
        while True:
            corr = height - sum(_impulse_row(shift, dcorr, cutoff, width))
            dcorr *= 1.0 + corr / div
            div *= 1.3
            if corr == 0:
                break
            attempts += 1
            if attempts > _MAX_CORRECTIONS:
                break

        row = _impulse_row(shift, dcorr, cutoff, width)
        row[m] += height - sum(row)
        start = j_l * width
        table[start:start + width] = row

    return table


def format_impulse_header(table: Sequence[int], w_shift: int, n_shift: int) -> str:
    """Return the impulse table as a C header defining ``base_impulse``."""
    width = 1 << w_shift
    expected = width * (1 << n_shift)
    if len(table) != expected:
        raise ValueError(f"table has {len(table)} entries, expected {expected}")
    parts = [
        f"#define IMPULSE_N_SHIFT {n_shift}\n",
        f"#define IMPULSE_W_SHIFT {w_shift}\n",
        "static const int32_t base_impulse[] = {",
    ]
    for i, value in enumerate(table):
        if i % width == 0:
            parts.append("\n\t")
        parts.append(f"{value:9d},")
    parts.append("\n};\n")
    return "".join(parts)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Write the default impulse table header to standard output."""
    table = gen_impulsetab(IMPULSE_W_SHIFT, IMPULSE_N_SHIFT, IMPULSE_CUTOFF)
    sys.stdout.write(format_impulse_header(table, IMPULSE_W_SHIFT, IMPULSE_N_SHIFT))
    return 0


if __name__ == "__main__":
    sys.exit(main())