"""Plot the gradient splines behind the default palette.

Requires the ``plot`` extra (matplotlib).
"""

from __future__ import annotations

from argparse import ArgumentParser

import matplotlib.pyplot as plt
import numpy as np

from adaptive_mandelbrot import generate_palette
from adaptive_mandelbrot.palette import (
    CHANNEL_MAX,
    GRADIENT_BLUE,
    GRADIENT_GREEN,
    GRADIENT_POSITIONS,
    GRADIENT_RED,
    gradient_splines,
)


def main() -> None:
    parser = ArgumentParser(description="Plot the palette gradient and its control points.")
    parser.add_argument("--size", type=int, default=1024, help="number of palette entries to show")
    parser.add_argument("--output", type=str, default=None, help="save the figure instead of showing it")
    opt = parser.parse_args()

    positions = np.linspace(0.0, 1.0, 512)
    fig, (curves, strip) = plt.subplots(2, 1, figsize=(8, 5), height_ratios=(4, 1), sharex=True)

    controls = (GRADIENT_RED, GRADIENT_GREEN, GRADIENT_BLUE)
    for spline, values, color in zip(gradient_splines(), controls, ("red", "green", "blue")):
        curves.plot(positions, spline.sample(positions), color=color, lw=1.5)
        curves.plot(GRADIENT_POSITIONS, np.asarray(values) * CHANNEL_MAX, "o", color=color)

    curves.set_ylim(-5, CHANNEL_MAX + 5)
    curves.set_ylabel("channel value")
    curves.grid(visible=True, which="major", axis="both", linestyle=":", color="gray", lw=0.5)

    palette = generate_palette(opt.size)
    strip.imshow(palette[np.newaxis, :, :], aspect="auto", extent=(0.0, 1.0, 0.0, 1.0))
    strip.set_yticks([])
    strip.set_xlabel("palette position")

    fig.suptitle(f"Palette gradient ({opt.size} entries)")
    if opt.output:
        fig.savefig(opt.output, dpi=150)
    else:
        plt.show()


if __name__ == "__main__":
    main()
