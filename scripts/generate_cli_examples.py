from __future__ import annotations

import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

EXAMPLES_ROOT = Path("examples/cli-options")
BASE_ARGS = ["--x-res", "240", "--y-res", "160", "--max-iterations", "256"]


@dataclass
class Example:
    name: str
    args: list[str]
    output: Path

    def full_args(self) -> list[str]:
        return ["python", "render.py", *self.args, "--output", str(self.output)]


def _example(name: str, *args: str, filename: str = "image.png") -> Example:
    return Example(name=name, args=[*BASE_ARGS, *args], output=EXAMPLES_ROOT / name / filename)


EXAMPLES: list[Example] = [
    _example("default"),
    _example("max-iterations", "--max-iterations", "2048", filename="high-iterations.png"),
    _example("x-res", "--x-res", "360", filename="wide-resolution.png"),
    _example("y-res", "--y-res", "96", filename="short-resolution.png"),
    _example("x-center", "--x-center", "-1.401155", "--scale", "0.02", filename="feigenbaum-point.png"),
    _example("y-center", "--y-center", "0.35", filename="upper-plane.png"),
    _example(
        "deep-zoom",
        "--x-center", "-0.743643887037158704752191506114774",
        "--y-center", "0.131825904205311970493132056385139",
        "--scale", "1e-25",
        filename="seahorse-valley.png",
    ),
    _example("corners", "--upper-left", "-0.75,0.15", "--lower-right", "-0.7,0.11", filename="corners.png"),
    _example("precision", "--precision", "128", filename="precision-128.png"),
    _example("workers", "--workers", "0", filename="single-thread.png"),
    _example("exhaustive", "--exhaustive", filename="exhaustive.png"),
    _example("palette-scale", "--palette-scale", "4", filename="fast-cycle.png"),
    _example("inside-color", "--inside-color", "#0a3ba0", filename="custom-interior.png"),
    _example("format", "--format", "webp", filename="custom.webp"),
    _example("verbose", "--verbose", filename="diagnostic.png"),
]


def _ensure_clean(paths: Iterable[Path]) -> None:
    for path in paths:
        if path.exists():
            shutil.rmtree(path)


def _verify(example: Example) -> None:
    if not example.output.is_file():
        raise RuntimeError(f"Expected file {example.output} was not created")


def main() -> None:
    EXAMPLES_ROOT.mkdir(parents=True, exist_ok=True)
    for example in EXAMPLES:
        print(f"\n[cli-example] {example.name}")
        _ensure_clean([example.output.parent])
        example.output.parent.mkdir(parents=True, exist_ok=True)
        subprocess.run(example.full_args(), check=True)
        _verify(example)
    print("\nAll CLI examples generated successfully.")


if __name__ == "__main__":
    main()
