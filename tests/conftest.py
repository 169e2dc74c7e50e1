from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest
from PIL import Image


def write_image(path: Path, array: np.ndarray) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.fromarray(array.astype(np.uint8)).save(path)
    return path


def solid(width: int, height: int, value: int) -> np.ndarray:
    return np.full((height, width, 3), value, dtype=np.uint8)


@pytest.fixture
def black_with_square(tmp_path: Path):
    """Referência 100x100 preta e atual com um quadrado branco 10x10 em (45,45)-(55,55)."""

    reference = solid(100, 100, 0)
    current = reference.copy()
    current[45:55, 45:55] = 255
    return (
        write_image(tmp_path / "reference.png", reference),
        write_image(tmp_path / "current.png", current),
    )
