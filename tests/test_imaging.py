from __future__ import annotations

from pathlib import Path

import numpy as np
from PIL import Image

from visual_regression import imaging
from visual_regression.imaging import Region

from conftest import solid


def test_load_image_returns_rgb(tmp_path: Path) -> None:
    path = tmp_path / "rgba.png"
    Image.new("RGBA", (4, 3), (10, 20, 30, 128)).save(path)

    image = imaging.load_image(path)

    assert image.shape == (3, 4, 3)
    assert image.dtype == np.uint8


def test_load_image_missing(tmp_path: Path) -> None:
    assert imaging.load_image(tmp_path / "nope.png") is None


def test_blank_image_is_white() -> None:
    image = imaging.blank_image(7, 5)

    assert image.shape == (5, 7, 3)
    assert np.all(image == 255)


def test_resize_noop_returns_same_object() -> None:
    image = solid(10, 10, 3)

    assert imaging.resize(image, 10, 10) is image
    assert imaging.resize(image, 20, 5).shape == (5, 20, 3)


def test_binarize_floor() -> None:
    gray = np.array([[0, 1, 2], [254, 255, 0]], dtype=np.uint8)

    mask = imaging.binarize(gray, floor=2)

    assert mask.tolist() == [[0, 0, 255], [255, 255, 0]]


def test_find_regions_external_only() -> None:
    mask = np.zeros((100, 100), dtype=np.uint8)
    # hollow ring with a blob inside, plus a separate blob
    mask[10:50, 10:50] = 255
    mask[14:46, 14:46] = 0
    mask[28:32, 28:32] = 255
    mask[80:90, 80:90] = 255

    regions = imaging.find_regions(mask)

    assert len(regions) == 2
    regions.sort(key=lambda region: region.center_x)
    assert abs(regions[0].center_x - 29.5) <= 0.5
    assert abs(regions[0].center_y - 29.5) <= 0.5
    assert abs(regions[1].center_x - 84.5) <= 0.5


def test_find_regions_empty_mask() -> None:
    assert imaging.find_regions(np.zeros((10, 10), dtype=np.uint8)) == []


def test_draw_regions_does_not_mutate_input() -> None:
    image = solid(40, 40, 0)
    original = image.copy()

    annotated = imaging.draw_regions(image, [Region(20.0, 20.0, 8.0)], color=(255, 0, 0), thickness=2)

    assert np.array_equal(image, original)
    assert annotated is not image
    assert annotated[20, 28].tolist() == [255, 0, 0]


def test_build_composite_layout() -> None:
    reference = solid(5, 4, 10)
    annotated = solid(5, 4, 20)
    diff = solid(5, 4, 30)

    composite = imaging.build_composite(reference, annotated, diff)

    assert composite.shape == (4, 15, 3)
    assert np.all(composite[:, :5] == 10)
    assert np.all(composite[:, 5:10] == 20)
    assert np.all(composite[:, 10:] == 30)


def test_absolute_difference_and_grayscale() -> None:
    reference = solid(3, 3, 200)
    current = solid(3, 3, 50)

    diff = imaging.absolute_difference(reference, current)

    assert np.all(diff == 150)
    assert np.all(imaging.to_grayscale(diff) == 150)


def test_save_image_roundtrip(tmp_path: Path) -> None:
    image = solid(6, 6, 77)
    path = tmp_path / "out.png"

    imaging.save_image(image, path)

    assert np.array_equal(imaging.load_image(path), image)
