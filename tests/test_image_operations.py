import pytest
from PIL import Image

from utils.image_operations import calculate_target_size, resize_to_fit


def test_matching_aspect_ratio_hits_both_bounds():
    assert calculate_target_size(1600, 1200, 800, 600) == (800, 600)


def test_width_constraint_applies_first():
    assert calculate_target_size(1000, 500, 800, 800) == (800, 400)


def test_height_constraint_after_width():
    # 800x1600 fits the width but is too tall: height clamps, width follows.
    assert calculate_target_size(800, 1600, 800, 600) == (300, 600)


def test_both_constraints_sequentially():
    # width clamp gives 1000x750, which is still too tall for 500
    assert calculate_target_size(2000, 1500, 1000, 500) == (667, 500)


@pytest.mark.parametrize("size", [(1, 1), (640, 480), (800, 600), (799, 10)])
def test_sizes_within_bounds_are_unchanged(size):
    assert calculate_target_size(*size, 800, 600) == size


def test_never_below_one_pixel():
    assert calculate_target_size(10000, 1, 100, 100) == (100, 1)
    # Width clamp to 50 leaves a 5000px height; the height clamp then
    # shrinks the width to 0.5px, which rounds up to one pixel.
    assert calculate_target_size(100, 10000, 50, 50) == (1, 50)


def test_rounds_half_up():
    # 3x2 into width 1 -> height 0.666..., rounds to 1
    assert calculate_target_size(3, 2, 1, 10) == (1, 1)
    # 5x3 into width 3 -> height 1.8 -> 2
    assert calculate_target_size(5, 3, 3, 10) == (3, 2)
    # 4x3 into width 2 -> height exactly 1.5 -> 2
    assert calculate_target_size(4, 3, 2, 10) == (2, 2)


def test_zero_height_rejected():
    with pytest.raises(ValueError):
        calculate_target_size(10, 0, 5, 5)


def test_resize_to_fit_returns_new_image():
    img = Image.new("RGB", (1000, 500), color="blue")
    resized = resize_to_fit(img, 800, 800)
    assert resized.size == (800, 400)
    assert img.size == (1000, 500)


def test_resize_to_fit_copies_when_small_enough():
    img = Image.new("RGB", (20, 10), color=(10, 200, 30))
    resized = resize_to_fit(img, 800, 600)
    assert resized.size == (20, 10)
    assert resized is not img
    assert resized.getpixel((5, 5)) == (10, 200, 30)
