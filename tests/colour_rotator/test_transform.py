from pathlib import Path

import numpy as np
import pytest

from colourworks.apps.colour_rotator.core.config import RotatorSettings, build_runtime_config
from colourworks.apps.colour_rotator.core.imaging import RgbaImage
from colourworks.apps.colour_rotator.core.transform import check_modifier, rotate
from colourworks.libs.vision.hsv import hsv_to_rgb, rgb_to_hsv
from colourworks.libs.vision.hue_sectors import CircleSector, signed_distance


def _image_from_hsv(hsv_rows, alpha=1.0) -> RgbaImage:
    hsv = np.asarray(hsv_rows, dtype=np.float32)
    rgb = hsv_to_rgb(hsv)
    pixels = np.concatenate([rgb, np.full(rgb.shape[:-1] + (1,), alpha, np.float32)], axis=-1)
    return RgbaImage(pixels)


def _hsv_of(image: RgbaImage) -> np.ndarray:
    return rgb_to_hsv(image.pixels[..., :3])


def test_red_pixel_lands_in_middle_of_target_band():
    image = RgbaImage(np.array([[[1.0, 0.0, 0.0, 0.5]]], dtype=np.float32))

    rotated = rotate(image, CircleSector(-45.0, 45.0), CircleSector(195.0, 255.0))

    hue, saturation, value = _hsv_of(rotated)[0, 0]
    assert hue == pytest.approx(225.0, abs=1e-3)
    assert saturation == pytest.approx(1.0, abs=1e-6)
    assert value == pytest.approx(1.0, abs=1e-6)
    np.testing.assert_allclose(rotated.pixels[0, 0, :3], [0.0, 0.25, 1.0], atol=1e-5)
    assert rotated.pixels[0, 0, 3] == np.float32(0.5)


def test_pixels_outside_source_sector_are_untouched():
    pixels = np.array(
        [[[0.2, 0.8, 0.3, 0.7], [0.1, 0.2, 0.9, 1.0]]],
        dtype=np.float32,
    )
    image = RgbaImage(pixels.copy())

    rotated = rotate(
        image, CircleSector.around(0.0, 90.0), CircleSector.around(60.0, 90.0), 0.5, -0.5
    )

    assert np.array_equal(rotated.pixels, pixels)


def test_input_buffer_is_not_modified():
    image = _image_from_hsv([[[10.0, 0.8, 0.9], [200.0, 0.5, 0.5]]])
    original = image.pixels.copy()

    rotated = rotate(image, CircleSector.around(0.0, 90.0), CircleSector.around(120.0, 90.0))

    assert np.array_equal(image.pixels, original)
    assert rotated is not image
    assert not np.array_equal(rotated.pixels, original)


def test_in_sector_hue_follows_sector_reprojection():
    source = CircleSector(340.0, 40.0)
    target = CircleSector(100.0, 220.0)
    image = _image_from_hsv([[[350.0, 0.6, 0.7], [10.0, 0.6, 0.7], [39.0, 0.6, 0.7]]])
    original_hues = _hsv_of(image)[0, :, 0]

    rotated = rotate(image, source, target)

    new_hues = _hsv_of(rotated)[0, :, 0]
    for before, after in zip(original_hues, new_hues):
        expected = target.linear_interpolate(source.alpha_of(float(before)))
        assert abs(signed_distance(float(after), expected)) < 1e-2


def test_modifiers_shift_and_clamp_saturation_and_value():
    image = _image_from_hsv([[[10.0, 0.9, 0.6], [20.0, 0.3, 0.9]]])
    before = _hsv_of(image)[0]
    sector = CircleSector.around(0.0, 90.0)

    rotated = rotate(image, sector, sector, saturation_modifier=0.5, value_modifier=-0.2)

    after = _hsv_of(rotated)[0]
    assert after[0, 1] == pytest.approx(1.0, abs=1e-5)
    assert after[0, 2] == pytest.approx(before[0, 2] - 0.2, abs=1e-5)
    assert after[1, 1] == pytest.approx(before[1, 1] + 0.5, abs=1e-5)
    assert after[1, 2] == pytest.approx(before[1, 2] - 0.2, abs=1e-5)

    darkened = rotate(image, sector, sector, value_modifier=-1.0)
    np.testing.assert_allclose(darkened.pixels[0, :, :3], 0.0, atol=1e-6)
    np.testing.assert_array_equal(darkened.pixels[..., 3], image.pixels[..., 3])


def test_zero_modifiers_keep_saturation_and_value():
    image = _image_from_hsv([[[30.0, 0.4, 0.8]]], alpha=0.25)
    before = _hsv_of(image)[0, 0]

    rotated = rotate(image, CircleSector.around(30.0, 60.0), CircleSector.around(250.0, 60.0))

    after = _hsv_of(rotated)[0, 0]
    assert after[0] == pytest.approx(250.0, abs=1e-2)
    assert after[1] == pytest.approx(before[1], abs=1e-5)
    assert after[2] == pytest.approx(before[2], abs=1e-5)
    assert rotated.pixels[0, 0, 3] == np.float32(0.25)


def test_modifiers_out_of_range_are_rejected():
    image = RgbaImage.blank(2, 2)
    sector = CircleSector.around(0.0, 90.0)
    with pytest.raises(ValueError):
        rotate(image, sector, sector, saturation_modifier=1.5)
    with pytest.raises(ValueError):
        rotate(image, sector, sector, value_modifier=-1.01)


def test_rotate_and_config_share_modifier_check():
    image = RgbaImage.blank(1, 1)
    sector = CircleSector.around(0.0, 90.0)
    message = r"Saturation modifier must be in the range \[-1, 1\], got 1.5"

    with pytest.raises(ValueError, match=message):
        rotate(image, sector, sector, saturation_modifier=1.5)
    with pytest.raises(ValueError, match=message):
        build_runtime_config(
            settings=RotatorSettings(),
            input_files=[Path("image.png")],
            hue=0.0,
            saturation_modifier=1.5,
        )
    assert check_modifier("Value modifier", -1) == -1.0


def test_empty_image_is_returned_as_copy():
    image = RgbaImage(np.zeros((0, 0, 4), dtype=np.float32))
    rotated = rotate(image, CircleSector(0.0, 10.0), CircleSector(20.0, 30.0))
    assert rotated.pixels.shape == (0, 0, 4)
    assert rotated is not image


def test_rgba_image_pixel_access():
    image = RgbaImage.blank(3, 2, fill=(0.1, 0.2, 0.3, 1.0))
    assert image.size == (3, 2)
    assert image.get_pixel(2, 1) == pytest.approx((0.1, 0.2, 0.3, 1.0))

    image.set_pixel(2, 1, (1.5, 0.5, -0.2, 0.4))
    assert image.get_pixel(2, 1) == pytest.approx((1.0, 0.5, 0.0, 0.4))

    with pytest.raises(ValueError):
        RgbaImage(np.zeros((2, 2, 3)))
