import numpy as np
from PIL import Image

from iEdit.core.filters import apply_blur, apply_color_adjustments
from iEdit.core.filters.numpy_executor import apply_saturation_vectorized
from iEdit.core.filters.pillow_executor import apply_tone_lut, build_tone_lut


def _image(pixels: np.ndarray) -> Image.Image:
    return Image.fromarray(pixels)


def test_neutral_tone_lut_is_identity() -> None:
    assert build_tone_lut(1.0, 1.0) == list(range(256))


def test_zero_brightness_lut_is_black() -> None:
    assert set(build_tone_lut(0.0, 1.0)) == {0}


def test_zero_contrast_lut_is_mid_grey() -> None:
    assert set(build_tone_lut(1.0, 0.0)) == {128}


def test_brightness_runs_before_contrast() -> None:
    # Brightness 200% saturates 200 to white before contrast 50% pulls it back.
    lut = build_tone_lut(2.0, 0.5)
    assert lut[200] == round((1.0 - 0.5) * 0.5 * 255 + 0.5 * 255)


def test_tone_lut_leaves_alpha_untouched() -> None:
    pixels = np.zeros((2, 2, 4), dtype=np.uint8)
    pixels[..., :3] = 100
    pixels[..., 3] = 37
    result = np.asarray(apply_tone_lut(_image(pixels), build_tone_lut(0.0, 1.0)))
    assert np.all(result[..., :3] == 0)
    assert np.all(result[..., 3] == 37)


def test_zero_saturation_is_greyscale(make_bitmap) -> None:
    pixels = make_bitmap().pixels
    result = apply_saturation_vectorized(pixels, 0.0)
    assert np.array_equal(result[..., 0], result[..., 1])
    assert np.array_equal(result[..., 1], result[..., 2])
    assert np.array_equal(result[..., 3], pixels[..., 3])


def test_unit_saturation_is_identity(make_bitmap) -> None:
    pixels = make_bitmap().pixels
    assert np.array_equal(apply_saturation_vectorized(pixels, 1.0), pixels)


def test_neutral_adjustments_return_a_copy(gradient_bitmap) -> None:
    source = gradient_bitmap.to_pil()
    result = apply_color_adjustments(source, 100, 100, 100)
    assert result is not source
    assert np.array_equal(np.asarray(result), gradient_bitmap.pixels)


def test_zero_blur_returns_a_copy(gradient_bitmap) -> None:
    source = gradient_bitmap.to_pil()
    result = apply_blur(source, 0.0)
    assert result is not source
    assert np.array_equal(np.asarray(result), gradient_bitmap.pixels)


def test_blur_smooths_a_checkerboard() -> None:
    pixels = np.zeros((16, 16, 4), dtype=np.uint8)
    checker = (np.indices((16, 16)).sum(axis=0) % 2).astype(bool)
    pixels[checker, :3] = 255
    pixels[..., 3] = 255

    blurred = np.asarray(apply_blur(_image(pixels), 2.0))

    assert blurred.shape == pixels.shape
    assert blurred[..., 0].std() < pixels[..., 0].std() / 4


def test_blur_does_not_bleed_colour_from_transparent_pixels() -> None:
    pixels = np.zeros((9, 9, 4), dtype=np.uint8)
    pixels[4, 4] = (255, 0, 0, 255)

    blurred = np.asarray(apply_blur(_image(pixels), 1.5))

    visible = blurred[..., 3] > 0
    assert visible.sum() > 1
    # Premultiplied blurring keeps the spread pixels red, not darkened.
    assert np.all(blurred[visible][:, 0] >= 200)
    assert np.all(blurred[visible][:, 1:3] == 0)


def test_blur_fades_canvas_edges_to_transparent() -> None:
    pixels = np.full((40, 40, 4), 255, dtype=np.uint8)

    blurred = np.asarray(apply_blur(_image(pixels), 5.0))

    assert blurred[0, 0, 3] < 255
    assert blurred[0, 20, 3] < 255
    assert blurred[20, 20, 3] >= 250
    # Colour stays white where coverage falls off.
    assert np.all(blurred[blurred[..., 3] > 32][:, :3] >= 240)
