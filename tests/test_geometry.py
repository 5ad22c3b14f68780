import numpy as np
import pytest

from iEdit.core.geometry import (
    build_centered_transform,
    inverse_affine_coefficients,
    is_identity,
    rotation_matrix,
    transform_point,
)


def test_default_transform_is_identity() -> None:
    assert is_identity(build_centered_transform(8, 6, 0, 1.0))
    assert is_identity(build_centered_transform(8, 6, 360, 1.0))


def test_rotation_is_clockwise_on_screen() -> None:
    matrix = build_centered_transform(4, 4, 90, 1.0)
    # A point right of the centre moves below it.
    assert transform_point(matrix, 3.0, 2.0) == pytest.approx((2.0, 3.0))


def test_quarter_turns_are_exact() -> None:
    matrix = rotation_matrix(270)
    assert matrix[:2, :2].tolist() == [[0.0, 1.0], [-1.0, 0.0]]


def test_scale_is_about_the_centre() -> None:
    matrix = build_centered_transform(4, 4, 0, 0.5)
    assert transform_point(matrix, 2.0, 2.0) == pytest.approx((2.0, 2.0))
    assert transform_point(matrix, 0.0, 0.0) == pytest.approx((1.0, 1.0))


def test_rotation_then_scale_keeps_centre_fixed() -> None:
    matrix = build_centered_transform(10, 6, 37, 1.7)
    assert transform_point(matrix, 5.0, 3.0) == pytest.approx((5.0, 3.0))


def test_inverse_coefficients_undo_forward_matrix() -> None:
    matrix = build_centered_transform(10, 6, 30, 0.5)
    a, b, c, d, e, f = inverse_affine_coefficients(matrix)
    x, y = transform_point(matrix, 1.0, 2.0)
    assert (a * x + b * y + c, d * x + e * y + f) == pytest.approx((1.0, 2.0))


def test_identity_coefficients() -> None:
    coefficients = inverse_affine_coefficients(np.eye(3))
    assert coefficients == pytest.approx((1.0, 0.0, 0.0, 0.0, 1.0, 0.0))


def test_non_positive_scale_is_rejected() -> None:
    with pytest.raises(ValueError):
        build_centered_transform(4, 4, 0, 0.0)
