from __future__ import annotations

import math

import pytest

from matselect.modules.schema import DENSITY, display_name
from matselect.modules.utils import format_deviation, format_number, safe_float


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("42", 42.0),
        (" 3.5 ", 3.5),
        (7, 7.0),
        ("", None),
        ("n/a", None),
        (None, None),
        (True, None),
        (float("nan"), None),
    ],
)
def test_safe_float(value, expected):
    assert safe_float(value) == expected


def test_safe_float_keeps_infinity_and_default():
    assert math.isinf(safe_float("inf"))
    assert safe_float("", 0.0) == 0.0


def test_formatters():
    assert format_number(3.14159) == "3.14"
    assert format_number(None) == "—"
    assert format_number("x", placeholder="n/a") == "n/a"
    assert format_deviation(5) == "+5.0%"
    assert format_deviation(-2.5, percentage=False) == "-2.5"
    assert format_deviation(None) == "—"


def test_display_names():
    assert display_name(DENSITY) == "Density (kg/m³)"
    assert display_name("HV") == "HV"


def test_package_exports_are_lazy():
    import matselect.modules as modules
    from matselect.modules.correlation import correlation_matrix
    from matselect.modules.pca import pca_project

    assert modules.correlation_matrix is correlation_matrix
    assert modules.pca_project is pca_project
    with pytest.raises(AttributeError):
        modules.does_not_exist
