from __future__ import annotations

import pytest

from matselect.modules.catalog import MaterialCatalog
from matselect.modules.correlation import (
    correlation_frame,
    correlation_matrix,
    pearson,
    strongest_pairs,
)
from matselect.modules.errors import InputPreconditionError
from matselect.modules.schema import (
    DENSITY,
    ELASTIC_MODULUS,
    POISSONS_RATIO,
    PROPERTY_COLUMNS,
    TENSILE_STRENGTH,
    YIELD_STRENGTH,
)


def _records(**columns):
    size = len(next(iter(columns.values())))
    return MaterialCatalog(
        {"Material": f"M{i}", **{name: values[i] for name, values in columns.items()}}
        for i in range(size)
    )


def test_matrix_is_symmetric_with_unit_diagonal(mixed_catalog):
    matrix = correlation_matrix(mixed_catalog)

    size = len(PROPERTY_COLUMNS)
    assert len(matrix) == size
    for i in range(size):
        assert matrix[i][i] == 1.0
        for j in range(size):
            assert matrix[i][j] == pytest.approx(matrix[j][i], abs=1e-12)
            assert -1.0 <= matrix[i][j] <= 1.0


def test_constant_property_correlates_to_zero(mixed_catalog):
    frame = correlation_frame(mixed_catalog)

    assert frame.loc[POISSONS_RATIO, TENSILE_STRENGTH] == 0
    assert frame.loc[TENSILE_STRENGTH, POISSONS_RATIO] == 0
    assert frame.loc[POISSONS_RATIO, POISSONS_RATIO] == 1


def test_perfect_linear_relationships():
    catalog = _records(
        **{
            TENSILE_STRENGTH: [100, 200, 300, 400],
            YIELD_STRENGTH: [50, 100, 150, 200],
            DENSITY: [9000, 8000, 7000, 6000],
        }
    )

    frame = correlation_frame(catalog, [TENSILE_STRENGTH, YIELD_STRENGTH, DENSITY])

    assert frame.loc[TENSILE_STRENGTH, YIELD_STRENGTH] == pytest.approx(1.0)
    assert frame.loc[TENSILE_STRENGTH, DENSITY] == pytest.approx(-1.0)


def test_fewer_than_three_pairs_reports_zero():
    catalog = _records(
        **{
            TENSILE_STRENGTH: [100, 200, 300, 400],
            YIELD_STRENGTH: [50, None, None, 200],
        }
    )

    matrix = correlation_matrix(catalog, [TENSILE_STRENGTH, YIELD_STRENGTH])

    assert matrix == [[1.0, 0.0], [0.0, 1.0]]


def test_only_records_with_both_values_are_paired():
    # The third record would break the linear fit if it were paired with a 0.
    catalog = _records(
        **{
            TENSILE_STRENGTH: [100, 200, 300, 400],
            YIELD_STRENGTH: [10, 20, None, 40],
        }
    )

    matrix = correlation_matrix(catalog, [TENSILE_STRENGTH, YIELD_STRENGTH])

    assert matrix[0][1] == pytest.approx(1.0)


def test_single_property_matrix():
    catalog = _records(**{ELASTIC_MODULUS: [1, 2, 3]})

    assert correlation_matrix(catalog, [ELASTIC_MODULUS]) == [[1.0]]


def test_non_numeric_property_is_rejected(mixed_catalog):
    with pytest.raises(InputPreconditionError) as excinfo:
        correlation_matrix(mixed_catalog, [TENSILE_STRENGTH, "Material"])

    assert any("Material" in issue for issue in excinfo.value.issues)


def test_non_numeric_values_are_rejected():
    catalog = _records(**{TENSILE_STRENGTH: [1, 2, 3], YIELD_STRENGTH: [1, "strong", 3]})

    with pytest.raises(InputPreconditionError):
        correlation_matrix(catalog, [TENSILE_STRENGTH, YIELD_STRENGTH])


def test_pearson_handles_degenerate_samples():
    assert pearson([1, 2], [2, 4]) == 0.0
    assert pearson([1, 1, 1], [1, 2, 3]) == 0.0
    assert pearson([1, 2, 3], [3, 2, 1]) == pytest.approx(-1.0)
    with pytest.raises(ValueError):
        pearson([1, 2, 3], [1, 2])


def test_strongest_pairs_orders_by_absolute_value():
    catalog = _records(
        **{
            TENSILE_STRENGTH: [100, 200, 300, 400],
            YIELD_STRENGTH: [50, 100, 150, 200],
            DENSITY: [9000, 6000, 8000, 7000],
        }
    )
    frame = correlation_frame(catalog, [TENSILE_STRENGTH, YIELD_STRENGTH, DENSITY])

    pairs = strongest_pairs(frame, limit=2)

    assert pairs[0][:2] == (TENSILE_STRENGTH, YIELD_STRENGTH)
    assert pairs[0][2] == pytest.approx(1.0)
    assert len(pairs) == 2


def test_empty_property_list_gives_empty_matrix(mixed_catalog):
    assert correlation_matrix(mixed_catalog, []) == []
    assert correlation_frame(mixed_catalog, []).empty
