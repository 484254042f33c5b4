from __future__ import annotations

import pytest

from matselect.modules.catalog import MaterialCatalog, RequirementSpec
from matselect.modules.deviation import (
    CLOSE,
    FAR,
    SOMEWHAT_CLOSE,
    VERY_CLOSE,
    closeness_band,
    closeness_table,
    deviation,
    deviations,
    is_percentage,
    order_by_total_deviation,
)
from matselect.modules.ranking import rank
from matselect.modules.schema import DENSITY, POISSONS_RATIO, PROPERTY_COLUMNS, TENSILE_STRENGTH

from conftest import make_record, make_requirements


def test_exact_match_has_zero_deviation(pair_catalog):
    requirements = make_requirements(500, 300, 200000, 80000, 0.3, 7800)
    rows = deviations(rank(pair_catalog, requirements), requirements)

    assert rows[0].deviations == {prop: 0.0 for prop in PROPERTY_COLUMNS}
    assert rows[0].total_absolute == 0


def test_percentage_deviation_is_signed():
    assert deviation(550, 500) == pytest.approx(10.0)
    assert deviation(450, 500) == pytest.approx(-10.0)
    assert is_percentage(500)


def test_zero_target_reports_absolute_difference():
    assert deviation(5, 0) == 5
    assert deviation(-2.5, 0) == -2.5
    assert not is_percentage(0)


def test_zero_weight_properties_are_still_reported(pair_catalog):
    requirements = make_requirements(500, 300, 200000, 80000, 0.3, 7800).replace(DENSITY, weight=0.0)
    rows = deviations(rank(pair_catalog, requirements), requirements)

    second = rows[1]
    assert set(second.deviations) == set(PROPERTY_COLUMNS)
    assert second.deviations[DENSITY] == pytest.approx((7850 - 7800) / 7800 * 100)


def test_missing_values_deviate_from_zero():
    catalog = MaterialCatalog([make_record("Hollow", 500, 300, 200000, 80000, 0.3, None)])
    requirements = RequirementSpec.default()

    rows = deviations(rank(catalog, requirements), requirements)

    assert rows[0].deviations[DENSITY] == pytest.approx(-100.0)


def test_total_deviation_ordering_is_independent_of_distance():
    # "Balanced" is nearer in normalized distance while "Skewed" has the
    # smaller total percentage deviation.
    catalog = MaterialCatalog(
        [
            make_record("Balanced", 520, 310, 200000, 80000, 0.36, 7800),
            make_record("Skewed", 500, 300, 200000, 80000, 0.3, 8800),
            make_record("Anchor", 400, 250, 190000, 78000, 0.1, 7000),
        ]
    )
    requirements = make_requirements(500, 300, 200000, 80000, 0.3, 7800)

    ranked = rank(catalog, requirements, k=None)
    rows = deviations(ranked, requirements)
    by_total = order_by_total_deviation(rows)

    assert [row.label for row in rows] == [m.label for m in ranked]
    assert [row.rank for row in rows] == [1, 2, 3]
    assert by_total[0].label == "Skewed"
    # The distance ordering is left untouched.
    assert rows[0].label == "Balanced"


def test_total_deviation_ties_keep_input_order():
    catalog = MaterialCatalog(
        [
            make_record("Over", 550, 300, 200000, 80000, 0.3, 7800),
            make_record("Under", 450, 300, 200000, 80000, 0.3, 7800),
        ]
    )
    requirements = make_requirements(500, 300, 200000, 80000, 0.3, 7800)

    rows = deviations(rank(catalog, requirements, k=None), requirements)

    assert rows[0].total_absolute == pytest.approx(rows[1].total_absolute)
    assert [row.label for row in order_by_total_deviation(rows)] == [row.label for row in rows]


@pytest.mark.parametrize(
    ("value", "target", "band"),
    [
        (100, 100, VERY_CLOSE),
        (105, 100, VERY_CLOSE),
        (90, 100, CLOSE),
        (125, 100, SOMEWHAT_CLOSE),
        (140, 100, FAR),
        (0, 0, VERY_CLOSE),
        (0.01, 0, FAR),
    ],
)
def test_closeness_band(value, target, band):
    assert closeness_band(value, target) == band


def test_closeness_table_covers_ranking(pair_catalog):
    requirements = make_requirements(500, 300, 200000, 80000, 0.3, 7800)
    table = closeness_table(rank(pair_catalog, requirements), requirements, TENSILE_STRENGTH)

    assert table == [
        ("Steel A as-rolled", 500.0, VERY_CLOSE),
        ("Steel B normalized", 550.0, CLOSE),
    ]
    mu_table = closeness_table(rank(pair_catalog, requirements), requirements, POISSONS_RATIO)
    assert [band for _, _, band in mu_table] == [VERY_CLOSE, VERY_CLOSE]


def test_row_serialization(pair_catalog):
    requirements = make_requirements(500, 300, 200000, 80000, 0.3, 7800)
    row = deviations(rank(pair_catalog, requirements), requirements)[1]

    payload = row.as_dict()

    assert payload["label"] == "Steel B normalized"
    assert payload["rank"] == 2
    assert payload["total_absolute_deviation"] == pytest.approx(row.total_absolute)
