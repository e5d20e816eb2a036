import math

import pytest

from resilience.assessments.rag.calculations import (
    cell_text,
    describe_scores,
    is_blank_cell,
    normalize_answer,
    polygon_area,
)
from resilience.assessments.rag.types import LikertMapping

AGREE = LikertMapping.from_pairs({"strongly agree": 5})


def test_normalize_is_case_and_whitespace_insensitive():
    assert normalize_answer("Strongly Agree", AGREE) == 5
    assert normalize_answer("strongly AGREE ", AGREE) == 5
    mixed_key = LikertMapping.from_pairs({"  Strongly Agree ": 5})
    assert normalize_answer("strongly agree", mixed_key) == 5


def test_normalize_rejects_partial_matches():
    assert normalize_answer("kinda agree", AGREE) is None
    assert normalize_answer("agree", AGREE) is None
    assert normalize_answer("strongly agree!", AGREE) is None


@pytest.mark.parametrize("raw", [None, "", "   ", "\t"])
def test_normalize_blank_is_unmapped(raw):
    assert normalize_answer(raw, AGREE) is None


def test_normalize_first_match_wins():
    table = LikertMapping.from_pairs([("Agree", 4), ("AGREE", 2)])
    assert normalize_answer("agree", table) == 4


def test_normalize_numeric_cells_compare_as_text():
    table = LikertMapping.from_pairs({"4": 4, "5": 5})
    assert normalize_answer(4, table) == 4
    assert normalize_answer(5.0, table) == 5
    assert normalize_answer(4.5, table) is None


def test_cell_text_and_blank_detection():
    assert cell_text(None) is None
    assert cell_text(3.0) == "3"
    assert cell_text(3.25) == "3.25"
    assert is_blank_cell("  ")
    assert not is_blank_cell(0)


def test_describe_empty():
    stats = describe_scores([])
    assert stats.as_dict() == {"n": 0, "median": 0, "mode": 0, "std_dev": 0, "min": 0, "max": 0}


def test_describe_single_value():
    stats = describe_scores([3])
    assert (stats.n, stats.median, stats.mode, stats.std_dev, stats.min, stats.max) == (1, 3, 3, 0, 3, 3)


def test_describe_sample_std_dev():
    stats = describe_scores([1, 2, 2, 3])
    assert stats.n == 4
    assert stats.median == 2
    assert stats.mode == 2
    assert stats.std_dev == pytest.approx(0.8165, abs=1e-4)
    assert round(stats.std_dev, 2) == 0.82
    assert (stats.min, stats.max) == (1, 3)


def test_describe_median_of_even_length_is_mean_of_middle_pair():
    assert describe_scores([5, 1, 4, 2]).median == pytest.approx(3.0)


def test_describe_mode_tie_prefers_largest():
    assert describe_scores([1, 1, 5, 5, 3]).mode == 5
    assert describe_scores([2, 4]).mode == 4


def test_describe_does_not_round():
    stats = describe_scores([1, 2])
    assert stats.std_dev == pytest.approx(math.sqrt(0.5))


@pytest.mark.parametrize("scores", [[], [5], [5, 5], [1, 4]])
def test_polygon_area_needs_three_vertices(scores):
    assert polygon_area(scores) == 0.0


def test_polygon_area_regular_shapes():
    triangle = 3 * 0.5 * 25 * math.sin(2 * math.pi / 3)
    assert polygon_area([5, 5, 5]) == pytest.approx(triangle)
    assert polygon_area([5, 5, 5, 5]) == pytest.approx(50.0)


def test_polygon_area_irregular_profile():
    # adjacent radii products: 4*3 + 3*2 + 2*4 = 26
    expected = 0.5 * math.sin(2 * math.pi / 3) * 26
    assert polygon_area([4, 3, 2]) == pytest.approx(expected)


def test_polygon_area_zero_radius_vertex():
    assert polygon_area([0, 0, 0]) == 0.0
    assert polygon_area([5, 0, 5, 0]) == pytest.approx(0.0)
