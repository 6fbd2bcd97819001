"""Category colour generation."""

import random

import pytest

from services.color_service import (
    assign_color,
    hex_to_hsl,
    hsl_to_hex,
    hue_distance,
    pick_hue,
)


def test_empty_expense_palette_starts_at_red():
    color = assign_color("expense", set())
    assert color == "#d92626"
    assert hex_to_hsl(color)[0] == 0


def test_empty_income_palette_starts_at_azure():
    color = assign_color("income", set())
    assert color == "#2680d9"
    assert hex_to_hsl(color)[0] == 210


def test_hue_distance_wraps_around():
    assert hue_distance(350, 10) == 20
    assert hue_distance(10, 350) == 20
    assert hue_distance(0, 180) == 180
    assert hue_distance(90, 90) == 0


def test_second_expense_colour_moves_one_step():
    first = assign_color("expense", set())
    second = assign_color("expense", {first})
    assert hex_to_hsl(second)[0] == 60


@pytest.mark.parametrize("type_", ["expense", "income"])
def test_fewer_than_six_colours_keep_sixty_degrees(type_):
    colors = []
    for _ in range(5):
        colors.append(assign_color(type_, colors))
        existing = [hex_to_hsl(c)[0] for c in colors]
        hue = pick_hue(type_, existing)
        assert all(hue_distance(hue, e) >= 60 for e in existing), (existing, hue)


def test_unseparable_palette_relaxes_separation():
    # every 60 degree lattice point sits within 30 degrees of one of these
    existing = [30, 90, 150, 210, 270]
    hue = pick_hue("expense", existing)
    assert min(hue_distance(hue, e) for e in existing) >= 30


def test_sequential_assignment_gives_distinct_hues():
    colors = []
    for _ in range(6):
        colors.append(assign_color("expense", colors))
    hues = sorted(hex_to_hsl(c)[0] for c in colors)
    assert hues == [0, 60, 120, 180, 240, 300]


def test_seventh_colour_relaxes_separation():
    existing = [0, 60, 120, 180, 240, 300]
    hue = pick_hue("expense", existing)
    assert hue == 30
    assert min(hue_distance(hue, e) for e in existing) == 30


def test_same_input_gives_same_colour():
    existing = {"#d92626", "#d9d926", "#26d926"}
    assert assign_color("expense", existing) == assign_color("expense", set(existing))


def test_crowded_palette_falls_back_to_seeded_random():
    existing = list(range(0, 360, 5))
    first = pick_hue("expense", existing, rng=random.Random(42))
    second = pick_hue("expense", existing, rng=random.Random(42))
    assert first == second
    assert 0 <= first < 360


def test_short_and_long_hex_forms_agree():
    assert hex_to_hsl("#f00") == hex_to_hsl("#ff0000")
    assert hex_to_hsl("#0f0")[0] == 120


@pytest.mark.parametrize("bad", ["", "#12", "#12345", "#zzzzzz", "not a colour", "#+fffff", "#-ff", "#ff ff0"])
def test_malformed_hex_reads_as_black(bad):
    assert hex_to_hsl(bad) == (0, 0.0, 0.0)


def test_hsl_round_trip_on_lattice_hues():
    for hue in range(0, 360, 30):
        assert hex_to_hsl(hsl_to_hex(hue, 70, 50))[0] == hue
