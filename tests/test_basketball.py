"""
Tests for the basketball loaders using an in-memory stand-in for sportsdataverse.
"""

import polars as pl
import pytest

from workshop.basketball import BasketballLoader, SHOT_COLUMNS, extract_shots, team_game_ids
from workshop.errors import FetchError


@pytest.fixture
def schedule():
    return pl.DataFrame({
        "game_id": [401, 402, 403],
        "home_display_name": ["Duke Blue Devils", "Kansas Jayhawks", "UNC Tar Heels"],
        "away_display_name": ["UNC Tar Heels", "Duke Blue Devils", "Kansas Jayhawks"],
    })


@pytest.fixture
def pbp():
    return pl.DataFrame({
        "game_id": [401, 401, 401, 402, 403, 402],
        "team_id": [150, 153, 150, 150, 2305, 150],
        "text": [
            "Kyle Filipowski made Jumper.",
            "RJ Davis missed Three Point Jumper.",
            "Jared McCain made Free Throw 1 of 2.",
            "Tyrese Proctor missed Layup.",
            "Hunter Dickinson made Dunk.",
            "Team rebound.",
        ],
        "shooting_play": [True, True, True, True, True, False],
        "scoring_play": [True, False, True, False, True, False],
        "score_value": [2, 3, 1, 2, 2, 0],
        "coordinate_x": [10.0, -22.0, -214748340.0, 3.0, 1.0, None],
        "coordinate_y": [5.0, 8.0, -214748365.0, 1.0, 0.0, None],
    })


class FakeMbb:
    def __init__(self, schedule=None, pbp=None, error=None):
        self.schedule = schedule
        self.pbp = pbp
        self.error = error
        self.calls = []

    def load_mbb_schedule(self, seasons, return_as_pandas=False):
        self.calls.append(("schedule", seasons, return_as_pandas))
        if self.error:
            raise self.error
        return self.schedule

    def load_mbb_pbp(self, seasons, return_as_pandas=False):
        self.calls.append(("pbp", seasons, return_as_pandas))
        if self.error:
            raise self.error
        return self.pbp


class TestBasketballLoader:

    def test_loads_through_source(self, schedule, pbp):
        source = FakeMbb(schedule=schedule, pbp=pbp)
        loader = BasketballLoader(source=source)

        assert loader.load_schedule(2024).height == 3
        assert loader.load_pbp(2024).height == 6
        assert source.calls == [("schedule", [2024], False), ("pbp", [2024], False)]

    def test_provider_failure_becomes_fetch_error(self):
        loader = BasketballLoader(source=FakeMbb(error=ConnectionError("offline")))
        with pytest.raises(FetchError):
            loader.load_schedule(2024)
        with pytest.raises(FetchError):
            loader.load_pbp(2024)


def test_team_game_ids_matches_home_and_away(schedule):
    assert team_game_ids(schedule, "duke") == [401, 402]
    assert team_game_ids(schedule, "Kansas Jayhawks") == [402, 403]
    assert team_game_ids(schedule, "Gonzaga") == []


def test_extract_shots_drops_free_throws_and_non_shots(pbp):
    shots = extract_shots(pbp)

    assert shots.columns == SHOT_COLUMNS
    assert shots["text"].to_list() == [
        "Kyle Filipowski made Jumper.",
        "RJ Davis missed Three Point Jumper.",
        "Tyrese Proctor missed Layup.",
        "Hunter Dickinson made Dunk.",
    ]
    assert shots["made"].to_list() == [True, False, False, True]


def test_extract_shots_filters_games_and_team(pbp):
    shots = extract_shots(pbp, game_ids=[401, 402], team_id=150)
    assert shots["text"].to_list() == ["Kyle Filipowski made Jumper.", "Tyrese Proctor missed Layup."]
