"""
Shared synthetic data: play-by-play with known EPA means and recorded
draft board pages, so no test touches the network.
"""

import polars as pl
import pytest

PBP_SCHEMA = {
    "season": pl.Int32,
    "season_type": pl.Utf8,
    "posteam": pl.Utf8,
    "defteam": pl.Utf8,
    "down": pl.Float64,
    "play_type": pl.Utf8,
    "penalty": pl.Float64,
    "epa": pl.Float64,
}

# Offensive EPA/pass by team and season; A and B only play each other
PASS_EPA = {
    "A": {2020: 0.1, 2021: 0.2, 2022: 0.25},
    "B": {2020: -0.1, 2021: 0.0, 2022: -0.05},
}
RUSH_EPA = {
    "A": {2020: -0.05, 2021: 0.05, 2022: 0.0},
    "B": {2020: 0.02, 2021: -0.08, 2022: -0.1},
}
OPPONENT = {"A": "B", "B": "A"}


def play(season, posteam, defteam, play_type, epa, down=1.0, penalty=0.0):
    return {
        "season": season,
        "season_type": "REG",
        "posteam": posteam,
        "defteam": defteam,
        "down": down,
        "play_type": play_type,
        "penalty": penalty,
        "epa": epa,
    }


def build_pbp(rows):
    return pl.DataFrame(rows, schema=PBP_SCHEMA)


@pytest.fixture
def synthetic_pbp():
    """
    Three seasons for two teams. Each offense has two passes averaging PASS_EPA,
    two runs averaging RUSH_EPA, and four plays that must be filtered out.
    """
    rows = []
    for team, seasons in PASS_EPA.items():
        opponent = OPPONENT[team]
        for season, mean in seasons.items():
            rows.append(play(season, team, opponent, "pass", mean - 0.3))
            rows.append(play(season, team, opponent, "pass", mean + 0.3))
            rush = RUSH_EPA[team][season]
            rows.append(play(season, team, opponent, "run", rush - 0.2, down=2.0))
            rows.append(play(season, team, opponent, "run", rush + 0.2, down=3.0))

            # ineligible: penalty, special teams, missing EPA, no down
            rows.append(play(season, team, opponent, "pass", 5.0, penalty=1.0))
            rows.append(play(season, team, opponent, "punt", -2.0, down=4.0))
            rows.append(play(season, team, opponent, "run", None))
            rows.append(play(season, team, opponent, "pass", 3.0, down=None))
    return build_pbp(rows)


TABLE_BOARD_HTML = """
<html><body>
<table class="player-info">
  <tr><th>Rank</th><th>Player</th><th>Pos</th><th>Pos Rank</th><th>College</th><th>Ht</th><th>Wt</th></tr>
  <tr><td colspan="7">&nbsp;</td></tr>
  <tr><td>1</td><td>Caleb Williams</td><td>QB</td><td>1</td><td>USC</td><td>6-1</td><td>214</td></tr>
  <tr><td></td><td></td><td></td><td></td><td></td><td></td><td></td></tr>
  <tr><td>2</td><td>Marvin Harrison Jr.</td><td>WR</td><td>1</td><td>Ohio State</td><td>6-3</td><td>209</td></tr>
  <tr><td></td><td></td><td></td><td></td><td></td><td></td><td></td></tr>
  <tr><td>3</td><td>Malik Nabers</td><td>WR</td><td>2</td><td>LSU</td><td>6-0</td><td>N/A</td></tr>
  <tr><td colspan="7"> </td></tr>
  <tr><td colspan="7"> </td></tr>
  <tr><td>4</td><td>Joe Alt</td><td>OT</td><td>1</td><td>Notre Dame</td><td>6-8</td><td>321</td></tr>
</table>
<table><tr><th>Other</th></tr><tr><td>ignored</td></tr></table>
</body></html>
"""

TEXT_BOARD_HTML = """
<html><body>
<div class="nfl-c-body-part nfl-c-body-part--text"><h3>1. Marvin Harrison Jr., WR, Ohio State</h3></div>
<div class="nfl-c-body-part nfl-c-body-part--text"><h3>2.   Caleb Williams,  QB, USC, 6'1" 214 lbs</h3></div>
<div class="nfl-c-body-part nfl-c-body-part--text"><h3>Honorable mentions</h3></div>
<div class="nfl-c-body-part nfl-c-body-part--text"><h3>   </h3></div>
<div class="nfl-c-body-part nfl-c-body-part--text"><h3>3. Jayden Daniels, QB, LSU, 6'4" 210 lbs</h3></div>
<div class="nfl-c-body-part nfl-c-body-part--text"><p>Not a ranking paragraph.</p></div>
</body></html>
"""

TEXT_BOARD_SELECTOR = "div.nfl-c-body-part--text h3"


@pytest.fixture
def table_board_html():
    return TABLE_BOARD_HTML


@pytest.fixture
def text_board_html():
    return TEXT_BOARD_HTML


class FixtureFetcher:
    """Serves recorded pages by URL; unknown URLs fail like a dead host."""

    def __init__(self, pages):
        self.pages = pages
        self.requested = []

    def fetch(self, url):
        from workshop.errors import FetchError

        self.requested.append(url)
        if url not in self.pages:
            raise FetchError(url, "Request failed: connection refused")
        return self.pages[url]


@pytest.fixture
def fixture_fetcher():
    return FixtureFetcher({
        "https://boards.test/table": TABLE_BOARD_HTML,
        "https://boards.test/text": TEXT_BOARD_HTML,
    })
