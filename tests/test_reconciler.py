"""
Tests for board reconciliation and player-name matching.
"""

import polars as pl
import pytest

from workshop.draft_boards import BOARD_SCHEMA, parse_table_board, parse_text_board
from workshop.reconciler import normalize_player_name, reconcile_boards
from conftest import TEXT_BOARD_SELECTOR


def board(source, entries):
    rows = [
        {**{col: None for col in BOARD_SCHEMA}, "source": source, "player_name": name, "overall_rank": rank}
        for name, rank in entries
    ]
    return pl.DataFrame(rows, schema=BOARD_SCHEMA)


class TestNormalizePlayerName:

    @pytest.mark.parametrize("raw, expected", [
        ("Marvin Harrison Jr.", "marvin harrison"),
        ("Marvin Harrison", "marvin harrison"),
        ("  JC   Latham ", "jc latham"),
        ("J.C. Latham", "jc latham"),
        ("Michael Penix Jr", "michael penix"),
        ("Kool-Aid McKinstry", "kool aid mckinstry"),
        ("Chop Robinson III", "chop robinson"),
        ("Jer'Zhan Newton", "jerzhan newton"),
        ("José Núñez", "jose nunez"),
    ])
    def test_normalization(self, raw, expected):
        assert normalize_player_name(raw) == expected

    def test_lone_suffix_like_name_is_kept(self):
        assert normalize_player_name("V") == "v"


class TestReconcileBoards:

    def test_matched_pair_and_unmatched_right_are_reported(self):
        left = board("left_board", [("Alice", 1)])
        right = board("right_board", [("Alice", 3), ("Bob", 1)])

        result = reconcile_boards(left, right)

        assert result.table.height == 1
        row = result.table.row(0, named=True)
        assert (row["player_name"], row["left_rank"], row["right_rank"], row["rank_diff"]) == ("Alice", 1, 3, 2)
        assert result.mismatch.unmatched_right == ["Bob"]
        assert result.mismatch.unmatched_right_count == 1
        assert result.mismatch.unmatched_left_count == 0
        assert result.mismatch.left_source == "left_board"
        assert result.mismatch.right_source == "right_board"

    def test_unmatched_left_rows_are_kept_with_null_rank(self):
        left = board("a", [("Alice", 1), ("Carol", 2)])
        right = board("b", [("Alice", 1)])

        result = reconcile_boards(left, right)

        carol = result.table.filter(pl.col("player_name") == "Carol").row(0, named=True)
        assert carol["right_rank"] is None
        assert carol["rank_diff"] is None
        assert result.mismatch.unmatched_left == ["Carol"]
        assert result.matched == 1

    def test_sorted_by_largest_disagreement(self):
        left = board("a", [("A", 1), ("B", 2), ("C", 3), ("D", 4)])
        right = board("b", [("A", 2), ("B", 10), ("C", 3)])

        table = reconcile_boards(left, right).table

        assert table["player_name"].to_list() == ["B", "A", "C", "D"]
        assert table["rank_diff"].to_list() == [8, 1, 0, None]

    def test_exact_matching_misses_suffix_variants(self):
        left = board("a", [("Marvin Harrison Jr.", 1)])
        right = board("b", [("Marvin Harrison", 4)])

        normalized = reconcile_boards(left, right)
        exact = reconcile_boards(left, right, normalize_names=False)

        assert normalized.table.row(0, named=True)["rank_diff"] == 3
        assert normalized.mismatch.is_clean
        assert exact.table.row(0, named=True)["right_rank"] is None
        assert exact.mismatch.unmatched_left == ["Marvin Harrison Jr."]
        assert exact.mismatch.unmatched_right == ["Marvin Harrison"]

    def test_duplicate_right_entries_keep_best_rank(self):
        left = board("a", [("Alice", 5)])
        right = board("b", [("Alice", 9), ("Alice", 2)])

        result = reconcile_boards(left, right)

        assert result.table.height == 1
        assert result.table.row(0, named=True)["right_rank"] == 2

    def test_scraped_boards(self, table_board_html, text_board_html):
        left, _ = parse_table_board(table_board_html, "drafttek")
        right, _ = parse_text_board(text_board_html, TEXT_BOARD_SELECTOR, "nfl_com")

        result = reconcile_boards(left, right)

        assert result.table["player_name"].to_list() == [
            "Caleb Williams", "Marvin Harrison Jr.", "Malik Nabers", "Joe Alt",
        ]
        assert result.table["rank_diff"].to_list() == [1, 1, None, None]
        assert result.mismatch.unmatched_left == ["Malik Nabers", "Joe Alt"]
        assert result.mismatch.unmatched_right == ["Jayden Daniels"]
