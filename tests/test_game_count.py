import pytest

from bowling_league.scoring import game_count


@pytest.mark.parametrize(
    "participants, expected",
    [(0, 6), (1, 6), (8, 6), (9, 7), (12, 7), (13, 8), (40, 8)],
)
def test_game_count_by_field_size(participants, expected):
    assert game_count(participants) == expected


def test_game_count_never_decreases():
    counts = [game_count(n) for n in range(0, 30)]
    assert counts == sorted(counts)
