from bowling_league.scoring import qualification_total, resolve_placements
from bowling_league.scoring.types import ResultSnapshot


def result(result_id, scores, handicap=None, finals=None):
    return ResultSnapshot(
        id=result_id,
        tournament_id=1,
        player_id=result_id,
        handicap=handicap,
        game_scores=scores,
        finals_scores=finals or [],
    )


def positions(placements):
    return {placed.id: position for placed, position in placements}


def test_qualification_total_scales_handicap_by_game_count():
    assert qualification_total(result(1, [150] * 6, handicap=10), 6) == 960
    assert qualification_total(result(1, [150] * 6, handicap=10), 8) == 980
    assert qualification_total(result(1, [150] * 6, handicap=-5), 6) == 870
    assert qualification_total(result(1, []), 6) == 0


def test_handicap_can_change_the_order():
    results = [result(1, [200] * 6), result(2, [195] * 6, handicap=15)]
    assert positions(resolve_placements(results, 6)) == {2: 1, 1: 2}


def test_positions_are_a_permutation_of_one_to_n():
    results = [result(i, [100 + i] * 6) for i in range(1, 11)]
    placements = resolve_placements(results, 7)
    assert sorted(position for _, position in placements) == list(range(1, 11))
    assert positions(placements)[10] == 1


def test_finalists_always_rank_ahead():
    results = [
        result(1, [10_000], finals=[]),
        result(2, [100], finals=[25, 25]),
        result(3, [200], finals=[30, 30]),
    ]
    assert positions(resolve_placements(results, 6)) == {3: 1, 2: 2, 1: 3}


def test_finals_ignore_handicap():
    results = [
        result(1, [150] * 6, handicap=15, finals=[200, 200]),
        result(2, [150] * 6, handicap=-15, finals=[201, 200]),
    ]
    assert positions(resolve_placements(results, 6)) == {2: 1, 1: 2}


def test_ties_keep_fetch_order():
    results = [result(5, [180] * 6), result(3, [180] * 6), result(4, [180] * 6)]
    assert [placed.id for placed, _ in resolve_placements(results, 6)] == [5, 3, 4]


def test_missing_scores_still_get_a_position():
    results = [result(1, []), result(2, [100])]
    assert positions(resolve_placements(results, 6)) == {2: 1, 1: 2}


def test_no_results_no_placements():
    assert resolve_placements([], 6) == []
