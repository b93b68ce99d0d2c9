from datetime import date

from bowling_league.repositories import DocumentScoringRepository
from bowling_league.scoring import compute_handicap, handicap_from_results
from bowling_league.scoring.handicap import played_scores, round_half_up
from bowling_league.scoring.types import ResultSnapshot


def result(result_id, scores):
    return ResultSnapshot(id=result_id, tournament_id=result_id, player_id=1, game_scores=scores)


def test_average_at_reference_gives_zero():
    assert handicap_from_results([result(1, [180] * 6), result(2, [180] * 6)]) == 0


def test_low_average_is_capped_at_plus_fifteen():
    assert handicap_from_results([result(1, [120] * 6), result(2, [120] * 6)]) == 15
    assert handicap_from_results([result(1, [60] * 6), result(2, [60] * 6)]) == 15


def test_high_average_is_capped_at_minus_fifteen():
    assert handicap_from_results([result(1, [240] * 6), result(2, [240] * 6)]) == -15


def test_single_tournament_is_not_enough_history():
    assert handicap_from_results([result(1, [150] * 6)]) is None
    assert handicap_from_results([]) is None


def test_only_two_most_recent_tournaments_count():
    recent = [result(1, [170] * 6), result(2, [170] * 6), result(3, [100] * 6)]
    assert handicap_from_results(recent) == 5


def test_only_first_six_games_and_played_games_count():
    # 7th and 8th games and zero entries are ignored
    scores = [160, 160, 160, 0, 0, 0, 300, 300]
    assert handicap_from_results([result(1, scores), result(2, [160] * 6)]) == 10


def test_half_values_round_up():
    # average 175 -> (180 - 175) / 2 = 2.5 -> 3
    assert handicap_from_results([result(1, [175] * 6), result(2, [175] * 6)]) == 3
    # average 185 -> -2.5 -> -2
    assert handicap_from_results([result(1, [185] * 6), result(2, [185] * 6)]) == -2
    assert round_half_up(-0.5) == 0


def test_played_scores_skips_non_numeric_entries():
    assert played_scores([150, 0, None, "200", True, float("nan"), -5, 99.5]) == [150, 99.5]


def build_history(statuses_and_dates, scores=(150,) * 6):
    tournaments = []
    participations = []
    for index, (status, day) in enumerate(statuses_and_dates, start=1):
        tournaments.append(
            {"id": index, "season_id": 1, "name": f"T{index}", "date": day, "status": status}
        )
        participations.append(
            {"id": 100 + index, "tournament_id": index, "player_id": 7, "game_scores": list(scores)}
        )
    return DocumentScoringRepository.from_export(
        {
            "seasons": [{"id": 1, "name": "Spring"}],
            "tournaments": tournaments,
            "players": [{"id": 7, "first_name": "Ann", "last_name": "Lee"}],
            "participations": participations,
        }
    )


def test_compute_handicap_uses_completed_tournaments_only():
    repository = build_history(
        [("COMPLETED", "2025-03-01"), ("ONGOING", "2025-03-08"), ("UPCOMING", "2025-03-15")]
    )
    assert compute_handicap(repository, 7, 1) is None


def test_compute_handicap_from_two_completed_tournaments():
    repository = build_history([("COMPLETED", "2025-03-01"), ("COMPLETED", "2025-03-08")])
    assert compute_handicap(repository, 7, 1) == 15


def test_compute_handicap_ignores_tournaments_on_or_after_cutoff():
    repository = build_history([("COMPLETED", "2025-03-01"), ("COMPLETED", "2025-03-08")])
    assert compute_handicap(repository, 7, 1, before=date(2025, 3, 8)) is None
    assert compute_handicap(repository, 7, 1, before=date(2025, 3, 9)) == 15


def test_compute_handicap_skips_results_without_played_games():
    repository = build_history(
        [("COMPLETED", "2025-03-01"), ("COMPLETED", "2025-03-08")], scores=(0,) * 6
    )
    assert compute_handicap(repository, 7, 1) is None


def test_compute_handicap_is_scoped_to_season():
    repository = build_history([("COMPLETED", "2025-03-01"), ("COMPLETED", "2025-03-08")])
    assert compute_handicap(repository, 7, 2) is None
