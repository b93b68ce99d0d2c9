import json
from datetime import date

import pytest

from bowling_league.errors import ValidationError
from bowling_league.repositories import DocumentScoringRepository
from bowling_league.scoring.types import ResultSnapshot

from conftest import document_export


def test_snapshots_join_tournament_fields(document_repository):
    results = document_repository.fetch_tournament_results(10)

    assert [r.id for r in results] == [100, 101, 102]
    assert results[0].tournament_name == "Opening Night"
    assert results[0].tournament_date == date(2025, 3, 8)
    assert document_repository.get_season(1).points_distribution == {1: 100, 2: 80, 3: 60}
    assert document_repository.get_tournament(10).participant_count == 3
    assert set(document_repository.get_players([1, 2, 99])) == {1, 2}


def test_season_results_only_include_completed_tournaments(document_repository):
    assert document_repository.fetch_season_results(1) == []
    document_repository.claim_completion(10)
    assert len(document_repository.fetch_season_results(1)) == 3


def test_rollback_restores_journaled_writes(document_repository):
    document_repository.persist_handicap(100, 7)
    document_repository.commit()

    document_repository.persist_handicap(100, -3)
    document_repository.persist_placements(
        [ResultSnapshot(id=101, tournament_id=10, player_id=2, final_position=1, rating_points_earned=100)]
    )
    document_repository.rollback()

    participations = document_repository.collections["participations"]
    assert participations[100]["handicap"] == 7
    assert participations[101].get("final_position") is None


def test_load_from_json_file(tmp_path):
    path = tmp_path / "export.json"
    path.write_text(json.dumps(document_export()), encoding="utf-8")

    repository = DocumentScoringRepository.from_json_file(path)
    assert repository.get_tournament(10).status == "ONGOING"


def test_commit_only_clears_the_current_unit(document_repository):
    document_repository.persist_handicap(100, 4)
    with document_repository.unit_of_work():
        document_repository.persist_handicap(101, 9)
        document_repository.commit()
    document_repository.rollback()

    participations = document_repository.collections["participations"]
    assert participations[100]["handicap"] is None
    assert participations[101]["handicap"] == 9


@pytest.mark.parametrize("day", [None, "", "next week"])
def test_export_tournament_without_a_date_is_rejected(day):
    export = document_export()
    export["tournaments"][0]["date"] = day
    with pytest.raises(ValidationError):
        DocumentScoringRepository.from_export(export)
