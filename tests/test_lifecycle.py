import threading

import pytest

from bowling_league.errors import InvalidTransitionError, NotFoundError
from bowling_league.repositories import DocumentScoringRepository
from bowling_league.scoring import complete_tournament

from conftest import document_export


def participation(repository, participation_id):
    return repository.collections["participations"][participation_id]


def test_completion_writes_positions_and_status(document_repository):
    complete_tournament(document_repository, 10)

    assert document_repository.get_tournament(10).status == "COMPLETED"
    assert participation(document_repository, 101)["final_position"] == 1
    assert participation(document_repository, 101)["rating_points_earned"] == 100
    assert participation(document_repository, 100)["final_position"] == 2


def test_second_completion_is_rejected_and_changes_nothing(document_repository):
    complete_tournament(document_repository, 10)
    participation(document_repository, 100)["game_scores"] = [300] * 6

    with pytest.raises(InvalidTransitionError):
        complete_tournament(document_repository, 10)

    assert participation(document_repository, 100)["final_position"] == 2
    assert participation(document_repository, 100)["rating_points_earned"] == 80


def test_upcoming_tournament_cannot_be_completed():
    repository = DocumentScoringRepository.from_export(document_export("UPCOMING"))
    with pytest.raises(InvalidTransitionError):
        complete_tournament(repository, 10)
    assert repository.get_tournament(10).status == "UPCOMING"
    assert participation(repository, 100).get("final_position") is None


def test_unknown_tournament(document_repository):
    with pytest.raises(NotFoundError):
        complete_tournament(document_repository, 999)


def test_tournament_without_participants_completes():
    export = document_export()
    export["participations"] = []
    repository = DocumentScoringRepository.from_export(export)

    assert complete_tournament(repository, 10) == []
    assert repository.get_tournament(10).status == "COMPLETED"


def test_missing_points_distribution_still_assigns_positions():
    export = document_export()
    export["seasons"][0]["points_distribution"] = None
    repository = DocumentScoringRepository.from_export(export)

    complete_tournament(repository, 10)

    assert participation(repository, 101)["final_position"] == 1
    assert participation(repository, 101)["rating_points_earned"] == 0


def test_failed_scoring_rolls_back_the_claim(document_repository, monkeypatch):
    def broken(results):
        raise RuntimeError("storage unavailable")

    monkeypatch.setattr(document_repository, "persist_placements", broken)

    with pytest.raises(RuntimeError):
        complete_tournament(document_repository, 10)

    assert document_repository.get_tournament(10).status == "ONGOING"


def test_concurrent_completion_scores_once(document_repository):
    outcomes = []

    def complete():
        try:
            complete_tournament(document_repository, 10)
            outcomes.append("completed")
        except InvalidTransitionError:
            outcomes.append("rejected")

    threads = [threading.Thread(target=complete) for _ in range(5)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert sorted(outcomes) == ["completed"] + ["rejected"] * 4


def two_tournament_repository():
    export = document_export()
    export["tournaments"].append(
        {**export["tournaments"][0], "id": 11, "name": "Second Night", "date": "2025-03-15"}
    )
    return DocumentScoringRepository.from_export(export)


def test_failed_completion_keeps_claims_of_the_enclosing_unit(monkeypatch):
    repository = two_tournament_repository()

    def broken(results):
        raise RuntimeError("storage unavailable")

    with repository.unit_of_work():
        assert repository.claim_completion(11)
        monkeypatch.setattr(repository, "persist_placements", broken)
        with pytest.raises(RuntimeError):
            complete_tournament(repository, 10)
        repository.commit()

    assert repository.get_tournament(10).status == "ONGOING"
    assert repository.get_tournament(11).status == "COMPLETED"


def test_failed_completion_does_not_undo_another_threads_claim(monkeypatch):
    repository = two_tournament_repository()
    claimed = threading.Event()
    scoring_failed = threading.Event()
    outcome = {}

    def complete_second_night():
        with repository.unit_of_work():
            outcome["claimed"] = repository.claim_completion(11)
            claimed.set()
            scoring_failed.wait(timeout=5)
            outcome["status_before_commit"] = repository.get_tournament(11).status
            repository.commit()

    def broken(results):
        raise RuntimeError("storage unavailable")

    worker = threading.Thread(target=complete_second_night)
    worker.start()
    assert claimed.wait(timeout=5)

    monkeypatch.setattr(repository, "persist_placements", broken)
    with pytest.raises(RuntimeError):
        complete_tournament(repository, 10)
    scoring_failed.set()
    worker.join()

    assert outcome == {"claimed": True, "status_before_commit": "COMPLETED"}
    assert repository.get_tournament(10).status == "ONGOING"
    assert repository.get_tournament(11).status == "COMPLETED"

    monkeypatch.undo()
    with pytest.raises(InvalidTransitionError):
        complete_tournament(repository, 11)
