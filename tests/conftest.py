from datetime import date

import pytest

from bowling_league import create_app, db
from bowling_league.models import (
    Player,
    Season,
    Tournament,
    TournamentParticipation,
)
from bowling_league.repositories import DocumentScoringRepository
from bowling_league.scoring import TournamentStatus

POINTS = {1: 100, 2: 80, 3: 60}


@pytest.fixture
def app():
    app = create_app("testing")
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_season(app):
    def _make(
        name="Spring 2025",
        start_date=date(2025, 3, 1),
        end_date=date(2025, 5, 31),
        points=POINTS,
        is_active=True,
    ):
        season = Season(
            name=name, start_date=start_date, end_date=end_date, is_active=is_active
        )
        if points is not None:
            season.set_points_distribution(points)
        db.session.add(season)
        db.session.commit()
        return season

    return _make


@pytest.fixture
def make_player(app):
    def _make(first_name="Ann", last_name="Lee", email=None, is_active=True):
        player = Player.create_player(first_name, last_name, email=email)
        player.is_active = is_active
        db.session.commit()
        return player

    return _make


@pytest.fixture
def make_tournament(app):
    def _make(season, day=date(2025, 3, 15), name="Weekly", status="UPCOMING", **kwargs):
        tournament = Tournament(
            season_id=season.id, name=name, date=day, status=status, **kwargs
        )
        db.session.add(tournament)
        db.session.commit()
        return tournament

    return _make


@pytest.fixture
def make_participation(app):
    def _make(tournament, player, game_scores=None, finals_scores=None, handicap=None):
        participation = TournamentParticipation(
            tournament_id=tournament.id,
            player_id=player.id,
            game_scores=game_scores or [],
            finals_scores=finals_scores or [],
            handicap=handicap,
        )
        db.session.add(participation)
        db.session.commit()
        return participation

    return _make


def document_export(tournament_status=TournamentStatus.ONGOING.value):
    """Three bowlers in one season with a single tournament"""
    return {
        "seasons": [
            {
                "id": 1,
                "name": "Spring 2025",
                "start_date": "2025-03-01",
                "end_date": "2025-05-31",
                "is_active": True,
                "points_distribution": {"1": 100, "2": 80, "3": 60},
            }
        ],
        "tournaments": [
            {
                "id": 10,
                "season_id": 1,
                "name": "Opening Night",
                "date": "2025-03-08",
                "status": tournament_status,
            }
        ],
        "players": [
            {"id": 1, "first_name": "Ann", "last_name": "Lee"},
            {"id": 2, "first_name": "Bob", "last_name": "Cruz"},
            {"id": 3, "first_name": "Cy", "last_name": "Diaz", "is_active": False},
        ],
        "participations": [
            {"id": 100, "tournament_id": 10, "player_id": 1, "game_scores": [30] * 6},
            {"id": 101, "tournament_id": 10, "player_id": 2, "game_scores": [200, 0, 0, 0, 0, 0]},
            {"id": 102, "tournament_id": 10, "player_id": 3, "game_scores": [25] * 6},
        ],
    }


@pytest.fixture
def document_repository():
    return DocumentScoringRepository.from_export(document_export())
