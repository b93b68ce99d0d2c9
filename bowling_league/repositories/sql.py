"""
SQLAlchemy implementation of the scoring repository.

Writes are flushed into the current session; commit() ends the unit of work.
"""

from datetime import datetime, timezone

from bowling_league import db
from bowling_league.models import Player, Season, Tournament, TournamentParticipation
from bowling_league.scoring.ports import ScoringRepository
from bowling_league.scoring.types import (
    PlayerSnapshot,
    ResultSnapshot,
    SeasonSnapshot,
    TournamentSnapshot,
    TournamentStatus,
)


def season_snapshot(season):
    return SeasonSnapshot(
        id=season.id,
        name=season.name,
        start_date=season.start_date,
        end_date=season.end_date,
        is_active=bool(season.is_active),
        points_distribution=season.get_points_distribution(),
    )


def result_snapshot(participation, tournament=None):
    tournament = tournament or participation.tournament
    return ResultSnapshot(
        id=participation.id,
        tournament_id=participation.tournament_id,
        player_id=participation.player_id,
        handicap=participation.handicap,
        game_scores=list(participation.game_scores or []),
        finals_scores=list(participation.finals_scores or []),
        final_position=participation.final_position,
        rating_points_earned=participation.rating_points_earned,
        tournament_name=tournament.name if tournament else "",
        tournament_date=tournament.date if tournament else None,
    )


class SqlScoringRepository(ScoringRepository):
    def __init__(self, session=None):
        self.session = session or db.session

    def get_season(self, season_id):
        season = self.session.get(Season, season_id)
        return season_snapshot(season) if season else None

    def get_tournament(self, tournament_id):
        tournament = self.session.get(Tournament, tournament_id)
        if tournament is None:
            return None
        return TournamentSnapshot(
            id=tournament.id,
            season_id=tournament.season_id,
            name=tournament.name,
            date=tournament.date,
            status=tournament.status,
            participant_count=tournament.participant_count,
        )

    def get_players(self, player_ids):
        if not player_ids:
            return {}
        players = (
            self.session.query(Player).filter(Player.id.in_(list(player_ids))).all()
        )
        return {
            player.id: PlayerSnapshot(
                id=player.id,
                first_name=player.first_name,
                last_name=player.last_name,
                is_active=bool(player.is_active),
            )
            for player in players
        }

    def _completed_results_query(self, season_id):
        return (
            self.session.query(TournamentParticipation, Tournament)
            .join(Tournament, TournamentParticipation.tournament_id == Tournament.id)
            .filter(
                Tournament.season_id == season_id,
                Tournament.status == TournamentStatus.COMPLETED.value,
            )
        )

    def fetch_recent_completed_results(self, player_id, season_id, before=None):
        query = self._completed_results_query(season_id).filter(
            TournamentParticipation.player_id == player_id
        )
        if before is not None:
            query = query.filter(Tournament.date < before)
        rows = query.order_by(Tournament.date.desc(), Tournament.id.desc()).all()
        return [result_snapshot(p, t) for p, t in rows]

    def fetch_tournament_results(self, tournament_id):
        participations = (
            self.session.query(TournamentParticipation)
            .filter(TournamentParticipation.tournament_id == tournament_id)
            .order_by(TournamentParticipation.id.asc())
            .all()
        )
        return [result_snapshot(p) for p in participations]

    def fetch_season_results(self, season_id):
        rows = (
            self._completed_results_query(season_id)
            .order_by(
                Tournament.date.asc(),
                Tournament.id.asc(),
                TournamentParticipation.id.asc(),
            )
            .all()
        )
        return [result_snapshot(p, t) for p, t in rows]

    def persist_handicap(self, participation_id, handicap):
        participation = self.session.get(TournamentParticipation, participation_id)
        participation.handicap = handicap
        self.session.flush()

    def claim_completion(self, tournament_id):
        # Conditional UPDATE: only one concurrent request can match ONGOING
        updated = (
            self.session.query(Tournament)
            .filter(
                Tournament.id == tournament_id,
                Tournament.status == TournamentStatus.ONGOING.value,
            )
            .update(
                {
                    "status": TournamentStatus.COMPLETED.value,
                    "updated_at": datetime.now(timezone.utc),
                },
                synchronize_session="fetch",
            )
        )
        return updated == 1

    def persist_placements(self, results):
        for result in results:
            participation = self.session.get(TournamentParticipation, result.id)
            participation.final_position = result.final_position
            participation.rating_points_earned = result.rating_points_earned
        self.session.flush()

    def commit(self):
        self.session.commit()

    def rollback(self):
        self.session.rollback()
