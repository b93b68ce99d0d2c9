from datetime import datetime, timezone

from bowling_league import db


class TournamentParticipation(db.Model):
    __tablename__ = "tournament_participations"

    id = db.Column(db.Integer, primary_key=True)

    # Participation identification
    tournament_id = db.Column(
        db.Integer, db.ForeignKey("tournaments.id"), nullable=False
    )
    player_id = db.Column(db.Integer, db.ForeignKey("players.id"), nullable=False)

    # Set once at admission
    handicap = db.Column(db.Integer, nullable=True)

    # Scores entered by tournament staff (0 = game not played)
    game_scores = db.Column(db.JSON, nullable=False, default=list)
    finals_scores = db.Column(db.JSON, nullable=False, default=list)

    # Results (written once when the tournament completes)
    final_position = db.Column(db.Integer, nullable=True)
    rating_points_earned = db.Column(db.Float, nullable=True)

    # Timestamps
    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = db.Column(
        db.DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    # Constraints and indexes
    __table_args__ = (
        db.UniqueConstraint(
            "tournament_id", "player_id", name="unique_tournament_player"
        ),
        db.Index("idx_participation_player", "player_id"),
        db.Index("idx_participation_tournament", "tournament_id"),
    )

    def __repr__(self):
        return f"<TournamentParticipation tournament_id={self.tournament_id} player_id={self.player_id}>"

    @property
    def total_score(self):
        """Raw qualification pins (no handicap)"""
        return sum(self.game_scores or [])

    @property
    def is_finalist(self):
        return bool(self.finals_scores)

    def to_dict(self):
        """Convert participation to dictionary for API responses"""
        return {
            "id": self.id,
            "tournament_id": self.tournament_id,
            "player_id": self.player_id,
            "player": self.player.to_summary() if self.player else None,
            "handicap": self.handicap,
            "game_scores": list(self.game_scores or []),
            "total_score": self.total_score,
            "finals_scores": list(self.finals_scores or []),
            "final_position": self.final_position,
            "rating_points_earned": self.rating_points_earned,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
