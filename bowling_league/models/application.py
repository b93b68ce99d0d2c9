from datetime import datetime, timezone

from bowling_league import db


class ApplicationStatus:
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class TournamentApplication(db.Model):
    """A player's request to be admitted to a tournament"""

    __tablename__ = "tournament_applications"

    id = db.Column(db.Integer, primary_key=True)

    tournament_id = db.Column(
        db.Integer, db.ForeignKey("tournaments.id"), nullable=False
    )
    player_id = db.Column(db.Integer, db.ForeignKey("players.id"), nullable=False)

    # Status
    status = db.Column(db.String(20), nullable=False, default=ApplicationStatus.PENDING)

    # Timestamps
    application_date = db.Column(
        db.DateTime, default=lambda: datetime.now(timezone.utc)
    )
    updated_at = db.Column(
        db.DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        db.UniqueConstraint(
            "tournament_id", "player_id", name="unique_tournament_application"
        ),
        db.Index("idx_application_status", "tournament_id", "status"),
    )

    def __repr__(self):
        return f"<TournamentApplication player {self.player_id} to tournament {self.tournament_id} ({self.status})>"

    @property
    def is_pending(self):
        return self.status == ApplicationStatus.PENDING

    def to_dict(self):
        """Convert application to dictionary for API responses"""
        return {
            "id": self.id,
            "tournament_id": self.tournament_id,
            "player_id": self.player_id,
            "player": self.player.to_summary() if self.player else None,
            "status": self.status,
            "application_date": (
                self.application_date.isoformat() if self.application_date else None
            ),
        }
