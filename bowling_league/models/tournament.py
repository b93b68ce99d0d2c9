from datetime import datetime, timezone

from bowling_league import db
from bowling_league.scoring import TournamentStatus, game_count


class Tournament(db.Model):
    __tablename__ = "tournaments"

    id = db.Column(db.Integer, primary_key=True)

    # Tournament identification
    season_id = db.Column(db.Integer, db.ForeignKey("seasons.id"), nullable=False)
    name = db.Column(db.String(120), nullable=False)
    date = db.Column(db.Date, nullable=False)
    location = db.Column(db.String(200))
    description = db.Column(db.Text)

    # Capacity (None = unlimited)
    max_participants = db.Column(db.Integer)

    # Lifecycle status
    status = db.Column(
        db.String(20), nullable=False, default=TournamentStatus.UPCOMING.value
    )

    # Timestamps
    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = db.Column(
        db.DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    participations = db.relationship(
        "TournamentParticipation",
        backref="tournament",
        lazy="dynamic",
        cascade="all, delete-orphan",
    )
    applications = db.relationship(
        "TournamentApplication",
        backref="tournament",
        lazy="dynamic",
        cascade="all, delete-orphan",
    )

    # Indexes
    __table_args__ = (
        db.Index("idx_tournament_season_date", "season_id", "date"),
        db.Index("idx_tournament_status", "status"),
    )

    def __repr__(self):
        return f"<Tournament {self.name} ({self.status})>"

    @property
    def participant_count(self):
        """Number of admitted players, always counted from participations"""
        return self.participations.count()

    @property
    def pending_application_count(self):
        from .application import ApplicationStatus

        return self.applications.filter_by(status=ApplicationStatus.PENDING).count()

    @property
    def game_count(self):
        """Qualification games required for the current field"""
        return game_count(self.participant_count)

    @property
    def is_completed(self):
        return self.status == TournamentStatus.COMPLETED.value

    def is_full(self):
        """Check if tournament has reached maximum capacity"""
        return (
            self.max_participants is not None
            and self.participant_count >= self.max_participants
        )

    def has_participant(self, player_id):
        return self.participations.filter_by(player_id=player_id).first() is not None

    def get_participations_by_position(self):
        """Participations ordered by final position, unplaced last"""
        participations = self.participations.all()
        return sorted(
            participations,
            key=lambda p: (p.final_position is None, p.final_position or 0, p.id),
        )

    @staticmethod
    def get_upcoming(limit=5):
        """Get upcoming tournaments from today on"""
        today = datetime.now(timezone.utc).date()
        return (
            Tournament.query.filter(
                Tournament.status == TournamentStatus.UPCOMING.value,
                Tournament.date >= today,
            )
            .order_by(Tournament.date.asc())
            .limit(limit)
            .all()
        )

    def to_dict(self, include_participants=False):
        """Convert tournament to dictionary for API responses"""
        data = {
            "id": self.id,
            "season_id": self.season_id,
            "season_name": self.season.name if self.season else None,
            "name": self.name,
            "date": self.date.isoformat() if self.date else None,
            "location": self.location,
            "description": self.description,
            "max_participants": self.max_participants,
            "status": self.status,
            "participant_count": self.participant_count,
            "pending_application_count": self.pending_application_count,
            "game_count": self.game_count,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

        if include_participants:
            data["participations"] = [
                p.to_dict() for p in self.get_participations_by_position()
            ]

        return data
