from datetime import datetime, timezone

from bowling_league import db


class Player(db.Model):
    __tablename__ = "players"

    id = db.Column(db.Integer, primary_key=True)

    # Profile information
    first_name = db.Column(db.String(50), nullable=False)
    last_name = db.Column(db.String(50), nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=True, index=True)

    # Roster status, only affects leaderboard display
    is_active = db.Column(db.Boolean, default=True)

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
        backref="player",
        lazy="dynamic",
        cascade="all, delete-orphan",
    )
    applications = db.relationship(
        "TournamentApplication",
        backref="player",
        lazy="dynamic",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        db.Index("idx_player_active_status", "is_active"),
        db.Index("idx_player_name", "last_name", "first_name"),
    )

    def __repr__(self):
        return f"<Player {self.full_name}>"

    @property
    def full_name(self):
        """Return full player name"""
        return f"{self.first_name} {self.last_name}"

    def set_names(self, first_name=None, last_name=None):
        """Set names as given, minus surrounding whitespace"""
        if first_name is not None:
            self.first_name = first_name.strip()
        if last_name is not None:
            self.last_name = last_name.strip()

    @staticmethod
    def create_player(first_name, last_name, email=None):
        """Create a new player"""
        player = Player(email=email.strip().lower() if email else None)
        player.set_names(first_name, last_name)
        db.session.add(player)
        return player

    def to_dict(self):
        """Convert player to dictionary for API responses"""
        return {
            "id": self.id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "full_name": self.full_name,
            "email": self.email,
            "is_active": self.is_active,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    def to_summary(self):
        return {
            "id": self.id,
            "first_name": self.first_name,
            "last_name": self.last_name,
        }
