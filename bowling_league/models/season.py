from datetime import datetime, timezone

from bowling_league import db


class Season(db.Model):
    __tablename__ = "seasons"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)  # e.g., "Spring 2025"

    # Season dates
    start_date = db.Column(db.Date, nullable=False)
    end_date = db.Column(db.Date, nullable=False)

    # Status
    is_active = db.Column(db.Boolean, default=False)

    # Rating configuration: {"1": 100, "2": 80, ...}
    points_distribution = db.Column(db.JSON, nullable=True)
    rating_config_updated_at = db.Column(db.DateTime, nullable=True)

    # Timestamps
    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = db.Column(
        db.DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    tournaments = db.relationship(
        "Tournament", backref="season", lazy="dynamic", cascade="all, delete-orphan"
    )

    # Database indexes
    __table_args__ = (
        db.Index("idx_season_active", "is_active"),
        db.Index("idx_season_dates", "start_date", "end_date"),
    )

    def __repr__(self):
        return f"<Season {self.name}>"

    @staticmethod
    def get_current_season():
        """Get the currently active season"""
        return Season.query.filter_by(is_active=True).first()

    def activate(self):
        """Activate this season (deactivates all others)"""
        Season.query.filter(Season.id != self.id).update({"is_active": False})
        self.is_active = True

    def overlaps(self, start_date, end_date):
        """Check if a date range overlaps this season"""
        return start_date <= self.end_date and end_date >= self.start_date

    def contains_date(self, day):
        return self.start_date <= day <= self.end_date

    def set_points_distribution(self, distribution):
        """Store a validated points distribution (keys are positions)"""
        if distribution is None:
            self.points_distribution = None
        else:
            self.points_distribution = {
                str(position): points for position, points in distribution.items()
            }
        self.rating_config_updated_at = datetime.now(timezone.utc)

    def get_points_distribution(self):
        """Points distribution keyed by int position, or None if not configured"""
        if not self.points_distribution:
            return None
        return {int(position): points for position, points in self.points_distribution.items()}

    def get_tournament_count(self):
        return self.tournaments.count()

    def rating_config_dict(self):
        return {
            "season_id": self.id,
            "points_distribution": self.points_distribution,
            "updated_at": (
                self.rating_config_updated_at.isoformat()
                if self.rating_config_updated_at
                else None
            ),
        }

    def to_dict(self, include_tournaments=False):
        """Convert season to dictionary for API responses"""
        data = {
            "id": self.id,
            "name": self.name,
            "start_date": self.start_date.isoformat() if self.start_date else None,
            "end_date": self.end_date.isoformat() if self.end_date else None,
            "is_active": self.is_active,
            "points_distribution": self.points_distribution,
            "tournament_count": self.get_tournament_count(),
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

        if include_tournaments:
            from .tournament import Tournament

            recent = self.tournaments.order_by(Tournament.date.desc()).limit(10).all()
            data["tournaments"] = [t.to_dict() for t in recent]

        return data
