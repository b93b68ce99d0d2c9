"""
Document-store implementation of the scoring repository.

Data lives in named collections of plain dict documents, the way a document
database export looks:

    {
        "seasons": [{"id": 1, "name": "Spring", "points_distribution": {"1": 100}}],
        "tournaments": [{"id": 7, "season_id": 1, "date": "2025-03-08", ...}],
        "players": [{"id": 3, "first_name": "Ann", "last_name": "Lee"}],
        "participations": [{"id": 11, "tournament_id": 7, "player_id": 3, ...}],
    }

Participation documents carry no season or date; those are joined from the
tournament document on read, so every tournament must carry a date. Writes
apply immediately and are journaled per thread and per unit of work, so
rollback() only undoes what the current unit wrote since its last commit().
"""

import json
import threading
from contextlib import contextmanager
from datetime import date

from bowling_league.errors import ValidationError
from bowling_league.scoring.ports import ScoringRepository
from bowling_league.scoring.types import (
    PlayerSnapshot,
    ResultSnapshot,
    SeasonSnapshot,
    TournamentSnapshot,
    TournamentStatus,
)

COLLECTIONS = ("seasons", "tournaments", "players", "participations")


def _as_date(value):
    if value is None or isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


class DocumentScoringRepository(ScoringRepository):
    def __init__(self):
        self.collections = {name: {} for name in COLLECTIONS}
        self._local = threading.local()
        self._lock = threading.RLock()

    @classmethod
    def from_export(cls, data):
        """Build a repository from a dict of collection name to document list"""
        repository = cls()
        for name in COLLECTIONS:
            for document in data.get(name, []):
                repository.insert(name, document)

        for tournament in repository.collections["tournaments"].values():
            try:
                day = _as_date(tournament.get("date"))
            except ValueError:
                day = None
            if day is None:
                raise ValidationError(
                    f"Tournament {tournament['id']} in export has no valid date"
                )
        return repository

    @classmethod
    def from_json_file(cls, path):
        with open(path, encoding="utf-8") as fh:
            return cls.from_export(json.load(fh))

    def insert(self, collection, document):
        """Add or replace a document; its "id" field is the key"""
        with self._lock:
            self.collections[collection][document["id"]] = dict(document)
        return document["id"]

    def _journals(self):
        stack = getattr(self._local, "journals", None)
        if stack is None:
            stack = self._local.journals = [[]]
        return stack

    @property
    def _journal(self):
        return self._journals()[-1]

    @contextmanager
    def unit_of_work(self):
        """Give the block its own journal; uncommitted writes fold into the outer one"""
        stack = self._journals()
        stack.append([])
        try:
            yield self
        finally:
            pending = stack.pop()
            stack[-1].extend(pending)

    def _update(self, collection, document_id, fields):
        with self._lock:
            document = self.collections[collection][document_id]
            previous = {key: document.get(key) for key in fields}
            self._journal.append((collection, document_id, previous))
            document.update(fields)

    # Reads

    def get_season(self, season_id):
        document = self.collections["seasons"].get(season_id)
        if document is None:
            return None
        distribution = document.get("points_distribution")
        return SeasonSnapshot(
            id=document["id"],
            name=document.get("name", ""),
            start_date=_as_date(document.get("start_date")),
            end_date=_as_date(document.get("end_date")),
            is_active=bool(document.get("is_active", False)),
            points_distribution=(
                {int(k): v for k, v in distribution.items()} if distribution else None
            ),
        )

    def _participations_of(self, tournament_id):
        return [
            p
            for p in self.collections["participations"].values()
            if p["tournament_id"] == tournament_id
        ]

    def get_tournament(self, tournament_id):
        document = self.collections["tournaments"].get(tournament_id)
        if document is None:
            return None
        return TournamentSnapshot(
            id=document["id"],
            season_id=document["season_id"],
            name=document.get("name", ""),
            date=_as_date(document.get("date")),
            status=document.get("status", TournamentStatus.UPCOMING.value),
            participant_count=len(self._participations_of(tournament_id)),
        )

    def get_players(self, player_ids):
        players = {}
        for player_id in player_ids:
            document = self.collections["players"].get(player_id)
            if document is not None:
                players[player_id] = PlayerSnapshot(
                    id=document["id"],
                    first_name=document.get("first_name", ""),
                    last_name=document.get("last_name", ""),
                    is_active=document.get("is_active", True),
                )
        return players

    def _snapshot(self, participation):
        tournament = self.collections["tournaments"].get(participation["tournament_id"], {})
        return ResultSnapshot(
            id=participation["id"],
            tournament_id=participation["tournament_id"],
            player_id=participation["player_id"],
            handicap=participation.get("handicap"),
            game_scores=list(participation.get("game_scores") or []),
            finals_scores=list(participation.get("finals_scores") or []),
            final_position=participation.get("final_position"),
            rating_points_earned=participation.get("rating_points_earned"),
            tournament_name=tournament.get("name", ""),
            tournament_date=_as_date(tournament.get("date")),
        )

    def _completed_tournaments(self, season_id):
        return [
            t
            for t in self.collections["tournaments"].values()
            if t["season_id"] == season_id
            and t.get("status") == TournamentStatus.COMPLETED.value
        ]

    def fetch_recent_completed_results(self, player_id, season_id, before=None):
        tournaments = self._completed_tournaments(season_id)
        if before is not None:
            tournaments = [t for t in tournaments if _as_date(t.get("date")) < before]
        tournaments.sort(key=lambda t: (_as_date(t.get("date")), t["id"]), reverse=True)

        results = []
        for tournament in tournaments:
            for participation in self._participations_of(tournament["id"]):
                if participation["player_id"] == player_id:
                    results.append(self._snapshot(participation))
        return results

    def fetch_tournament_results(self, tournament_id):
        participations = sorted(self._participations_of(tournament_id), key=lambda p: p["id"])
        return [self._snapshot(p) for p in participations]

    def fetch_season_results(self, season_id):
        tournaments = sorted(
            self._completed_tournaments(season_id),
            key=lambda t: (_as_date(t.get("date")), t["id"]),
        )
        results = []
        for tournament in tournaments:
            results.extend(self.fetch_tournament_results(tournament["id"]))
        return results

    # Writes

    def persist_handicap(self, participation_id, handicap):
        self._update("participations", participation_id, {"handicap": handicap})

    def claim_completion(self, tournament_id):
        with self._lock:
            document = self.collections["tournaments"].get(tournament_id)
            if document is None or document.get("status") != TournamentStatus.ONGOING.value:
                return False
            self._update(
                "tournaments", tournament_id, {"status": TournamentStatus.COMPLETED.value}
            )
            return True

    def persist_placements(self, results):
        for result in results:
            self._update(
                "participations",
                result.id,
                {
                    "final_position": result.final_position,
                    "rating_points_earned": result.rating_points_earned,
                },
            )

    def commit(self):
        self._journal.clear()

    def rollback(self):
        journal = self._journal
        with self._lock:
            while journal:
                collection, document_id, previous = journal.pop()
                self.collections[collection][document_id].update(previous)
