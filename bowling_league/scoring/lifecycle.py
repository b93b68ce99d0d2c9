"""
Tournament completion: the only place placements and rating points are written.
"""

import logging

from bowling_league.errors import InvalidTransitionError, NotFoundError
from bowling_league.scoring.game_count import game_count
from bowling_league.scoring.placement import resolve_placements
from bowling_league.scoring.rating import assign_rating_points

logger = logging.getLogger(__name__)


def complete_tournament(repository, tournament_id):
    """
    Complete a tournament and score it exactly once.

    The status claim and the placement writes happen in one unit of work: if
    scoring fails, the claim is rolled back with it.

    Returns:
        list of scored results in final standing order (empty for a
        tournament without participants)

    Raises:
        NotFoundError: unknown tournament
        InvalidTransitionError: tournament is not ONGOING, or another request
            already completed it
    """
    tournament = repository.get_tournament(tournament_id)
    if tournament is None:
        raise NotFoundError(f"Tournament with ID {tournament_id} not found")

    with repository.unit_of_work():
        if not repository.claim_completion(tournament_id):
            raise InvalidTransitionError(
                f"Tournament {tournament_id} cannot be completed from status "
                f"{repository.get_tournament(tournament_id).status}"
            )

        try:
            results = repository.fetch_tournament_results(tournament_id)
            scored = []
            if results:
                season = repository.get_season(tournament.season_id)
                distribution = season.points_distribution if season else None
                placements = resolve_placements(results, game_count(len(results)))
                scored = assign_rating_points(placements, distribution)
                repository.persist_placements(scored)
            repository.commit()
        except Exception:
            repository.rollback()
            logger.exception(
                f"Scoring tournament {tournament_id} failed, completion rolled back"
            )
            raise

    logger.info(f"Tournament {tournament_id} completed with {len(scored)} placements")
    return scored
