"""
Placement resolution for completed tournaments.

Without a finals round, players are ordered by qualification total (pins plus
handicap scaled by the tournament's game count). With a finals round, every
finalist is placed ahead of every non-finalist: finalists are ordered by their
finals pins (no handicap), the rest by qualification total.

Ties keep the order in which results were fetched (sorted() is stable).
"""


def qualification_total(result, game_count):
    """Qualification pins plus handicap applied to every required game"""
    return sum(result.game_scores or []) + (result.handicap or 0) * game_count


def finals_total(result):
    return sum(result.finals_scores or [])


def is_finalist(result):
    return bool(result.finals_scores)


def order_results(results, game_count):
    """Return results in final standing order"""
    results = list(results)

    def by_qualification(result):
        return qualification_total(result, game_count)

    if not any(is_finalist(result) for result in results):
        return sorted(results, key=by_qualification, reverse=True)

    finalists = sorted(
        (result for result in results if is_finalist(result)),
        key=finals_total,
        reverse=True,
    )
    others = sorted(
        (result for result in results if not is_finalist(result)),
        key=by_qualification,
        reverse=True,
    )
    return finalists + others


def resolve_placements(results, game_count):
    """
    Assign 1-based final positions.

    Args:
        results: every participation result of the tournament
        game_count: qualification games required for the tournament

    Returns:
        list of (result, position) tuples, positions 1..n without gaps
    """
    return [
        (result, index + 1)
        for index, result in enumerate(order_results(results, game_count))
    ]
