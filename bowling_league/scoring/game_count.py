"""Qualification game count policy"""

SMALL_FIELD_MAX = 8
MEDIUM_FIELD_MAX = 12


def game_count(participant_count):
    """
    Number of qualification games a tournament plays for a given field size.

    Returns:
        6 for up to 8 players, 7 for 9-12 players, 8 for 13 or more
    """
    if participant_count <= SMALL_FIELD_MAX:
        return 6
    if participant_count <= MEDIUM_FIELD_MAX:
        return 7
    return 8
