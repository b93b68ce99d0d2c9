from bowling_league import create_app, db
from bowling_league.models import (
    Player,
    Season,
    Tournament,
    TournamentApplication,
    TournamentParticipation,
)

app = create_app()


@app.shell_context_processor
def make_shell_context():
    return {
        "db": db,
        "Player": Player,
        "Season": Season,
        "Tournament": Tournament,
        "TournamentApplication": TournamentApplication,
        "TournamentParticipation": TournamentParticipation,
    }


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=5000, debug=app.config.get("DEBUG", False))
