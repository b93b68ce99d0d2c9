#!/usr/bin/env python3
"""
Bowling League Management CLI

Command-line management for seasons, tournament completion and the database.
"""

import json
import logging
import os
import sys

import click
from flask.cli import with_appcontext
from flask_migrate import downgrade, migrate, upgrade
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from bowling_league import create_app, db
from bowling_league.errors import LeagueError
from bowling_league.models import Player, Season, Tournament
from bowling_league.repositories import DocumentScoringRepository
from bowling_league.scoring import TournamentStatus, build_leaderboard
from bowling_league.services import season_service, tournament_service

app = create_app()


def fail(message, error=None):
    """Report a failed command and exit non-zero"""
    db.session.rollback()
    if error is not None:
        logging.error(f"{message}: {error}")
        click.echo(f"❌ {message}: {error}")
    else:
        click.echo(f"❌ {message}")
    sys.exit(1)


def echo_leaderboard(leaderboard):
    season = leaderboard["season"]
    click.echo(f"🎳 {season['name']} ({season['start_date']} to {season['end_date']})")
    click.echo("=" * 60)

    if not leaderboard["leaderboard"]:
        click.echo("No completed tournaments yet.")
        return

    for entry in leaderboard["leaderboard"]:
        marker = "" if entry["is_active"] else " (inactive)"
        click.echo(
            f"{entry['rank']:>3}. {entry['player_name']:<30}{marker} "
            f"{entry['total_points']:>8.1f} pts  "
            f"{entry['tournaments_played']} played  "
            f"avg game {entry['average_game_score']:.1f}"
        )


def load_points(points):
    """Points distribution from inline JSON or a path to a JSON file"""
    if os.path.exists(points):
        with open(points, encoding="utf-8") as fh:
            return json.load(fh)
    try:
        return json.loads(points)
    except json.JSONDecodeError as e:
        fail("Points distribution is not valid JSON", e)


@click.group()
def cli():
    """Bowling League Management CLI"""
    pass


# Season Management Commands
@cli.group()
def season():
    """Season management commands"""
    pass


@season.command()
@click.argument("name")
@click.option(
    "--start-date",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    required=True,
    help="Season start date (YYYY-MM-DD)",
)
@click.option(
    "--end-date",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    required=True,
    help="Season end date (YYYY-MM-DD)",
)
@click.option("--points", help='Points distribution JSON, e.g. \'{"1": 100, "2": 80}\'')
@click.option("--activate", is_flag=True, help="Activate this season")
@with_appcontext
def create(name, start_date, end_date, points, activate):
    """Create a new season"""
    data = {
        "name": name,
        "start_date": start_date.date(),
        "end_date": end_date.date(),
        "is_active": activate,
    }
    if points:
        data["points_distribution"] = load_points(points)

    try:
        new_season = season_service.create_season(data)
    except LeagueError as e:
        fail("Season not created", e.message)
    except SQLAlchemyError as e:
        fail("Database error creating season", e)

    click.echo(
        f"✅ Created season {new_season.id} '{new_season.name}' "
        f"({new_season.start_date} to {new_season.end_date})"
    )
    if new_season.is_active:
        click.echo("✅ Season is active")


@season.command()
@click.argument("season_id", type=int)
@with_appcontext
def activate(season_id):
    """Activate a season (deactivates all others)"""
    try:
        activated = season_service.activate_season(season_id)
    except LeagueError as e:
        fail("Season not activated", e.message)
    except SQLAlchemyError as e:
        fail("Database error activating season", e)

    click.echo(f"✅ Activated season '{activated.name}'")


@season.command("list")
@with_appcontext
def list_seasons():
    """List all seasons"""
    seasons = season_service.list_seasons()

    if not seasons:
        click.echo("No seasons found.")
        return

    click.echo("Seasons:")
    for s in seasons:
        status = "🟢 ACTIVE" if s.is_active else "⚪ Inactive"
        points = "points set" if s.points_distribution else "no points distribution"
        click.echo(
            f"  {s.id}: {s.name} ({s.start_date} to {s.end_date}) {status} - "
            f"{s.get_tournament_count()} tournaments, {points}"
        )


@season.command("set-points")
@click.argument("season_id", type=int)
@click.argument("points")
@with_appcontext
def set_points(season_id, points):
    """Set the points distribution (inline JSON or JSON file)"""
    try:
        config = season_service.set_rating_config(season_id, load_points(points))
    except LeagueError as e:
        fail("Points distribution not saved", e.message)
    except SQLAlchemyError as e:
        fail("Database error saving points distribution", e)

    click.echo(
        f"✅ Points distribution saved for {len(config['points_distribution'])} positions"
    )


@season.command()
@click.argument("season_id", type=int, required=False)
@with_appcontext
def leaderboard(season_id):
    """Show a season leaderboard (default: active season)"""
    try:
        if season_id is None:
            board = season_service.get_active_leaderboard()
        else:
            board = season_service.get_leaderboard(season_id)
    except LeagueError as e:
        fail("Leaderboard unavailable", e.message)

    echo_leaderboard(board)


# Tournament Commands
@cli.group()
def tournament():
    """Tournament commands"""
    pass


@tournament.command()
@click.argument("tournament_id", type=int)
@with_appcontext
def complete(tournament_id):
    """Complete an ongoing tournament and award rating points"""
    try:
        completed = tournament_service.update_status(
            tournament_id, TournamentStatus.COMPLETED.value
        )
    except LeagueError as e:
        fail("Tournament not completed", e.message)
    except SQLAlchemyError as e:
        fail("Database error completing tournament", e)

    click.echo(f"✅ Completed '{completed.name}'")
    for participation in completed.get_participations_by_position():
        click.echo(
            f"  {participation.final_position:>3}. {participation.player.full_name:<30} "
            f"{participation.rating_points_earned:g} pts"
        )


@cli.command("leaderboard-from-export")
@click.argument("export_file", type=click.Path(exists=True, dir_okay=False))
@click.argument("season_id")
def leaderboard_from_export(export_file, season_id):
    """Compute a leaderboard from a JSON document export"""
    season_key = int(season_id) if season_id.isdigit() else season_id

    try:
        repository = DocumentScoringRepository.from_json_file(export_file)
        board = build_leaderboard(repository, season_key)
    except LeagueError as e:
        click.echo(f"❌ Leaderboard unavailable: {e.message}")
        sys.exit(1)

    echo_leaderboard(board.to_dict())


# Database Commands
@cli.group()
def db_cmd():
    """Database commands"""
    pass


@db_cmd.command()
@with_appcontext
def init_db():
    """Initialize database tables"""
    try:
        db.create_all()
    except SQLAlchemyError as e:
        fail("Error initializing database", e)
    click.echo("✅ Database tables created successfully!")


@db_cmd.command()
@with_appcontext
def reset():
    """⚠️  DANGER: Drop and recreate all tables"""
    if not click.confirm("This will DELETE ALL DATA. Are you sure?"):
        click.echo("Cancelled.")
        return

    try:
        db.drop_all()
        db.create_all()
    except SQLAlchemyError as e:
        fail("Error resetting database", e)
    click.echo("✅ Database reset successfully!")


# Database Migration Commands
@cli.group()
def db_migrate():
    """Database migration commands"""
    pass


@db_migrate.command()
@with_appcontext
def init_migrations():
    """Initialize migrations repository"""
    if os.path.exists("migrations"):
        click.echo("❌ Migrations directory already exists!")
        return

    from flask_migrate import init as flask_migrate_init

    flask_migrate_init()
    click.echo("✅ Migrations repository initialized!")


@db_migrate.command()
@click.option("-m", "--message", required=True, help="Migration message")
@with_appcontext
def create_migration(message):
    """Create a new migration"""
    migrate(message=message)
    click.echo(f"✅ Migration created: {message}")


@db_migrate.command()
@click.option("--revision", default="head", help="Revision to upgrade to")
@with_appcontext
def apply_migrations(revision):
    """Apply migrations to database"""
    upgrade(revision=revision)
    click.echo(f"✅ Migrations applied to {revision}")


@db_migrate.command()
@click.option("--revision", required=True, help="Revision to downgrade to")
@with_appcontext
def rollback_migration(revision):
    """Rollback migrations to specific revision"""
    downgrade(revision=revision)
    click.echo(f"✅ Rolled back to {revision}")


# Info Commands
@cli.command()
@with_appcontext
def status():
    """Show application status"""
    from bowling_league.utils.cache_utils import CacheManager

    click.echo("🎳 Bowling League Status")
    click.echo("=" * 40)

    # Database connection
    try:
        db.session.execute(text("SELECT 1"))
        click.echo("✅ Database: Connected")
    except SQLAlchemyError as e:
        fail("Database: Error", e)

    stats = CacheManager.get_cache_stats()
    click.echo(f"🗄️  Cache: {stats['type']} (leaderboards {stats['leaderboard_timeout']}s)")

    # Current season
    current_season = Season.get_current_season()
    if current_season:
        click.echo(f"✅ Current Season: {current_season.name}")
    else:
        click.echo("⚠️  Current Season: None active")

    player_count = Player.query.filter_by(is_active=True).count()
    click.echo(f"👥 Active Players: {player_count}")

    if current_season:
        total = current_season.get_tournament_count()
        completed = Tournament.query.filter_by(
            season_id=current_season.id, status=TournamentStatus.COMPLETED.value
        ).count()
        click.echo(f"🎳 Tournaments: {completed}/{total} completed")


if __name__ == "__main__":
    with app.app_context():
        cli()
