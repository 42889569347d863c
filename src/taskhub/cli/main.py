"""Taskhub CLI — run the server and manage the database.

Usage:
    taskhub serve                      # Run the API with uvicorn
    taskhub init-db                    # Create tables directly (dev/test)
    taskhub clear-projects --yes       # Delete every project and todo
    taskhub clear-members --yes        # Delete every org membership
"""

from __future__ import annotations

import asyncio

import click

from taskhub import __version__
from taskhub.config import settings


def _run(coro):
    """Run an async coroutine from a synchronous Click handler."""
    return asyncio.run(coro)


@click.group()
@click.version_option(version=__version__, prog_name="taskhub")
def main():
    """Taskhub — multi-tenant task tracking API."""


@main.command()
@click.option("--host", default=None, help="Bind address (default: TASKHUB_HOST)")
@click.option("--port", default=None, type=int, help="Port (default: TASKHUB_PORT)")
@click.option("--reload", is_flag=True, help="Auto-reload on code changes")
def serve(host: str | None, port: int | None, reload: bool):
    """Run the HTTP API."""
    import uvicorn

    uvicorn.run(
        "taskhub.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
    )


@main.command("init-db")
def init_db():
    """Create all tables from the ORM models (use Alembic in production)."""
    _run(_init_db_impl())
    click.secho("Tables created.", fg="green")


async def _init_db_impl():
    from taskhub.db.engine import engine
    from taskhub.db.models import Base

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    await engine.dispose()


@main.command("clear-projects")
@click.confirmation_option(prompt="Delete every project and todo of every organization?")
def clear_projects():
    """Delete all projects (and their todos) across all organizations."""
    from taskhub.services.project_service import ProjectService

    deleted = _run(_with_session(lambda db: ProjectService(db).clear_all()))
    click.echo(f"Deleted {len(deleted)} project(s).")


@main.command("clear-members")
@click.confirmation_option(prompt="Delete every membership of every organization?")
def clear_members():
    """Delete all org memberships across all organizations."""
    from taskhub.services.membership_service import MembershipService

    deleted = _run(_with_session(lambda db: MembershipService(db).clear()))
    click.echo(f"Deleted {len(deleted)} membership(s).")


async def _with_session(action):
    from taskhub.db.engine import async_session_factory, engine

    try:
        async with async_session_factory() as db:
            return await action(db)
    finally:
        await engine.dispose()


if __name__ == "__main__":
    main()
