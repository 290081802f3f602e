"""Seed the database with a demo admin, agents, a team and zones.

Usage:
    python -m knockwise.tools.seed_db
    python -m knockwise.tools.seed_db --drop  # drop existing data first
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from knockwise.adapters.persistence.database import async_session_factory
from knockwise.adapters.persistence.models import (
    AgentZoneAssignmentModel,
    ScheduledAssignmentModel,
    TeamModel,
    UserModel,
    ZoneModel,
)
from knockwise.adapters.persistence.repositories import (
    SqlTeamRepository,
    SqlUserRepository,
    SqlZoneRepository,
)
from knockwise.domain.entities.team import Team
from knockwise.domain.entities.user import User
from knockwise.domain.entities.zone import Zone
from knockwise.domain.value_objects.enums import UserRole
from knockwise.domain.value_objects.geo_polygon import GeoPolygon

logging.basicConfig(level=logging.INFO, format="%(levelname)s | %(message)s")
logger = logging.getLogger(__name__)

ADMIN = ("Demo Admin", "admin@knockwise.local")

AGENTS = [
    ("Ava Brooks", "ava@knockwise.local"),
    ("Liam Chen", "liam@knockwise.local"),
    ("Maya Ortiz", "maya@knockwise.local"),
    ("Noah Patel", "noah@knockwise.local"),
]

TEAM_NAME = "North Crew"

# (name, south-west corner lon/lat); each zone is a 0.01° square
ZONES = [
    ("Maple Heights", (-97.7450, 30.2870)),
    ("Riverside East", (-97.7300, 30.2550)),
    ("Cedar Park West", (-97.8200, 30.5050)),
]


def _square(lon: float, lat: float, size: float = 0.01) -> GeoPolygon:
    return GeoPolygon(
        ring=(
            (lon, lat),
            (lon + size, lat),
            (lon + size, lat + size),
            (lon, lat + size),
            (lon, lat),
        )
    )


async def _drop_data(session: AsyncSession) -> None:
    """Delete all data in correct order (respecting FK constraints)."""
    for model in [
        AgentZoneAssignmentModel,
        ScheduledAssignmentModel,
        ZoneModel,
    ]:
        await session.execute(delete(model))
    # users ↔ teams reference each other
    await session.execute(
        UserModel.__table__.update().values(primary_team_id=None, primary_zone_id=None)
    )
    await session.execute(delete(TeamModel))
    await session.execute(delete(UserModel))
    await session.commit()
    logger.info("Dropped all existing data")


async def _get_or_create_user(
    session: AsyncSession, name: str, email: str, role: UserRole, created_by: int | None
) -> tuple[int, bool]:
    existing = await session.execute(select(UserModel.id).where(UserModel.email == email))
    user_id = existing.scalar_one_or_none()
    if user_id is not None:
        logger.debug("User '%s' already exists, skipping", email)
        return user_id, False
    user = await SqlUserRepository(session).save(
        User(id=None, name=name, email=email, role=role, created_by=created_by)
    )
    return user.id, True


async def seed(drop: bool = False) -> dict[str, int]:
    """Main seed function. Returns counts of seeded records."""
    counts = {"users": 0, "teams": 0, "zones": 0}

    async with async_session_factory() as session:
        if drop:
            await _drop_data(session)

        admin_id, created = await _get_or_create_user(
            session, *ADMIN, UserRole.SUBADMIN, created_by=None
        )
        counts["users"] += int(created)

        agent_ids = []
        for name, email in AGENTS:
            agent_id, created = await _get_or_create_user(
                session, name, email, UserRole.AGENT, created_by=admin_id
            )
            agent_ids.append(agent_id)
            counts["users"] += int(created)

        existing = await session.execute(select(TeamModel.id).where(TeamModel.name == TEAM_NAME))
        if existing.scalar_one_or_none() is None:
            members = agent_ids[:2]
            team = await SqlTeamRepository(session).save(
                Team(
                    id=None,
                    name=TEAM_NAME,
                    created_by=admin_id,
                    leader_id=members[0],
                    agent_ids=members,
                )
            )
            users = SqlUserRepository(session)
            for agent_id in members:
                await users.update_teams(agent_id, [team.id], team.id)
            counts["teams"] += 1

        zones = SqlZoneRepository(session)
        for name, (lon, lat) in ZONES:
            existing = await session.execute(select(ZoneModel.id).where(ZoneModel.name == name))
            if existing.scalar_one_or_none() is not None:
                continue
            await zones.save(
                Zone(id=None, name=name, created_by=admin_id, boundary=_square(lon, lat))
            )
            counts["zones"] += 1

        await session.commit()

    logger.info(
        "Seeded %d users, %d teams, %d zones",
        counts["users"], counts["teams"], counts["zones"],
    )
    return counts


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed KnockWise demo data")
    parser.add_argument("--drop", action="store_true", help="Drop existing data first")
    args = parser.parse_args()

    try:
        asyncio.run(seed(drop=args.drop))
    except Exception:
        logger.exception("Seeding failed")
        sys.exit(1)


if __name__ == "__main__":
    main()
