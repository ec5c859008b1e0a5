#!/usr/bin/env python3
import argparse
import asyncio
import random

from heliclockter import datetime_utc, timedelta

from clubhub.database import database
from clubhub.logic.matches import create_match
from clubhub.logic.statistics import recalculate_tournament_statistics
from clubhub.models.db.club import ClubBody
from clubhub.models.db.match import MatchCreateBody, MatchOutcome, MatchResultBody
from clubhub.models.db.player import PlayerBody, PlayerRole, PlayerWithClub
from clubhub.models.db.point_system import (
    ComparisonOperator,
    ConditionalRuleBody,
    PointSystemTemplateBody,
    RuleConditionType,
    StagePointBody,
)
from clubhub.models.db.tournament import TournamentBody
from clubhub.sql.admins import ensure_admin
from clubhub.sql.clubs import sql_create_club
from clubhub.sql.players import sql_create_player
from clubhub.sql.point_systems import (
    get_template_id_by_name,
    sql_create_point_system_template,
)
from clubhub.sql.tournaments import sql_add_participants, sql_create_tournament

CLUB_NAMES = ["Riverside FC", "Northgate United", "Harbor Athletic", "Oakfield Rovers"]
FIRST_NAMES = ["Alex", "Sam", "Jordan", "Taylor", "Robin", "Casey", "Jamie", "Morgan", "Riley"]
LAST_NAMES = ["Khan", "Silva", "Meyer", "Okafor", "Novak", "Larsen", "Rossi", "Tanaka"]
SAMPLE_TEMPLATE_NAME = "Sample league scoring"


def sample_player_name(rng: random.Random, index: int) -> str:
    return f"{rng.choice(FIRST_NAMES)} {rng.choice(LAST_NAMES)} {index}"


def sample_template() -> PointSystemTemplateBody:
    return PointSystemTemplateBody(
        name=SAMPLE_TEMPLATE_NAME,
        description="Three points per win with a bonus for clean sheets and big wins",
        points_per_win=3,
        points_per_draw=1,
        points_per_loss=0,
        points_per_goal_scored=0,
        points_per_goal_conceded=0,
        stage_points=[
            StagePointBody(
                stage_name="Final",
                stage_order=1,
                points_per_win=5,
                points_per_draw=2,
                points_per_loss=1,
                points_per_goal_scored=0,
                points_per_goal_conceded=0,
            )
        ],
        conditional_rules=[
            ConditionalRuleBody(
                condition_type=RuleConditionType.CLEAN_SHEET,
                operator=ComparisonOperator.EQUALS,
                threshold=0,
                point_adjustment=1,
            ),
            ConditionalRuleBody(
                condition_type=RuleConditionType.GOAL_DIFFERENCE_THRESHOLD,
                operator=ComparisonOperator.GREATER_THAN_OR_EQUAL,
                threshold=3,
                point_adjustment=1,
            ),
        ],
    )


def sample_result_pair(
    rng: random.Random, player_a: PlayerWithClub, player_b: PlayerWithClub
) -> list[MatchResultBody]:
    goals_a, goals_b = rng.randint(0, 4), rng.randint(0, 4)
    if goals_a > goals_b:
        outcome_a, outcome_b = MatchOutcome.WIN, MatchOutcome.LOSS
    elif goals_a < goals_b:
        outcome_a, outcome_b = MatchOutcome.LOSS, MatchOutcome.WIN
    else:
        outcome_a = outcome_b = MatchOutcome.DRAW

    return [
        MatchResultBody(
            player_id=player_a.id, outcome=outcome_a, goals_scored=goals_a, goals_conceded=goals_b
        ),
        MatchResultBody(
            player_id=player_b.id, outcome=outcome_b, goals_scored=goals_b, goals_conceded=goals_a
        ),
    ]


async def seed(args: argparse.Namespace) -> None:
    rng = random.Random(args.seed)

    if await ensure_admin(args.admin_username, args.admin_password):
        print(f"Created admin '{args.admin_username}'")

    club_players: list[PlayerWithClub] = []
    clubs = []
    for club_name in CLUB_NAMES[: args.clubs]:
        club = await sql_create_club(ClubBody(name=club_name))
        clubs.append(club)
        for index in range(args.players_per_club):
            roles = [PlayerRole.PLAYER]
            if index == 0:
                roles = [PlayerRole.CAPTAIN, PlayerRole.PLAYER]
            elif index == 1:
                roles = [PlayerRole.MANAGER]
            body = PlayerBody(name=sample_player_name(rng, len(club_players)), roles=roles)
            club_players.append(await sql_create_player(body, club.id))

    for index in range(args.free_agents):
        body = PlayerBody(
            name=sample_player_name(rng, len(club_players) + index),
            email=f"free.agent{index}@example.com",
            district="Central",
            state="Sample State",
            place="Central, Sample State",
        )
        await sql_create_player(body, None)

    template_id = await get_template_id_by_name(SAMPLE_TEMPLATE_NAME)
    if template_id is None:
        template = await sql_create_point_system_template(sample_template())
        template_id = template.id
        final_stage_id = template.stage_points[0].id
    else:
        final_stage_id = None

    start = datetime_utc.now() - timedelta(days=14)
    tournament = await sql_create_tournament(
        TournamentBody(
            name=f"Sample Cup {start.year}",
            description="Seeded sample tournament",
            start_date=start,
            end_date=start + timedelta(days=30),
            club_id=clubs[0].id if clubs else None,
            point_system_template_id=template_id,
        )
    )
    await sql_add_participants(tournament.id, [player.id for player in club_players])

    for index in range(args.matches):
        player_a, player_b = rng.sample(club_players, 2)
        is_final = index == args.matches - 1 and final_stage_id is not None
        await create_match(
            tournament,
            MatchCreateBody(
                match_date=start + timedelta(days=index % 14, hours=index),
                stage_id=final_stage_id if is_final else None,
                results=sample_result_pair(rng, player_a, player_b),
            ),
        )

    summary = await recalculate_tournament_statistics(tournament.id)
    print(
        f"Seeded {len(clubs)} clubs, {len(club_players)} club players, "
        f"{args.free_agents} free agents and {args.matches} matches | "
        f"tournament={tournament.id} | recalculated {summary.results_updated} results "
        f"in {summary.duration_ms}ms"
    )


async def async_main() -> None:
    parser = argparse.ArgumentParser(
        description="Seed sample clubs, players, a point system and a tournament with matches."
    )
    parser.add_argument("--admin-username", type=str, default="admin")
    parser.add_argument("--admin-password", type=str, default="admin-pass-123")
    parser.add_argument("--clubs", type=int, default=3)
    parser.add_argument("--players-per-club", type=int, default=6)
    parser.add_argument("--free-agents", type=int, default=4)
    parser.add_argument("--matches", type=int, default=20)
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducible data")
    args = parser.parse_args()

    if args.clubs < 1 or args.clubs > len(CLUB_NAMES):
        raise ValueError(f"--clubs must be between 1 and {len(CLUB_NAMES)}")
    if args.clubs * args.players_per_club < 2:
        raise ValueError("At least two club players are needed to create matches")

    await database.connect()
    try:
        await seed(args)
    finally:
        await database.disconnect()


if __name__ == "__main__":
    asyncio.run(async_main())
