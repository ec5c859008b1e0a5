from pathlib import Path
from typing import Any

from fastapi import APIRouter, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from heliclockter import datetime_utc

from clubhub.config import config
from clubhub.logic.clubs import build_club_hierarchy
from clubhub.logic.ranking.leaderboard import (
    get_player_leaderboard,
    get_team_leaderboard,
    get_tournament_leaderboard,
    public_tournament_player_sort_key,
)
from clubhub.logic.statistics import get_template_for_tournament
from clubhub.routes.auth import authenticate_admin, issue_access_token, set_session_cookie
from clubhub.sql.clubs import get_club_by_id, get_clubs
from clubhub.sql.matches import get_matches_with_results, get_recent_results_of_player
from clubhub.sql.players import get_player_by_id, get_player_count, get_players
from clubhub.sql.point_systems import get_point_system_template_count, get_point_system_templates
from clubhub.sql.stats import get_stats_of_player
from clubhub.sql.tournaments import (
    get_participants,
    get_tournament_count,
    get_tournament_with_counts,
    get_tournaments,
)
from clubhub.utils.id_types import ClubId, PlayerId, TournamentId
from clubhub.utils.pagination import MAX_PAGE_SIZE, Pagination

router = APIRouter(include_in_schema=False)

templates = Jinja2Templates(directory=Path(__file__).resolve().parents[1] / "templates")


def render(
    request: Request, template: str, context: dict[str, Any] | None = None, status_code: int = 200
) -> HTMLResponse:
    return templates.TemplateResponse(
        request, template, {"now": datetime_utc.now(), **(context or {})}, status_code=status_code
    )


def not_found(request: Request, resource: str) -> HTMLResponse:
    return render(request, "not_found.html", {"resource": resource}, status_code=404)


@router.get("/login", response_class=HTMLResponse)
async def login_page(request: Request) -> HTMLResponse:
    return render(request, "login.html")


@router.post("/login", response_model=None)
async def login_submit(
    request: Request, username: str = Form(...), password: str = Form(...)
) -> HTMLResponse | RedirectResponse:
    admin = await authenticate_admin(username, password)
    if admin is None:
        return render(
            request,
            "login.html",
            {"error": "Incorrect username or password", "username": username},
            status_code=401,
        )

    response = RedirectResponse("/dashboard", status_code=303)
    set_session_cookie(response, issue_access_token(admin))
    return response


@router.get("/logout")
async def logout_page() -> RedirectResponse:
    response = RedirectResponse("/login", status_code=303)
    response.delete_cookie(config.session_cookie_name)
    return response


@router.get("/dashboard", response_class=HTMLResponse)
async def dashboard(request: Request) -> HTMLResponse:
    counts = {
        "clubs": len(await get_clubs()),
        "players": await get_player_count(),
        "free_agents": await get_player_count(free_agents_only=True),
        "tournaments": await get_tournament_count(),
        "point_systems": await get_point_system_template_count(None),
    }
    return render(request, "dashboard/index.html", {"counts": counts})


@router.get("/dashboard/clubs", response_class=HTMLResponse)
async def dashboard_clubs(request: Request) -> HTMLResponse:
    return render(request, "dashboard/clubs.html", {"clubs": await get_clubs()})


@router.get("/dashboard/tournaments", response_class=HTMLResponse)
async def dashboard_tournaments(request: Request) -> HTMLResponse:
    return render(
        request, "dashboard/tournaments.html", {"tournaments": await get_tournaments()}
    )


@router.get("/dashboard/tournaments/{tournament_id}", response_class=HTMLResponse)
async def dashboard_tournament(request: Request, tournament_id: TournamentId) -> HTMLResponse:
    tournament = await get_tournament_with_counts(tournament_id)
    if tournament is None:
        return not_found(request, "Tournament")

    template = await get_template_for_tournament(tournament)
    return render(
        request,
        "dashboard/tournament.html",
        {
            "tournament": tournament,
            "status": tournament.status_at(datetime_utc.now()),
            "stages": template.stage_points if template is not None else [],
            "participants": await get_participants(tournament_id),
            "matches": await get_matches_with_results(tournament_id),
            "rows": await get_tournament_leaderboard(tournament_id),
        },
    )


@router.get("/dashboard/point-systems", response_class=HTMLResponse)
async def dashboard_point_systems(request: Request) -> HTMLResponse:
    pagination = Pagination(page=1, page_size=MAX_PAGE_SIZE)
    return render(
        request,
        "dashboard/point_systems.html",
        {"templates": await get_point_system_templates(None, pagination)},
    )


@router.get("/dashboard/free-agents", response_class=HTMLResponse)
async def dashboard_free_agents(request: Request) -> HTMLResponse:
    return render(
        request,
        "dashboard/free_agents.html",
        {"players": await get_players(free_agents_only=True)},
    )


@router.get("/", response_class=HTMLResponse)
async def home(request: Request) -> HTMLResponse:
    return render(
        request,
        "public/index.html",
        {
            "tournaments": await get_tournaments(pagination=Pagination(page=1, page_size=5)),
            "rows": (await get_player_leaderboard(None))[:10],
        },
    )


@router.get("/tournaments", response_class=HTMLResponse)
async def public_tournaments_page(request: Request) -> HTMLResponse:
    now = datetime_utc.now()
    tournaments = await get_tournaments()
    return render(
        request,
        "public/tournaments.html",
        {"tournaments": [(t, t.status_at(now)) for t in tournaments]},
    )


@router.get("/tournaments/{tournament_id}", response_class=HTMLResponse)
async def public_tournament_page(request: Request, tournament_id: TournamentId) -> HTMLResponse:
    tournament = await get_tournament_with_counts(tournament_id)
    if tournament is None:
        return not_found(request, "Tournament")

    return render(
        request,
        "public/tournament.html",
        {
            "tournament": tournament,
            "status": tournament.status_at(datetime_utc.now()),
            "matches": await get_matches_with_results(tournament_id),
            "rows": await get_tournament_leaderboard(
                tournament_id, key=public_tournament_player_sort_key
            ),
        },
    )


@router.get("/players", response_class=HTMLResponse)
async def public_players_page(
    request: Request, search: str | None = None, free_agents: bool = False
) -> HTMLResponse:
    return render(
        request,
        "public/players.html",
        {
            "players": await get_players(search=search, free_agents_only=free_agents),
            "search": search or "",
            "free_agents": free_agents,
        },
    )


@router.get("/players/{player_id}", response_class=HTMLResponse)
async def public_player_page(request: Request, player_id: PlayerId) -> HTMLResponse:
    player = await get_player_by_id(player_id)
    if player is None:
        return not_found(request, "Player")

    return render(
        request,
        "public/player.html",
        {
            "player": player,
            "tournament_stats": await get_stats_of_player(player_id),
            "recent_results": await get_recent_results_of_player(player_id),
        },
    )


@router.get("/clubs", response_class=HTMLResponse)
async def public_clubs_page(request: Request) -> HTMLResponse:
    return render(request, "public/clubs.html", {"clubs": await get_clubs()})


@router.get("/clubs/{club_id}", response_class=HTMLResponse)
async def public_club_page(request: Request, club_id: ClubId) -> HTMLResponse:
    club = await get_club_by_id(club_id)
    if club is None:
        return not_found(request, "Club")

    return render(
        request,
        "public/club.html",
        {
            "hierarchy": build_club_hierarchy(club, await get_players(club_id=club_id)),
            "tournaments": await get_tournaments(club_id=club_id),
        },
    )


@router.get("/leaderboard/players", response_class=HTMLResponse)
async def player_leaderboard_page(
    request: Request, tournament: TournamentId | None = None
) -> HTMLResponse:
    return render(
        request,
        "public/player_leaderboard.html",
        {
            "rows": await get_player_leaderboard(tournament),
            "tournaments": await get_tournaments(),
            "selected": tournament,
        },
    )


@router.get("/leaderboard/teams", response_class=HTMLResponse)
async def team_leaderboard_page(
    request: Request, tournament: TournamentId | None = None
) -> HTMLResponse:
    return render(
        request,
        "public/team_leaderboard.html",
        {
            "rows": await get_team_leaderboard(tournament),
            "tournaments": await get_tournaments(),
            "selected": tournament,
        },
    )
