"""Page shell routes for the admin and trainer areas.

Rendering happens in the frontend; these routes give the authorization gate
concrete paths to guard and tell the client which page it landed on.
"""

from fastapi import APIRouter

router = APIRouter(tags=["pages"], include_in_schema=False)


def _page(name: str) -> dict:
    return {"page": name}


@router.get("/admin")
@router.get("/admin/dashboard")
async def admin_dashboard():
    return _page("admin-dashboard")


@router.get("/admin/login")
async def admin_login_page():
    return _page("admin-login")


@router.get("/admin/members")
async def admin_members_page():
    return _page("admin-members")


@router.get("/admin/trainers")
async def admin_trainers_page():
    return _page("admin-trainers")


@router.get("/admin/notifications")
async def admin_notifications_page():
    return _page("admin-notifications")


@router.get("/trainer/login")
async def trainer_login_page():
    return _page("trainer-login")


@router.get("/trainer")
@router.get("/trainer/members")
async def trainer_members_page():
    return _page("trainer-members")


@router.get("/ai-planner")
async def ai_planner_page():
    return _page("ai-planner")
