from fastapi import APIRouter

from weekline.api.routes import account, billing, exports, health, projects, sessions, week

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(account.router, tags=["account"])
api_router.include_router(projects.router, prefix="/projects", tags=["projects"])
api_router.include_router(sessions.router, prefix="/sessions", tags=["sessions"])
api_router.include_router(week.router, tags=["week"])
api_router.include_router(exports.router, prefix="/exports", tags=["exports"])
api_router.include_router(billing.router, tags=["billing"])
