from fastapi import APIRouter

from xpenso.api.routers import auth, expenses, stats

api_router = APIRouter()
api_router.include_router(auth.router)
api_router.include_router(expenses.router)
api_router.include_router(stats.router)
