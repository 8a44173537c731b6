from fastapi import APIRouter

from pto_tracker.api.balances import balances_router
from pto_tracker.api.employees import employees_router
from pto_tracker.api.meta import meta_router
from pto_tracker.api.policies import router as policies_router
from pto_tracker.api.reports import reports_router
from pto_tracker.api.requests import requests_router
from pto_tracker.api.teams import teams_router
from pto_tracker.api.users import users_router

api_router = APIRouter()
api_router.include_router(users_router)
api_router.include_router(employees_router)
api_router.include_router(teams_router)
api_router.include_router(policies_router)
api_router.include_router(balances_router)
api_router.include_router(requests_router)
api_router.include_router(reports_router)
api_router.include_router(meta_router)
