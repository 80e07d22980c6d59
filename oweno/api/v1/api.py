from fastapi import APIRouter
from oweno.api.v1.endpoints import splits, expenses, balances, settlements

api_router = APIRouter()

api_router.include_router(splits.router, prefix="/splits", tags=["splits"])
api_router.include_router(expenses.router, prefix="/expenses", tags=["expenses"])
api_router.include_router(balances.router, prefix="/balances", tags=["balances"])
api_router.include_router(settlements.router, prefix="/settlements", tags=["settlements"])
