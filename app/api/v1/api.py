from fastapi import APIRouter
from .endpoints import (
    items,
    users,
    balance,
)

api_router = APIRouter()

api_router.include_router(items.router, prefix="/items", tags=["Items"])
api_router.include_router(users.router, prefix="/users", tags=["Users"])
api_router.include_router(balance.router, prefix="/balance", tags=["Balance"])
