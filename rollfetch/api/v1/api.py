from fastapi import APIRouter

from rollfetch.api.v1.endpoints import results

# Create the API router without a prefix since it will be added in main.py
api_router = APIRouter()

api_router.include_router(results.router, tags=["results"])
