from fastapi import APIRouter

from product_catalog.api.endpoints import products

api_router = APIRouter()

# Include all API endpoint routers
api_router.include_router(products.router, prefix="/Product", tags=["Products"])
