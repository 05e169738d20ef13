from fastapi import APIRouter

from .routes_health import router as health_router
from .shipping import router as shipping_router
from .shipping_config import router as shipping_config_router


api_v1 = APIRouter()
api_v1.include_router(health_router)
api_v1.include_router(shipping_router)
api_v1.include_router(shipping_config_router)
