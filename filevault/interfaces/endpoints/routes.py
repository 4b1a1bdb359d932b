from fastapi import APIRouter

from . import file_routes, folder_routes, status_routes


def create_api_routes() -> APIRouter:
    """创建API路由，涵盖整个项目的所有路由管理(均需要认证)"""

    api_router = APIRouter()

    api_router.include_router(status_routes.router)
    api_router.include_router(folder_routes.router)
    api_router.include_router(file_routes.router)

    return api_router


router = create_api_routes()
