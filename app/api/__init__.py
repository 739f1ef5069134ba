"""
API 路由模块
"""
from fastapi import APIRouter

from .v1 import jobs, candidates, assessments, responses

# 创建主路由
api_router = APIRouter()

# 注册各模块路由
api_router.include_router(
    jobs.router,
    prefix="/jobs",
    tags=["职位管理"]
)
api_router.include_router(
    candidates.router,
    prefix="/candidates",
    tags=["候选人管理"]
)
api_router.include_router(
    assessments.router,
    prefix="/assessments",
    tags=["测评管理"]
)
api_router.include_router(
    responses.router,
    prefix="/responses",
    tags=["测评答卷"]
)
