"""
API v1 路由模块
"""
from . import jobs, candidates, assessments, responses

__all__ = [
    "jobs",
    "candidates",
    "assessments",
    "responses",
]
