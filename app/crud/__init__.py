"""
CRUD 操作模块
"""
from .job import job_crud
from .candidate import candidate_crud
from .assessment import assessment_crud
from .response import response_crud

__all__ = [
    "job_crud",
    "candidate_crud",
    "assessment_crud",
    "response_crud",
]
