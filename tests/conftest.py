"""
测试配置文件

提供测试用的 fixtures：内存数据库、测试客户端、测试数据工厂等
"""
from typing import AsyncGenerator, Callable, List, Optional
from dataclasses import dataclass, field

import pytest_asyncio
from fastapi import FastAPI
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.pool import StaticPool

from app.core.config import Settings
from app.core.database import Database
from app.core.network import NetworkSimulator
from app.main import create_app


# 使用内存 SQLite 作为测试数据库
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


def make_settings(**overrides) -> Settings:
    """测试配置：不读 .env，不写种子数据，无网络延迟"""
    values = {
        "database_url": TEST_DATABASE_URL,
        "seed_on_startup": False,
        "network_min_delay_ms": 0,
        "network_max_delay_ms": 0,
        "network_failure_rate": 0,
        "jobs_page_size": 10,
        **overrides,
    }
    return Settings(_env_file=None, **values)


def make_app(
    database: Database,
    *,
    should_fail: Optional[Callable[[], bool]] = None,
    **settings_overrides
) -> FastAPI:
    """创建绑定测试数据库的应用，可注入网络故障"""
    network = NetworkSimulator(0, 0, 0, should_fail=should_fail)
    return create_app(make_settings(**settings_overrides), database=database, network=network)


def make_client(app: FastAPI) -> AsyncClient:
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


# ========== 测试数据工厂 ==========

@dataclass
class DataFactory:
    """
    测试数据工厂类

    集中管理测试数据创建，避免各测试文件重复代码
    字段变更时只需修改此处
    """
    client: AsyncClient
    _counter: int = field(default=0, repr=False)

    def _next_id(self) -> str:
        """生成唯一后缀，避免数据冲突"""
        self._counter += 1
        return str(self._counter)

    async def create_job(self, **overrides) -> dict:
        """创建职位，返回完整响应数据"""
        suffix = self._next_id()
        data = {
            "title": f"Test Job {suffix}",
            "description": "Job used in tests",
            "responsibilities": ["Build features"],
            "qualifications": ["Python"],
            "status": "active",
            "tags": ["Remote"],
            **overrides
        }
        resp = await self.client.post("/api/v1/jobs", json=data)
        assert resp.status_code == 200, f"创建职位失败: {resp.text}"
        return resp.json()["data"]

    async def create_candidate(self, job_id: Optional[str] = None, **overrides) -> dict:
        """创建候选人，未指定职位时自动创建"""
        if job_id is None:
            job = await self.create_job()
            job_id = job["id"]

        suffix = self._next_id()
        data = {
            "name": f"Candidate {suffix}",
            "email": f"candidate{suffix}@example.com",
            "phone": f"+91-{suffix.zfill(4)}",
            "job_id": job_id,
            **overrides
        }
        resp = await self.client.post("/api/v1/candidates", json=data)
        assert resp.status_code == 200, f"创建候选人失败: {resp.text}"
        return resp.json()["data"]

    async def create_assessment(
        self,
        job_id: Optional[str] = None,
        sections: Optional[List[dict]] = None,
        **overrides
    ) -> dict:
        """创建测评，未指定分区时使用一个含两道题的默认分区"""
        if job_id is None:
            job = await self.create_job()
            job_id = job["id"]

        if sections is None:
            sections = [
                {
                    "id": "s1",
                    "title": "Basics",
                    "order": 0,
                    "questions": [
                        {
                            "id": "q1",
                            "type": "single-choice",
                            "title": "Do you know Python?",
                            "required": True,
                            "options": ["Yes", "No"],
                            "order": 0,
                        },
                        {
                            "id": "q2",
                            "type": "short-text",
                            "title": "Which frameworks?",
                            "required": True,
                            "conditional_logic": {
                                "depends_on": "q1",
                                "condition": "equals",
                                "value": "Yes",
                            },
                            "order": 1,
                        },
                    ],
                }
            ]

        data = {
            "title": f"Assessment {self._next_id()}",
            "job_id": job_id,
            "sections": sections,
            **overrides
        }
        resp = await self.client.post("/api/v1/assessments", json=data)
        assert resp.status_code == 200, f"创建测评失败: {resp.text}"
        return resp.json()["data"]


@pytest_asyncio.fixture(scope="function")
async def database() -> AsyncGenerator[Database, None]:
    """
    为每个测试函数提供独立的内存数据库

    StaticPool 保证所有会话共享同一个内存连接
    """
    db = Database(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await db.init()
    yield db
    await db.close()


@pytest_asyncio.fixture(scope="function")
async def db_session(database: Database) -> AsyncGenerator[AsyncSession, None]:
    """直接访问数据库的会话（用于 CRUD / 种子数据测试）"""
    async with database.session_factory() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def client(database: Database) -> AsyncGenerator[AsyncClient, None]:
    """
    提供测试用的 HTTP 客户端

    ASGITransport 不触发 lifespan，数据库已在 database fixture 中初始化
    """
    async with make_client(make_app(database)) as ac:
        yield ac


@pytest_asyncio.fixture
async def factory(client: AsyncClient) -> DataFactory:
    """提供测试数据工厂实例"""
    return DataFactory(client=client)
