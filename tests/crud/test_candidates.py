"""
候选人 API 测试

覆盖候选人 CRUD、阶段流转、看板拖拽和备注
"""
import pytest
from httpx import AsyncClient

from tests.conftest import DataFactory


@pytest.mark.asyncio
async def test_candidate_crud_flow(client: AsyncClient, factory: DataFactory):
    """测试候选人完整 CRUD 流程"""
    job = await factory.create_job()

    # 1. Create
    candidate = await factory.create_candidate(job_id=job["id"], name="Aarav Sharma")
    candidate_id = candidate["id"]
    assert candidate["current_stage"] == "applied"
    assert len(candidate["timeline"]) == 1
    assert candidate["timeline"][0]["description"] == "Application submitted"

    # 2. Read
    response = await client.get(f"/api/v1/candidates/{candidate_id}")
    assert response.status_code == 200
    assert response.json()["data"]["name"] == "Aarav Sharma"

    # 3. List / search
    response = await client.get("/api/v1/candidates", params={"search": "aarav"})
    assert response.json()["data"]["total"] == 1

    response = await client.get("/api/v1/candidates", params={"job_id": job["id"]})
    assert response.json()["data"]["total"] == 1

    # 4. Update
    response = await client.patch(f"/api/v1/candidates/{candidate_id}", json={"phone": "+91-1234"})
    assert response.status_code == 200
    assert response.json()["data"]["phone"] == "+91-1234"

    # 5. Delete
    response = await client.delete(f"/api/v1/candidates/{candidate_id}")
    assert response.status_code == 200

    response = await client.get(f"/api/v1/candidates/{candidate_id}")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_create_candidate_unknown_job(client: AsyncClient):
    """测试关联不存在的职位"""
    response = await client.post("/api/v1/candidates", json={
        "name": "Nobody",
        "email": "nobody@example.com",
        "job_id": "missing-job",
    })
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_stage_change_records_timeline(client: AsyncClient, factory: DataFactory):
    """测试阶段变更追加时间线事件，任意阶段可直接流转"""
    candidate = await factory.create_candidate()

    response = await client.patch(
        f"/api/v1/candidates/{candidate['id']}/stage", json={"stage": "hired"}
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["current_stage"] == "hired"

    event = data["timeline"][-1]
    assert event["type"] == "stage_change"
    assert event["description"] == "Moved to hired"
    assert event["metadata"] == {"from": "applied", "to": "hired"}

    # 终态也可以再流转
    response = await client.patch(
        f"/api/v1/candidates/{candidate['id']}/stage", json={"stage": "screening"}
    )
    assert response.json()["data"]["current_stage"] == "screening"

    response = await client.patch(
        f"/api/v1/candidates/{candidate['id']}/stage", json={"stage": "unknown"}
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_board_move_changes_stage_once(client: AsyncClient, factory: DataFactory):
    """测试看板跨列拖拽：阶段改变，只追加一条事件，备注不变"""
    candidate = await factory.create_candidate()
    await client.patch(f"/api/v1/candidates/{candidate['id']}/stage", json={"stage": "interview"})
    await client.post(
        f"/api/v1/candidates/{candidate['id']}/notes", json={"content": "Strong portfolio"}
    )

    response = await client.post("/api/v1/candidates/board/move", json={
        "draggable_id": candidate["id"],
        "source": {"droppable_id": "interview", "index": 0},
        "destination": {"droppable_id": "offer", "index": 2},
    })
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["current_stage"] == "offer"
    assert [n["content"] for n in data["notes"]] == ["Strong portfolio"]
    # 初始事件 + 阶段事件 + 备注事件 + 拖拽产生的阶段事件
    assert len(data["timeline"]) == 4
    assert data["timeline"][-1]["type"] == "stage_change"
    assert data["timeline"][-1]["metadata"] == {"from": "interview", "to": "offer"}


@pytest.mark.asyncio
async def test_board_move_same_column_is_noop(client: AsyncClient, factory: DataFactory):
    """测试列内拖拽和拖出看板不做修改"""
    candidate = await factory.create_candidate()

    response = await client.post("/api/v1/candidates/board/move", json={
        "draggable_id": candidate["id"],
        "source": {"droppable_id": "applied", "index": 0},
        "destination": {"droppable_id": "applied", "index": 3},
    })
    assert response.status_code == 200
    assert response.json()["message"] == "No change"
    assert len(response.json()["data"]["timeline"]) == 1

    response = await client.post("/api/v1/candidates/board/move", json={
        "draggable_id": candidate["id"],
        "source": {"droppable_id": "applied", "index": 0},
        "destination": None,
    })
    assert response.status_code == 200
    assert response.json()["data"]["current_stage"] == "applied"


@pytest.mark.asyncio
async def test_board_move_invalid_stage(client: AsyncClient, factory: DataFactory):
    """测试拖到不存在的列"""
    candidate = await factory.create_candidate()

    response = await client.post("/api/v1/candidates/board/move", json={
        "draggable_id": candidate["id"],
        "source": {"droppable_id": "applied", "index": 0},
        "destination": {"droppable_id": "archived", "index": 0},
    })
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_board_groups_by_stage(client: AsyncClient, factory: DataFactory):
    """测试看板按阶段分组并统计数量"""
    job = await factory.create_job()
    first = await factory.create_candidate(job_id=job["id"])
    await factory.create_candidate(job_id=job["id"])
    await client.patch(f"/api/v1/candidates/{first['id']}/stage", json={"stage": "offer"})

    response = await client.get("/api/v1/candidates/board", params={"job_id": job["id"]})
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["total"] == 2

    counts = {column["stage"]: column["count"] for column in data["columns"]}
    assert [column["stage"] for column in data["columns"]] == [
        "applied", "screening", "interview", "assessment", "offer", "hired", "rejected"
    ]
    assert counts["applied"] == 1
    assert counts["offer"] == 1


@pytest.mark.asyncio
async def test_note_mentions(client: AsyncClient, factory: DataFactory):
    """测试备注 @提及 提取"""
    candidate = await factory.create_candidate()

    response = await client.post(
        f"/api/v1/candidates/{candidate['id']}/notes",
        json={"content": "Loop in @priya and @rahul_k for the panel"},
    )
    assert response.status_code == 200
    data = response.json()["data"]
    note = data["notes"][-1]
    assert note["mentions"] == ["priya", "rahul_k"]
    assert note["author_id"] == "current-user"
    assert data["timeline"][-1]["type"] == "note_added"

    # 显式传入 mentions 时以传入为准
    response = await client.post(
        f"/api/v1/candidates/{candidate['id']}/notes",
        json={"content": "Ping @someone", "mentions": []},
    )
    assert response.json()["data"]["notes"][-1]["mentions"] == []

    response = await client.post(
        f"/api/v1/candidates/{candidate['id']}/notes", json={"content": ""}
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_board_move_uses_stored_stage(client: AsyncClient, factory: DataFactory):
    """测试看板拖拽以当前阶段为准：过期的源列不产生重复事件"""
    candidate = await factory.create_candidate()
    await client.patch(f"/api/v1/candidates/{candidate['id']}/stage", json={"stage": "offer"})

    response = await client.post("/api/v1/candidates/board/move", json={
        "draggable_id": candidate["id"],
        "source": {"droppable_id": "interview", "index": 0},
        "destination": {"droppable_id": "offer", "index": 0},
    })
    assert response.status_code == 200
    assert response.json()["message"] == "No change"
    data = response.json()["data"]
    assert data["current_stage"] == "offer"
    assert len(data["timeline"]) == 2

    # 源列过期但目标不同：按实际阶段记录 from
    response = await client.post("/api/v1/candidates/board/move", json={
        "draggable_id": candidate["id"],
        "source": {"droppable_id": "applied", "index": 0},
        "destination": {"droppable_id": "hired", "index": 0},
    })
    event = response.json()["data"]["timeline"][-1]
    assert event["metadata"] == {"from": "offer", "to": "hired"}


@pytest.mark.asyncio
async def test_update_clears_optional_fields(client: AsyncClient, factory: DataFactory):
    """测试显式传入 null 可清空电话和简历，必填字段忽略 null"""
    candidate = await factory.create_candidate(resume="Ten years of Python")

    response = await client.patch(
        f"/api/v1/candidates/{candidate['id']}",
        json={"phone": None, "resume": None, "name": None},
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["phone"] is None
    assert data["resume"] is None
    assert data["name"] == candidate["name"]

    # 未传入的字段不变
    response = await client.patch(
        f"/api/v1/candidates/{candidate['id']}", json={"email": "new@example.com"}
    )
    assert response.json()["data"]["name"] == candidate["name"]
