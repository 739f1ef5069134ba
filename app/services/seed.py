"""
种子数据

首次启动时写入示例数据：25 个职位、1000 名候选人、3 份测评。
通过职位数量探测保证幂等，已有数据时跳过。
"""
import random
from datetime import timedelta
from typing import List, Optional

from loguru import logger
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.assessment import Assessment
from app.models.base import utc_now
from app.models.candidate import Candidate, CandidateStage
from app.models.documents import (
    AssessmentSection,
    Question,
    QuestionType,
    TimelineEvent,
    TimelineEventType,
    ValidationRule,
)
from app.models.job import Job, JobStatus, slugify

JOB_TITLES = [
    "Senior Frontend Developer",
    "Backend Engineer",
    "Full Stack Developer",
    "DevOps Engineer",
    "Product Manager",
    "UX Designer",
    "Data Scientist",
    "Mobile Developer",
    "QA Engineer",
    "Technical Lead",
    "Software Architect",
    "Marketing Manager",
    "Sales Representative",
    "Customer Success Manager",
    "HR Specialist",
    "Financial Analyst",
    "Operations Manager",
    "Business Analyst",
    "Content Writer",
    "Graphic Designer",
    "Project Manager",
    "Security Engineer",
    "Machine Learning Engineer",
    "Cloud Engineer",
    "Database Administrator",
]

JOB_TAGS = ["Remote", "Full-time", "Part-time", "Contract", "Senior", "Junior", "Mid-level", "Urgent", "New"]

FIRST_NAMES = [
    "Cristiano", "Leo", "Michael", "Gareth", "David", "Virat", "Roberto",
    "Novak", "James", "Maria", "Roger", "Steve", "Kylian",
]
LAST_NAMES = [
    "Smith", "Ronaldo", "Messi", "Jordan", "Schumacher", "Bale", "Miller",
    "Kohli", "Rodriguez", "Sharapova", "Mbappe", "Federer", "Djokovic",
]

DAY = timedelta(days=1)


def generate_jobs(rng: random.Random) -> List[Job]:
    """生成示例职位，order 与列表位置一致"""
    now = utc_now()
    jobs = []
    for index, title in enumerate(JOB_TITLES):
        lowered = title.lower()
        jobs.append(Job(
            id=f"job-{index + 1}",
            title=title,
            slug=slugify(title),
            description=(
                f"We are looking for a talented {title} to join our growing team. "
                "This is an excellent opportunity to work with cutting-edge technologies "
                "and make a significant impact on our products."
            ),
            responsibilities=[
                f"Lead {lowered} initiatives and projects",
                "Collaborate with cross-functional teams",
                "Mentor junior team members",
                "Contribute to technical architecture decisions",
                "Ensure code quality and best practices",
            ],
            qualifications=[
                f"5+ years of experience in {lowered} role",
                "Strong problem-solving skills",
                "Excellent communication abilities",
                "Bachelor's degree in relevant field",
                "Experience with modern development tools",
            ],
            status=JobStatus.ACTIVE if rng.random() > 0.3 else JobStatus.ARCHIVED,
            tags=JOB_TAGS[:rng.randint(1, 4)],
            created_at=now - rng.random() * 90 * DAY,
            updated_at=now,
            order=index,
        ))
    return jobs


def generate_candidates(jobs: List[Job], rng: random.Random, count: int = 1000) -> List[Candidate]:
    """生成示例候选人，随机分配职位和阶段"""
    now = utc_now()
    stages = list(CandidateStage)
    candidates = []
    for i in range(count):
        first_name = rng.choice(FIRST_NAMES)
        last_name = rng.choice(LAST_NAMES)
        event = TimelineEvent(
            id=f"timeline-{i + 1}-1",
            type=TimelineEventType.STAGE_CHANGE,
            description="Application submitted",
            created_at=now - rng.random() * 30 * DAY,
        )
        candidates.append(Candidate(
            id=f"candidate-{i + 1}",
            name=f"{first_name} {last_name}",
            email=f"{first_name.lower()}.{last_name.lower()}@email.com",
            phone=f"+91-{rng.randint(1000, 9999)}",
            current_stage=rng.choice(stages),
            job_id=rng.choice(jobs).id,
            notes=[],
            assessment_scores=[],
            timeline=[event.model_dump(mode="json")],
            created_at=now - rng.random() * 60 * DAY,
            updated_at=now,
        ))
    return candidates


def generate_assessments(jobs: List[Job], link_base: str, rng: random.Random) -> List[Assessment]:
    """为前三个职位生成测评：技术单选题 5 道 + 经历问答题 3 道"""
    now = utc_now()
    assessments = []
    for index, job in enumerate(jobs[:3]):
        n = index + 1
        technical = AssessmentSection(
            id=f"section-{n}-1",
            title="Technical Skills",
            description="Evaluate technical competencies",
            order=0,
            questions=[
                Question(
                    id=f"question-{n}-1-{q + 1}",
                    type=QuestionType.SINGLE_CHOICE,
                    title=f"Technical question {q + 1}",
                    description="Select the best answer",
                    required=True,
                    options=["Option A", "Option B", "Option C", "Option D"],
                    order=q,
                )
                for q in range(5)
            ],
        )
        experience = AssessmentSection(
            id=f"section-{n}-2",
            title="Experience & Background",
            description="Tell us about your experience",
            order=1,
            questions=[
                Question(
                    id=f"question-{n}-2-{q + 1}",
                    type=QuestionType.LONG_TEXT,
                    title=f"Experience question {q + 1}",
                    description="Please provide detailed answer",
                    required=True,
                    validation=ValidationRule(min_length=50, max_length=500),
                    order=q,
                )
                for q in range(3)
            ],
        )
        assessment_id = f"assessment-{n}"
        assessments.append(Assessment(
            id=assessment_id,
            title=f"{job.title} Assessment",
            job_id=job.id,
            sections=[technical.model_dump(mode="json"), experience.model_dump(mode="json")],
            is_published=True,
            shareable_link=f"{link_base}/{assessment_id}",
            created_at=now - rng.random() * 30 * DAY,
            updated_at=now,
        ))
    return assessments


async def seed_database(
    db: AsyncSession,
    *,
    candidate_count: int = 1000,
    link_base: str = "https://recruitify.app/assessment",
    random_seed: Optional[int] = None,
) -> bool:
    """
    写入种子数据

    Returns:
        是否实际写入（已有职位数据时返回 False）
    """
    job_count = (await db.execute(select(func.count()).select_from(Job))).scalar() or 0
    if job_count > 0:
        logger.info(f"已存在 {job_count} 个职位，跳过种子数据")
        return False

    logger.info("正在写入种子数据...")
    rng = random.Random(random_seed)

    jobs = generate_jobs(rng)
    candidates = generate_candidates(jobs, rng, count=candidate_count)
    assessments = generate_assessments(jobs, link_base, rng)

    db.add_all(jobs)
    db.add_all(candidates)
    db.add_all(assessments)
    await db.flush()

    logger.info(
        f"种子数据写入完成: {len(jobs)} 个职位, {len(candidates)} 名候选人, {len(assessments)} 份测评"
    )
    return True
