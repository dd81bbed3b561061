"""
Demo account and sample tasks for local environments.
"""

import logging
from datetime import timedelta

from taskmanager.core.security import PasswordHasher
from taskmanager.models.base import utcnow
from taskmanager.models.task import TaskCreate, TaskPriority, TaskStatus
from taskmanager.storage.base import TaskStore, UserStore

logger = logging.getLogger(__name__)

DEMO_NAME = "Demo User"
DEMO_EMAIL = "demo@taskmanager.com"
DEMO_PASSWORD = "demo123"

DEMO_TASKS = [
    ("Learn Docker", "Study Docker containerization and multi-stage builds", TaskStatus.DONE, TaskPriority.HIGH),
    ("Setup Kubernetes", "Configure k3s cluster and deploy applications", TaskStatus.IN_PROGRESS, TaskPriority.HIGH),
    ("CI/CD Pipeline", "Implement GitHub Actions for automated deployment", TaskStatus.TODO, TaskPriority.MEDIUM),
    ("Monitoring Setup", "Configure Prometheus and Grafana for observability", TaskStatus.TODO, TaskPriority.MEDIUM),
    ("Security Hardening", "Implement security best practices and vulnerability scanning", TaskStatus.TODO, TaskPriority.LOW),
]


async def seed_demo_data(
    user_store: UserStore,
    task_store: TaskStore,
    password_hasher: PasswordHasher,
) -> bool:
    """
    Create the demo user with sample tasks unless it already exists.

    Returns:
        True if the demo data was created, False if it was already present.
    """
    if await user_store.email_exists(DEMO_EMAIL):
        return False

    now = utcnow()
    user = await user_store.create(
        name=DEMO_NAME,
        email=DEMO_EMAIL,
        password_hash=await password_hasher.hash(DEMO_PASSWORD),
        now=now,
    )

    # Oldest first so the listing shows them in the order above.
    for offset, (title, description, status, priority) in enumerate(reversed(DEMO_TASKS)):
        created_at = now + timedelta(milliseconds=offset)
        task = await task_store.create(
            user.id,
            TaskCreate(title=title, description=description, priority=priority),
            now=created_at,
        )
        if status != TaskStatus.TODO:
            await task_store.update(user.id, task.id, {"status": status}, now=created_at)

    logger.info(f"Demo user created with {len(DEMO_TASKS)} sample tasks")
    return True
