"""
Pytest configuration and fixtures for the Gantt scheduler tests.
"""

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from gantt.main import app
from gantt.models import Task


def make_task(task_id: str, start: str | None = None, end: str | None = None, **fields) -> Task:
    """Build a Task with ISO dates; extra fields pass straight through."""
    return Task(id=task_id, name=fields.pop("name", task_id.upper()), start_date=start, end_date=end, **fields)


@pytest.fixture
def task_factory():
    return make_task


@pytest.fixture
def hierarchy_tasks():
    """
    Summary -> sub-summary -> task, plus unrelated top-level rows.

        0  before
        1  summary
        2    sub
        3      leaf
        4    sibling
        5  after
    """
    return [
        make_task("before", "2025-09-01", "2025-09-02", sort_order=0),
        make_task("summary", "2025-09-03", "2025-09-10", task_type="summary", sort_order=1),
        make_task("sub", "2025-09-03", "2025-09-06", task_type="sub_summary", parent_id="summary", sort_order=2),
        make_task("leaf", "2025-09-03", "2025-09-04", parent_id="sub", sort_order=3),
        make_task("sibling", "2025-09-07", "2025-09-10", parent_id="summary", sort_order=4),
        make_task("after", "2025-09-11", "2025-09-12", sort_order=5),
    ]


@pytest_asyncio.fixture(scope="function")
async def client():
    """Async test client bound to the ASGI app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
