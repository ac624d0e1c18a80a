"""Tests for pull request comments and tasks."""

import json

import httpx
import pytest

from mcp_bitbucket.bitbucket import TaskResolution
from mcp_bitbucket.exceptions import BitbucketApiError
from mcp_bitbucket.models.bitbucket import BitbucketTask
from tests.utils.factories import CommentFactory, PageFactory, TaskFactory

PR = "/repositories/acme/widgets/pullrequests/42"


@pytest.mark.anyio
async def test_list_comments_and_tasks_fetches_both(fetcher, fake_bitbucket):
    fake_bitbucket.add(
        "GET",
        f"{PR}/comments",
        PageFactory.create([CommentFactory.create(1), CommentFactory.create_inline(2)]),
    )
    fake_bitbucket.add(
        "GET", f"{PR}/tasks", PageFactory.create([TaskFactory.create(100, 2)])
    )

    comments, tasks = await fetcher.list_comments_and_tasks("acme", "widgets", 42)

    assert [c.id for c in comments] == [1, 2]
    assert [t.id for t in tasks] == [100]
    assert tasks[0].comment_id == 2
    paths = sorted(request.url.path for request in fake_bitbucket.requests)
    assert paths == [f"/2.0{PR}/comments", f"/2.0{PR}/tasks"]


@pytest.mark.anyio
async def test_task_fetch_failure_yields_empty_tasks(fetcher, fake_bitbucket, caplog):
    fake_bitbucket.add(
        "GET", f"{PR}/comments", PageFactory.create([CommentFactory.create(1)])
    )
    fake_bitbucket.add("GET", f"{PR}/tasks", httpx.Response(500, text="boom"))

    comments, tasks = await fetcher.list_comments_and_tasks("acme", "widgets", 42)

    assert [c.id for c in comments] == [1]
    assert tasks == []
    assert "Could not fetch tasks for PR #42" in caplog.text


@pytest.mark.anyio
async def test_comment_fetch_failure_propagates(fetcher, fake_bitbucket):
    fake_bitbucket.add("GET", f"{PR}/comments", httpx.Response(401, text=""))
    fake_bitbucket.add("GET", f"{PR}/tasks", PageFactory.create([]))

    with pytest.raises(BitbucketApiError) as exc_info:
        await fetcher.list_comments_and_tasks("acme", "widgets", 42)

    assert exc_info.value.status_code == 401


@pytest.mark.anyio
async def test_resolve_task_sends_resolved_state(fetcher, fake_bitbucket):
    fake_bitbucket.add(
        "PUT", f"{PR}/tasks/100", TaskFactory.create(100, state="RESOLVED")
    )

    task = await fetcher.resolve_task("acme", "widgets", 42, 100)

    assert task.is_resolved
    assert json.loads(fake_bitbucket.requests[0].content) == {"state": "RESOLVED"}


@pytest.mark.anyio
async def test_resolve_task_with_empty_response_keeps_task_id(fetcher, fake_bitbucket):
    fake_bitbucket.add("PUT", f"{PR}/tasks/7", httpx.Response(204))

    task = await fetcher.resolve_task("acme", "widgets", 42, 7)

    assert task.id == 7
    assert task.is_resolved


@pytest.mark.anyio
async def test_resolve_tasks_reports_every_outcome_in_order(fetcher, fake_bitbucket):
    tasks = [
        BitbucketTask(id=1, content="first"),
        BitbucketTask(id=2, content="second"),
        BitbucketTask(id=3, content="third"),
    ]
    fake_bitbucket.add("PUT", f"{PR}/tasks/1", TaskFactory.create(1, state="RESOLVED"))
    fake_bitbucket.add(
        "PUT", f"{PR}/tasks/2", httpx.Response(403, json={"error": {"message": "no"}})
    )
    fake_bitbucket.add("PUT", f"{PR}/tasks/3", TaskFactory.create(3, state="RESOLVED"))

    resolutions = await fetcher.resolve_tasks("acme", "widgets", 42, tasks)

    assert [r.index for r in resolutions] == [0, 1, 2]
    assert [r.task.id for r in resolutions] == [1, 2, 3]
    assert [r.success for r in resolutions] == [True, False, True]
    assert resolutions[0].value is not None and resolutions[0].value.is_resolved
    assert isinstance(resolutions[1].error, BitbucketApiError)
    assert resolutions[1].value is None
    # Every task was attempted despite the failure.
    assert len(fake_bitbucket.requests) == 3


@pytest.mark.anyio
async def test_resolve_tasks_with_empty_batch(fetcher, fake_bitbucket):
    assert await fetcher.resolve_tasks("acme", "widgets", 42, []) == []
    assert fake_bitbucket.requests == []


def test_task_resolution_success_flag():
    task = BitbucketTask(id=1)
    assert TaskResolution(index=0, task=task, value=task).success
    assert not TaskResolution(index=0, task=task, error=ValueError("x")).success
