"""Tests for the tool handlers against a simulated Bitbucket API."""

import os
from unittest.mock import patch

import httpx
import pytest

from mcp_bitbucket.bitbucket.config import BitbucketConfig
from mcp_bitbucket.tools import handlers
from tests.utils.factories import (
    CommentFactory,
    PageFactory,
    PullRequestFactory,
    TaskFactory,
)

PRS = "/repositories/acme/widgets/pullrequests"
PR = f"{PRS}/42"


@pytest.fixture
async def fetcher_without_workspace(fake_bitbucket, make_fetcher, config_without_workspace):
    client = make_fetcher(fake_bitbucket.transport, config_without_workspace)
    yield client
    await client.aclose()


@pytest.mark.anyio
async def test_list_prs_uses_default_workspace(fetcher, fake_bitbucket):
    fake_bitbucket.add("GET", PRS, PageFactory.create([PullRequestFactory.create(42)]))

    result = await handlers.list_prs(fetcher, repo_slug="widgets")

    assert result.startswith("Found 1 open pull request(s) in acme/widgets:")
    assert fake_bitbucket.requests[0].url.params["pagelen"] == "25"


@pytest.mark.anyio
async def test_list_prs_explicit_workspace_wins(fetcher, fake_bitbucket):
    fake_bitbucket.add(
        "GET", "/repositories/other/widgets/pullrequests", PageFactory.create([])
    )

    result = await handlers.list_prs(
        fetcher, workspace="other", repo_slug="widgets", state="DECLINED"
    )

    assert result == "No declined pull requests found in other/widgets."


@pytest.mark.anyio
@pytest.mark.parametrize(
    "handler,kwargs",
    [
        (handlers.list_prs, {"repo_slug": "widgets"}),
        (handlers.get_pr, {"repo_slug": "widgets", "pr_id": 42}),
        (handlers.get_pr_diff, {"repo_slug": "widgets", "pr_id": 42}),
        (handlers.list_pr_comments, {"repo_slug": "widgets", "pr_id": 42}),
        (
            handlers.post_pr_comment,
            {"repo_slug": "widgets", "pr_id": 42, "content": "hi"},
        ),
        (handlers.resolve_pr_task, {"repo_slug": "widgets", "pr_id": 42, "task_id": 1}),
        (handlers.fetch_and_resolve_pr_comments, {"repo_slug": "widgets", "pr_id": 42}),
    ],
)
async def test_missing_workspace_fails_before_any_request(
    fetcher_without_workspace, fake_bitbucket, handler, kwargs
):
    result = await handler(fetcher_without_workspace, **kwargs)

    assert "No workspace specified" in result
    assert "BITBUCKET_WORKSPACE" in result
    assert fake_bitbucket.requests == []


@pytest.mark.anyio
async def test_get_pr_not_found(fetcher):
    result = await handlers.get_pr(fetcher, repo_slug="widgets", pr_id=42)

    assert result.startswith(f"Not found (GET {PR}).")
    assert "Check that the workspace, repository slug, and PR ID are correct." in result


@pytest.mark.anyio
async def test_get_pr_network_failure(make_fetcher):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = make_fetcher(httpx.MockTransport(handler))
    result = await handlers.get_pr(client, repo_slug="widgets", pr_id=42)
    await client.aclose()

    assert result.startswith("Network error: Could not connect to Bitbucket API.")


@pytest.mark.anyio
async def test_get_pr_diff_truncates_large_diffs(fetcher, fake_bitbucket):
    section = "diff --git a/big.txt b/big.txt\n" + ("+" + "y" * 79 + "\n") * 2_000
    fake_bitbucket.add("GET", f"{PR}/diff", section)

    result = await handlers.get_pr_diff(fetcher, repo_slug="widgets", pr_id=42)

    assert "Files changed: 1" in result
    assert "  - big.txt" in result
    assert result.endswith(f"... (truncated, {len(section) - 100_000} bytes omitted)")


@pytest.mark.anyio
async def test_list_pr_comments_survives_task_failure(fetcher, fake_bitbucket):
    fake_bitbucket.add(
        "GET", f"{PR}/comments", PageFactory.create([CommentFactory.create(1)])
    )
    fake_bitbucket.add("GET", f"{PR}/tasks", httpx.Response(500, text="boom"))

    result = await handlers.list_pr_comments(fetcher, repo_slug="widgets", pr_id=42)

    assert result.startswith("Found 1 comment(s) and 0 task(s) on PR #42:")


@pytest.mark.anyio
async def test_list_pr_comments_fails_when_comments_fail(fetcher, fake_bitbucket):
    fake_bitbucket.add("GET", f"{PR}/comments", httpx.Response(403, text=""))
    fake_bitbucket.add("GET", f"{PR}/tasks", PageFactory.create([]))

    result = await handlers.list_pr_comments(fetcher, repo_slug="widgets", pr_id=42)

    assert result.startswith(f"Permission denied (GET {PR}/comments).")


@pytest.mark.anyio
async def test_post_inline_reply(fetcher, fake_bitbucket):
    fake_bitbucket.add(
        "POST",
        f"{PR}/comments",
        httpx.Response(201, json=CommentFactory.create_inline(77, "src/app.py", 5)),
    )

    result = await handlers.post_pr_comment(
        fetcher,
        repo_slug="widgets",
        pr_id=42,
        content="Fixed in abc123",
        inline={"path": "src/app.py", "line": 5},
        parent_id=3,
    )

    assert result.splitlines() == [
        "Comment posted on PR #42.",
        "Comment ID: 77",
        "Type: Inline comment on src/app.py:5",
        "Reply to: comment #3",
        "URL: https://bitbucket.org/acme/widgets/pull-requests/42/_/diff#comment-77",
    ]


@pytest.mark.anyio
async def test_resolve_pr_task(fetcher, fake_bitbucket):
    fake_bitbucket.add(
        "PUT", f"{PR}/tasks/100", TaskFactory.create(100, state="RESOLVED")
    )

    result = await handlers.resolve_pr_task(
        fetcher, repo_slug="widgets", pr_id=42, task_id=100
    )

    assert result == "Task #100 resolved on PR #42.\nState: RESOLVED\nTask: Fix this"


@pytest.mark.anyio
async def test_resolve_pr_task_with_empty_response(fetcher, fake_bitbucket):
    fake_bitbucket.add("PUT", f"{PR}/tasks/7", httpx.Response(204))

    result = await handlers.resolve_pr_task(
        fetcher, repo_slug="widgets", pr_id=42, task_id=7
    )

    assert result.startswith("Task #7 resolved on PR #42.\nState: RESOLVED")


@pytest.mark.anyio
async def test_fetch_and_resolve_end_to_end(fetcher, fake_bitbucket):
    fake_bitbucket.add(
        "GET",
        f"{PR}/comments",
        PageFactory.create(
            [
                CommentFactory.create(1, author="Alice", content="Why?"),
                CommentFactory.create_inline(2, author="Bob", content="Off by one"),
                CommentFactory.create(3, author="coderabbitai", content="Walkthrough"),
            ]
        ),
    )
    fake_bitbucket.add(
        "GET",
        f"{PR}/tasks",
        PageFactory.create(
            [
                TaskFactory.create(100, 2, content="Fix the bound"),
                TaskFactory.create(101, 5, state="RESOLVED", content="Rename"),
            ]
        ),
    )
    fake_bitbucket.add(
        "PUT",
        f"{PR}/tasks/100",
        TaskFactory.create(100, 2, state="RESOLVED", content="Fix the bound"),
    )

    result = await handlers.fetch_and_resolve_pr_comments(
        fetcher, repo_slug="widgets", pr_id=42
    )

    assert "[Comment #1] [HUMAN] @Alice" in result
    assert "[Comment #2] [HUMAN] @Bob" in result
    assert "[Comment #3] [BOT] @coderabbitai" in result
    assert "  [Task #100] UNRESOLVED: Fix the bound" in result
    assert "[Task #101] RESOLVED: Rename (by Bob Jones on comment #5" in result
    assert "  ✓ Resolved Task #100: Fix the bound" in result
    assert "1 resolved, 0 failed" in result
    assert "1 bot comment(s), 2 human comment(s)" in result

    puts = [r for r in fake_bitbucket.requests if r.method == "PUT"]
    assert [r.url.path for r in puts] == [f"/2.0{PR}/tasks/100"]
    for request in fake_bitbucket.requests:
        if request.method == "GET":
            assert request.url.params["pagelen"] == "100"


@pytest.mark.anyio
async def test_fetch_and_resolve_reports_partial_failures(fetcher, fake_bitbucket):
    fake_bitbucket.add("GET", f"{PR}/comments", PageFactory.create([]))
    fake_bitbucket.add(
        "GET",
        f"{PR}/tasks",
        PageFactory.create([TaskFactory.create(1, 9), TaskFactory.create(2, 9)]),
    )
    fake_bitbucket.add("PUT", f"{PR}/tasks/1", httpx.Response(500, text="oops"))
    fake_bitbucket.add("PUT", f"{PR}/tasks/2", TaskFactory.create(2, 9, "RESOLVED"))

    result = await handlers.fetch_and_resolve_pr_comments(
        fetcher, repo_slug="widgets", pr_id=42
    )

    assert "  ✗ Failed Task #1: Fix this" in result
    assert "    Error: Bitbucket API 500: Internal Server Error" in result
    assert "  ✓ Resolved Task #2: Fix this" in result
    assert "Tasks done. 1 resolved, 1 failed." in result


@pytest.mark.anyio
async def test_fetch_and_resolve_uses_configured_bot_patterns(
    fake_bitbucket, make_fetcher, bitbucket_config
):
    bitbucket_config.bot_patterns = ["^alice$"]
    client = make_fetcher(fake_bitbucket.transport, bitbucket_config)
    fake_bitbucket.add(
        "GET",
        f"{PR}/comments",
        PageFactory.create([CommentFactory.create(1, author="Alice")]),
    )
    fake_bitbucket.add("GET", f"{PR}/tasks", PageFactory.create([]))

    result = await handlers.fetch_and_resolve_pr_comments(
        client, repo_slug="widgets", pr_id=42
    )
    await client.aclose()

    assert "[Comment #1] [BOT] @Alice" in result
    assert "1 bot comment(s), 0 human comment(s)" in result


@pytest.mark.anyio
async def test_fetch_and_resolve_bad_bot_pattern_resolves_nothing(
    fake_bitbucket, make_fetcher, bitbucket_config
):
    bitbucket_config.bot_patterns = ["[unclosed"]
    client = make_fetcher(fake_bitbucket.transport, bitbucket_config)
    fake_bitbucket.add(
        "GET", f"{PR}/comments", PageFactory.create([CommentFactory.create(1)])
    )
    fake_bitbucket.add("GET", f"{PR}/tasks", PageFactory.create([TaskFactory.create(7, 1)]))
    fake_bitbucket.add("PUT", f"{PR}/tasks/7", TaskFactory.create(7, 1, "RESOLVED"))

    result = await handlers.fetch_and_resolve_pr_comments(
        client, repo_slug="widgets", pr_id=42
    )
    await client.aclose()

    assert result.startswith("Error in fetching and resolving comments on PR #42:")
    assert fake_bitbucket.requests == []


@pytest.mark.anyio
async def test_fetch_and_resolve_with_invalid_pattern_from_env(
    mock_env_vars, fake_bitbucket, make_fetcher
):
    with patch.dict(os.environ, {"BITBUCKET_BOT_PATTERNS": "[unclosed"}):
        config = BitbucketConfig.from_env()
    client = make_fetcher(fake_bitbucket.transport, config)
    fake_bitbucket.add(
        "GET", f"{PR}/comments", PageFactory.create([CommentFactory.create(1)])
    )
    fake_bitbucket.add("GET", f"{PR}/tasks", PageFactory.create([TaskFactory.create(7, 1)]))
    fake_bitbucket.add("PUT", f"{PR}/tasks/7", TaskFactory.create(7, 1, "RESOLVED"))

    result = await handlers.fetch_and_resolve_pr_comments(
        client, repo_slug="widgets", pr_id=42
    )
    await client.aclose()

    assert "  ✓ Resolved Task #7: Fix this" in result
    assert "Tasks done. 1 resolved, 0 failed." in result
