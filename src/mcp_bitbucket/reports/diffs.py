"""Text report for pull request diffs."""

import re
from dataclasses import dataclass

# Above this many characters the rendered diff is cut; the data is not.
MAX_DIFF_SIZE = 100_000

FILE_SECTION_DELIMITER = "diff --git"

_ADDED_LINE = re.compile(r"^\+[^+]", re.MULTILINE)
_REMOVED_LINE = re.compile(r"^-[^-]", re.MULTILINE)
_FILE_HEADER = re.compile(r"a/(.+?) b/")


@dataclass(frozen=True)
class DiffStats:
    files: list[str]
    additions: int
    deletions: int

    @property
    def files_changed(self) -> int:
        return len(self.files)


def split_file_sections(diff: str) -> list[str]:
    """Split a unified diff into its per-file sections."""
    return [section for section in diff.split(FILE_SECTION_DELIMITER) if section]


def file_names(sections: list[str]) -> list[str]:
    """Paths named by the `a/<path> b/<path>` header of each section.

    Sections without a recognisable header are skipped.
    """
    names = []
    for section in sections:
        if match := _FILE_HEADER.search(section):
            names.append(match.group(1))
    return names


def diff_stats(diff: str) -> DiffStats:
    # Header lines (+++ / ---) are not counted.
    return DiffStats(
        files=split_file_sections(diff),
        additions=len(_ADDED_LINE.findall(diff)),
        deletions=len(_REMOVED_LINE.findall(diff)),
    )


def render_diff(
    diff: str,
    pr_id: int,
    workspace: str,
    repo_slug: str,
    max_size: int = MAX_DIFF_SIZE,
) -> str:
    """Render a diff with a stats header, truncating very large diffs."""
    if not diff or not diff.strip():
        return f"PR #{pr_id} has no changes (empty diff)."

    stats = diff_stats(diff)
    header = "\n".join(
        [
            f"Diff for PR #{pr_id} in {workspace}/{repo_slug}",
            f"Files changed: {stats.files_changed}",
            f"Additions: +{stats.additions} | Deletions: -{stats.deletions}",
            "",
        ]
    )

    if len(diff) <= max_size:
        return header + diff

    return "\n".join(
        [
            header,
            f"WARNING: Diff is large ({round(len(diff) / 1024)}KB). "
            "Showing truncated version.",
            "",
            "Files in this PR:",
            *(f"  - {name}" for name in file_names(stats.files)),
            "",
            "--- Truncated Diff ---",
            diff[:max_size],
            "",
            f"... (truncated, {len(diff) - max_size} bytes omitted)",
        ]
    )
