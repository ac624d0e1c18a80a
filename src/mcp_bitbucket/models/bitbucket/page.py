"""
Page of a cursor-paginated Bitbucket Cloud listing.
"""

from typing import Any

from ..base import ApiModel


class BitbucketPage(ApiModel):
    """One page of `{"values": [...], "next": "<url>"}`.

    `next_url` is an opaque cursor; its absence marks the last page.
    """

    values: list[dict[str, Any]] = []
    next_url: str | None = None

    @classmethod
    def from_api_response(cls, data: dict[str, Any], **kwargs: Any) -> "BitbucketPage":
        if not isinstance(data, dict):
            return cls()
        values = data.get("values")
        return cls(
            values=values if isinstance(values, list) else [],
            next_url=data.get("next") or None,
        )
