"""
View shell schemas: which console view is active.
"""

from enum import Enum

from pydantic import BaseModel


class AppView(str, Enum):
    OVERVIEW = "Overview"
    EVENT_REQUESTS = "Event Requests"
    CANCELLATION_REQUESTS = "Cancellations"
    USER_MANAGEMENT = "User Management"

    @property
    def slug(self) -> str:
        return _SLUGS[self]

    @classmethod
    def from_slug(cls, slug: str) -> "AppView":
        for view, view_slug in _SLUGS.items():
            if view_slug == slug:
                return view
        raise ValueError(f"Unknown view: {slug}")


_SLUGS = {
    AppView.OVERVIEW: "overview",
    AppView.EVENT_REQUESTS: "event-requests",
    AppView.CANCELLATION_REQUESTS: "cancellations",
    AppView.USER_MANAGEMENT: "user-management",
}


class ViewSelect(BaseModel):
    view: AppView


class ShellResponse(BaseModel):
    active_view: AppView
    active_slug: str
    views: list[AppView]
