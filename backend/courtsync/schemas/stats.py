from courtsync.schemas.base import CamelModel


class StatsResponse(CamelModel):
    bookings: int = 0
    events: int = 0
    users: int = 0
