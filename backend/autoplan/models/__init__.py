from autoplan.models.room import Room, RoomPool, RoomType  # noqa: F401
from autoplan.models.session import ScheduledSession, SessionCategory, Term  # noqa: F401
from autoplan.models.subject import Subject  # noqa: F401
from autoplan.models.teacher import CarriedOverVolume, Teacher  # noqa: F401
