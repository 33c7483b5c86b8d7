# models/__init__.py
from models.base import Base
from models.profile import Profile
from models.swipe import Swipe
from models.match import Match
from models.message import Message
from models.event import Event

__all__ = [
    "Base",
    "Profile",
    "Swipe",
    "Match",
    "Message",
    "Event",
]
