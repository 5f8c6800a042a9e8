from .user import User
from .venture import Venture

__all__ = ["User", "Venture"]
