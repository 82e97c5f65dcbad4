# Services package initialization
# Application services hold the business rules; controllers only translate HTTP.

from . import auth_service
from . import learning_service
from . import mentor_service
from . import request_service
from . import user_service

__all__ = [
    "auth_service",
    "learning_service",
    "mentor_service",
    "request_service",
    "user_service",
]
