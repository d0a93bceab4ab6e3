from . import api_keys
from . import auth
from . import categories
from . import galleries
from . import home
from . import media
from . import posts

__all__ = [
    "api_keys",
    "auth",
    "categories",
    "galleries",
    "home",
    "media",
    "posts",
]
