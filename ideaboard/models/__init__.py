"""
Idea Board – SQLAlchemy ORM models package.

Imports all model classes so the app can discover them
through a single ``import ideaboard.models``.
"""

from ideaboard.models.idea import Idea              # noqa: F401
from ideaboard.models.idea_vote import IdeaVote     # noqa: F401
from ideaboard.models.product import (              # noqa: F401
    Product,
    ProductComment,
    ProductImage,
    ProductUpdate,
)
