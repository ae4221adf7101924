# Models package init
"""
Chartwise Backend — ORM Models
================================

Importing this package registers every table with ``Base.metadata``
(used by Alembic autogenerate and by the test suite's create_all).
"""

from app.models.chart import SavedChart
from app.models.notification import Notification
from app.models.profile import UserProfile

__all__ = ["SavedChart", "Notification", "UserProfile"]
