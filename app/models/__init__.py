# Entry Tracker — Database Models
# Import all models here for SQLAlchemy discovery

from app.models.person import Person     # noqa
from app.models.entry import Entry       # noqa
