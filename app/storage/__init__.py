# Entry Tracker — persistence backends
# Import the factory from here; routers and services only see the Storage interface.

from app.storage.base import Storage                 # noqa
from app.storage.factory import get_storage          # noqa
