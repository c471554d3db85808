from .storage import LocalStorage
from .mock_store import MockDataStore
from .base import DataAccess, READ_OPERATIONS
from .mock_access import MockDataAccess
from .live_access import LiveDataAccess
from .facade import BackendProbe, ClientDataAccess, build_data_access
from .realtime import RealtimeClient
