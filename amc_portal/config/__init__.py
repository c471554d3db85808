from .settings import Settings, ClientSettings, get_settings, get_client_settings
from .security import SecurityConfig
