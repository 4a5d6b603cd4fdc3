from .routes import router
from .state import AppState, get_app_state, set_app_state

__all__ = ["router", "AppState", "get_app_state", "set_app_state"]
