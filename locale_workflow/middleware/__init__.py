from .session_bridge import install_session_bridge_middleware

__all__ = ["install_session_bridge_middleware"]
