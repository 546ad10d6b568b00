from agentloop.sessions.session import Session, SessionManager

__all__ = ["Session", "SessionManager"]
