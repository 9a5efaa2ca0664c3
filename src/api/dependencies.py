"""API Dependencies - Access to application-owned components.

Components are created in the application lifespan and kept on app.state;
routes reach them through these dependencies instead of module globals.
"""

from fastapi.requests import HTTPConnection

from src.config.settings import Settings
from src.orchestrator.session import SessionOrchestrator
from src.orchestrator.store import ConversationStore


def get_store(connection: HTTPConnection) -> ConversationStore:
    """Conversation store of the running application."""
    return connection.app.state.store


def get_orchestrator(connection: HTTPConnection) -> SessionOrchestrator:
    """Session orchestrator of the running application."""
    return connection.app.state.orchestrator


def get_relay_settings(connection: HTTPConnection) -> Settings:
    """Settings the application was created with."""
    return connection.app.state.settings
