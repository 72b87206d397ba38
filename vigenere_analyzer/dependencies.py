import threading
from collections import OrderedDict
from functools import lru_cache
from typing import Annotated, Callable

from fastapi import Depends, Header

from vigenere_analyzer.core.config import Settings, get_settings
from vigenere_analyzer.services.analysis.language_model import LanguageModel, get_language_model
from vigenere_analyzer.services.pipeline.orchestrator import SearchOrchestrator
from vigenere_analyzer.services.preprocessing.normalizer import TextNormalizer


# Settings dependency
SettingsDep = Annotated[Settings, Depends(get_settings)]

# Language model dependency, built once
LanguageModelDep = Annotated[LanguageModel, Depends(get_language_model)]


class SessionOrchestrators:
    """
    Search orchestrators keyed by client session.

    A new analysis only supersedes earlier analyses of the same session.
    Requests without a session id get a fresh orchestrator of their own.
    The least recently used session is dropped once max_sessions is reached;
    a job it was running still finishes normally.
    """

    def __init__(self, factory: Callable[[], SearchOrchestrator], max_sessions: int = 256):
        self.factory = factory
        self.max_sessions = max_sessions
        self._sessions: OrderedDict[str, SearchOrchestrator] = OrderedDict()
        self._lock = threading.Lock()

    def get(self, session_id: str | None) -> SearchOrchestrator:
        if session_id is None:
            return self.factory()

        with self._lock:
            orchestrator = self._sessions.pop(session_id, None)
            if orchestrator is None:
                orchestrator = self.factory()
            self._sessions[session_id] = orchestrator

            while len(self._sessions) > self.max_sessions:
                self._sessions.popitem(last=False)

        return orchestrator


@lru_cache
def get_session_orchestrators() -> SessionOrchestrators:
    """Get the process-wide session registry."""
    settings = get_settings()
    model = get_language_model()
    return SessionOrchestrators(
        lambda: SearchOrchestrator.from_settings(settings, model),
        max_sessions=settings.max_sessions,
    )

SessionOrchestratorsDep = Annotated[SessionOrchestrators, Depends(get_session_orchestrators)]


def get_orchestrator(
    sessions: SessionOrchestratorsDep,
    session_id: Annotated[str | None, Header(alias="X-Session-Id")] = None,
) -> SearchOrchestrator:
    """Get the orchestrator of the calling session."""
    return sessions.get(session_id)

OrchestratorDep = Annotated[SearchOrchestrator, Depends(get_orchestrator)]


def get_normalizer(settings: SettingsDep) -> TextNormalizer:
    """Get a text normalizer honoring the configured length limit."""
    return TextNormalizer(max_length=settings.max_ciphertext_length)

NormalizerDep = Annotated[TextNormalizer, Depends(get_normalizer)]
