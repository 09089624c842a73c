from .conversation import ConversationManager, SubmitResult, SubmitStatus
from .generation import GenerationClient, GenerationFailed, MissingCredentialError, ProviderError
from .sessions import SessionNotFoundError, SessionRegistry

__all__ = [
    "ConversationManager",
    "GenerationClient",
    "GenerationFailed",
    "MissingCredentialError",
    "ProviderError",
    "SessionNotFoundError",
    "SessionRegistry",
    "SubmitResult",
    "SubmitStatus",
]
