"""SQLAlchemy and Pydantic models."""
from haven.models.db_models import (
    ArchivedItem,
    Asset,
    HavenConversation,
    StagingItem,
    UserAsset,
    UserProfile,
    VaultItem,
    init_db,
)
from haven.models.schemas import (
    AgentInput,
    AgentNodeSummary,
    AgentOutput,
    AgentResult,
    SuggestedConnection,
)

__all__ = [
    "ArchivedItem",
    "Asset",
    "HavenConversation",
    "StagingItem",
    "UserAsset",
    "UserProfile",
    "VaultItem",
    "init_db",
    "AgentInput",
    "AgentNodeSummary",
    "AgentOutput",
    "AgentResult",
    "SuggestedConnection",
]
