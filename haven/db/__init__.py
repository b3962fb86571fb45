"""Database package: session and lifecycle."""
from haven.models.db_models import (
    ArchivedItem,
    Asset,
    HavenConversation,
    StagingItem,
    UserAsset,
    UserProfile,
    VaultItem,
    create_tables,
    get_db,
    init_db,
)

__all__ = [
    "ArchivedItem",
    "Asset",
    "HavenConversation",
    "StagingItem",
    "UserAsset",
    "UserProfile",
    "VaultItem",
    "create_tables",
    "get_db",
    "init_db",
]
