"""Pydantic schemas for API requests, responses and the agent envelope.

Request fields are optional at the schema level; each capability validates its
own required fields so a missing field is answered with a 400 and a short
message instead of a validation dump.
"""
from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ----- Agent envelope -----
class AgentNodeData(CamelModel):
    asset_id: str | None = None
    label: str | None = None
    content: str | None = None
    metadata: dict[str, Any] | None = None


class AgentNodeSummary(CamelModel):
    """One canvas node as seen by an agent."""

    id: str
    type: str | None = None
    data: AgentNodeData = Field(default_factory=AgentNodeData)


class SuggestedConnection(CamelModel):
    source: str = Field(alias="from")
    to: str
    label: str | None = None


class AgentInput(CamelModel):
    nodes: list[AgentNodeSummary] = Field(default_factory=list)
    edges: list[dict[str, Any]] | None = None
    user_prompt: str | None = None


class AgentResult(CamelModel):
    content: str
    metadata: dict[str, Any] | None = None
    suggested_connections: list[SuggestedConnection] | None = None
    next_agent: str | None = Field(default=None, description="UI hint only; nothing enforces it")


class AgentOutput(CamelModel):
    """``result`` is present iff ``success``; ``error`` is present iff not."""

    success: bool
    result: AgentResult | None = None
    error: str | None = None

    @model_validator(mode="after")
    def _check_shape(self) -> "AgentOutput":
        if self.success and (self.result is None or self.error is not None):
            raise ValueError("successful output carries result and no error")
        if not self.success and (self.error is None or self.result is not None):
            raise ValueError("failed output carries error and no result")
        return self

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class PipelineRequest(AgentInput):
    agents: list[str] = Field(default_factory=lambda: ["course", "quiz"])


# ----- Shared writing options -----
class VoiceProfile(CamelModel):
    samples: str | None = None
    rules: str | None = None


class ChatMessage(CamelModel):
    role: str
    content: str


# ----- Video -----
class ScriptRequest(CamelModel):
    topic: str | None = None
    format: str = "tiktok"
    hook_type: str = "question"
    voice_style: str = "casual"
    custom_voice: str | None = None
    source_context: str | None = None


class StoryboardRequest(CamelModel):
    visual_style: str = "cinematic"
    script_content: dict[str, Any] | None = None
    node_label: str | None = None


class BrollRequest(CamelModel):
    script_content: str | None = None
    user_id: str | None = None


# ----- Marketing -----
class AngleRequest(CamelModel):
    product: str | None = None
    target_audience: str | None = None
    platforms: list[str] = Field(default_factory=lambda: ["linkedin", "twitter"])
    source_context: str | None = None


class ABTestRequest(CamelModel):
    original_copy: str | None = None
    product: str | None = None
    platform: str | None = None
    style: str | None = None


# ----- Learning -----
class TutorRequest(CamelModel):
    action: str | None = None
    context: str | None = None
    user_prompt: str | None = None
    history: list[ChatMessage] | None = None


# ----- Production -----
class ProductionRequest(CamelModel):
    project_name: str | None = None
    project_type: str = "generic"
    description: str | None = None


# ----- Assistant / writing -----
class AssistantRequest(CamelModel):
    action: str | None = None
    content: str | None = None
    context: str | None = None
    prompt: str | None = None
    voice_profile: VoiceProfile | None = None
    use_reasoning_model: bool = False
    deep_research: bool = False
    document_url: str | None = None
    language_mode: str | None = None


class ArticleSection(CamelModel):
    heading: str = ""
    brief: str = ""


class ArticleRequest(CamelModel):
    action: str | None = None
    topic: str | None = None
    template: str | None = None
    section: ArticleSection | None = None
    context: str | None = None
    content: str | None = None
    voice_profile: VoiceProfile | None = None
    source_mode: str | None = None
    canvas_context: str | None = None
    vault_assets: list[dict[str, Any]] | None = None
    web_sources: list[dict[str, Any]] | None = None


class DecodedPattern(CamelModel):
    structure: str = ""
    hook: str = ""
    psychology: str = ""
    call_to_action: str = ""


class GhostwriterRequest(CamelModel):
    action: str | None = None
    content: str | None = None
    patterns: list[DecodedPattern] | None = None
    niche_context: str | None = None
    voice_profile: VoiceProfile | None = None


class RepurposeRequest(CamelModel):
    action: str | None = None
    content: str | None = None
    platform: str | None = None
    voice_profile: VoiceProfile | None = None
    source_node_id: str | None = None
    language_mode: str | None = None


class TranslateRequest(CamelModel):
    text: str | None = None
    target_language: str | None = None


class AnalyzeRequest(CamelModel):
    image_url: str | None = None
    user_prompt: str | None = None


# ----- Search -----
class SearchRequest(CamelModel):
    query: str | None = None
    user_id: str | None = None
    limit: int = Field(default=20, ge=1, le=200)
    threshold: float = Field(default=0.1, ge=0.0, le=1.0)


class WebSearchRequest(CamelModel):
    query: str | None = None


class VaultSearchRequest(CamelModel):
    query: str | None = None
    user_id: str | None = None


class EmbedRequest(CamelModel):
    text: str | None = None
    return_embedding: bool = True


# ----- Assets -----
PublicationStatus = Literal["draft", "scheduled", "published"]


class ScheduleRequest(CamelModel):
    asset_id: str | None = None
    scheduled_at: datetime | None = None
    publication_status: PublicationStatus | None = None


class BackfillRequest(CamelModel):
    user_id: str | None = None


class OpenGraphRequest(CamelModel):
    url: str | None = None


# ----- User -----
class ProfileIn(CamelModel):
    name: str | None = None
    role: str | None = None
    industry: str | None = None
    goals: str | None = None
    writing_style: str | None = None
    languages: list[str] = Field(default_factory=list)


class ProfileRequest(CamelModel):
    user_id: str | None = None
    profile: ProfileIn | None = None


class ProfileOut(CamelModel):
    user_id: str
    name: str | None = None
    role: str | None = None
    industry: str | None = None
    goals: str | None = None
    writing_style: str | None = None
    languages: list[str] | None = None
    updated_at: datetime | None = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class MemoryRequest(CamelModel):
    user_id: str | None = None
    session_summary: str | None = None
    key_topics: list[str] = Field(default_factory=list)
