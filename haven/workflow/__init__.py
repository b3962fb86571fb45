"""LangGraph workflow for chained canvas agents."""


def create_pipeline_graph(agents: list[str]):
    """Lazy import to avoid circular import with haven.agents."""
    from haven.workflow.graph import create_pipeline_graph as _create
    return _create(agents)


__all__ = ["create_pipeline_graph"]
