"""Production-plan capability: break a project into phases of tasks."""
from typing import Any

from haven.agents.capability import Capability, Fields

_PHASE_RULE = "Each phase should have 3-5 specific, actionable tasks."

TEMPLATE_PROMPTS = {
    "app": f"""You are an App Development Project Manager. Break down mobile/web app projects into clear development phases with specific actionable tasks.

Standard phases for app development:
1. Planning & Research - Requirements, market research, tech stack
2. Design - Wireframes, UI/UX, prototypes
3. Development - Core features, backend, frontend
4. Testing - Unit tests, integration, QA
5. Launch - Deployment, app store submission, marketing

{_PHASE_RULE}""",
    "merch": f"""You are a Merchandise Production Manager. Break down merchandise creation projects into clear production phases with specific tasks.

Standard phases for merchandise:
1. Concept & Design - Sketches, mockups, design finalization
2. Sourcing - Materials, vendors, samples
3. Production - Manufacturing, quality control
4. Packaging - Design, printing, assembly
5. Distribution - Inventory, shipping, sales channels

{_PHASE_RULE}""",
    "poster": f"""You are a Poster Design Project Manager. Break down poster/print design projects into clear phases with specific tasks.

Standard phases for poster design:
1. Brief & Research - Understand goals, audience, references
2. Concept - Sketches, layout options, typography
3. Design - Full design execution, color, imagery
4. Review - Client feedback, revisions
5. Production - Print prep, proofing, printing

{_PHASE_RULE}""",
    "generic": f"""You are a Production Manager. Break down any project into clear phases with specific actionable tasks.

Standard phases:
1. Planning - Define goals, scope, timeline
2. Preparation - Gather resources, set up tools
3. Execution - Core work, deliverables
4. Review - Quality check, refinements
5. Completion - Final delivery, documentation

{_PHASE_RULE}""",
}

_FORMAT = """IMPORTANT: Return ONLY valid JSON, no markdown, no explanation.

Return JSON in this exact format:
{
  "projectTitle": "Refined project name",
  "phases": [
    {
      "name": "Phase Name",
      "tasks": [
        { "id": "unique-id-1", "name": "Task description", "completed": false },
        { "id": "unique-id-2", "name": "Another task", "completed": false }
      ]
    }
  ]
}"""


def build_production_prompt(fields: Fields) -> str:
    template = TEMPLATE_PROMPTS.get(fields.get("project_type") or "generic", TEMPLATE_PROMPTS["generic"])
    return (
        f"{template}\n\n{_FORMAT}\n\n"
        f"Project: {fields.get('project_name')}\n"
        f"Description: {fields.get('description') or ''}\n\n"
        "Break this project into phases with clear, actionable tasks. Return JSON only."
    )


def normalize_plan(data: Any, fields: Fields) -> dict[str, Any]:
    """Every task gets an id and a completed flag."""
    phases = data.get("phases") if isinstance(data.get("phases"), list) else []
    for p_idx, phase in enumerate(phases, start=1):
        tasks = phase.get("tasks") if isinstance(phase, dict) and isinstance(phase.get("tasks"), list) else []
        for t_idx, task in enumerate(tasks, start=1):
            if isinstance(task, dict):
                task.setdefault("id", f"phase-{p_idx}-task-{t_idx}")
                task["completed"] = bool(task.get("completed", False))
    return {**data, "phases": phases}


PRODUCTION = Capability(
    name="production",
    build_prompt=build_production_prompt,
    required=("project_name",),
    missing_message="Project name is required",
    response="object",
    normalize=normalize_plan,
)
