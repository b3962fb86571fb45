"""Learning capabilities: course outline, quiz and tutor chat."""
from typing import Any

from haven.agents.capability import Capability, Fields, envelope, run_capability
from haven.config import settings
from haven.models.schemas import AgentOutput

NO_NODES = "No nodes provided"


def _node_data(node: dict[str, Any]) -> dict[str, Any]:
    return node.get("data") or {}


def _tags(meta: dict[str, Any]) -> str:
    tags = meta.get("tags") or []
    return ", ".join(str(t) for t in tags) if isinstance(tags, list) else ""


# ----- course -----
def summarize_nodes_for_course(nodes: list[dict[str, Any]]) -> str:
    lines = []
    for idx, node in enumerate(nodes, start=1):
        data = _node_data(node)
        meta = data.get("metadata") or {}
        label = data.get("label") or f"Item {idx}"
        summary = meta.get("summary") or (data.get("content") or "")[:200] or "No content"
        tags = _tags(meta)
        entry = f"{idx}. [{node.get('type') or 'unknown'}] {label}\n   Summary: {summary}"
        if tags:
            entry += f"\n   Tags: {tags}"
        lines.append(entry)
    return "\n\n".join(lines)


def build_course_prompt(fields: Fields) -> str:
    nodes = fields["nodes"]
    return f"""You are the Course Architect, an AI learning designer that structures knowledge into coherent learning paths.

Given the following learning materials, design a structured course outline.

MATERIALS ({len(nodes)} items):
{summarize_nodes_for_course(nodes)}

USER REQUEST: {fields.get("user_prompt") or "Create a comprehensive course structure"}

REQUIREMENTS:
1. **Course Structure**: Organize into logical modules/chapters
2. **Progressive Difficulty**: Basic concepts → Intermediate → Advanced
3. **Core Ideas**: Identify the fundamental principles that must be mastered
4. **Sub-topics**: Break down each core idea into learnable chunks
5. **Prerequisites**: What should be known before starting
6. **Learning Objectives**: What the user will master by the end

OUTPUT FORMAT (JSON):
{{
  "courseTitle": "Suggested title for the course",
  "description": "Brief overview of what this course covers",
  "prerequisites": "What should be known beforehand",
  "estimatedDuration": "e.g., 2 weeks, 10 hours",
  "modules": [
    {{
      "moduleNumber": 1,
      "title": "Module title",
      "coreIdea": "The fundamental principle of this module",
      "subTopics": ["Sub-topic 1", "Sub-topic 2"],
      "nodeIds": ["ids of the materials that belong here"],
      "learningObjectives": ["After this module, you will be able to..."]
    }}
  ],
  "suggestedStudyPath": "How to approach this course (e.g., linear, concept-first, project-based)",
  "masteryMilestones": [
    {{"milestone": "Beginner", "criteria": "Can recall and explain core concepts"}},
    {{"milestone": "Intermediate", "criteria": "Can apply concepts to solve problems"}},
    {{"milestone": "Advanced", "criteria": "Can synthesize concepts and teach others"}}
  ]
}}

Return ONLY valid JSON, no markdown formatting."""


def normalize_course(data: Any, fields: Fields) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise ValueError("Course outline must be a JSON object")
    return data


COURSE = Capability(
    name="course",
    build_prompt=build_course_prompt,
    required=("nodes",),
    missing_message=NO_NODES,
    normalize=normalize_course,
    next_agent="quiz_master",
)


# ----- quiz -----
def _quiz_material(node: dict[str, Any]) -> str:
    data = _node_data(node)
    meta = data.get("metadata") or {}
    label = data.get("label") or "Untitled"
    content = data.get("content") or meta.get("summary") or ""
    course = meta.get("courseData") or (meta if meta.get("modules") else None)
    if isinstance(course, dict) and course.get("modules"):
        modules = "\n\n".join(
            f"Module {i}: {m.get('title', '')}\n{m.get('coreIdea', '')}\n"
            f"Topics: {', '.join(m.get('subTopics') or []) or 'none'}"
            for i, m in enumerate(course["modules"], start=1)
        )
        content = f"{course.get('description') or ''}\n\nCourse Modules:\n{modules}"
    tags = _tags(meta)
    block = f"[{label}]\n{content}"
    if tags:
        block += f"\nTags: {tags}"
    return block + "\n---"


def build_quiz_prompt(fields: Fields) -> str:
    content = "\n\n".join(_quiz_material(n) for n in fields["nodes"])
    return f"""You are the Quiz Master, a learning assistant that generates educational quiz questions.

Given the following learning materials, create a comprehensive quiz to test understanding.

CONTENT:
{content}

USER REQUEST: {fields.get("user_prompt") or "Generate a balanced quiz covering core concepts"}

REQUIREMENTS:
1. **Question Types**: Include a mix of:
   - Multiple Choice (4 options, 1 correct)
   - Fill-in-the-Blank (provide the blank text with ___ for the missing word)
   - Open-Ended (requires thoughtful written response)

2. **Difficulty Levels**:
   - Start with basic recall questions to confirm core understanding
   - Progress to intermediate application questions
   - Include 1-2 advanced synthesis questions

3. **Question Count**: Generate 5-10 questions total (balanced across types)

4. **Mastery Focus**: Questions should verify the user understands the CORE IDEAS and sub-topics, not trivial details

OUTPUT FORMAT (JSON):
{{
  "questions": [
    {{
      "id": "q1",
      "type": "multiple_choice | fill_in_blank | open_ended",
      "difficulty": "basic | intermediate | advanced",
      "question": "Question text here",
      "options": ["A", "B", "C", "D"],
      "correctAnswer": "B or the missing word or a sample answer for open-ended",
      "explanation": "Why this is correct and what concept it tests"
    }}
  ],
  "courseInsights": {{
    "mainTopics": ["Topic 1", "Topic 2"],
    "prerequisites": "What should be known before this",
    "estimatedTime": "15 minutes"
  }}
}}

Only multiple_choice questions carry "options".
Return ONLY valid JSON, no markdown formatting."""


def normalize_quiz(data: Any, fields: Fields) -> dict[str, Any]:
    if not isinstance(data, dict) or not isinstance(data.get("questions"), list):
        raise ValueError("Quiz must be a JSON object with a questions list")
    return data


QUIZ = Capability(
    name="quiz",
    build_prompt=build_quiz_prompt,
    required=("nodes",),
    missing_message=NO_NODES,
    normalize=normalize_quiz,
    next_agent="study_session",
    timeout=settings.quiz_timeout_seconds,
)


# ----- tutor -----
def build_tutor_system(fields: Fields) -> str:
    history = fields.get("history") or []
    transcript = "\n".join(f"{m['role']}: {m['content']}" for m in history) if history else "None"
    system = f"""You are a world-class AI Tutor engaged in a "Deep Dive" study session with a student.

YOUR GOAL:
Help the student deeply internalize and master the concepts in the provided Course Material.

YOUR BEHAVIOR:
1. **Explain Clearly**: Use simple language, analogies, and examples.
2. **Be Socratic**: Occasionally ask checking questions to ensure the user understands ("Does that make sense?", "Can you explain that back to me?").
3. **Stay Grounded**: Base your answers on the provided Context, but feel free to bring in outside knowledge to clarify definitions or give examples.
4. **Encourage**: Be positive and supportive. Learning is hard!
5. **Format**: Use Markdown (bold, lists) to make explanations readable.

COURSE MATERIAL CONTEXT:
{fields.get("context")}

PREVIOUS CONVERSATION:
{transcript}
"""
    if fields.get("action") == "quiz_me":
        system += (
            "\n\nThe user wants to be quizzed. Ask a single thought-provoking question "
            "based on the material. Wait for their answer."
        )
    return system


def build_tutor_prompt(fields: Fields) -> str:
    if fields.get("user_prompt"):
        return fields["user_prompt"]
    return "Quiz me on this material." if fields.get("action") == "quiz_me" else "Explain the key ideas of this material."


TUTOR = Capability(
    name="tutor",
    build_prompt=build_tutor_prompt,
    system_instruction=build_tutor_system,
    required=("context",),
    missing_message="No context provided for the tutor",
    response="text",
)


async def run_course(fields: Fields) -> AgentOutput:
    data = await run_capability(COURSE, fields)
    return envelope(data.get("courseTitle") or "Course Outline", data, COURSE.next_agent)


async def run_quiz(fields: Fields) -> AgentOutput:
    data = await run_capability(QUIZ, fields)
    return envelope(f"Generated {len(data['questions'])} questions", data, QUIZ.next_agent)


# Agents that speak the canvas envelope and can be chained
ENVELOPE_AGENTS = {"course": run_course, "quiz": run_quiz}
