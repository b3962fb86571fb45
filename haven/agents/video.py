"""Short-form video capabilities: script, storyboard and B-roll keyword extraction."""
from typing import Any

from haven.agents.capability import Capability, Fields
from haven.utils.helpers import extract_json_array, to_int_seconds

FORMAT_CONFIGS: dict[str, dict[str, int]] = {
    "tiktok": {"min": 15, "max": 60, "hook": 2},
    "reel": {"min": 30, "max": 90, "hook": 3},
    "youtube-short": {"min": 30, "max": 60, "hook": 3},
    "youtube-long": {"min": 480, "max": 900, "hook": 30},
}
HOOK_TYPES = ("question", "statement", "story", "shock")
VOICE_STYLES = {
    "casual": '- Use "you" and "I", contractions, simple words, like talking to a friend',
    "professional": "- Confident, authoritative, polished language, no filler words",
    "energetic": "- Exclamation points! Short punchy sentences. High energy throughout!",
}

STYLE_CONFIGS: dict[str, dict[str, Any]] = {
    "cinematic": {
        "description": "Film-like compositions with dramatic lighting, shallow depth of field, and cinematic color grading",
        "key_elements": ["rule of thirds", "leading lines", "dramatic shadows", "bokeh backgrounds", "warm/cool contrast"],
    },
    "minimalist": {
        "description": "Clean, simple visuals with lots of negative space and focused subjects",
        "key_elements": ["negative space", "single subject focus", "muted colors", "geometric simplicity", "clean backgrounds"],
    },
    "dynamic": {
        "description": "High-energy visuals with movement, action, and dynamic angles",
        "key_elements": ["dutch angles", "motion blur", "bold colors", "quick cuts suggested", "action framing"],
    },
    "hand-drawn": {
        "description": "Illustrated, artistic look with sketch-like qualities",
        "key_elements": ["illustrated overlays", "hand-drawn arrows", "sketch borders", "doodle elements", "paper textures"],
    },
    "corporate": {
        "description": "Professional, polished look suitable for business content",
        "key_elements": ["symmetrical framing", "branded colors", "clean typography", "professional lighting", "formal composition"],
    },
}

DEFAULT_BROLL_KEYWORDS = ["video", "footage", "content"]


# ----- script -----
def _script_options(fields: Fields) -> tuple[str, dict[str, int], str, str]:
    fmt = fields.get("format") if fields.get("format") in FORMAT_CONFIGS else "tiktok"
    hook_type = fields.get("hook_type") if fields.get("hook_type") in HOOK_TYPES else "question"
    voice_style = fields.get("voice_style") or "casual"
    if voice_style not in VOICE_STYLES and voice_style != "custom":
        voice_style = "casual"
    return fmt, FORMAT_CONFIGS[fmt], hook_type, voice_style


def build_script_prompt(fields: Fields) -> str:
    fmt, cfg, hook_type, voice_style = _script_options(fields)
    custom_voice = fields.get("custom_voice")
    voice = custom_voice if voice_style == "custom" and custom_voice else voice_style
    if voice_style == "custom":
        voice_rule = f"- Match this style exactly: {custom_voice or 'a natural speaking voice'}"
    else:
        voice_rule = VOICE_STYLES[voice_style]

    if fmt in ("tiktok", "reel"):
        guidelines = (
            "- Hook must be under 3 seconds and extremely punchy\n"
            f"- Total script should fit {cfg['min']}-{cfg['max']} seconds\n"
            "- Include at least 2 B-roll or text overlay suggestions\n"
            "- End with a strong CTA or loop point\n"
            "- Keep energy high throughout\n"
            "- Use conversational, relatable language"
        )
    else:
        guidelines = (
            f"- Hook can be up to {cfg['hook']} seconds\n"
            "- Build a complete narrative arc\n"
            "- Include scene transitions\n"
            "- Vary shot types for visual interest"
        )
    source = fields.get("source_context")
    context_block = f"**Context from connected notes:**\n{source}\n" if source else ""

    return f"""You are a viral content scriptwriter specializing in short-form video. Create a complete video script.

**Topic:** {fields.get("topic")}

**Format:** {fmt} (Target duration: {cfg["min"]}-{cfg["max"]} seconds)

**Hook Style:** {hook_type}
- question: Start with a thought-provoking question
- statement: Bold, attention-grabbing statement
- story: Quick personal anecdote or story opener
- shock: Surprising fact or controversial take

**Voice Style:** {voice}

{context_block}
Generate a complete script with the following JSON structure:
{{
    "hook": "The opening hook line ({cfg["hook"]} seconds, must grab attention immediately)",
    "contentBlocks": [
        {{"id": "block-1", "type": "talking-point|story|example|transition", "content": "The actual script text for this section", "duration": <integer seconds>}}
    ],
    "cta": "The call-to-action line",
    "scenes": [
        {{"id": "scene-1", "shotType": "a-roll|b-roll|text-overlay|transition", "description": "What happens visually in this scene", "duration": <integer seconds>}}
    ],
    "estimatedDuration": <total integer seconds>
}}

Guidelines for {fmt}:
{guidelines}

Voice style "{voice}" means:
{voice_rule}

Return ONLY valid JSON, no markdown or explanation."""


def script_fallback(fields: Fields) -> dict[str, Any]:
    topic = fields.get("topic")
    return {
        "hook": f"Here's something about {topic} you need to know...",
        "contentBlocks": [
            {"id": "block-1", "type": "talking-point", "content": f"Key insight about {topic}", "duration": 15},
        ],
        "cta": "Follow for more!",
        "scenes": [
            {"id": "scene-1", "shotType": "a-roll", "description": "Talking to camera", "duration": 5},
            {"id": "scene-2", "shotType": "b-roll", "description": "Supporting footage", "duration": 10},
            {"id": "scene-3", "shotType": "a-roll", "description": "CTA delivery", "duration": 5},
        ],
        "estimatedDuration": 20,
    }


def _normalize_durations(items: Any, default: int = 5) -> list[dict[str, Any]]:
    out = []
    for item in items if isinstance(items, list) else []:
        if isinstance(item, dict):
            item = {**item, "duration": to_int_seconds(item.get("duration"), default)}
            out.append(item)
    return out


def normalize_script(data: Any, fields: Fields) -> dict[str, Any]:
    if not isinstance(data, dict):
        return script_fallback(fields)
    blocks = _normalize_durations(data.get("contentBlocks"))
    scenes = _normalize_durations(data.get("scenes"))
    total = data.get("estimatedDuration")
    estimated = to_int_seconds(total, sum(s["duration"] for s in scenes))
    return {**data, "contentBlocks": blocks, "scenes": scenes, "estimatedDuration": estimated}


SCRIPT = Capability(
    name="script",
    build_prompt=build_script_prompt,
    required=("topic",),
    missing_message="Topic is required",
    fallback=script_fallback,
    normalize=normalize_script,
)


# ----- storyboard -----
def _style(fields: Fields) -> tuple[str, dict[str, Any]]:
    style = fields.get("visual_style") if fields.get("visual_style") in STYLE_CONFIGS else "cinematic"
    return style, STYLE_CONFIGS[style]


def build_storyboard_prompt(fields: Fields) -> str:
    style, cfg = _style(fields)
    script = fields.get("script_content") or {}
    parts = []
    if script.get("hook"):
        parts.append(f"HOOK: {script['hook']}")
    blocks = script.get("contentBlocks") or []
    if blocks:
        lines = "\n".join(f"- [{b.get('type', '')}] {b.get('content', '')}" for b in blocks)
        parts.append(f"CONTENT:\n{lines}")
    if script.get("cta"):
        parts.append(f"CTA: {script['cta']}")
    script_context = "\n\n".join(parts)

    existing = script.get("scenes") or []
    existing_block = ""
    if existing:
        lines = "\n".join(
            f"{i}. [{s.get('shotType', '')}] {s.get('description', '')} ({s.get('duration', '')}s)"
            for i, s in enumerate(existing, start=1)
        )
        existing_block = f"\n**Existing Scene Structure (enhance these):**\n{lines}\n"
    elements = cfg["key_elements"]

    return f"""You are a professional video storyboard artist. Create a detailed visual storyboard based on the script provided.

**Project:** {fields.get("node_label") or "Video Storyboard"}

**Visual Style:** {style.upper()}
{cfg["description"]}
Key visual elements to incorporate: {", ".join(elements)}

**Script Content:**
{script_context or "No script content provided - create a general storyboard structure"}
{existing_block}
Create a detailed storyboard with enhanced visual descriptions. Return JSON:
{{
    "scenes": [
        {{
            "id": "scene-1",
            "sceneNumber": 1,
            "shotType": "a-roll|b-roll|text-overlay|transition",
            "framing": "wide|medium|close-up|extreme-close-up",
            "cameraMovement": "static|pan|zoom|dolly|tilt",
            "description": "What happens in this scene (action/dialogue)",
            "visualComposition": "Detailed visual description: lighting, colors, elements in frame, mood, {", ".join(elements[:2])}",
            "textOverlay": "Any on-screen text (optional, null if none)",
            "duration": <integer seconds>,
            "referenceKeywords": ["keyword1", "keyword2", "keyword3"]
        }}
    ],
    "totalDuration": <total integer seconds>
}}

Guidelines:
1. Each scene should have rich visual composition details matching the {style} style
2. Use varied framing (WS, MS, CU, ECU) for visual interest
3. Include camera movements where they enhance storytelling
4. referenceKeywords should be search terms for finding similar reference images
5. Typically 4-8 scenes for short-form, 10-20 for long-form
6. Text overlays only where they add value (hooks, key points, CTAs)
7. Ensure scene durations total the expected video length

Return ONLY valid JSON, no markdown or explanation."""


_DEFAULT_STORYBOARD_SCENES = [
    {
        "shotType": "a-roll", "framing": "medium", "cameraMovement": "static",
        "description": "Opening hook - attention grabber",
        "visualComposition": "Subject centered, warm lighting, engaging eye contact",
        "textOverlay": None, "duration": 3, "referenceKeywords": ["talking head", "hook", "opening"],
    },
    {
        "shotType": "b-roll", "framing": "wide", "cameraMovement": "pan",
        "description": "Establishing context",
        "visualComposition": "Cinematic establishing shot with ambient lighting",
        "textOverlay": None, "duration": 5, "referenceKeywords": ["b-roll", "establishing", "cinematic"],
    },
    {
        "shotType": "a-roll", "framing": "close-up", "cameraMovement": "zoom",
        "description": "Main content delivery",
        "visualComposition": "Close-up for emphasis, dramatic lighting",
        "textOverlay": None, "duration": 10, "referenceKeywords": ["close up", "emphasis", "main point"],
    },
    {
        "shotType": "text-overlay", "framing": "medium", "cameraMovement": "static",
        "description": "Call to action",
        "visualComposition": "Bold text overlay on engaging background",
        "textOverlay": "Follow for more!", "duration": 3, "referenceKeywords": ["cta", "call to action", "ending"],
    },
]


def storyboard_fallback(fields: Fields) -> dict[str, Any]:
    style, cfg = _style(fields)
    existing = (fields.get("script_content") or {}).get("scenes") or []
    if existing:
        scenes = [
            {
                "id": f"scene-{i}",
                "sceneNumber": i,
                "shotType": s.get("shotType") or "a-roll",
                "framing": "medium",
                "cameraMovement": "static",
                "description": s.get("description") or "Scene description",
                "visualComposition": f"{cfg['key_elements'][0]} with {cfg['key_elements'][1]}",
                "textOverlay": None,
                "duration": to_int_seconds(s.get("duration"), 5) or 5,
                "referenceKeywords": ["video", "scene", style],
            }
            for i, s in enumerate(existing, start=1)
        ]
        total = sum(s["duration"] for s in scenes)
    else:
        scenes = [
            {"id": f"scene-{i}", "sceneNumber": i, **scene}
            for i, scene in enumerate(_DEFAULT_STORYBOARD_SCENES, start=1)
        ]
        total = 21
    return {"scenes": scenes, "totalDuration": total}


def normalize_storyboard(data: Any, fields: Fields) -> dict[str, Any]:
    if not isinstance(data, dict):
        return storyboard_fallback(fields)
    scenes = _normalize_durations(data.get("scenes"))
    total = to_int_seconds(data.get("totalDuration"), sum(s["duration"] for s in scenes))
    return {**data, "scenes": scenes, "totalDuration": total}


STORYBOARD = Capability(
    name="storyboard",
    build_prompt=build_storyboard_prompt,
    fallback=storyboard_fallback,
    normalize=normalize_storyboard,
)


# ----- B-roll keywords -----
def build_broll_keywords_prompt(fields: Fields) -> str:
    script = (fields.get("script_content") or "")[:2000]
    return f'''Analyze this video script and extract 5-10 keywords that would make good B-roll footage searches.
Focus on:
- Visual nouns (objects, places, people types)
- Actions being described
- Emotional tones that could be shown visually
- Settings or environments mentioned

Script:
"""
{script}
"""

Return ONLY a JSON array of keywords, nothing else. Example: ["laptop", "typing", "office", "success", "celebration"]'''


def keywords_from_text(text: str, fields: Fields) -> list[str]:
    """Keyword list from the model text. No array gives []; an unusable one gives the defaults."""
    if "[" not in (text or ""):
        return []
    keywords = extract_json_array(text)
    if keywords is None:
        return list(DEFAULT_BROLL_KEYWORDS)
    return [str(k) for k in keywords if isinstance(k, (str, int, float)) and str(k).strip()]


BROLL_KEYWORDS = Capability(
    name="broll",
    build_prompt=build_broll_keywords_prompt,
    required=("script_content", "user_id"),
    missing_message="Script content and userId required",
    response="text",
    normalize=keywords_from_text,
)
