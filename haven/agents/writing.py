"""Writing capabilities: long-form articles, ghostwriting, repurposing and translation."""
import time
from typing import Any

from haven.agents.capability import Capability, Fields
from haven.agents.voice import build_source_context, build_voice_prompt, language_instruction
from haven.errors import InvalidOptionError

_OUTLINE_FORMAT = """Format as JSON:
{{
  "title": "...",
  "sections": [
    {{ "heading": "{first}", "brief": "..." }},
    ...
  ]
}}"""

ARTICLE_TEMPLATES = {
    "how-to": (
        "HOW-TO GUIDE",
        """1. **Problem Statement**: What challenge does this solve? (2-3 sentences)
2. **Solution Overview**: High-level approach (1 paragraph)
3. **Step-by-Step Guide**: 5-7 actionable steps (each with a clear heading)
4. **Common Pitfalls**: 2-3 things to avoid
5. **Conclusion**: Summary + next steps""",
        "Problem Statement",
    ),
    "thought-leadership": (
        "THOUGHT LEADERSHIP",
        """1. **Hook**: A provocative opening statement or question
2. **Core Thesis**: Your unique perspective (bold claim)
3. **Supporting Evidence**: 3-4 key arguments with examples
4. **Counterarguments**: Address objections
5. **Vision**: Where this leads, future implications
6. **Call to Action**: What readers should do""",
        "Hook",
    ),
    "case-study": (
        "CASE STUDY",
        """1. **Background**: Context and initial situation
2. **Challenge**: What was the problem?
3. **Approach**: Strategy and tactics used
4. **Results**: Quantifiable outcomes (metrics, impact)
5. **Lessons Learned**: Key takeaways
6. **Recommendations**: What others should do""",
        "Background",
    ),
    "listicle": (
        "LISTICLE",
        """1. **Introduction**: Why this list matters (hook + context)
2. **Main Points**: 7-10 numbered items (each with a catchy subheading)
3. **Conclusion**: Tie it all together + CTA""",
        "Introduction",
    ),
}


def _voice(fields: Fields) -> str:
    return build_voice_prompt(fields.get("voice_profile"))


# ----- article -----
def build_outline_prompt(fields: Fields) -> str:
    template = fields.get("template")
    if template not in ARTICLE_TEMPLATES:
        raise InvalidOptionError("Invalid template")
    kind, structure, first = ARTICLE_TEMPLATES[template]
    sources = build_source_context(
        fields.get("canvas_context"), fields.get("vault_assets"), fields.get("web_sources")
    )
    return f"""Generate a detailed outline for a {kind} article about: "{fields.get("topic")}"

{sources}

Structure:
{structure}

{_OUTLINE_FORMAT.format(first=first)}"""


def build_expand_prompt(fields: Fields) -> str:
    section = fields.get("section") or {}
    return f"""You are an expert long-form content writer. Expand the following section into a full, polished paragraph or section.

CONTEXT (full article outline):
{fields.get("context")}

SECTION TO EXPAND:
Heading: {section.get("heading") or ""}
Brief: {section.get("brief") or ""}

{_voice(fields)}

RULES:
- Write 2-4 paragraphs (150-300 words)
- Use engaging, clear language
- Include concrete examples or analogies
- Maintain flow and transitions
- Output ONLY the expanded content, no preamble"""


def build_polish_prompt(fields: Fields) -> str:
    return f"""You are an expert editor. Polish this article to improve:
- Flow and transitions between sections
- Clarity and conciseness
- Engagement and readability
- Grammar and style

{_voice(fields)}

ARTICLE:
{fields.get("content")}

Output the polished version ONLY, no preamble."""


ARTICLE_ACTIONS = {
    "GENERATE_OUTLINE": Capability(
        name="article_outline",
        build_prompt=build_outline_prompt,
        required=("topic", "template"),
        missing_message="Topic and template are required",
        response="object",
        temperature=0.7,
        max_output_tokens=2048,
    ),
    "EXPAND_SECTION": Capability(
        name="article_expand",
        build_prompt=build_expand_prompt,
        required=("section", "context"),
        missing_message="Section and context are required",
        response="text",
        temperature=0.7,
        max_output_tokens=1024,
    ),
    "POLISH_ARTICLE": Capability(
        name="article_polish",
        build_prompt=build_polish_prompt,
        required=("content",),
        missing_message="Content is required",
        response="text",
        temperature=0.6,
        max_output_tokens=4096,
    ),
}


# ----- ghostwriter -----
def _niche(fields: Fields, label: str = "NICHE CONTEXT: ") -> str:
    niche = fields.get("niche_context")
    return f"{label}{niche}" if niche else ""


def _patterns(fields: Fields, *keys: tuple[str, str]) -> str:
    lines = []
    for i, pattern in enumerate(fields.get("patterns") or [], start=1):
        extras = " | ".join(f"{label}: {pattern.get(key) or ''}" for label, key in keys)
        lines.append(f"Pattern {i}: {pattern.get('structure') or ''} | {extras}")
    return "\n".join(lines)


def build_deconstruct_prompt(fields: Fields) -> str:
    niche = fields.get("niche_context")
    niche_line = f"The user operates in these niches: {niche}. Consider this context when analyzing." if niche else ""
    return f"""You are an expert content analyst trained in viral content psychology. Your task is to deconstruct high-performing social media posts and extract their underlying patterns.

For each post provided, analyze:
1. **Structure**: The skeleton (e.g., "Hook → Agitation → Solution → CTA", "Contrast Pattern", "Listicle")
2. **Hook**: What makes the first line grab attention (e.g., "Counter-intuitive claim", "Direct challenge", "Curiosity gap")
3. **Psychology**: The emotional trigger being used (e.g., "Fear of missing out", "Identity validation", "Tribal belonging")
4. **Call to Action**: How engagement is prompted (e.g., "Implicit question", "Direct ask", "Open loop")

{niche_line}

Respond in JSON format:
{{
  "patterns": [
    {{ "structure": "...", "hook": "...", "psychology": "...", "callToAction": "..." }}
  ]
}}

---
POSTS TO ANALYZE:
{fields.get("content")}"""


def build_titles_prompt(fields: Fields) -> str:
    return f"""You are a viral YouTube title generator. Using the patterns decoded from high-performing content, generate 25 scroll-stopping title options.

DECODED PATTERNS:
{_patterns(fields, ("Hook", "hook"))}

{_niche(fields)}

RULES:
1. Each title should use ONE of the decoded patterns as its foundation
2. Titles should be 50-70 characters max
3. Use power words, numbers, and curiosity triggers
4. Avoid clickbait that doesn't deliver
5. Mix formats: questions, how-to, lists, contrarian takes

{_voice(fields)}

Output just the titles, numbered 1-25, one per line."""


def build_deep_prompt(fields: Fields) -> str:
    return f"""You are a deep-thought content writer specializing in paradoxes, philosophical quotes, and problem/solution frameworks.

DECODED PATTERNS:
{_patterns(fields, ("Psychology", "psychology"))}

{_niche(fields)}

Generate 10 "deep posts" using these formats:
1. **Paradoxes** (3): Statements that seem contradictory but reveal deeper truths
2. **Original Quotes** (3): Quotable statements that sound like wisdom
3. **Problem/Solution** (4): Short-form posts that identify a pain point and hint at resolution

Each post should be 1-3 sentences, suitable for Twitter/X or LinkedIn.
Format: [TYPE] followed by the post content.

{_voice(fields)}"""


def build_ideas_prompt(fields: Fields) -> str:
    return f"""You are a content idea generator for a creator who tests ideas on X before expanding them into long-form.

DECODED PATTERNS:
{_patterns(fields, ("Hook", "hook"), ("CTA", "call_to_action"))}

{_niche(fields)}

Generate 60 tweet/post ideas (short 1-2 line summaries of what to write about). These should:
1. Apply the decoded patterns to new topics
2. Cover a mix of: personal stories, contrarian takes, how-to tips, observations, predictions
3. Be specific enough to write from, but not fully written posts
4. Follow the 30% rule: 30% proven formats, 70% experimental angles

Group them into categories:
- Evergreen (15): Topics that work year-round
- Trending (15): Topics related to current cultural moments
- Personal (15): Story-based or opinion-based
- Educational (15): How-to or insight-based

Number each idea within its category.

{_voice(fields)}"""


def patterns_from_outline(data: Any, fields: Fields) -> list[dict[str, Any]]:
    patterns = data.get("patterns")
    if not isinstance(patterns, list):
        raise ValueError("Deconstruction returned no patterns")
    return patterns


_PATTERNS_REQUIRED = "Patterns are required"

GHOSTWRITER_ACTIONS = {
    "DECONSTRUCT": Capability(
        name="ghostwriter_deconstruct",
        build_prompt=build_deconstruct_prompt,
        required=("content",),
        missing_message="Content is required",
        response="object",
        normalize=patterns_from_outline,
        temperature=0.4,
        max_output_tokens=2048,
    ),
    "GENERATE_TITLES": Capability(
        name="ghostwriter_titles",
        build_prompt=build_titles_prompt,
        required=("patterns",),
        missing_message=_PATTERNS_REQUIRED,
        response="text",
        temperature=0.8,
        max_output_tokens=2048,
    ),
    "GENERATE_DEEP": Capability(
        name="ghostwriter_deep",
        build_prompt=build_deep_prompt,
        required=("patterns",),
        missing_message=_PATTERNS_REQUIRED,
        response="text",
        temperature=0.8,
        max_output_tokens=2048,
    ),
    "GENERATE_IDEAS": Capability(
        name="ghostwriter_ideas",
        build_prompt=build_ideas_prompt,
        required=("patterns",),
        missing_message=_PATTERNS_REQUIRED,
        response="text",
        temperature=0.9,
        max_output_tokens=4096,
    ),
}


# ----- repurpose -----
PLATFORM_PROMPTS = {
    "linkedin": """Reformat this content for LinkedIn:

RULES:
1. Start with a strong hook line (standalone, creates curiosity)
2. Use short paragraphs (1-2 sentences max per paragraph)
3. Add strategic line breaks for readability
4. Include a "⬇️" or similar indicator if it's a longer post
5. End with a question or call-to-engagement
6. Add 3-5 relevant hashtags at the end
7. Optimal length: 1300-1900 characters

TONE: Professional but human, thought-leadership style""",
    "twitter": """Convert this content into a Twitter/X thread:

RULES:
1. First tweet must be a standalone hook that works on its own
2. Each tweet: max 280 characters
3. Number format: "1/" or "🧵 1/X"
4. End with a CTA tweet (follow, repost, etc.)
5. Aim for 5-10 tweets total
6. Use line breaks within tweets for rhythm
7. Last tweet should summarize + invite engagement

TONE: Punchy, conversational, high-value""",
    "instagram": """Reformat this content for an Instagram carousel caption:

RULES:
1. Attention-grabbing first line (shows in preview)
2. Body: conversational, story-driven, personal
3. Include relevant emojis (strategic, not excessive)
4. End with engagement question
5. Add a line break before hashtags
6. Include 20-30 targeted hashtags (mix of sizes)
7. Optimal length: 800-1500 characters before hashtags

TONE: Authentic, relatable, slightly casual""",
}

REPURPOSE_BRIEFS = {
    "TWEET_TO_NEWSLETTER": (
        """You are an expert content expander specializing in transforming short-form content into long-form newsletters.

Given a tweet or short post, expand it into a full newsletter structured as:

**Subject Line**: A compelling email subject (50 chars max)
**Opening Hook**: 2-3 sentences that grab attention and introduce the topic
**Main Content**: 3-4 paragraphs that expand on the core idea with examples, depth and at least one personal anecdote or case study
**Key Takeaway**: A memorable, quotable summary in 1-2 sentences
**Call to Action**: What the reader should do next

Write in a conversational, engaging tone. Every sentence should add value.""",
        "ORIGINAL TWEET/POST",
    ),
    "NEWSLETTER_TO_SCRIPT": (
        """You are a video script writer who transforms written content into engaging spoken-word scripts.

Convert the newsletter/article into a video script with:

**HOOK (0:00-0:15)** [VISUAL] opening shot, [AUDIO] the words that stop the scroll
**INTRO (0:15-0:45)** [VISUAL] suggested B-roll or graphics, [AUDIO] brief context and why this matters
**MAIN CONTENT (0:45-3:00)** 3-4 segments, each with [VISUAL] shot type and [AUDIO] spoken words
**CONCLUSION (3:00-3:30)** [VISUAL] final shot, [AUDIO] summary and strong close
**CTA (3:30-3:45)** [VISUAL] subscribe animation, [AUDIO] clear call to action

Use short sentences. Write for the ear, not the eye. Include pauses marked with [BEAT] where dramatic effect is needed.""",
        "NEWSLETTER/ARTICLE",
    ),
    "CONTENT_TO_NEWSLETTER": (
        """You are an expert content strategist transforming raw content into a polished newsletter.

Given ANY type of content (notes, ideas, documents, rough drafts), transform it into a professional newsletter:

**Subject Line**: A compelling email subject that creates curiosity (50 chars max)
**Opening Hook**: 2-3 sentences that grab attention immediately
**Main Content**: 3-5 paragraphs with a clear, logical flow, practical examples and insights the reader can apply immediately
**Key Takeaway**: 1-2 memorable sentences summarizing the value
**Call to Action**: What the reader should do next

Write in a conversational, engaging tone. Every sentence should add value.""",
        "SOURCE CONTENT",
    ),
    "CONTENT_TO_THREAD": (
        """You are a viral thread writer transforming content into engaging social media threads.

Given ANY content, create a Twitter/X style thread:

1/ HOOK - A standalone opening that stops the scroll.
2/-X/ BODY - One idea per tweet, max 280 characters each, with specific examples and numbers.
X/ SUMMARY - Recap the key points
FINAL/ CTA - Engage the reader (follow, repost, save, etc.)

RULES:
- Aim for 6-10 tweets
- Number format: "1/" through "10/"
- First tweet MUST work as a standalone post
- Be punchy, conversational, high-value""",
        "SOURCE CONTENT",
    ),
    "CONTENT_TO_SCRIPT": (
        """You are a video script writer transforming content into engaging spoken-word scripts.

Given ANY content, create a script for short-form video (TikTok/Reels/Shorts):

[HOOK - First 3 seconds] The opening line that stops the scroll. Direct to camera.
[CONTEXT - 5-10 seconds] Brief setup. Why this matters.
[MAIN CONTENT - 30-45 seconds] 3-4 key points in a punchy, conversational style.
[CLOSE - 5 seconds] Strong finish or quick recap.
[CTA] What you want viewers to do.

RULES:
- Write for the EAR, not the eye
- Use short, punchy sentences
- Include [BEAT] for dramatic pauses
- Total script: 60-90 seconds when spoken""",
        "SOURCE CONTENT",
    ),
}

REPURPOSE_LABELS = {
    "TWEET_TO_NEWSLETTER": "Newsletter Version",
    "NEWSLETTER_TO_SCRIPT": "Video Script",
    "CONTENT_TO_NEWSLETTER": "Newsletter",
    "CONTENT_TO_THREAD": "Thread",
    "CONTENT_TO_SCRIPT": "Script",
}

# Actions whose result is dropped on the canvas as a linked note
CANVAS_REPURPOSE_ACTIONS = ("TWEET_TO_NEWSLETTER", "NEWSLETTER_TO_SCRIPT", "FORMAT_PLATFORM")


def _repurpose_prompt(brief: str, heading: str, fields: Fields) -> str:
    return (
        f"{brief}\n\n{_voice(fields)}{language_instruction(fields.get('language_mode'))}"
        f"\n\n---\n{heading}:\n{fields.get('content')}"
    )


def _brief_builder(action: str):
    brief, heading = REPURPOSE_BRIEFS[action]
    return lambda fields: _repurpose_prompt(brief, heading, fields)


def build_platform_prompt(fields: Fields) -> str:
    platform = fields.get("platform")
    if platform not in PLATFORM_PROMPTS:
        raise InvalidOptionError("Invalid platform. Use: linkedin, twitter, or instagram")
    return _repurpose_prompt(PLATFORM_PROMPTS[platform], "ORIGINAL CONTENT", fields)


def repurpose_label(action: str, platform: str | None = None) -> str:
    if action == "FORMAT_PLATFORM":
        return f"{platform[:1].upper()}{platform[1:]} Post" if platform else "Formatted Post"
    return REPURPOSE_LABELS.get(action, "Repurposed Content")


def repurpose_result(action: str, text: str, fields: Fields) -> dict[str, Any]:
    """Response body for a repurpose action."""
    metadata: dict[str, Any] = {"transformationType": action, "timestamp": int(time.time() * 1000)}
    body: dict[str, Any] = {"content": text, "label": repurpose_label(action, fields.get("platform"))}
    if action in CANVAS_REPURPOSE_ACTIONS:
        body["nodeType"] = "noteNode"
        metadata = {"sourceNodeId": fields.get("source_node_id"), **metadata}
        if action == "FORMAT_PLATFORM":
            metadata["platform"] = fields.get("platform")
    body["metadata"] = metadata
    return body


_REPURPOSE_TOKENS = {
    "TWEET_TO_NEWSLETTER": 2048,
    "NEWSLETTER_TO_SCRIPT": 3000,
    "CONTENT_TO_NEWSLETTER": 2500,
    "CONTENT_TO_THREAD": 2000,
    "CONTENT_TO_SCRIPT": 2000,
}

REPURPOSE_ACTIONS = {
    action: Capability(
        name=f"repurpose_{action.lower()}",
        build_prompt=_brief_builder(action),
        required=("content",),
        missing_message="Content is required",
        response="text",
        temperature=0.7,
        max_output_tokens=tokens,
    )
    for action, tokens in _REPURPOSE_TOKENS.items()
}
REPURPOSE_ACTIONS["FORMAT_PLATFORM"] = Capability(
    name="repurpose_format_platform",
    build_prompt=build_platform_prompt,
    required=("content",),
    missing_message="Content is required",
    response="text",
    temperature=0.7,
    max_output_tokens=2048,
)


# ----- translate -----
def build_translate_prompt(fields: Fields) -> str:
    if fields.get("target_language") == "ms":
        source_lang, target_lang = "English", "Bahasa Malaysia"
    else:
        source_lang, target_lang = "Bahasa Malaysia", "English"
    return f"""You are a professional translator fluent in both English and Bahasa Malaysia.
Your task is to translate the given text from {source_lang} to {target_lang}.

CRITICAL RULES:
1. Translate naturally, NOT word-for-word. The output should sound like a native speaker wrote it.
2. For Bahasa Malaysia: Use standard formal BM unless the input is clearly informal/colloquial.
3. Maintain the original tone (formal, casual, professional, humorous).
4. Preserve any formatting (bullet points, line breaks, headers).
5. If the text contains technical terms, keep them in English if that's how they're commonly used.
6. DO NOT add explanations or notes. Output ONLY the translated text.

---
TEXT TO TRANSLATE:
{fields.get("text")}"""


TRANSLATE = Capability(
    name="translate",
    build_prompt=build_translate_prompt,
    required=("text", "target_language"),
    missing_message="Missing required fields: text, targetLanguage",
    response="text",
    temperature=0.3,
    max_output_tokens=4096,
)
