"""Marketing capabilities: angle generation and A/B copy variants."""
from typing import Any

from haven.agents.capability import Capability, Fields

ANGLE_DESCRIPTIONS = {
    "pain-point": "Address a specific problem or frustration the audience faces",
    "benefit": "Highlight a concrete benefit or positive outcome",
    "story": "Use a personal narrative or customer success story",
    "authority": "Leverage expertise, credentials, or social proof",
    "urgency": "Create time-sensitive motivation to act now",
    "curiosity": "Generate intrigue that compels them to learn more",
}
DEFAULT_PLATFORMS = ["linkedin", "twitter"]


def _platforms(fields: Fields) -> list[str]:
    return list(fields.get("platforms") or DEFAULT_PLATFORMS)


def build_angle_prompt(fields: Fields) -> str:
    source = fields.get("source_context")
    context_block = f"**Additional Context:**\n{source}\n" if source else ""
    approaches = "\n".join(
        f"- {name.replace('-', ' ').title()}: {desc}" for name, desc in ANGLE_DESCRIPTIONS.items()
    )
    return f"""You are an expert marketing strategist and copywriter. Generate compelling marketing angles for a product/content.

**Product/Content:** {fields.get("product")}
**Target Audience:** {fields.get("target_audience")}
**Target Platforms:** {", ".join(_platforms(fields))}

{context_block}
Generate 4-6 unique marketing angles. Each angle should use a different psychological approach:
{approaches}

For each angle, create 2-3 copy variations tailored for the selected platforms.

Return JSON in this exact format:
{{
    "angles": [
        {{
            "id": "angle-1",
            "type": "pain-point|benefit|story|authority|urgency|curiosity",
            "title": "Short descriptive title for this angle",
            "hook": "The main hook/headline for this angle (attention-grabbing, 1-2 sentences)",
            "platforms": ["linkedin", "twitter"],
            "variations": [
                {{"id": "var-1", "label": "A", "copy": "Complete marketing copy for variation A (ready to post, platform-appropriate)"}},
                {{"id": "var-2", "label": "B", "copy": "Complete marketing copy for variation B (different tone/structure)"}}
            ]
        }}
    ]
}}

Guidelines:
1. Each angle should feel distinctly different in approach
2. Hooks should be scroll-stopping and attention-grabbing
3. Variations should differ in tone, structure, or emphasis (not just word swaps)
4. Copy should be platform-appropriate (LinkedIn = professional, Twitter = punchy, Instagram = visual/emoji-friendly)
5. Include clear CTAs where appropriate
6. Keep copy length appropriate for each platform

Return ONLY valid JSON, no markdown or explanation."""


def angle_fallback(fields: Fields) -> dict[str, Any]:
    product = fields.get("product")
    audience = fields.get("target_audience")
    platforms = _platforms(fields)
    return {
        "angles": [
            {
                "id": "angle-1",
                "type": "pain-point",
                "title": "The Problem Nobody Talks About",
                "hook": f"Struggling with {product}? You're not alone.",
                "platforms": platforms,
                "variations": [
                    {"id": "var-1a", "label": "A", "copy": f"Most {audience} waste hours on {product} without seeing results. Here's what actually works..."},
                    {"id": "var-1b", "label": "B", "copy": f"The #1 mistake {audience} make with {product}? Trying to do it all at once."},
                ],
            },
            {
                "id": "angle-2",
                "type": "benefit",
                "title": "The Transformation Promise",
                "hook": f"What if {product} could change everything?",
                "platforms": platforms,
                "variations": [
                    {"id": "var-2a", "label": "A", "copy": f"Imagine waking up with {product} already working for you. That's the reality for smart {audience}."},
                    {"id": "var-2b", "label": "B", "copy": f"{product} isn't just a tool. It's your unfair advantage in a competitive market."},
                ],
            },
            {
                "id": "angle-3",
                "type": "curiosity",
                "title": "The Unexpected Secret",
                "hook": f"The weird trick behind {product} success",
                "platforms": platforms,
                "variations": [
                    {"id": "var-3a", "label": "A", "copy": f"Nobody told me this about {product} until I discovered it myself. Now I can't unsee it..."},
                    {"id": "var-3b", "label": "B", "copy": f"Why are top {audience} obsessed with {product}? It's not what you think."},
                ],
            },
        ]
    }


def normalize_angles(data: Any, fields: Fields) -> dict[str, Any]:
    if not isinstance(data, dict) or not isinstance(data.get("angles"), list):
        return angle_fallback(fields)
    return data


ANGLE = Capability(
    name="angle",
    build_prompt=build_angle_prompt,
    required=("product",),
    missing_message="Product is required",
    fallback=angle_fallback,
    normalize=normalize_angles,
)


def build_abtest_prompt(fields: Fields) -> str:
    extras = []
    if fields.get("product"):
        extras.append(f"Product/Topic: {fields['product']}")
    if fields.get("platform"):
        extras.append(f"Platform: {fields['platform']}")
    if fields.get("style"):
        extras.append(f"Style preference: {fields['style']}")
    return f'''You are an expert A/B testing copywriter. Create an alternative version of this marketing copy that tests a different approach.

Original Copy:
"""
{fields.get("original_copy")}
"""

{chr(10).join(extras)}

Create ONE alternative version that:
1. Keeps the same core message but uses a different angle or hook
2. Tests a different emotional trigger or call-to-action
3. Maintains similar length

Return ONLY the alternative copy, no explanations or markdown.'''


AB_VARIANT = Capability(
    name="abtest",
    build_prompt=build_abtest_prompt,
    required=("original_copy",),
    missing_message="Original copy required",
    response="text",
)
