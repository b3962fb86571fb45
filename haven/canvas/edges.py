"""Edge label and color for each kind of derived node."""

NEWSLETTER = ("📧 Newsletter", "#f59e0b")
SCRIPT = ("🎬 Script", "#ec4899")
REPURPOSED = ("✨ Repurposed", "#a855f7")
NOTE = ("📝 Note", "#f59e0b")
COURSE = ("📚 Course", "#a855f7")
QUIZ = ("❓ Quiz", "#3b82f6")

PLATFORM_STYLES = {
    "linkedin": ("💼 LinkedIn", "#0077b5"),
    "twitter": ("🐦 Twitter", "#1da1f2"),
    "instagram": ("📸 Instagram", "#e4405f"),
}


def repurpose_style(transformation_type: str | None, platform: str | None = None) -> tuple[str, str]:
    """(label, color) for an edge into a repurposed node."""
    if transformation_type == "TWEET_TO_NEWSLETTER":
        return NEWSLETTER
    if transformation_type == "NEWSLETTER_TO_SCRIPT":
        return SCRIPT
    if transformation_type == "FORMAT_PLATFORM" and platform in PLATFORM_STYLES:
        return PLATFORM_STYLES[platform]
    return REPURPOSED
