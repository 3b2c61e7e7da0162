"""
Logo rendering
"""

LOGO_TEXT = "PX"
LOGO_SIZE = 40
LOGO_RADIUS = 12
LOGO_BACKGROUND = "#3b82f6"
LOGO_FOREGROUND = "#fafafa"


def render_logo_svg(
    text: str = LOGO_TEXT,
    size: int = LOGO_SIZE,
    background: str = LOGO_BACKGROUND,
    foreground: str = LOGO_FOREGROUND
) -> str:
    """Square rounded badge with the app initials centered in it"""
    half = size / 2
    return (
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{size}" height="{size}" '
        f'viewBox="0 0 {size} {size}">'
        f'<rect width="{size}" height="{size}" rx="{LOGO_RADIUS}" fill="{background}"/>'
        f'<text x="{half:g}" y="{half:g}" fill="{foreground}" font-family="sans-serif" '
        f'font-size="16" text-anchor="middle" dominant-baseline="central">{text}</text>'
        f'</svg>'
    )
