"""
Layout component: wraps page content into a complete HTML document.
"""

from typing import Optional

from .base import Component


class Layout(Component):
    """Minimal page shell for the auth and profile pages."""

    def __init__(self, title: str, content: str, *, head_extra: Optional[str] = None):
        """
        Args:
            title: Page title (escaped)
            content: Pre-rendered body HTML
            head_extra: Pre-rendered markup appended to <head>, e.g. a refresh meta tag
        """
        self.title = title
        self.content = content
        self.head_extra = head_extra or ""

    def render(self) -> str:
        return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{self.escape(self.title)} - SciQuest Heroes</title>
    <link rel="stylesheet" href="/static/css/sciquest.css">
    <script src="/static/js/forms.js" defer></script>
    {self.head_extra}
</head>
<body>
    <main id="main-content" class="auth-container" role="main">
        {self.content}
    </main>
</body>
</html>"""
