"""
Base Component class for SciQuest UI components.

Pages are assembled from small Python classes instead of templates. Every
dynamic value passes through `escape` or `attributes`.
"""

from typing import Any, Optional
import html


class Component:
    """Base class for all UI components"""

    def render(self) -> str:
        """Return the component's HTML."""
        raise NotImplementedError("Subclasses must implement render()")

    @staticmethod
    def escape(text: Optional[Any]) -> str:
        """HTML-escape `text`; None renders as the empty string."""
        return html.escape(str(text)) if text is not None else ""

    @staticmethod
    def classes(*args: str, **conditionals: bool) -> str:
        """Join CSS classes, adding each keyword whose value is true.

        Example:
            >>> Component.classes("banner", "banner-error", hidden=False)
            "banner banner-error"
        """
        names = [name for name in args if name]
        names.extend(key.replace("_", "-") for key, value in conditionals.items() if value)
        return " ".join(names)

    @staticmethod
    def attributes(**attrs: Any) -> str:
        """Build an HTML attribute string.

        `class_`/`for_` lose the trailing underscore, inner underscores become
        hyphens, True renders a bare boolean attribute, False/None are dropped.

        Example:
            >>> Component.attributes(id="age", aria_invalid="true", required=True)
            'id="age" aria-invalid="true" required'
        """
        result = []
        for key, value in attrs.items():
            if key.endswith("_"):
                key = key[:-1]
            else:
                key = key.replace("_", "-")

            if value is True:
                result.append(key)
            elif value is not False and value is not None:
                result.append(f'{key}="{html.escape(str(value))}"')

        return " ".join(result)
