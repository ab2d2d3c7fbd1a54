"""
Submit button component.

`forms.js` swaps in the loading label and disables the button while the
request is in flight, so double clicks do not submit twice.
"""

from typing import Optional

from ..base import Component


class SubmitButton(Component):
    """Primary form action button."""

    def __init__(
        self,
        label: str,
        *,
        loading_label: str = "Processing...",
        variant: str = "primary",
        name: Optional[str] = None,
        formaction: Optional[str] = None,
        formnovalidate: bool = False,
    ) -> None:
        self.label = label
        self.loading_label = loading_label
        self.variant = variant
        self.name = name
        self.formaction = formaction
        self.formnovalidate = formnovalidate

    def render(self) -> str:
        attrs = self.attributes(
            type="submit",
            class_=self.classes("btn", f"btn-{self.variant}"),
            name=self.name,
            formaction=self.formaction,
            formnovalidate=self.formnovalidate,
            data_loading_label=self.loading_label,
        )
        return f"<button {attrs}>{self.escape(self.label)}</button>"
