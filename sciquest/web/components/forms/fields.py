"""
Form field components.

Keep label, input, help and error markup consistent across the auth, wizard
and profile forms.
"""

from typing import Iterable, Optional, Tuple

from ..base import Component


class FormField(Component):
    """Wrapper that renders label, input slot, help, and error text."""

    def __init__(
        self,
        field_id: str,
        label: str,
        *,
        required: bool = False,
        help_text: Optional[str] = None,
        error_text: Optional[str] = None,
    ) -> None:
        self.field_id = field_id
        self.label = label
        self.required = required
        self.help_text = help_text
        self.error_text = error_text

    def render(self, input_html: str) -> str:
        state_class = " form-field--error" if self.error_text else ""
        required_marker = (
            '<span class="form-required" aria-hidden="true">*</span>'
            if self.required
            else ""
        )
        help_html = (
            f'<p class="form-help" id="{self.field_id}-help">{self.escape(self.help_text)}</p>'
            if self.help_text
            else ""
        )
        error_html = (
            f'<p class="form-error" role="alert" id="{self.field_id}-error">{self.escape(self.error_text)}</p>'
            if self.error_text
            else ""
        )
        label_attrs = self.attributes(for_=self.field_id, class_="form-label")

        return (
            f'<div class="form-group{state_class}">'
            f"<label {label_attrs}>"
            f"{self.escape(self.label)}{required_marker}"
            "</label>"
            f"{input_html}"
            f"{help_html}"
            f"{error_html}"
            "</div>"
        )

    def _aria(self) -> dict:
        return {
            "aria_describedby": f"{self.field_id}-help" if self.help_text else None,
            "aria_invalid": "true" if self.error_text else "false",
        }


class TextInputField(FormField):
    """Single-line input (text, email, password, number).

    Passwords are never echoed back: `value` is ignored for `input_type="password"`.
    """

    def render(
        self,
        *,
        value: Optional[str] = "",
        input_type: str = "text",
        autocomplete: Optional[str] = None,
        placeholder: Optional[str] = None,
        **attrs: object,
    ) -> str:
        input_attrs = self.attributes(
            id=self.field_id,
            name=self.field_id,
            type=input_type,
            value=None if input_type == "password" else (value or ""),
            autocomplete=autocomplete,
            placeholder=placeholder,
            required=self.required,
            class_="form-input",
            **self._aria(),
            **attrs,
        )
        return super().render(f"<input {input_attrs}>")


class SelectField(FormField):
    """<select> with a leading empty placeholder option."""

    def render(
        self,
        *,
        options: Iterable[Tuple[str, str]],
        value: Optional[str] = None,
        placeholder: str = "Select...",
    ) -> str:
        selected = "" if value is None else str(value)
        option_html = [f'<option value="">{self.escape(placeholder)}</option>']
        for opt_value, opt_label in options:
            opt_attrs = self.attributes(value=opt_value, selected=(opt_value == selected))
            option_html.append(f"<option {opt_attrs}>{self.escape(opt_label)}</option>")
        select_attrs = self.attributes(
            id=self.field_id,
            name=self.field_id,
            required=self.required,
            class_="form-input",
            **self._aria(),
        )
        return super().render(f"<select {select_attrs}>{''.join(option_html)}</select>")


class HiddenField(Component):
    def __init__(self, name: str, value: Optional[str]):
        self.name = name
        self.value = value

    def render(self) -> str:
        return f"<input {self.attributes(type='hidden', name=self.name, value=self.value or '')}>"
