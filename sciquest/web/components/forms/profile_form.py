"""
Profile edit form.

Shows the display name, an account-type badge and the avatar initial above
the editable fields. Age and parent email only appear for student profiles.
"""

from typing import Any, Mapping, Optional

from sciquest.identity_access.domain import AccountType
from sciquest.identity_access.profiles import avatar_initial

from ..base import Component
from .fields import HiddenField, TextInputField
from .submit import SubmitButton


def _text(value: Any) -> str:
    return "" if value is None else str(value)


class ProfileForm(Component):
    def __init__(
        self,
        *,
        csrf_token: str,
        profile: Mapping[str, Any],
        display_name: str,
        account_type: Optional[AccountType],
        is_student: bool,
        banner_html: str = "",
        values: Optional[Mapping[str, Any]] = None,
    ):
        self.csrf_token = csrf_token
        self.profile = profile
        self.display_name = display_name
        self.account_type = account_type
        self.is_student = is_student
        self.banner_html = banner_html
        # Submitted values win over stored ones when re-rendering after a failed save.
        self.values = dict(profile)
        if values:
            self.values.update(values)

    def _header(self) -> str:
        avatar_url = self.profile.get("avatar_url")
        if avatar_url:
            avatar = f'<img class="avatar" src="{self.escape(avatar_url)}" alt="">'
        else:
            avatar = f'<div class="avatar avatar-initial">{self.escape(avatar_initial(self.display_name))}</div>'
        badge = ""
        if self.account_type is not None:
            badge = (
                f'<span class="{self.classes("badge", f"badge-{self.account_type.value}")}">'
                f"{self.escape(self.account_type.label)}</span>"
            )
        return f"""
            <div class="profile-header">
                {avatar}
                <h1 id="displayName">{self.escape(self.display_name)}</h1>
                {badge}
            </div>"""

    def render(self) -> str:
        fields = [
            TextInputField("username", "Username").render(
                value=_text(self.values.get("username")), disabled=True
            ),
            TextInputField("email", "Email").render(
                value=_text(self.values.get("email")), input_type="email", disabled=True
            ),
            TextInputField("first_name", "First name", required=self.is_student).render(
                value=_text(self.values.get("first_name")), autocomplete="given-name"
            ),
            TextInputField("full_name", "Full name").render(
                value=_text(self.values.get("full_name")), autocomplete="name"
            ),
        ]
        if self.is_student:
            fields.append(
                TextInputField("age", "Age", help_text="Between 5 and 12").render(
                    value=_text(self.values.get("age")), input_type="number", min="5", max="12"
                )
            )
            fields.append(
                TextInputField("parent_email", "Parent's email").render(
                    value=_text(self.values.get("parent_email")), input_type="email"
                )
            )
        fields_html = "\n".join(fields)
        return f"""
        <section class="profile-card">
            {self._header()}
            {self.banner_html}
            <form method="post" action="/profile" id="profileForm" novalidate>
                {HiddenField("csrf_token", self.csrf_token).render()}
                {fields_html}
                <div class="form-actions">{SubmitButton("Save Changes", loading_label="Saving...").render()}</div>
            </form>
            <form method="post" action="/auth/logout" class="logout-form">
                {HiddenField("csrf_token", self.csrf_token).render()}
                {SubmitButton("Log Out", variant="secondary", loading_label="Logging out...").render()}
            </form>
        </section>
        """
