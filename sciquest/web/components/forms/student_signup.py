"""
Student sign-up wizard panels.

Panel 1 asks for age and a parent email, panel 2 for the child's own account
details and the CAPTCHA. Only one panel is rendered per response; the other
panel's data lives in the server-side wizard state.
"""

from typing import Optional

from sciquest.identity_access.validation import CAPTCHA_QUESTION, MAX_STUDENT_AGE, MIN_STUDENT_AGE
from sciquest.identity_access.wizard import Panel, WizardState

from ..base import Component
from .fields import HiddenField, SelectField, TextInputField
from .submit import SubmitButton

AGE_OPTIONS = [(str(age), f"{age} years old") for age in range(MIN_STUDENT_AGE, MAX_STUDENT_AGE + 1)]


class StudentSignupWizard(Component):
    def __init__(
        self,
        *,
        csrf_token: str,
        state: WizardState,
        banner_html: str = "",
        captcha_value: Optional[str] = "",
    ):
        self.csrf_token = csrf_token
        self.state = state
        self.banner_html = banner_html
        self.captcha_value = captcha_value

    def _steps(self) -> str:
        on_two = self.state.panel is Panel.PANEL2
        first = self.classes("step", active=not on_two, completed=on_two)
        second = self.classes("step", active=on_two)
        return (
            '<ol class="wizard-steps">'
            f'<li class="{first}">About you</li>'
            f'<li class="{second}">Your account</li>'
            "</ol>"
        )

    def _panel1(self) -> str:
        age = SelectField("age", "How old are you?", required=True).render(
            options=AGE_OPTIONS,
            value=str(self.state.age) if self.state.age is not None else None,
            placeholder="Select your age",
        )
        parent = TextInputField(
            "parent_email",
            "Parent's email",
            required=True,
            help_text="We will let your parent know about your new account.",
        ).render(value=self.state.parent_email, input_type="email", autocomplete="off")
        return f"""
            <form method="post" action="/auth/student-signup/panel1" id="panel1" novalidate>
                {HiddenField("csrf_token", self.csrf_token).render()}
                {age}
                {parent}
                <div class="form-actions">{SubmitButton("Next", loading_label="Checking...").render()}</div>
            </form>"""

    def _panel2(self) -> str:
        first_name = TextInputField("first_name", "First name", required=True).render(
            value=self.state.first_name, autocomplete="given-name"
        )
        email = TextInputField("email", "Email", required=True).render(
            value=self.state.email, input_type="email", autocomplete="email"
        )
        password = TextInputField(
            "password", "Password", required=True, help_text="At least 6 characters."
        ).render(input_type="password", autocomplete="new-password")
        captcha = TextInputField("captcha", CAPTCHA_QUESTION, required=True).render(
            value=self.captcha_value or "", autocomplete="off", inputmode="numeric"
        )
        back = SubmitButton(
            "Back",
            variant="secondary",
            formaction="/auth/student-signup/back",
            formnovalidate=True,
            loading_label="Back",
        )
        return f"""
            <form method="post" action="/auth/student-signup/panel2" id="panel2" novalidate>
                {HiddenField("csrf_token", self.csrf_token).render()}
                {first_name}
                {email}
                {password}
                {captcha}
                <div class="form-actions">
                    {back.render()}
                    {SubmitButton("Sign Up", loading_label="Creating Account...").render()}
                </div>
            </form>"""

    def render(self) -> str:
        panel_html = self._panel2() if self.state.panel is Panel.PANEL2 else self._panel1()
        return f"""
        <section class="auth-card student-signup" data-panel="{self.state.panel.value}">
            <h1>Join SciQuest Heroes!</h1>
            {self._steps()}
            {self.banner_html}
            {panel_html}
            <p class="toggle-mode">Already have an account? <a href="/auth?type=student">Log In</a></p>
        </section>
        """
