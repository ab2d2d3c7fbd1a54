"""
Auth page form: login and sign-up modes share one form.

Mode switches titles, button labels and the toggle link. The Google button is
left out for student hints, the forgot-password link only shows in login mode.
"""

from typing import Optional
from urllib.parse import urlencode

from sciquest.identity_access.domain import AccountType

from ..base import Component
from .fields import HiddenField, TextInputField
from .submit import SubmitButton


class AuthForm(Component):
    def __init__(
        self,
        *,
        csrf_token: str,
        signup_mode: bool = False,
        hint: Optional[AccountType] = None,
        email: str = "",
        banner_html: str = "",
    ):
        self.csrf_token = csrf_token
        self.signup_mode = signup_mode
        self.hint = hint
        self.email = email
        self.banner_html = banner_html

    def _mode_link(self, signup: bool) -> str:
        params = {"mode": "signup"} if signup else {}
        if self.hint is not None:
            params["type"] = self.hint.value
        query = urlencode(params)
        return f"/auth?{query}" if query else "/auth"

    def render(self) -> str:
        if self.signup_mode:
            title = "Create a free account"
            subtitle = f"Join SciQuest Heroes as a {self.hint.value if self.hint else 'member'}"
            submit = SubmitButton("Sign Up", formaction="/auth/signup")
            google_label = "Sign up with Google"
            toggle = f'Already have an account? <a href="{self.escape(self._mode_link(False))}" id="toggleModeLink">Log In</a>'
            forgot_html = ""
        else:
            title = "Welcome Back!"
            subtitle = "Sign in to continue your adventure"
            submit = SubmitButton("Log In", formaction="/auth/login")
            google_label = "Continue with Google"
            toggle = f'Don&#x27;t have an account? <a href="{self.escape(self._mode_link(True))}" id="toggleModeLink">Sign Up</a>'
            forgot_html = '<div class="forgot-password"><a href="/auth/forgot" id="forgotPasswordLink">Forgot password?</a></div>'

        hidden = "".join(
            [
                HiddenField("csrf_token", self.csrf_token).render(),
                HiddenField("type", self.hint.value if self.hint else "").render(),
            ]
        )
        email_field = TextInputField("email", "Email", required=True).render(
            value=self.email, input_type="email", autocomplete="email"
        )
        password_field = TextInputField("password", "Password", required=True).render(
            input_type="password",
            autocomplete="new-password" if self.signup_mode else "current-password",
        )

        google_html = ""
        if self.hint is not AccountType.STUDENT:
            google_html = f"""
        <div class="divider" id="divider"><span>or</span></div>
        <form method="post" action="/auth/google" class="google-form">
            {hidden}
            {SubmitButton(google_label, variant="google", loading_label="Redirecting...").render()}
        </form>"""

        return f"""
        <section class="auth-card" data-mode="{'signup' if self.signup_mode else 'login'}">
            <h1 id="authTitle">{self.escape(title)}</h1>
            <p id="authSubtitle">{self.escape(subtitle)}</p>
            {self.banner_html}
            <form method="post" action="{'/auth/signup' if self.signup_mode else '/auth/login'}" id="authForm" novalidate>
                {hidden}
                {email_field}
                {password_field}
                {forgot_html}
                <div class="form-actions">{submit.render()}</div>
            </form>
            {google_html}
            <p class="toggle-mode" id="toggleText">{toggle}</p>
        </section>
        """
