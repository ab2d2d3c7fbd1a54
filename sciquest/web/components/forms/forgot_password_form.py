"""
Forgot-password form.
"""

from ..base import Component
from .fields import HiddenField, TextInputField
from .submit import SubmitButton


class ForgotPasswordForm(Component):
    def __init__(self, *, csrf_token: str, email: str = "", banner_html: str = ""):
        self.csrf_token = csrf_token
        self.email = email
        self.banner_html = banner_html

    def render(self) -> str:
        email_field = TextInputField("email", "Email", required=True).render(
            value=self.email, input_type="email", autocomplete="email"
        )
        return f"""
        <section class="auth-card">
            <h1>Reset Password</h1>
            <p>Enter your email and we will send you a link to reset your password.</p>
            {self.banner_html}
            <form method="post" action="/auth/forgot" id="forgotPasswordForm" novalidate>
                {HiddenField("csrf_token", self.csrf_token).render()}
                {email_field}
                <div class="form-actions">{SubmitButton("Send Reset Link", loading_label="Sending...").render()}</div>
            </form>
            <p class="toggle-mode"><a href="/auth">Back to login</a></p>
        </section>
        """
