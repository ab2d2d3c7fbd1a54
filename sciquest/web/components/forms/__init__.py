"""
Form components for the auth, wizard and profile pages.
"""

from .fields import FormField, TextInputField, SelectField, HiddenField
from .submit import SubmitButton
from .auth_form import AuthForm
from .forgot_password_form import ForgotPasswordForm
from .student_signup import StudentSignupWizard
from .profile_form import ProfileForm

__all__ = [
    "FormField",
    "TextInputField",
    "SelectField",
    "HiddenField",
    "SubmitButton",
    "AuthForm",
    "ForgotPasswordForm",
    "StudentSignupWizard",
    "ProfileForm",
]
