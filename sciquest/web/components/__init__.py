# SciQuest Component System
# Pure Python components for escaped HTML generation

from .base import Component
from .layout import Layout
from .banner import Banner, RefreshMeta, banner_for
from .forms import (
    FormField,
    TextInputField,
    SelectField,
    HiddenField,
    SubmitButton,
    AuthForm,
    ForgotPasswordForm,
    StudentSignupWizard,
    ProfileForm,
)

__all__ = [
    "Component",
    "Layout",
    "Banner",
    "RefreshMeta",
    "banner_for",
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
