from django import forms
from django.contrib.auth.forms import AuthenticationForm
from django.core.exceptions import ValidationError

from .models import Division, User

INVALID_LOGIN = "Invalid email, password, or user division"


class EmailAuthenticationForm(AuthenticationForm):
    username = forms.EmailField(
        label="Email",
        widget=forms.EmailInput(attrs={'class': 'form-control', 'autofocus': True, 'autocomplete': 'email'})
    )
    password = forms.CharField(
        strip=False,
        widget=forms.PasswordInput(attrs={'class': 'form-control', 'autocomplete': 'current-password'})
    )
    division = forms.ChoiceField(
        label="User Division",
        choices=[(d.value, d.label) for d in Division.portal_divisions()],
        widget=forms.Select(attrs={'class': 'form-select'})
    )

    error_messages = {
        'invalid_login': INVALID_LOGIN,
        'inactive': INVALID_LOGIN,
    }

    def confirm_login_allowed(self, user):
        super().confirm_login_allowed(user)
        if not user.can_use_portal or user.division != self.cleaned_data.get('division'):
            raise ValidationError(INVALID_LOGIN, code='invalid_login')


class AccountForm(forms.ModelForm):
    password = forms.CharField(
        strip=False,
        widget=forms.PasswordInput(attrs={'class': 'form-control', 'autocomplete': 'new-password'})
    )

    class Meta:
        model = User
        fields = ('name', 'email', 'division', 'is_active')
        widgets = {
            'name': forms.TextInput(attrs={'class': 'form-control'}),
            'email': forms.EmailInput(attrs={'class': 'form-control'}),
            'division': forms.Select(attrs={'class': 'form-select'}),
            'is_active': forms.CheckboxInput(attrs={'class': 'form-check-input'}),
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        if self.instance.pk:
            self.fields['password'].required = False
            self.fields['password'].help_text = "Leave blank to keep the current password."

    def clean_email(self):
        email = self.cleaned_data['email'].strip().lower()
        clash = User.objects.filter(email__iexact=email).exclude(pk=self.instance.pk)
        if clash.exists():
            raise ValidationError("An account with this email already exists.")
        return email

    def save(self, commit=True):
        user = super().save(commit=False)
        user.username = user.email
        if self.cleaned_data.get('password'):
            user.set_password(self.cleaned_data['password'])
        if commit:
            user.save()
        return user
