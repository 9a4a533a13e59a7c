from django import forms
from django.conf import settings

from accounts.models import Division
from .models import Document


def working_day_choices():
    return [(days, f"{days} Days") for days in getattr(settings, 'AWD_WORKING_DAY_CHOICES', (3, 7, 20))]


def intake_destination_choices():
    choices = [(d.value, f"{d.label} Admin") for d in Division.routing_divisions()]
    choices.append((Division.SECRETARY.value, Division.SECRETARY.label))
    return choices


class DocumentIntakeForm(forms.ModelForm):
    working_days = forms.TypedChoiceField(coerce=int, choices=working_day_choices,
                                          widget=forms.Select(attrs={'class': 'form-select'}))
    forwarded_to = forms.ChoiceField(choices=intake_destination_choices,
                                     widget=forms.Select(attrs={'class': 'form-select'}))

    class Meta:
        model = Document
        fields = ['reference_number', 'originating_office', 'subject', 'date_of_document',
                  'fsis_reference_number', 'awd_received_date', 'forwarded_to', 'forwarded_to_name',
                  'remarks', 'working_days']
        widgets = {
            'reference_number': forms.TextInput(attrs={'class': 'form-control'}),
            'originating_office': forms.TextInput(attrs={'class': 'form-control'}),
            'subject': forms.TextInput(attrs={'class': 'form-control'}),
            'date_of_document': forms.DateInput(attrs={'class': 'form-control', 'type': 'date'}),
            'fsis_reference_number': forms.TextInput(attrs={'class': 'form-control'}),
            'awd_received_date': forms.DateInput(attrs={'class': 'form-control', 'type': 'date'}),
            'forwarded_to_name': forms.TextInput(attrs={'class': 'form-control'}),
            'remarks': forms.Textarea(attrs={'class': 'form-control', 'rows': 3}),
        }
        labels = {
            'reference_number': 'AWD Reference Number',
            'fsis_reference_number': 'FSIS Reference Number',
            'awd_received_date': 'AWD Received Date',
            'forwarded_to_name': 'Forwarded To (Name)',
        }
        help_texts = {
            'reference_number': 'Assigned automatically. Edit only to correct it.',
        }

    def clean_reference_number(self):
        return self.cleaned_data['reference_number'].strip().upper()


class DocumentEditForm(forms.ModelForm):
    working_days = forms.TypedChoiceField(coerce=int, choices=working_day_choices,
                                          widget=forms.Select(attrs={'class': 'form-select'}))

    class Meta:
        model = Document
        fields = ['originating_office', 'subject', 'date_of_document', 'fsis_reference_number',
                  'awd_received_date', 'forwarded_to_name', 'remarks', 'working_days']
        widgets = {
            'originating_office': forms.TextInput(attrs={'class': 'form-control'}),
            'subject': forms.TextInput(attrs={'class': 'form-control'}),
            'date_of_document': forms.DateInput(attrs={'class': 'form-control', 'type': 'date'}),
            'fsis_reference_number': forms.TextInput(attrs={'class': 'form-control'}),
            'awd_received_date': forms.DateInput(attrs={'class': 'form-control', 'type': 'date'}),
            'forwarded_to_name': forms.TextInput(attrs={'class': 'form-control'}),
            'remarks': forms.Textarea(attrs={'class': 'form-control', 'rows': 3}),
        }

    def clean_subject(self):
        return self.cleaned_data['subject'].upper()

    def clean_originating_office(self):
        return self.cleaned_data['originating_office'].upper()
