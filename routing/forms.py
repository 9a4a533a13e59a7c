from django import forms

from accounts.models import Division
from documents.models import Document, Inspector
from documents.utils import reference_sort_key
from .transitions import Action

DIVISION_CHOICES = [('', '---------')] + [(d.value, f"{d.label} Admin") for d in Division.routing_divisions()]
DESTINATION_CHOICES = DIVISION_CHOICES + [(Division.SECRETARY.value, Division.SECRETARY.label)]
# The Secretary can also send a document back to intake for closing.
FORWARD_CHOICES = DIVISION_CHOICES + [(Division.ADMIN.value, Division.ADMIN.label)]

# Form fields each action passes on to its transition function.
ACTION_PARAMS = {
    Action.ASSIGN_AND_CLOSE: ('inspector', 'remarks'),
    Action.HOLD: ('inspector', 'remarks'),
    Action.DELETE: ('remarks',),
    Action.FORWARD_TO_DIVISION: ('division', 'forwarded_to_name', 'remarks'),
    Action.RETURN_TO_INTAKE: ('remarks',),
    Action.ENDORSE_TO_SECRETARY: ('remarks',),
    Action.MARK_RECEIVED: ('received_by', 'remarks'),
    Action.RETURN_CLOSED: ('destination', 'forwarded_to_name', 'remarks'),
    Action.RELEASE_HOLD: ('remarks',),
    Action.REFORWARD: ('destination', 'forwarded_to_name', 'remarks'),
}


class DocumentActionForm(forms.Form):
    inspector = forms.CharField(required=False, max_length=150,
                                widget=forms.TextInput(attrs={'class': 'form-control', 'list': 'inspector-names'}))
    division = forms.ChoiceField(choices=FORWARD_CHOICES, required=False,
                                 widget=forms.Select(attrs={'class': 'form-select'}))
    destination = forms.ChoiceField(choices=DESTINATION_CHOICES, required=False,
                                    widget=forms.Select(attrs={'class': 'form-select'}))
    forwarded_to_name = forms.CharField(required=False, max_length=150,
                                        widget=forms.TextInput(attrs={'class': 'form-control'}))
    received_by = forms.CharField(required=False, max_length=150,
                                  widget=forms.TextInput(attrs={'class': 'form-control'}))
    remarks = forms.CharField(required=False, widget=forms.Textarea(attrs={'rows': 3, 'class': 'form-control'}))

    def params_for(self, action):
        return {name: self.cleaned_data.get(name, '') for name in ACTION_PARAMS[Action(action)]}

    @staticmethod
    def inspector_names():
        return list(Inspector.objects.filter(is_active=True).values_list('name', flat=True))


class BulkReturnForm(forms.Form):
    destination = forms.ChoiceField(choices=DESTINATION_CHOICES,
                                    widget=forms.Select(attrs={'class': 'form-select'}))
    remarks = forms.CharField(widget=forms.Textarea(attrs={'rows': 3, 'class': 'form-control'}))

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields['references'] = forms.MultipleChoiceField(choices=self._reference_choices())

    def _reference_choices(self):
        closed = Document.objects.filter(status=Document.Status.CLOSED).values_list('reference_number', flat=True)
        return [(ref, ref) for ref in sorted(closed, key=reference_sort_key, reverse=True)]


class PurgeForm(forms.Form):
    references = forms.CharField(
        widget=forms.Textarea(attrs={'rows': 3, 'class': 'form-control'}),
        help_text="One AWD reference number per line."
    )
    confirm = forms.BooleanField(required=True, label="I understand this permanently removes the records")

    def clean_references(self):
        refs = [line.strip() for line in self.cleaned_data['references'].splitlines() if line.strip()]
        if not refs:
            raise forms.ValidationError("Enter at least one reference number.")
        return refs
