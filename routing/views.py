import logging

from django.contrib import messages
from django.contrib.auth.mixins import LoginRequiredMixin
from django.core.exceptions import ValidationError
from django.db import DatabaseError
from django.shortcuts import get_object_or_404, redirect, render
from django.utils.http import url_has_allowed_host_and_scheme
from django.views import View

from accounts.mixins import AdminRequiredMixin
from accounts.session import get_session
from documents.models import Document
from .forms import BulkReturnForm, DocumentActionForm, PurgeForm
from .services import bulk_return_closed, perform_action, purge_documents
from .transitions import PERFORMERS, Action

logger = logging.getLogger(__name__)


def _back(request, fallback='dashboard'):
    target = request.POST.get('next') or request.META.get('HTTP_REFERER')
    if target and url_has_allowed_host_and_scheme(target, allowed_hosts={request.get_host()}):
        return redirect(target)
    return redirect(fallback)


def _error_text(exc):
    return '; '.join(exc.messages) if hasattr(exc, 'messages') else str(exc)


class DocumentActionView(LoginRequiredMixin, View):
    """
    Runs one routing action on a document. The action comes from the URL;
    whether it is allowed depends on the document's state and the user's role.
    """
    def post(self, request, reference_number, action):
        document = get_object_or_404(Document, reference_number=reference_number)
        try:
            action = Action(action)
        except ValueError:
            messages.error(request, "Unknown action.")
            return _back(request)

        session = get_session(request)
        if session.role not in PERFORMERS[action]:
            messages.error(request, "You do not have permission to perform this action.")
            return _back(request)

        form = DocumentActionForm(request.POST)
        if not form.is_valid():
            messages.error(request, f"Action failed: {form.errors.as_text()}")
            return _back(request)

        try:
            perform_action(document, action, session, **form.params_for(action))
        except ValidationError as exc:
            messages.error(request, _error_text(exc))
        except DatabaseError:
            logger.exception("Could not %s %s", action.value, reference_number)
            messages.error(request, f"Could not {action.label.lower()} {reference_number}. Please try again.")
        else:
            messages.success(request, f"{action.label}: {reference_number}")

        return _back(request)


class BulkReturnView(LoginRequiredMixin, AdminRequiredMixin, View):
    def post(self, request):
        form = BulkReturnForm(request.POST)
        if not form.is_valid():
            messages.error(request, "Select closed documents, a destination and remarks.")
            return _back(request, 'documents:admin_closed')

        documents = Document.objects.filter(reference_number__in=form.cleaned_data['references'])
        result = bulk_return_closed(
            documents, get_session(request),
            form.cleaned_data['destination'], form.cleaned_data['remarks'],
        )
        if result.failed:
            messages.error(request, "Some documents could not be returned. Please review the closed list.")
        else:
            messages.success(request, f"Returned {len(result.succeeded)} document(s).")
        return _back(request, 'documents:admin_closed')


class PurgeDocumentsView(LoginRequiredMixin, AdminRequiredMixin, View):
    template_name = 'routing/purge.html'

    def get(self, request):
        return render(request, self.template_name, {'form': PurgeForm()})

    def post(self, request):
        form = PurgeForm(request.POST)
        if not form.is_valid():
            return render(request, self.template_name, {'form': form})

        try:
            deleted = purge_documents(form.cleaned_data['references'], get_session(request))
        except DatabaseError:
            logger.exception("Purge failed")
            messages.error(request, "Purge failed. No records were removed.")
            return render(request, self.template_name, {'form': form})

        messages.success(request, f"Permanently removed {deleted} document(s).")
        return redirect('documents:admin_ongoing')
