import logging

from django.conf import settings
from django.contrib import messages
from django.contrib.auth.mixins import LoginRequiredMixin
from django.db import DatabaseError, IntegrityError
from django.db.models import F, OuterRef, Q, Subquery
from django.shortcuts import get_object_or_404, redirect, render
from django.views import View
from django.views.generic import DetailView, ListView

from accounts.mixins import AdminRequiredMixin, PortalRequiredMixin, SecretaryRequiredMixin
from accounts.models import Division
from accounts.session import get_session
from routing.forms import BulkReturnForm, DocumentActionForm
from .forms import DocumentEditForm, DocumentIntakeForm
from .models import Document, TrackingEntry
from .services import register_document, update_document_details
from .utils import next_reference_number

logger = logging.getLogger(__name__)

Status = Document.Status


def search_documents(queryset, search):
    """Case-insensitive match over the columns shown in the lists."""
    search = (search or '').strip()
    if not search:
        return queryset
    return queryset.filter(
        Q(reference_number__icontains=search) |
        Q(subject__icontains=search) |
        Q(forwarded_by__icontains=search) |
        Q(forwarded_to__icontains=search) |
        Q(remarks__icontains=search)
    )


class DocumentListView(LoginRequiredMixin, ListView):
    """
    Base for every portal list. Subclasses narrow the queryset with
    `statuses`, `holders` and `exclude_holders`, or override `filter_queryset`.
    """
    model = Document
    template_name = 'documents/document_list.html'
    context_object_name = 'documents'
    title = ''
    statuses = ()
    holders = ()
    exclude_holders = ()
    show_bulk_return = False

    def get_paginate_by(self, queryset):
        return getattr(settings, 'AWD_PAGE_SIZE', 10)

    def filter_queryset(self, queryset):
        if self.statuses:
            queryset = queryset.filter(status__in=self.statuses)
        if self.holders:
            queryset = queryset.filter(forwarded_to__in=self.holders)
        if self.exclude_holders:
            queryset = queryset.exclude(forwarded_to__in=self.exclude_holders)
        return queryset

    def get_queryset(self):
        qs = Document.objects.exclude(status=Status.DELETED)
        qs = self.filter_queryset(qs)
        qs = search_documents(qs, self.request.GET.get('search'))
        return qs.order_by(F('reference_sequence').desc(nulls_last=True), '-reference_number')

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context['title'] = self.title
        context['search_query'] = self.request.GET.get('search', '')
        context['action_form'] = DocumentActionForm()
        context['inspector_names'] = DocumentActionForm.inspector_names()
        if self.show_bulk_return:
            context['bulk_form'] = BulkReturnForm()
        return context


# Admin portal

class AdminPendingView(AdminRequiredMixin, DocumentListView):
    title = "Pending"
    statuses = (Status.OPEN,)
    holders = (Division.ADMIN,)


class AdminOngoingView(AdminRequiredMixin, DocumentListView):
    title = "Ongoing"
    statuses = (Status.OPEN, Status.RETURNED)
    exclude_holders = (Division.ADMIN,)


class AdminSentView(AdminRequiredMixin, DocumentListView):
    title = "Sent"

    def filter_queryset(self, queryset):
        first_forwarded_by = TrackingEntry.objects.filter(
            document=OuterRef('pk')
        ).order_by('action_timestamp', 'id').values('forwarded_by')[:1]
        return queryset.annotate(
            first_forwarded_by=Subquery(first_forwarded_by)
        ).filter(first_forwarded_by__endswith=f"({Division.ADMIN})")


class AdminHoldView(AdminRequiredMixin, DocumentListView):
    title = "On Hold"
    statuses = (Status.ON_HOLD,)


class AdminClosedView(AdminRequiredMixin, DocumentListView):
    title = "Closed"
    statuses = (Status.CLOSED,)
    show_bulk_return = True


class AdminReturnedView(AdminRequiredMixin, DocumentListView):
    title = "Returned"
    statuses = (Status.RETURNED,)


# Secretary portal

class SecretaryPendingView(SecretaryRequiredMixin, DocumentListView):
    title = "Pending"
    statuses = (Status.OPEN,)
    holders = (Division.SECRETARY,)


class SecretaryDivisionView(SecretaryRequiredMixin, DocumentListView):
    title = "With Divisions"
    statuses = (Status.OPEN,)
    holders = Division.routing_divisions()


class SecretaryOngoingView(SecretaryRequiredMixin, DocumentListView):
    title = "Ongoing"
    statuses = (Status.OPEN, Status.RETURNED)
    exclude_holders = (Division.SECRETARY,)


class SecretaryHoldView(SecretaryRequiredMixin, DocumentListView):
    title = "On Hold"
    statuses = (Status.ON_HOLD,)


class SecretarySentView(SecretaryRequiredMixin, DocumentListView):
    title = "Sent"

    def filter_queryset(self, queryset):
        return queryset.filter(
            tracking_entries__forwarded_by__endswith=f"({Division.SECRETARY})"
        ).distinct()


class DocumentIntakeView(LoginRequiredMixin, AdminRequiredMixin, View):
    template_name = 'documents/document_form.html'

    def get(self, request):
        form = DocumentIntakeForm(initial={
            'reference_number': next_reference_number(),
            'working_days': 3,
        })
        return render(request, self.template_name, {'form': form, 'title': "Assign Tracking Number"})

    def post(self, request):
        form = DocumentIntakeForm(request.POST)
        if form.is_valid():
            document = form.save(commit=False)
            try:
                register_document(document, get_session(request), by_user=request.user)
            except IntegrityError:
                logger.warning("Reference %s was taken during intake", document.reference_number)
                form.add_error('reference_number', "This reference number was just taken. Please use the next one.")
                form.data = form.data.copy()
                form.data['reference_number'] = next_reference_number()
            else:
                messages.success(request, f"Tracking number {document.reference_number} assigned.")
                return redirect('documents:intake')

        return render(request, self.template_name, {'form': form, 'title': "Assign Tracking Number"})


class DocumentEditView(LoginRequiredMixin, AdminRequiredMixin, View):
    template_name = 'documents/document_form.html'

    def get(self, request, reference_number):
        document = get_object_or_404(Document, reference_number=reference_number)
        form = DocumentEditForm(instance=document)
        return render(request, self.template_name, {
            'form': form, 'document': document, 'title': f"Edit {document.reference_number}"
        })

    def post(self, request, reference_number):
        document = get_object_or_404(Document, reference_number=reference_number)
        form = DocumentEditForm(request.POST, instance=document)
        if form.is_valid():
            try:
                update_document_details(form.save(commit=False), get_session(request))
            except DatabaseError:
                logger.exception("Could not save edits to %s", reference_number)
                messages.error(request, "Could not save your changes. Please try again.")
            else:
                messages.success(request, f"{reference_number} updated.")
                return redirect('documents:detail', reference_number=reference_number)

        return render(request, self.template_name, {
            'form': form, 'document': document, 'title': f"Edit {document.reference_number}"
        })


class DocumentDetailView(LoginRequiredMixin, PortalRequiredMixin, DetailView):
    """Subject information: the document and its full audit trail."""
    model = Document
    template_name = 'documents/document_detail.html'
    context_object_name = 'document'
    slug_field = 'reference_number'
    slug_url_kwarg = 'reference_number'

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context['entries'] = self.object.audit_trail
        context['return_records'] = self.object.return_records.order_by('-recorded_at')
        context['action_form'] = DocumentActionForm()
        context['inspector_names'] = DocumentActionForm.inspector_names()
        return context
