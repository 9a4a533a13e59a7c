import logging

from django.contrib import messages
from django.contrib.auth.mixins import LoginRequiredMixin
from django.contrib.auth.views import LoginView
from django.db.models import Q
from django.shortcuts import redirect
from django.urls import reverse_lazy
from django.views.generic import CreateView, DeleteView, ListView, UpdateView

from .forms import AccountForm, EmailAuthenticationForm
from .mixins import AdminRequiredMixin
from .models import User

logger = logging.getLogger(__name__)


class PortalLoginView(LoginView):
    authentication_form = EmailAuthenticationForm
    redirect_authenticated_user = True
    template_name = 'accounts/login.html'


class AccountListView(LoginRequiredMixin, AdminRequiredMixin, ListView):
    model = User
    template_name = 'accounts/account_list.html'
    context_object_name = 'accounts'
    paginate_by = 10

    def get_queryset(self):
        queryset = super().get_queryset()
        query = self.request.GET.get('q')
        if query:
            queryset = queryset.filter(
                Q(name__icontains=query) |
                Q(email__icontains=query) |
                Q(division__icontains=query)
            )
        return queryset

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context['search_query'] = self.request.GET.get('q', '')
        return context


class AccountCreateView(LoginRequiredMixin, AdminRequiredMixin, CreateView):
    model = User
    form_class = AccountForm
    template_name = 'accounts/account_form.html'
    success_url = reverse_lazy('account_list')

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context['title'] = 'Create Account'
        return context

    def form_valid(self, form):
        response = super().form_valid(form)
        logger.info("Account %s (%s) created by %s", self.object.email, self.object.division, self.request.user.email)
        messages.success(self.request, f"Account created for {self.object.email}.")
        return response


class AccountUpdateView(LoginRequiredMixin, AdminRequiredMixin, UpdateView):
    model = User
    form_class = AccountForm
    template_name = 'accounts/account_form.html'
    success_url = reverse_lazy('account_list')

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context['title'] = 'Edit Account'
        return context

    def form_valid(self, form):
        response = super().form_valid(form)
        logger.info("Account %s updated by %s", self.object.email, self.request.user.email)
        messages.success(self.request, f"Account {self.object.email} updated.")
        return response


class AccountDeleteView(LoginRequiredMixin, AdminRequiredMixin, DeleteView):
    model = User
    template_name = 'accounts/account_confirm_delete.html'
    context_object_name = 'account'
    success_url = reverse_lazy('account_list')

    def form_valid(self, form):
        if self.object.pk == self.request.user.pk:
            messages.error(self.request, "You cannot delete your own account.")
            return redirect('account_list')
        email = self.object.email
        response = super().form_valid(form)
        logger.warning("Account %s deleted by %s", email, self.request.user.email)
        messages.success(self.request, f"Account {email} deleted.")
        return response
