import csv
import datetime

from django.contrib.auth.mixins import LoginRequiredMixin
from django.db.models import Count, Q
from django.http import HttpResponse
from django.utils import timezone
from django.views.generic import ListView, TemplateView

from accounts.mixins import AdminRequiredMixin, SecretaryRequiredMixin
from accounts.models import Division
from documents.models import Document, MandayRecord, ReturnRecord
from routing.deadlines import InvalidDate, deadline_status, parse_date
from . import analytics


def _day_bounds(day):
    start = timezone.make_aware(datetime.datetime.combine(day, datetime.time.min))
    end = timezone.make_aware(datetime.datetime.combine(day, datetime.time.max))
    return start, end


def _inspector_names():
    return list(
        MandayRecord.objects.order_by('inspector_name').values_list('inspector_name', flat=True).distinct()
    )


def _comparisons(records, today):
    return {window: analytics.period_totals(records, window, today) for window in analytics.WINDOWS}


class AdminDashboardView(LoginRequiredMixin, AdminRequiredMixin, TemplateView):
    template_name = 'mis/admin_dashboard.html'

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        today = timezone.localdate()

        division = self.request.GET.get('division', '')
        records = MandayRecord.objects.all()
        if division:
            records = records.filter(division=division)
        records = list(records)

        context['division_filter'] = division
        context['division_choices'] = Division.routing_divisions()
        context['annual'] = analytics.annual_comparison(records, today.year)
        context['comparisons'] = _comparisons(records, today)
        context['weekly'] = analytics.weekly_document_status(
            Document.objects.exclude(status=Document.Status.DELETED).only('status', 'start_date', 'end_date'),
            today,
        )
        context['submitted_today'] = Document.objects.filter(start_date__range=_day_bounds(today)).count()
        context['closed_today'] = Document.objects.filter(
            status=Document.Status.CLOSED, end_date=today
        ).count()
        context['return_counts'] = ReturnRecord.objects.aggregate(
            to_inspector=Count('id', filter=Q(kind=ReturnRecord.Kind.RETURN_TO_INSPECTOR)),
            to_awd=Count('id', filter=Q(kind=ReturnRecord.Kind.RETURN_TO_AWD)),
        )
        return context


class SecretaryDashboardView(LoginRequiredMixin, SecretaryRequiredMixin, TemplateView):
    template_name = 'mis/secretary_dashboard.html'

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        today = timezone.localdate()

        inspector = self.request.GET.get('inspector', '')
        records = MandayRecord.objects.all()
        if inspector:
            records = records.filter(inspector_name=inspector)
        records = list(records)

        context['inspector_filter'] = inspector
        context['inspectors'] = _inspector_names()
        context['comparisons'] = _comparisons(records, today)
        context['annual'] = analytics.annual_comparison(records, today.year)
        context['status_counts'] = Document.objects.aggregate(
            open=Count('id', filter=Q(status=Document.Status.OPEN)),
            closed=Count('id', filter=Q(status=Document.Status.CLOSED)),
        )
        return context


class BaseReportView(LoginRequiredMixin, AdminRequiredMixin, ListView):
    """
    Base view for reports with date filtering and CSV export.
    """
    paginate_by = 50
    report_title = ''
    export_headers = []

    def get_filter_dates(self):
        dates = []
        for name in ('from_date', 'to_date'):
            try:
                dates.append(parse_date(self.request.GET.get(name)))
            except InvalidDate:
                dates.append(None)
        return tuple(dates)

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        from_date, to_date = self.get_filter_dates()
        context['from_date'] = from_date.strftime('%Y-%m-%d') if from_date else ''
        context['to_date'] = to_date.strftime('%Y-%m-%d') if to_date else ''
        context['search_query'] = self.request.GET.get('search', '')
        context['status_filter'] = self.request.GET.get('status', '')
        context['report_title'] = self.report_title
        return context

    def render_to_response(self, context, **response_kwargs):
        if 'export' in self.request.GET:
            return self.export_csv(self.get_queryset())
        return super().render_to_response(context, **response_kwargs)

    def export_csv(self, queryset):
        response = HttpResponse(content_type='text/csv')
        filename = self.report_title.replace(' ', '_')
        response['Content-Disposition'] = f'attachment; filename="{filename}_{timezone.localdate()}.csv"'

        writer = csv.writer(response)
        writer.writerow(self.export_headers)
        for item in queryset:
            writer.writerow(self.get_export_row(item))
        return response

    def get_export_row(self, item):
        raise NotImplementedError


class MandayAnalyticsView(BaseReportView):
    model = MandayRecord
    template_name = 'mis/mandays.html'
    context_object_name = 'records'
    report_title = "Mandays Efficiency"
    export_headers = ['Reference Number', 'Inspector', 'Division', 'Original Days', 'Actual Days',
                      'Efficiency %', 'Status', 'Date Recorded']

    def get_period(self):
        period = self.request.GET.get('period', 'month')
        return period if period in analytics.PERIODS else 'month'

    def get_queryset(self):
        qs = MandayRecord.objects.all().order_by('-date_recorded')

        inspector = self.request.GET.get('inspector')
        if inspector:
            qs = qs.filter(inspector_name=inspector)

        from_date, to_date = self.get_filter_dates()
        if from_date:
            qs = qs.filter(date_recorded__gte=_day_bounds(from_date)[0])
        if to_date:
            qs = qs.filter(date_recorded__lte=_day_bounds(to_date)[1])

        search = self.request.GET.get('search')
        if search:
            qs = qs.filter(Q(reference_number__icontains=search) | Q(inspector_name__icontains=search))
        return qs

    def get_export_row(self, record):
        return [
            record.reference_number,
            record.inspector_name,
            record.division,
            record.original_working_days,
            record.actual_working_days,
            analytics.calculate_efficiency(record.original_working_days, record.actual_working_days),
            analytics.efficiency_status(record.original_working_days, record.actual_working_days),
            timezone.localtime(record.date_recorded).strftime('%Y-%m-%d %H:%M'),
        ]

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        records = list(self.get_queryset())
        period = self.get_period()

        context['period'] = period
        context['periods'] = analytics.PERIODS
        context['inspector_filter'] = self.request.GET.get('inspector', '')
        context['inspectors'] = _inspector_names()
        context['totals'] = analytics.summarize(records)
        context['grouped'] = analytics.group_by_period(records, period)
        context['rows'] = [
            (record,
             analytics.calculate_efficiency(record.original_working_days, record.actual_working_days),
             analytics.efficiency_status(record.original_working_days, record.actual_working_days))
            for record in context['records']
        ]
        return context


class DocumentReportView(BaseReportView):
    model = Document
    template_name = 'mis/document_report.html'
    context_object_name = 'documents'
    report_title = "Document Report"
    export_headers = ['Reference Number', 'Subject', 'Originating Office', 'Status', 'Forwarded To',
                      'Working Days', 'Deadline']

    def get_queryset(self):
        qs = Document.objects.all()

        from_date, to_date = self.get_filter_dates()
        if from_date:
            qs = qs.filter(start_date__gte=_day_bounds(from_date)[0])
        if to_date:
            qs = qs.filter(start_date__lte=_day_bounds(to_date)[1])

        search = self.request.GET.get('search')
        if search:
            qs = qs.filter(
                Q(reference_number__icontains=search) |
                Q(subject__icontains=search) |
                Q(originating_office__icontains=search)
            )

        status = self.request.GET.get('status')
        if status:
            qs = qs.filter(status=status)
        return qs

    def get_export_row(self, document):
        badge = deadline_status(document.start_date, document.working_days, end_date=document.end_date)
        return [
            document.reference_number,
            document.subject,
            document.originating_office,
            document.status,
            document.forwarded_to,
            document.working_days,
            badge.label,
        ]

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context['status_choices'] = Document.Status.choices
        return context
