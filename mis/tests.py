import csv
import datetime
from collections import namedtuple

from django.contrib.auth import get_user_model
from django.test import Client, SimpleTestCase, TestCase
from django.urls import reverse
from django.utils import timezone

from accounts.models import Division
from accounts.session import AuthenticatedSession
from documents.models import Document, MandayRecord
from documents.services import register_document
from routing.services import assign_inspector_and_close, endorse_to_secretary, forward_to_division, return_closed
from . import analytics

User = get_user_model()

Record = namedtuple('Record', ['original_working_days', 'actual_working_days', 'date_recorded'])
Doc = namedtuple('Doc', ['status', 'start_date', 'end_date'])

TODAY = datetime.date(2024, 5, 15)


class EfficiencyTests(SimpleTestCase):
    def test_calculate_efficiency(self):
        self.assertEqual(analytics.calculate_efficiency(3, 6), 50)
        self.assertEqual(analytics.calculate_efficiency(7, 7), 100)
        self.assertEqual(analytics.calculate_efficiency(7, 2), 100)
        self.assertEqual(analytics.calculate_efficiency(0, 5), 0)
        self.assertEqual(analytics.calculate_efficiency(5, 0), 0)

    def test_efficiency_status(self):
        self.assertEqual(analytics.efficiency_status(7, 3), analytics.AHEAD_OF_TIME)
        self.assertEqual(analytics.efficiency_status(3, 3), analytics.ON_SCHEDULE)
        self.assertEqual(analytics.efficiency_status(3, 5), analytics.OFF_TRACK)


class AggregationTests(SimpleTestCase):
    def setUp(self):
        self.records = [
            Record(3, 2, datetime.date(2024, 1, 10)),
            Record(7, 9, datetime.date(2024, 1, 22)),
            Record(20, 18, datetime.date(2024, 5, 14)),
            Record(3, 3, datetime.date(2024, 5, 15)),
            Record(3, 4, '2023-12-30'),
        ]

    def test_summarize(self):
        totals = analytics.summarize(self.records[:2])
        self.assertEqual((totals['original'], totals['actual'], totals['count']), (10, 11, 2))
        self.assertEqual(totals['efficiency'], 91)
        self.assertEqual(analytics.summarize([])['status'], '')

    def test_group_by_month_is_chronological(self):
        rows = analytics.group_by_period(self.records, 'month')
        self.assertEqual([row['period'] for row in rows], ['December 2023', 'January 2024', 'May 2024'])
        self.assertEqual(rows[1]['original'], 10)
        self.assertEqual(rows[1]['count'], 2)

    def test_group_by_quarter_and_year(self):
        quarters = analytics.group_by_period(self.records, 'quarter')
        self.assertEqual([row['period'] for row in quarters], ['Q4 2023', 'Q1 2024', 'Q2 2024'])
        years = analytics.group_by_period(self.records, 'year')
        self.assertEqual([row['count'] for row in years], [1, 4])

    def test_group_by_iso_week(self):
        rows = analytics.group_by_period(self.records, 'week')
        self.assertEqual(rows[-1]['period'], 'Week 20, 2024')
        self.assertEqual(rows[-1]['count'], 2)

    def test_unknown_period(self):
        with self.assertRaises(ValueError):
            analytics.group_by_period(self.records, 'decade')

    def test_period_totals(self):
        self.assertEqual(analytics.period_totals(self.records, 'day', TODAY)['original'], 3)
        self.assertEqual(analytics.period_totals(self.records, 'week', TODAY)['original'], 23)
        self.assertEqual(analytics.period_totals(self.records, 'month', TODAY)['count'], 2)

    def test_future_dates_fall_outside_windows(self):
        records = self.records + [
            Record(7, 7, datetime.date(2024, 5, 20)),
            Record(7, 7, datetime.date(2030, 1, 1)),
        ]
        self.assertEqual(analytics.period_totals(records, 'week', TODAY)['original'], 23)
        self.assertEqual(analytics.period_totals(records, 'month', TODAY)['count'], 2)
        future = [Doc('Open', datetime.date(2030, 1, 1), None)]
        self.assertEqual(analytics.weekly_document_status(future, TODAY), {'ongoing': 0, 'closed': 0})

    def test_annual_comparison(self):
        rows = analytics.annual_comparison(self.records, 2024)
        self.assertEqual(len(rows), 12)
        self.assertEqual(rows[0], {'name': 'Jan', 'planned': 10, 'actual': 11, 'efficiency': 91})
        self.assertEqual(rows[4]['planned'], 23)
        self.assertEqual(rows[11]['planned'], 0)

    def test_weekly_document_status(self):
        documents = [
            Doc('Open', datetime.date(2024, 5, 13), None),
            Doc('Returned', datetime.date(2024, 5, 1), None),
            Doc('Closed', datetime.date(2024, 4, 1), datetime.date(2024, 5, 14)),
            Doc('Closed', datetime.date(2024, 4, 1), datetime.date(2024, 4, 20)),
            Doc('Open', 'garbage', None),
        ]
        self.assertEqual(analytics.weekly_document_status(documents, TODAY), {'ongoing': 1, 'closed': 1})


class DashboardViewTests(TestCase):
    def setUp(self):
        self.client = Client()
        self.admin = User.objects.create_user(
            username='admin@awd.test', email='admin@awd.test', password='password',
            name='Intake Clerk', division=Division.ADMIN,
        )
        self.secretary = User.objects.create_user(
            username='sec@awd.test', email='sec@awd.test', password='password',
            name='Office Secretary', division=Division.SECRETARY,
        )
        self.admin_session = AuthenticatedSession.for_user(self.admin)
        self.secretary_session = AuthenticatedSession.for_user(self.secretary)

    def close_via(self, reference, division, inspector='J. Cruz'):
        document = register_document(Document(
            reference_number=reference, subject='Audit', originating_office='Office',
            forwarded_to=division, working_days=3,
        ), self.admin_session)
        endorse_to_secretary(document, self.secretary_session)
        forward_to_division(document, self.secretary_session, Division.ADMIN)
        assign_inspector_and_close(document, self.admin_session, inspector)
        return document

    def test_return_removes_division_from_aggregates(self):
        self.close_via('AWD-2024-0001', Division.CATCID)
        reopened = self.close_via('AWD-2024-0002', Division.CATCID)
        self.client.force_login(self.admin)
        year = timezone.localdate().year

        def planned():
            response = self.client.get(reverse('mis:admin_dashboard'), {'division': Division.CATCID})
            return sum(row['planned'] for row in response.context['annual'])

        before = planned()
        return_closed(reopened, self.admin_session, Division.CATCID, 'Incomplete')
        after = planned()

        self.assertEqual(before - after, 3)
        self.assertEqual(MandayRecord.objects.filter(date_recorded__year=year).count(), 1)

    def test_admin_dashboard_counts(self):
        self.close_via('AWD-2024-0001', Division.EARD)
        self.client.force_login(self.admin)

        response = self.client.get(reverse('mis:admin_dashboard'))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.context['submitted_today'], 1)
        self.assertEqual(response.context['closed_today'], 1)
        self.assertEqual(response.context['weekly'], {'ongoing': 0, 'closed': 1})

    def test_secretary_dashboard_filters_by_inspector(self):
        self.close_via('AWD-2024-0001', Division.EARD, inspector='J. Cruz')
        self.close_via('AWD-2024-0002', Division.EARD, inspector='M. Santos')
        self.client.force_login(self.secretary)

        response = self.client.get(reverse('mis:secretary_dashboard'), {'inspector': 'M. Santos'})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.context['comparisons']['day']['count'], 1)
        self.assertEqual(response.context['inspectors'], ['J. Cruz', 'M. Santos'])
        self.assertEqual(response.context['status_counts']['closed'], 2)

    def test_mandays_csv_export(self):
        self.close_via('AWD-2024-0001', Division.GACID)
        self.client.force_login(self.admin)

        response = self.client.get(reverse('mis:mandays'), {'export': '1'})

        self.assertEqual(response['Content-Type'], 'text/csv')
        rows = list(csv.reader(response.content.decode().splitlines()))
        self.assertEqual(rows[0][0], 'Reference Number')
        self.assertEqual(rows[1][:3], ['AWD-2024-0001', 'J. Cruz', 'GACID'])

    def test_mandays_page_groups_by_period(self):
        self.close_via('AWD-2024-0001', Division.GACID)
        self.client.force_login(self.admin)

        response = self.client.get(reverse('mis:mandays'), {'period': 'year'})

        self.assertEqual(response.context['period'], 'year')
        self.assertEqual(len(response.context['grouped']), 1)
        self.assertEqual(response.context['totals']['count'], 1)

    def test_document_report_csv_has_deadline_label(self):
        register_document(Document(
            reference_number='AWD-2024-0001', subject='Audit', originating_office='Office',
            forwarded_to=Division.SECRETARY, working_days=20,
        ), self.admin_session)
        self.client.force_login(self.admin)

        response = self.client.get(reverse('mis:document_report'), {'export': '1', 'status': 'Open'})

        rows = list(csv.reader(response.content.decode().splitlines()))
        self.assertEqual(len(rows), 2)
        self.assertIn('working days left', rows[1][-1])

    def test_reports_are_admin_only(self):
        self.client.force_login(self.secretary)
        response = self.client.get(reverse('mis:mandays'))
        self.assertRedirects(response, reverse('login'), fetch_redirect_response=False)
