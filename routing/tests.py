import datetime

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.test import Client, SimpleTestCase, TestCase
from django.urls import reverse

from accounts.models import Division
from accounts.session import AuthenticatedSession
from documents.models import Document, MandayRecord, ReturnRecord, TrackingEntry
from documents.services import register_document
from .deadlines import (
    CLOSED, NOT_AVAILABLE, OVERDUE, InvalidDate, Urgency, classify_urgency, compute_deadline,
    deadline_status, parse_date, remaining_business_days,
)
from .services import (
    assign_inspector_and_close, bulk_return_closed, endorse_to_secretary, forward_to_division,
    hold_document, purge_documents, release_hold, return_closed, return_to_intake, reforward,
)
from .transitions import Action, TransitionNotAllowed, actions_for, allowed_actions

User = get_user_model()

FRIDAY = datetime.date(2024, 3, 1)
WEDNESDAY = datetime.date(2024, 3, 6)

ADMIN = AuthenticatedSession(id=1, role=Division.ADMIN, name='Intake Clerk')
SECRETARY = AuthenticatedSession(id=2, role=Division.SECRETARY, name='Office Secretary')


class DeadlineTests(SimpleTestCase):
    def test_friday_plus_three_is_wednesday(self):
        self.assertEqual(compute_deadline(FRIDAY, 3), WEDNESDAY)

    def test_zero_budget_returns_start(self):
        self.assertEqual(compute_deadline(FRIDAY, 0), FRIDAY)

    def test_negative_budget_rejected(self):
        with self.assertRaises(ValueError):
            compute_deadline(FRIDAY, -1)

    def test_deadline_never_lands_on_weekend(self):
        for offset in range(14):
            start = FRIDAY + datetime.timedelta(days=offset)
            for budget in range(1, 12):
                deadline = compute_deadline(start, budget)
                self.assertLess(deadline.weekday(), 5, (start, budget))
                self.assertEqual(remaining_business_days(start, deadline), budget)

    def test_start_day_is_not_counted(self):
        monday = datetime.date(2024, 3, 4)
        self.assertEqual(compute_deadline(monday, 1), datetime.date(2024, 3, 5))

    def test_remaining_business_days(self):
        self.assertEqual(remaining_business_days(FRIDAY, WEDNESDAY), 3)
        self.assertEqual(remaining_business_days(FRIDAY, datetime.date(2024, 3, 3)), 0)
        self.assertEqual(remaining_business_days(WEDNESDAY, FRIDAY), 0)

    def test_remaining_grows_by_one_per_weekday(self):
        previous = remaining_business_days(FRIDAY, FRIDAY)
        for offset in range(1, 15):
            day = FRIDAY + datetime.timedelta(days=offset)
            current = remaining_business_days(FRIDAY, day)
            self.assertEqual(current - previous, 1 if day.weekday() < 5 else 0)
            previous = current

    def test_parse_date_formats_agree(self):
        for value in ('2024-03-01', '2024-03-01T09:30:00', '03/01/2024', '03/01/2024, 09:30 AM',
                      '03/01/2024 14:15:00', FRIDAY, datetime.datetime(2024, 3, 1, 10, 0)):
            self.assertEqual(parse_date(value), FRIDAY, value)

    def test_parse_date_rejects_garbage(self):
        for value in ('', 'not a date', '31/31/2024', None, 42):
            with self.assertRaises(InvalidDate):
                parse_date(value)

    def test_classify_urgency_table(self):
        self.assertEqual(classify_urgency(5, False, True), CLOSED)
        self.assertEqual(classify_urgency(5, True, False), OVERDUE)
        self.assertEqual(classify_urgency(0, False, False, due=WEDNESDAY).label, "Due today (Mar 06, 2024)")
        self.assertEqual(classify_urgency(3, False, False, due=WEDNESDAY).urgency, Urgency.CRITICAL)
        self.assertEqual(classify_urgency(4, False, False, due=WEDNESDAY).urgency, Urgency.WARNING)
        self.assertEqual(classify_urgency(7, False, False, due=WEDNESDAY).urgency, Urgency.WARNING)
        self.assertEqual(classify_urgency(8, False, False, due=WEDNESDAY).urgency, Urgency.NORMAL)
        self.assertEqual(
            classify_urgency(3, False, False, due=WEDNESDAY).label, "3 working days left (due Mar 06, 2024)"
        )

    def test_classify_urgency_is_total(self):
        for remaining in range(0, 40):
            for overdue in (False, True):
                for closed in (False, True):
                    status = classify_urgency(remaining, overdue, closed, due=WEDNESDAY)
                    self.assertTrue(status.label)
                    self.assertIn(status.urgency, list(Urgency))

    def test_deadline_status(self):
        self.assertEqual(deadline_status(FRIDAY, 3, end_date=WEDNESDAY), CLOSED)
        self.assertEqual(deadline_status(None, 3), NOT_AVAILABLE)
        self.assertEqual(deadline_status('garbage', 3), NOT_AVAILABLE)
        self.assertEqual(deadline_status(FRIDAY, 0), NOT_AVAILABLE)
        self.assertEqual(deadline_status(FRIDAY, 3, today=datetime.date(2024, 3, 7)), OVERDUE)
        self.assertEqual(deadline_status(FRIDAY, 3, today=WEDNESDAY).label, "Due today (Mar 06, 2024)")
        self.assertEqual(deadline_status(FRIDAY, 3, today=FRIDAY).urgency, Urgency.CRITICAL)
        self.assertEqual(deadline_status(FRIDAY, 7, today=FRIDAY).urgency, Urgency.WARNING)
        self.assertEqual(deadline_status(FRIDAY, 20, today=FRIDAY).urgency, Urgency.NORMAL)

    def test_deadline_status_accepts_us_strings(self):
        self.assertEqual(
            deadline_status('03/01/2024, 09:30 AM', 3, today=FRIDAY),
            deadline_status(FRIDAY, 3, today=FRIDAY),
        )


class RoutingTableTests(SimpleTestCase):
    Status = Document.Status

    def test_open_at_intake(self):
        self.assertEqual(
            allowed_actions(self.Status.OPEN, Division.ADMIN),
            {Action.ASSIGN_AND_CLOSE, Action.HOLD, Action.DELETE},
        )

    def test_open_at_secretary(self):
        self.assertEqual(
            allowed_actions(self.Status.OPEN, Division.SECRETARY),
            {Action.FORWARD_TO_DIVISION, Action.RETURN_TO_INTAKE, Action.DELETE},
        )

    def test_open_at_any_division(self):
        for division in Division.routing_divisions():
            self.assertEqual(
                allowed_actions(self.Status.OPEN, division),
                {Action.ENDORSE_TO_SECRETARY, Action.DELETE},
            )

    def test_status_wide_rows(self):
        for holder in (Division.ADMIN, Division.SECRETARY, Division.EARD, ''):
            self.assertEqual(allowed_actions(self.Status.CLOSED, holder), {Action.MARK_RECEIVED, Action.RETURN_CLOSED})
            self.assertEqual(allowed_actions(self.Status.ON_HOLD, holder), {Action.RELEASE_HOLD, Action.DELETE})
            self.assertEqual(allowed_actions(self.Status.RETURNED, holder), {Action.REFORWARD})

    def test_deleted_allows_nothing(self):
        self.assertEqual(allowed_actions(self.Status.DELETED, Division.ADMIN), frozenset())
        self.assertEqual(allowed_actions(self.Status.OPEN, ''), frozenset())

    def test_actions_for_role(self):
        document = Document(status=self.Status.OPEN, forwarded_to=Division.CATCID)
        self.assertEqual(actions_for(document, Division.SECRETARY), {Action.ENDORSE_TO_SECRETARY, Action.DELETE})
        self.assertEqual(actions_for(document, Division.ADMIN), {Action.DELETE})


class TransitionServiceTests(TestCase):
    def make_document(self, reference, forwarded_to, working_days=3):
        document = Document(
            reference_number=reference,
            subject='Import permit',
            originating_office='Bureau of Customs',
            forwarded_to=forwarded_to,
            working_days=working_days,
        )
        return register_document(document, ADMIN)

    def test_register_opens_audit_trail(self):
        document = self.make_document('AWD-2024-0001', Division.SECRETARY)
        self.assertEqual(document.status, Document.Status.OPEN)
        self.assertEqual(document.forwarded_by, 'Intake Clerk (Admin)')
        self.assertEqual(document.subject, 'IMPORT PERMIT')
        self.assertIsNotNone(document.deadline)
        self.assertEqual(list(document.audit_trail.values_list('action', flat=True)), ['Created'])

    def test_endorse_to_secretary(self):
        document = self.make_document('AWD-2024-0001', Division.CATCID)
        before = TrackingEntry.objects.filter(document=document).count()

        endorse_to_secretary(document, SECRETARY)

        document.refresh_from_db()
        self.assertEqual(document.status, Document.Status.OPEN)
        self.assertEqual(document.forwarded_to, Division.SECRETARY)
        self.assertEqual(document.forwarded_by, Division.CATCID)
        entries = TrackingEntry.objects.filter(document=document)
        self.assertEqual(entries.count(), before + 1)
        self.assertEqual(entries.last().forwarded_to, Division.SECRETARY)

    def test_disallowed_transition_leaves_document_untouched(self):
        document = self.make_document('AWD-2024-0001', Division.SECRETARY)
        with self.assertRaises(TransitionNotAllowed):
            assign_inspector_and_close(document, ADMIN, 'J. Cruz')

        document.refresh_from_db()
        self.assertEqual(document.status, Document.Status.OPEN)
        self.assertEqual(document.tracking_entries.count(), 1)

    def test_forward_rejects_unknown_division(self):
        document = self.make_document('AWD-2024-0001', Division.SECRETARY)
        with self.assertRaises(ValidationError):
            forward_to_division(document, SECRETARY, 'FSIS')

    def _close_via_catcid(self, reference):
        document = self.make_document(reference, Division.CATCID)
        endorse_to_secretary(document, SECRETARY)
        forward_to_division(document, SECRETARY, Division.ADMIN)
        assign_inspector_and_close(document, ADMIN, 'J. Cruz')
        return document

    def test_close_records_mandays(self):
        document = self._close_via_catcid('AWD-2024-0001')

        self.assertEqual(document.status, Document.Status.CLOSED)
        self.assertIsNotNone(document.end_date)
        record = MandayRecord.objects.get(reference_number='AWD-2024-0001')
        self.assertEqual(record.original_working_days, 3)
        self.assertGreaterEqual(record.actual_working_days, 1)
        self.assertEqual(record.inspector_name, 'J. Cruz')
        self.assertEqual(record.division, Division.CATCID)

    def test_stale_copy_cannot_close_twice(self):
        document = self.make_document('AWD-2024-0001', Division.SECRETARY)
        forward_to_division(document, SECRETARY, Division.ADMIN)
        stale = Document.objects.get(pk=document.pk)

        assign_inspector_and_close(document, ADMIN, 'J. Cruz')
        with self.assertRaises(TransitionNotAllowed):
            assign_inspector_and_close(stale, ADMIN, 'M. Santos')

        self.assertEqual(stale.status, Document.Status.CLOSED)
        self.assertEqual(MandayRecord.objects.filter(document=document).count(), 1)
        self.assertEqual(MandayRecord.objects.get(document=document).inspector_name, 'J. Cruz')

    def test_return_closed_drops_manday_record(self):
        kept = self._close_via_catcid('AWD-2024-0001')
        returned = self._close_via_catcid('AWD-2024-0002')
        kept_record = MandayRecord.objects.get(document=kept)

        return_closed(returned, ADMIN, Division.CATCID, 'Incomplete findings')

        returned.refresh_from_db()
        self.assertEqual(returned.status, Document.Status.OPEN)
        self.assertEqual(returned.forwarded_to, Division.CATCID)
        self.assertIsNone(returned.end_date)
        remaining = MandayRecord.objects.filter(division=Division.CATCID)
        self.assertEqual(list(remaining), [kept_record])
        self.assertTrue(ReturnRecord.objects.filter(
            reference_number='AWD-2024-0002', kind=ReturnRecord.Kind.RETURN_TO_INSPECTOR
        ).exists())

    def test_return_closed_requires_remarks(self):
        document = self._close_via_catcid('AWD-2024-0001')
        with self.assertRaises(ValidationError):
            return_closed(document, ADMIN, Division.CATCID, '')
        self.assertTrue(MandayRecord.objects.filter(document=document).exists())

    def test_hold_and_release(self):
        document = self.make_document('AWD-2024-0001', Division.SECRETARY)
        forward_to_division(document, SECRETARY, Division.ADMIN)

        hold_document(document, ADMIN, 'J. Cruz')
        self.assertEqual(document.status, Document.Status.ON_HOLD)
        release_hold(document, ADMIN)
        self.assertEqual(document.status, Document.Status.OPEN)
        self.assertEqual(document.forwarded_to, Division.ADMIN)

    def test_return_to_intake_then_reforward(self):
        document = self.make_document('AWD-2024-0001', Division.SECRETARY)

        return_to_intake(document, SECRETARY, remarks='Wrong office')
        self.assertEqual(document.status, Document.Status.RETURNED)
        self.assertEqual(document.forwarded_to, Division.ADMIN)
        self.assertEqual(ReturnRecord.objects.filter(kind=ReturnRecord.Kind.RETURN_TO_AWD).count(), 1)

        reforward(document, ADMIN, Division.GACID, forwarded_to_name='Section Chief')
        self.assertEqual(document.status, Document.Status.OPEN)
        self.assertEqual(document.forwarded_to, Division.GACID)
        self.assertEqual(document.forwarded_to_name, 'Section Chief')

    def test_bulk_return_reports_partial_failure(self):
        closed = self._close_via_catcid('AWD-2024-0001')
        still_open = self.make_document('AWD-2024-0002', Division.SECRETARY)

        with self.assertLogs('routing.services', level='ERROR'):
            result = bulk_return_closed([closed, still_open], ADMIN, Division.EARD, 'Recheck')

        self.assertEqual(result.succeeded, ['AWD-2024-0001'])
        self.assertEqual(result.failed, ['AWD-2024-0002'])
        closed.refresh_from_db()
        self.assertEqual(closed.forwarded_to, Division.EARD)

    def test_purge_removes_every_trace(self):
        self._close_via_catcid('AWD-2024-0001')
        self.make_document('AWD-2024-0002', Division.SECRETARY)

        deleted = purge_documents(['AWD-2024-0001'], ADMIN)

        self.assertEqual(deleted, 1)
        self.assertFalse(Document.objects.filter(reference_number='AWD-2024-0001').exists())
        self.assertFalse(TrackingEntry.objects.filter(reference_number='AWD-2024-0001').exists())
        self.assertFalse(MandayRecord.objects.filter(reference_number='AWD-2024-0001').exists())
        self.assertTrue(Document.objects.filter(reference_number='AWD-2024-0002').exists())


class DocumentActionViewTests(TestCase):
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
        self.document = register_document(Document(
            reference_number='AWD-2024-0001',
            subject='Import permit',
            originating_office='Bureau of Customs',
            forwarded_to=Division.SECRETARY,
        ), ADMIN)

    def url(self, action):
        return reverse('routing:document_action', args=[self.document.reference_number, action])

    def test_secretary_forwards_to_division(self):
        self.client.force_login(self.secretary)
        response = self.client.post(self.url(Action.FORWARD_TO_DIVISION), {'division': Division.MOOCSU})

        self.assertEqual(response.status_code, 302)
        self.document.refresh_from_db()
        self.assertEqual(self.document.forwarded_to, Division.MOOCSU)
        self.assertEqual(self.document.forwarded_by, 'Office Secretary (Secretary)')

    def test_admin_cannot_run_secretary_action(self):
        self.client.force_login(self.admin)
        response = self.client.post(self.url(Action.FORWARD_TO_DIVISION), {'division': Division.MOOCSU})

        self.assertEqual(response.status_code, 302)
        self.document.refresh_from_db()
        self.assertEqual(self.document.forwarded_to, Division.SECRETARY)

    def test_disallowed_action_shows_error(self):
        self.client.force_login(self.secretary)
        response = self.client.post(self.url(Action.ENDORSE_TO_SECRETARY), follow=True)

        messages = [str(m) for m in response.context['messages']]
        self.assertTrue(any('Cannot' in m for m in messages))
        self.assertEqual(self.document.tracking_entries.count(), 1)

    def test_unknown_action(self):
        self.client.force_login(self.secretary)
        response = self.client.post(self.url('explode'))
        self.assertEqual(response.status_code, 302)

    def test_anonymous_is_redirected_to_login(self):
        response = self.client.post(self.url(Action.DELETE))
        self.assertEqual(response.status_code, 302)
        self.assertIn(reverse('login'), response.url)
        self.document.refresh_from_db()
        self.assertEqual(self.document.status, Document.Status.OPEN)

    def test_bulk_return_view(self):
        forward_to_division(self.document, SECRETARY, Division.ADMIN)
        assign_inspector_and_close(self.document, ADMIN, 'J. Cruz')

        self.client.force_login(self.admin)
        response = self.client.post(reverse('routing:bulk_return'), {
            'references': ['AWD-2024-0001'],
            'destination': Division.CATCID,
            'remarks': 'Recheck',
        })

        self.assertEqual(response.status_code, 302)
        self.document.refresh_from_db()
        self.assertEqual(self.document.status, Document.Status.OPEN)
        self.assertEqual(self.document.forwarded_to, Division.CATCID)
        self.assertFalse(MandayRecord.objects.exists())
