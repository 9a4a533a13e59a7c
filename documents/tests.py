import datetime
from io import StringIO

from django.contrib import admin
from django.contrib.auth import get_user_model
from django.core.management import call_command
from django.test import Client, RequestFactory, TestCase, override_settings
from django.urls import reverse

from accounts.models import Division
from accounts.session import AuthenticatedSession
from routing.services import forward_to_division
from .models import Document, Inspector, TrackingEntry
from .services import record_tracking_entry, register_document
from .utils import next_reference_number, parse_reference_number, reference_sort_key

User = get_user_model()

ADMIN = AuthenticatedSession(id=1, role=Division.ADMIN, name='Intake Clerk')
SECRETARY = AuthenticatedSession(id=2, role=Division.SECRETARY, name='Office Secretary')


def create_document(reference, forwarded_to=Division.ADMIN, status=Document.Status.OPEN, **extra):
    return Document.objects.create(
        reference_number=reference,
        subject=extra.pop('subject', 'FOOD SAFETY AUDIT'),
        originating_office=extra.pop('originating_office', 'REGIONAL OFFICE'),
        forwarded_to=forwarded_to,
        status=status,
        **extra
    )


class ReferenceNumberTests(TestCase):
    def test_next_after_existing_codes(self):
        for seq in range(1, 10):
            create_document(f'AWD-2024-{seq:04d}')
        self.assertEqual(next_reference_number(2024), 'AWD-2024-0010')

    def test_first_code_of_year(self):
        create_document('AWD-2024-0041')
        self.assertEqual(next_reference_number(2025), 'AWD-2025-0001')

    def test_hand_typed_codes_are_ignored(self):
        create_document('AWD-2024-0002')
        create_document('AWD-2024-77')
        create_document('MANUAL-2024-0099')
        self.assertEqual(next_reference_number(2024), 'AWD-2024-0003')

    def test_sequence_grows_past_four_digits(self):
        create_document('AWD-2024-9999')
        self.assertEqual(next_reference_number(2024), 'AWD-2024-10000')
        create_document('AWD-2024-10000')
        self.assertEqual(next_reference_number(2024), 'AWD-2024-10001')
        self.assertEqual(parse_reference_number('AWD-2024-10000'), (2024, 10000))

    def test_parse_reference_number(self):
        self.assertEqual(parse_reference_number('AWD-2024-0012'), (2024, 12))
        self.assertIsNone(parse_reference_number('AWD-2024-12'))
        self.assertIsNone(parse_reference_number(''))

    def test_save_fills_sort_fields(self):
        document = create_document('AWD-2024-0012')
        self.assertEqual((document.reference_year, document.reference_sequence), (2024, 12))
        manual = create_document('FSIS-LEGACY')
        self.assertIsNone(manual.reference_sequence)

    def test_reference_sort_key(self):
        codes = ['AWD-2024-0002', 'AWD-2024-0010', 'AWD-2024-0001']
        self.assertEqual(sorted(codes, key=reference_sort_key), ['AWD-2024-0001', 'AWD-2024-0002', 'AWD-2024-0010'])


class DocumentModelTests(TestCase):
    def test_deadline_computed_on_save(self):
        document = create_document(
            'AWD-2024-0001', working_days=3,
            start_date=datetime.datetime(2024, 3, 1, 9, 0, tzinfo=datetime.timezone.utc),
        )
        self.assertEqual(document.deadline, datetime.date(2024, 3, 6))

    def test_tracking_entries_are_immutable(self):
        document = create_document('AWD-2024-0001')
        entry = record_tracking_entry(document, 'Created')
        entry.remarks = 'changed'
        with self.assertRaises(ValueError):
            entry.save()

    def test_tracking_entries_cannot_be_deleted(self):
        document = create_document('AWD-2024-0001')
        entry = record_tracking_entry(document, 'Created')

        with self.assertRaises(ValueError):
            entry.delete()
        self.assertEqual(document.tracking_entries.count(), 1)

        request = RequestFactory().get('/site-admin/')
        request.user = User.objects.create_superuser(
            username='root@awd.test', email='root@awd.test', password='password',
        )
        model_admin = admin.site._registry[TrackingEntry]
        self.assertFalse(model_admin.has_delete_permission(request, entry))
        self.assertFalse(model_admin.has_change_permission(request, entry))


class PortalTestCase(TestCase):
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


class IntakeViewTests(PortalTestCase):
    def setUp(self):
        super().setUp()
        self.client.force_login(self.admin)
        self.url = reverse('documents:intake')

    def form_data(self, reference):
        return {
            'reference_number': reference,
            'originating_office': 'Regional Office',
            'subject': 'Food safety audit',
            'forwarded_to': Division.SECRETARY,
            'forwarded_to_name': '',
            'remarks': 'For action',
            'working_days': '7',
        }

    def test_form_is_prefilled_with_next_code(self):
        create_document('AWD-2024-0004')
        response = self.client.get(self.url)
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.context['form'].initial['reference_number'].startswith('AWD-'))

    def test_intake_registers_document(self):
        response = self.client.post(self.url, self.form_data('awd-2024-0001'))

        self.assertRedirects(response, self.url)
        document = Document.objects.get(reference_number='AWD-2024-0001')
        self.assertEqual(document.status, Document.Status.OPEN)
        self.assertEqual(document.forwarded_to, Division.SECRETARY)
        self.assertEqual(document.forwarded_by, 'Intake Clerk (Admin)')
        self.assertEqual(document.subject, 'FOOD SAFETY AUDIT')
        self.assertEqual(document.working_days, 7)
        self.assertEqual(document.created_by, self.admin)
        self.assertEqual(TrackingEntry.objects.filter(document=document).count(), 1)

    def test_duplicate_reference_is_a_form_error(self):
        create_document('AWD-2024-0001')
        response = self.client.post(self.url, self.form_data('AWD-2024-0001'))

        self.assertEqual(response.status_code, 200)
        self.assertIn('reference_number', response.context['form'].errors)
        self.assertEqual(Document.objects.count(), 1)

    def test_secretary_cannot_open_intake(self):
        self.client.force_login(self.secretary)
        response = self.client.get(self.url)
        self.assertRedirects(response, reverse('login'), fetch_redirect_response=False)


@override_settings(AWD_PAGE_SIZE=10)
class DocumentListViewTests(PortalTestCase):
    def test_pending_list_orders_and_paginates(self):
        for seq in range(1, 13):
            create_document(f'AWD-2024-{seq:04d}')
        create_document('AWD-2024-0013', forwarded_to=Division.SECRETARY)
        self.client.force_login(self.admin)

        response = self.client.get(reverse('documents:admin_pending'))

        self.assertEqual(response.status_code, 200)
        documents = list(response.context['documents'])
        self.assertEqual(len(documents), 10)
        self.assertEqual(documents[0].reference_number, 'AWD-2024-0012')
        self.assertEqual(response.context['paginator'].count, 12)

    def test_search(self):
        create_document('AWD-2024-0001', subject='PORK IMPORT')
        create_document('AWD-2024-0002', subject='POULTRY PERMIT')
        self.client.force_login(self.admin)

        response = self.client.get(reverse('documents:admin_pending'), {'search': 'poultry'})

        self.assertEqual([d.reference_number for d in response.context['documents']], ['AWD-2024-0002'])

    def test_deleted_documents_are_hidden(self):
        create_document('AWD-2024-0001', status=Document.Status.DELETED)
        self.client.force_login(self.admin)
        response = self.client.get(reverse('documents:admin_pending'))
        self.assertEqual(len(response.context['documents']), 0)

    def test_admin_sent_lists_documents_registered_by_intake(self):
        register_document(Document(
            reference_number='AWD-2024-0001', subject='a', originating_office='b',
            forwarded_to=Division.SECRETARY,
        ), ADMIN)
        create_document('AWD-2024-0002', forwarded_to=Division.SECRETARY)
        self.client.force_login(self.admin)

        response = self.client.get(reverse('documents:admin_sent'))

        self.assertEqual([d.reference_number for d in response.context['documents']], ['AWD-2024-0001'])

    def test_secretary_lists(self):
        document = register_document(Document(
            reference_number='AWD-2024-0001', subject='a', originating_office='b',
            forwarded_to=Division.SECRETARY,
        ), ADMIN)
        self.client.force_login(self.secretary)

        pending = self.client.get(reverse('documents:secretary_pending'))
        self.assertEqual(len(pending.context['documents']), 1)

        forward_to_division(document, SECRETARY, Division.EARD)
        division = self.client.get(reverse('documents:secretary_division'))
        sent = self.client.get(reverse('documents:secretary_sent'))
        self.assertEqual([d.reference_number for d in division.context['documents']], ['AWD-2024-0001'])
        self.assertEqual([d.reference_number for d in sent.context['documents']], ['AWD-2024-0001'])

    def test_closed_list_offers_bulk_return(self):
        create_document('AWD-2024-0001', status=Document.Status.CLOSED)
        self.client.force_login(self.admin)
        response = self.client.get(reverse('documents:admin_closed'))
        self.assertIn('bulk_form', response.context)
        self.assertContains(response, 'Return selected')


class DocumentDetailAndEditTests(PortalTestCase):
    def setUp(self):
        super().setUp()
        self.document = register_document(Document(
            reference_number='AWD-2024-0001', subject='Original subject', originating_office='Office',
            forwarded_to=Division.SECRETARY,
        ), ADMIN)

    def test_detail_shows_audit_trail_to_either_portal(self):
        for user in (self.admin, self.secretary):
            self.client.force_login(user)
            response = self.client.get(reverse('documents:detail', args=['AWD-2024-0001']))
            self.assertEqual(response.status_code, 200)
            self.assertEqual([e.action for e in response.context['entries']], ['Created'])

    def test_edit_records_entry_and_recomputes_deadline(self):
        self.client.force_login(self.admin)
        old_deadline = self.document.deadline

        response = self.client.post(reverse('documents:edit', args=['AWD-2024-0001']), {
            'originating_office': 'Central office',
            'subject': 'Corrected subject',
            'working_days': '20',
            'remarks': 'Typo',
        })

        self.assertRedirects(response, reverse('documents:detail', args=['AWD-2024-0001']))
        self.document.refresh_from_db()
        self.assertEqual(self.document.subject, 'CORRECTED SUBJECT')
        self.assertEqual(self.document.working_days, 20)
        self.assertGreater(self.document.deadline, old_deadline)
        self.assertEqual(self.document.audit_trail.last().action, 'Edited')


class SeedInspectorsCommandTests(TestCase):
    def test_seeds_names(self):
        Inspector.objects.create(name='Old Hand')
        out = StringIO()

        call_command('seed_inspectors', 'J. Cruz', 'M. Santos', '--deactivate-missing', stdout=out)

        self.assertEqual(
            list(Inspector.objects.filter(is_active=True).values_list('name', flat=True)),
            ['J. Cruz', 'M. Santos'],
        )
        self.assertFalse(Inspector.objects.get(name='Old Hand').is_active)
        self.assertIn('2 inspector(s)', out.getvalue())
