from django.contrib.auth import get_user_model
from django.test import Client, TestCase
from django.urls import reverse

from .forms import INVALID_LOGIN
from .models import Division
from .session import AuthenticatedSession

User = get_user_model()


def create_account(email, division, password='password', name='Test User'):
    return User.objects.create_user(
        username=email, email=email, password=password, name=name, division=division,
    )


class LoginTests(TestCase):
    def setUp(self):
        self.client = Client()
        self.admin = create_account('admin@awd.test', Division.ADMIN, name='Intake Clerk')
        self.division_user = create_account('catcid@awd.test', Division.CATCID)

    def login(self, email, password, division):
        return self.client.post(reverse('login'), {
            'username': email, 'password': password, 'division': division,
        })

    def test_login_by_email_goes_to_dashboard(self):
        response = self.login('admin@awd.test', 'password', Division.ADMIN)
        self.assertRedirects(response, reverse('dashboard'), fetch_redirect_response=False)

    def test_wrong_password(self):
        response = self.login('admin@awd.test', 'nope', Division.ADMIN)
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, INVALID_LOGIN)

    def test_wrong_division(self):
        response = self.login('admin@awd.test', 'password', Division.SECRETARY)
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, INVALID_LOGIN)
        self.assertNotIn('_auth_user_id', self.client.session)

    def test_division_accounts_cannot_sign_in(self):
        response = self.login('catcid@awd.test', 'password', Division.ADMIN)
        self.assertContains(response, INVALID_LOGIN)

    def test_passwords_are_hashed(self):
        self.assertNotEqual(self.admin.password, 'password')
        self.assertTrue(self.admin.check_password('password'))

    def test_session_value(self):
        session = AuthenticatedSession.for_user(self.admin)
        self.assertEqual(session.role, Division.ADMIN)
        self.assertEqual(session.forwarding_label, 'Intake Clerk (Admin)')


class DivisionAccessMiddlewareTests(TestCase):
    def setUp(self):
        self.client = Client()
        self.admin = create_account('admin@awd.test', Division.ADMIN)
        self.secretary = create_account('sec@awd.test', Division.SECRETARY)

    def test_anonymous_redirected_with_next(self):
        url = reverse('documents:admin_pending')
        response = self.client.get(url)
        self.assertRedirects(response, f"{reverse('login')}?next={url}", fetch_redirect_response=False)

    def test_wrong_role_is_signed_out(self):
        self.client.force_login(self.secretary)
        response = self.client.get(reverse('documents:admin_pending'))

        self.assertRedirects(response, reverse('login'), fetch_redirect_response=False)
        self.assertNotIn('_auth_user_id', self.client.session)

    def test_secretary_portal_blocks_admin(self):
        self.client.force_login(self.admin)
        response = self.client.get(reverse('documents:secretary_pending'))
        self.assertRedirects(response, reverse('login'), fetch_redirect_response=False)

    def test_own_portal_is_open(self):
        self.client.force_login(self.secretary)
        response = self.client.get(reverse('documents:secretary_pending'))
        self.assertEqual(response.status_code, 200)

    def test_dashboard_dispatches_by_division(self):
        self.client.force_login(self.admin)
        self.assertRedirects(self.client.get(reverse('dashboard')), reverse('mis:admin_dashboard'))
        self.client.force_login(self.secretary)
        self.assertRedirects(self.client.get(reverse('dashboard')), reverse('mis:secretary_dashboard'))


class AccountManagementTests(TestCase):
    def setUp(self):
        self.client = Client()
        self.admin = create_account('admin@awd.test', Division.ADMIN, name='Intake Clerk')
        self.client.force_login(self.admin)

    def test_create_account(self):
        response = self.client.post(reverse('account_create'), {
            'name': 'New Secretary',
            'email': 'New.Sec@AWD.test',
            'division': Division.SECRETARY,
            'password': 'S3cure-pass!',
            'is_active': 'on',
        })

        self.assertRedirects(response, reverse('account_list'))
        account = User.objects.get(email='new.sec@awd.test')
        self.assertEqual(account.username, 'new.sec@awd.test')
        self.assertTrue(account.check_password('S3cure-pass!'))

    def test_duplicate_email_rejected(self):
        response = self.client.post(reverse('account_create'), {
            'name': 'Copy', 'email': 'ADMIN@awd.test', 'division': Division.ADMIN, 'password': 'x',
        })
        self.assertEqual(response.status_code, 200)
        self.assertIn('email', response.context['form'].errors)

    def test_edit_keeps_password_when_blank(self):
        other = create_account('gacid@awd.test', Division.GACID, password='keep-me')
        response = self.client.post(reverse('account_update', args=[other.pk]), {
            'name': 'Renamed', 'email': 'gacid@awd.test', 'division': Division.GACID,
            'password': '', 'is_active': 'on',
        })

        self.assertRedirects(response, reverse('account_list'))
        other.refresh_from_db()
        self.assertEqual(other.name, 'Renamed')
        self.assertTrue(other.check_password('keep-me'))

    def test_list_search(self):
        create_account('eard@awd.test', Division.EARD, name='Eard Person')
        response = self.client.get(reverse('account_list'), {'q': 'eard'})
        self.assertEqual([a.email for a in response.context['accounts']], ['eard@awd.test'])

    def test_delete_account(self):
        other = create_account('moocsu@awd.test', Division.MOOCSU)
        response = self.client.post(reverse('account_delete', args=[other.pk]))
        self.assertRedirects(response, reverse('account_list'))
        self.assertFalse(User.objects.filter(pk=other.pk).exists())

    def test_cannot_delete_self(self):
        self.client.post(reverse('account_delete', args=[self.admin.pk]))
        self.assertTrue(User.objects.filter(pk=self.admin.pk).exists())
