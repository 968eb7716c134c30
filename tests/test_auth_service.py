"""
Test Suite for AuthService with a mocked Supabase client

Run with: python -m pytest tests/test_auth_service.py
"""

import unittest
from unittest.mock import Mock, patch

import auth_service
from auth_service import (
    AuthService,
    ACCESS_TOKEN_COOKIE,
    PENDING_COOKIES_KEY,
    REFRESH_TOKEN_COOKIE,
    SESSION_CLIENT_KEY,
    SESSION_USER_KEY,
)
from report_wizard import User


def auth_response(user_id="u-1", email="dentista@example.com", with_session=True):
    response = Mock()
    response.user = Mock(id=user_id, email=email)
    response.session = Mock(access_token="access", refresh_token="refresh") if with_session else None
    return response


class TestSignIn(unittest.TestCase):

    def setUp(self):
        self.client = Mock()
        self.session = {}
        self.auth = AuthService(client=self.client, session_state=self.session, cookies={})

    def test_success_stores_user(self):
        self.client.auth.sign_in_with_password.return_value = auth_response()

        result = self.auth.sign_in("Dentista@Example.com ", "segredo")

        self.assertTrue(result.success)
        self.assertEqual(result.user, User(id="u-1", email="dentista@example.com"))
        self.assertEqual(self.auth.get_current_user(), result.user)
        self.assertEqual(self.session[PENDING_COOKIES_KEY], {
            ACCESS_TOKEN_COOKIE: "access",
            REFRESH_TOKEN_COOKIE: "refresh",
        })
        self.client.auth.sign_in_with_password.assert_called_once_with({
            "email": "dentista@example.com",
            "password": "segredo",
        })

    def test_wrong_password(self):
        self.client.auth.sign_in_with_password.side_effect = Exception("Invalid login credentials")

        result = self.auth.sign_in("dentista@example.com", "errada")

        self.assertFalse(result.success)
        self.assertEqual(result.error_message, "Email ou senha incorretos!")
        self.assertIsNone(self.auth.get_current_user())

    def test_missing_credentials(self):
        result = self.auth.sign_in("", "")

        self.assertFalse(result.success)
        self.assertEqual(result.error_message, "Preencha email e senha!")
        self.client.auth.sign_in_with_password.assert_not_called()


class TestSignUp(unittest.TestCase):

    def setUp(self):
        self.client = Mock()
        self.session = {}
        self.auth = AuthService(client=self.client, session_state=self.session, cookies={})

    def test_success_signs_in(self):
        self.client.auth.sign_up.return_value = auth_response()

        result = self.auth.sign_up("dentista@example.com", "segredo")

        self.assertTrue(result.success)
        self.assertFalse(result.needs_confirmation)
        self.assertIsNotNone(self.auth.get_current_user())

    def test_email_confirmation_pending(self):
        self.client.auth.sign_up.return_value = auth_response(with_session=False)

        result = self.auth.sign_up("dentista@example.com", "segredo")

        self.assertTrue(result.success)
        self.assertTrue(result.needs_confirmation)
        self.assertIsNone(self.auth.get_current_user())
        self.assertNotIn(PENDING_COOKIES_KEY, self.session)

    def test_short_password(self):
        result = self.auth.sign_up("dentista@example.com", "123")

        self.assertFalse(result.success)
        self.assertIn("6", result.error_message)
        self.client.auth.sign_up.assert_not_called()

    def test_provider_error(self):
        self.client.auth.sign_up.side_effect = Exception("User already registered")

        result = self.auth.sign_up("dentista@example.com", "segredo")

        self.assertFalse(result.success)
        self.assertIn("already registered", result.error_message)


class TestSignOut(unittest.TestCase):

    def test_clears_session_and_cookies(self):
        client = Mock()
        session = {SESSION_USER_KEY: {"id": "u-1", "email": "dentista@example.com"}}
        auth = AuthService(client=client, session_state=session, cookies={})

        self.assertIsNone(auth.sign_out())

        self.assertNotIn(SESSION_USER_KEY, session)
        self.assertEqual(session[PENDING_COOKIES_KEY], {
            ACCESS_TOKEN_COOKIE: None,
            REFRESH_TOKEN_COOKIE: None,
        })
        client.auth.sign_out.assert_called_once()

    def test_provider_failure_still_clears_session(self):
        client = Mock()
        client.auth.sign_out.side_effect = Exception("network")
        session = {SESSION_USER_KEY: {"id": "u-1", "email": "dentista@example.com"}}
        auth = AuthService(client=client, session_state=session, cookies={})

        error = auth.sign_out()

        self.assertEqual(error, "network")
        self.assertIsNone(auth.get_current_user())

    def test_stale_cookies_not_restored_after_sign_out(self):
        client = Mock()
        cookies = {ACCESS_TOKEN_COOKIE: "access", REFRESH_TOKEN_COOKIE: "refresh"}
        session = {SESSION_USER_KEY: {"id": "u-1", "email": "dentista@example.com"}}
        auth = AuthService(client=client, session_state=session, cookies=cookies)

        auth.sign_out()

        self.assertIsNone(auth.get_current_user())
        client.auth.set_session.assert_not_called()


class TestRestoreSession(unittest.TestCase):

    def setUp(self):
        self.client = Mock()
        self.session = {}
        self.cookies = {ACCESS_TOKEN_COOKIE: "old-access", REFRESH_TOKEN_COOKIE: "old-refresh"}
        self.auth = AuthService(client=self.client, session_state=self.session, cookies=self.cookies)

    def test_reload_restores_user_from_cookies(self):
        self.client.auth.set_session.return_value = auth_response()

        user = self.auth.get_current_user()

        self.assertEqual(user, User(id="u-1", email="dentista@example.com"))
        self.client.auth.set_session.assert_called_once_with("old-access", "old-refresh")
        # Refreshed tokens are written back
        self.assertEqual(self.session[PENDING_COOKIES_KEY][ACCESS_TOKEN_COOKIE], "access")

    def test_restore_attempted_once_per_session(self):
        self.client.auth.set_session.side_effect = Exception("Invalid Refresh Token")

        self.assertIsNone(self.auth.get_current_user())
        self.assertIsNone(self.auth.get_current_user())

        self.client.auth.set_session.assert_called_once()
        self.assertEqual(self.session[PENDING_COOKIES_KEY][REFRESH_TOKEN_COOKIE], None)

    def test_no_cookies(self):
        auth = AuthService(client=self.client, session_state={}, cookies={})

        self.assertIsNone(auth.get_current_user())
        self.client.auth.set_session.assert_not_called()


class TestCookieScript(unittest.TestCase):

    def test_script_sets_and_clears_then_empties_queue(self):
        session = {PENDING_COOKIES_KEY: {ACCESS_TOKEN_COOKIE: "abc.def", REFRESH_TOKEN_COOKIE: None}}
        auth = AuthService(client=Mock(), session_state=session, cookies={})

        script = auth.pending_cookie_script()

        self.assertIn(f"{ACCESS_TOKEN_COOKIE}=abc.def; path=/", script)
        self.assertIn(f"{REFRESH_TOKEN_COOKIE}=; path=/; max-age=0", script)
        self.assertNotIn(PENDING_COOKIES_KEY, session)
        self.assertIsNone(auth.pending_cookie_script())


class TestClientPerSession(unittest.TestCase):

    @patch('auth_service.get_supabase_credentials', return_value=("https://x.supabase.co", "anon"))
    @patch('auth_service.create_client')
    def test_each_session_gets_its_own_client(self, mock_create, _):
        mock_create.side_effect = [Mock(name="client-a"), Mock(name="client-b")]
        session_a, session_b = {}, {}

        client_a = auth_service.get_supabase_client(session_a)
        client_b = auth_service.get_supabase_client(session_b)

        self.assertIsNot(client_a, client_b)
        self.assertIs(auth_service.get_supabase_client(session_a), client_a)
        self.assertIs(session_a[SESSION_CLIENT_KEY], client_a)
        self.assertEqual(mock_create.call_count, 2)

    @patch('auth_service.get_supabase_credentials', return_value=(None, None))
    def test_not_configured(self, _):
        session = {}

        self.assertIsNone(auth_service.get_supabase_client(session))
        self.assertNotIn(SESSION_CLIENT_KEY, session)


if __name__ == '__main__':
    unittest.main()
