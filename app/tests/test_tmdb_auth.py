import json
import unittest
from unittest.mock import MagicMock, patch
import sys
import os

import requests

# Add the parent directory to the Python path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from tmdb_login.core.api.base_client import BaseAPIClient
from tmdb_login.core.error.exceptions import HandshakeStateError
from tmdb_login.services.tmdb.auth import AuthenticationSequencer
from tmdb_login.services.tmdb.types import (CancellationToken, Credentials,
                                 HandshakeFailure, HandshakeState,
                                 HandshakeSuccess)

BASE_URL = "https://api.example.org/3"

TOKEN_BODY = {"success": True, "expires_at": "2030-01-01 00:00:00 UTC", "request_token": "abc"}
VALIDATE_BODY = {"success": True, "expires_at": "2030-01-01 00:00:00 UTC", "request_token": "abc"}
SESSION_BODY = {"success": True, "session_id": "xyz"}
ACCOUNT_BODY = {"id": 548, "username": "jane", "include_adult": False}


def make_response(body=None, status_code=200, content=None):
    response = MagicMock()
    response.status_code = status_code
    response.content = content if content is not None else json.dumps(body).encode("utf-8")
    response.text = response.content.decode("utf-8", errors="replace")
    response.headers = {"Content-Type": "application/json;charset=utf-8"}
    return response


class SequencerTestCase(unittest.TestCase):
    def setUp(self):
        patcher = patch('tmdb_login.core.api.base_client.requests.request')
        self.mock_request = patcher.start()
        self.addCleanup(patcher.stop)

        self.client = BaseAPIClient(BASE_URL, "test-key")
        self.credentials = Credentials(username="jane", password="hunter2")
        self.sequencer = AuthenticationSequencer(self.client, self.credentials)

    def respond(self, *responses):
        self.mock_request.side_effect = list(responses)

    def requested_urls(self):
        return [c.args[1] for c in self.mock_request.call_args_list]

    def advance_to(self, state):
        """Run successful steps until the sequencer reaches state"""
        bodies = {
            HandshakeState.AWAITING_VALIDATION: [TOKEN_BODY],
            HandshakeState.AWAITING_SESSION: [TOKEN_BODY, VALIDATE_BODY],
            HandshakeState.AWAITING_USER_ID: [TOKEN_BODY, VALIDATE_BODY, SESSION_BODY],
        }[state]
        self.respond(*[make_response(body) for body in bodies])
        self.sequencer.start()
        while self.sequencer.state is not state:
            self.sequencer.advance()
        self.mock_request.reset_mock()


class TestHandshakeSteps(SequencerTestCase):
    def test_starts_idle(self):
        self.assertEqual(self.sequencer.state, HandshakeState.IDLE)
        self.sequencer.start()
        self.assertEqual(self.sequencer.state, HandshakeState.AWAITING_TOKEN)

    def test_request_token_step(self):
        self.respond(make_response({"request_token": "abc"}))
        self.sequencer.start()

        self.sequencer.get_request_token()

        self.assertEqual(self.sequencer.state, HandshakeState.AWAITING_VALIDATION)
        self.assertEqual(self.sequencer.session.request_token, "abc")
        self.assertEqual(
            self.requested_urls(),
            [f"{BASE_URL}/authentication/token/new?api_key=test-key"]
        )

    def test_request_token_missing(self):
        self.respond(make_response({"success": True}))
        self.sequencer.start()

        self.sequencer.get_request_token()

        self.assertEqual(self.sequencer.state, HandshakeState.FAILED)
        self.assertEqual(self.sequencer.result.code, "missing_field")
        self.assertEqual(self.sequencer.result.message, "Login Failed (Request Token).")

    def test_validation_step_keeps_request_token(self):
        self.advance_to(HandshakeState.AWAITING_VALIDATION)
        self.respond(make_response({"success": True}))

        self.sequencer.login_with_token()

        self.assertEqual(self.sequencer.state, HandshakeState.AWAITING_SESSION)
        self.assertEqual(self.sequencer.session.request_token, "abc")
        url = self.requested_urls()[0]
        self.assertTrue(url.startswith(f"{BASE_URL}/authentication/token/validate_with_login?"))
        for param in ("api_key=test-key", "request_token=abc", "username=jane", "password=hunter2"):
            self.assertIn(param, url)

    def test_validation_success_false(self):
        self.advance_to(HandshakeState.AWAITING_VALIDATION)
        self.respond(make_response({"success": False}))

        self.sequencer.login_with_token()

        self.assertEqual(self.sequencer.state, HandshakeState.FAILED)
        self.assertEqual(self.sequencer.result.code, "service")
        self.assertEqual(self.sequencer.result.step, "validate_login")

    def test_validation_reports_service_message(self):
        self.advance_to(HandshakeState.AWAITING_VALIDATION)
        self.respond(make_response({
            "success": False,
            "status_code": 30,
            "status_message": "Invalid username and/or password: You did not provide a valid login."
        }))

        self.sequencer.login_with_token()

        result = self.sequencer.result
        self.assertIn("Invalid username and/or password", result.reason)
        self.assertIn("status_code 30", result.reason)
        self.assertEqual(result.details["status_code"], 30)
        self.assertEqual(result.message, "Login Failed (Invalid Credentials).")

    def test_validation_missing_success(self):
        self.advance_to(HandshakeState.AWAITING_VALIDATION)
        self.respond(make_response({"request_token": "abc"}))

        self.sequencer.login_with_token()

        self.assertEqual(self.sequencer.state, HandshakeState.FAILED)
        self.assertEqual(self.sequencer.result.code, "missing_field")

    def test_validation_failure_stops_sequence(self):
        self.respond(
            make_response(TOKEN_BODY),
            make_response({"success": False}),
            make_response(SESSION_BODY),
        )

        result = self.sequencer.run()

        self.assertIsInstance(result, HandshakeFailure)
        self.assertEqual(self.mock_request.call_count, 2)
        self.assertIsNone(self.sequencer.session.session_id)

    def test_session_step(self):
        self.advance_to(HandshakeState.AWAITING_SESSION)
        self.respond(make_response({"session_id": "xyz"}))

        self.sequencer.get_session_id()

        self.assertEqual(self.sequencer.state, HandshakeState.AWAITING_USER_ID)
        self.assertEqual(self.sequencer.session.session_id, "xyz")
        self.assertEqual(
            self.requested_urls(),
            [f"{BASE_URL}/authentication/session/new?api_key=test-key&request_token=abc"]
        )

    def test_session_id_missing_with_service_status(self):
        self.advance_to(HandshakeState.AWAITING_SESSION)
        self.respond(make_response({"status_code": 17, "status_message": "Session denied."}))

        self.sequencer.get_session_id()

        self.assertEqual(self.sequencer.result.code, "service")
        self.assertIn("Session denied.", self.sequencer.result.reason)

    def test_user_id_step(self):
        self.advance_to(HandshakeState.AWAITING_USER_ID)
        self.respond(make_response(ACCOUNT_BODY))

        self.sequencer.get_user_id()

        self.assertEqual(self.sequencer.state, HandshakeState.DONE)
        self.assertEqual(self.sequencer.result, HandshakeSuccess(session_id="xyz", user_id=548))
        self.assertEqual(
            self.requested_urls(),
            [f"{BASE_URL}/account?api_key=test-key&session_id=xyz"]
        )

    def test_user_id_must_be_integer(self):
        self.advance_to(HandshakeState.AWAITING_USER_ID)
        self.respond(make_response({"id": True}))

        self.sequencer.get_user_id()

        self.assertEqual(self.sequencer.state, HandshakeState.FAILED)
        self.assertEqual(self.sequencer.result.code, "missing_field")
        self.assertEqual(self.sequencer.result.message, "Login Failed (User ID).")


class TestStepFailures(SequencerTestCase):
    """Every step fails the same way on transport and status errors"""

    STEP_STATES = [
        (None, "request_token"),
        (HandshakeState.AWAITING_VALIDATION, "validate_login"),
        (HandshakeState.AWAITING_SESSION, "create_session"),
        (HandshakeState.AWAITING_USER_ID, "user_id"),
    ]

    def prepare(self, state):
        if state is None:
            self.sequencer.start()
        else:
            self.advance_to(state)

    def test_transport_error_fails_each_step(self):
        for state, step in self.STEP_STATES:
            with self.subTest(step=step):
                self.setUp()
                self.prepare(state)
                self.respond(requests.exceptions.ConnectionError("offline"))

                self.sequencer.advance()

                self.assertEqual(self.sequencer.state, HandshakeState.FAILED)
                self.assertEqual(self.sequencer.result.code, "transport")
                self.assertEqual(self.sequencer.result.step, step)

    def test_non_2xx_fails_each_step(self):
        for state, step in self.STEP_STATES:
            with self.subTest(step=step):
                self.setUp()
                self.prepare(state)
                self.respond(make_response(
                    {"status_code": 7, "status_message": "Invalid API key: You must be granted a valid key."},
                    status_code=401
                ))

                self.sequencer.advance()

                result = self.sequencer.result
                self.assertEqual(self.sequencer.state, HandshakeState.FAILED)
                self.assertEqual(result.code, "http_status")
                self.assertEqual(result.step, step)
                self.assertEqual(result.details["status_code"], 401)
                self.assertIn("Invalid API key", result.reason)

    def test_malformed_json_stops_further_requests(self):
        for state, step in self.STEP_STATES:
            with self.subTest(step=step):
                self.setUp()
                self.prepare(state)
                self.respond(make_response(content=b"<html>oops</html>"), make_response(ACCOUNT_BODY))

                while not self.sequencer.state.is_terminal:
                    self.sequencer.advance()

                self.assertEqual(self.sequencer.result.code, "decode")
                self.assertEqual(self.mock_request.call_count, 1)

    def test_non_2xx_with_unparseable_body(self):
        self.sequencer.start()
        self.respond(make_response(content=b"Bad Gateway", status_code=502))

        self.sequencer.advance()

        self.assertEqual(self.sequencer.result.code, "http_status")
        self.assertIn("502", self.sequencer.result.reason)


class TestHandshakeRun(SequencerTestCase):
    def test_happy_path(self):
        self.respond(
            make_response(TOKEN_BODY),
            make_response(VALIDATE_BODY),
            make_response(SESSION_BODY),
            make_response(ACCOUNT_BODY),
        )

        result = self.sequencer.run()

        self.assertEqual(result, HandshakeSuccess(session_id="xyz", user_id=548))
        self.assertTrue(result.success)
        self.assertEqual(self.sequencer.state, HandshakeState.DONE)
        self.assertEqual(self.mock_request.call_count, 4)
        paths = [url.split("?")[0] for url in self.requested_urls()]
        self.assertEqual(paths, [
            f"{BASE_URL}/authentication/token/new",
            f"{BASE_URL}/authentication/token/validate_with_login",
            f"{BASE_URL}/authentication/session/new",
            f"{BASE_URL}/account",
        ])

    def test_credentials_released_after_run(self):
        self.respond(make_response(content=b""))

        self.sequencer.run()

        self.assertIsNone(self.sequencer.credentials)

    def test_cannot_run_twice(self):
        self.respond(
            make_response(TOKEN_BODY),
            make_response(VALIDATE_BODY),
            make_response(SESSION_BODY),
            make_response(ACCOUNT_BODY),
        )
        self.sequencer.run()

        with self.assertRaises(HandshakeStateError):
            self.sequencer.run()

    def test_steps_cannot_run_out_of_order(self):
        self.sequencer.start()

        with self.assertRaises(HandshakeStateError):
            self.sequencer.get_session_id()

        self.mock_request.assert_not_called()
        self.assertEqual(self.sequencer.state, HandshakeState.AWAITING_TOKEN)

    def test_advance_after_terminal_state(self):
        self.respond(make_response(content=b"nope"))
        self.sequencer.run()

        with self.assertRaises(HandshakeStateError):
            self.sequencer.advance()

    def test_cancellation_between_steps(self):
        cancellation = CancellationToken()
        sequencer = AuthenticationSequencer(self.client, self.credentials, cancellation)

        def cancel_after_token(*args, **kwargs):
            cancellation.cancel()
            return make_response(TOKEN_BODY)

        self.mock_request.side_effect = cancel_after_token

        result = sequencer.run()

        self.assertEqual(self.mock_request.call_count, 1)
        self.assertEqual(result.code, "cancelled")
        self.assertEqual(result.step, "validate_login")
        self.assertEqual(result.message, "Login Cancelled.")

    def test_password_not_logged(self):
        self.respond(
            make_response(TOKEN_BODY),
            make_response({"success": False, "status_code": 30, "status_message": "Invalid"}),
        )

        with self.assertLogs("tmdb_login", level="DEBUG") as logs:
            self.sequencer.run()

        output = "\n".join(logs.output)
        self.assertIn("password=***", output)
        self.assertNotIn("hunter2", output)

    def test_transport_failure_hides_session_and_api_key(self):
        self.respond(
            make_response(TOKEN_BODY),
            make_response(VALIDATE_BODY),
            make_response(SESSION_BODY),
            requests.exceptions.ConnectionError("connection reset"),
        )

        with self.assertLogs("tmdb_login", level="DEBUG") as logs:
            result = self.sequencer.run()

        self.assertEqual(result.step, "user_id")
        self.assertEqual(result.code, "transport")
        self.assertEqual(result.details["url"], f"{BASE_URL}/account")
        for secret in ("xyz", "abc", "test-key"):
            with self.subTest(secret=secret):
                self.assertNotIn(secret, str(result.details))
                self.assertNotIn(secret, result.reason)
                self.assertNotIn(secret, "\n".join(logs.output))

    def test_response_bodies_not_logged(self):
        self.respond(*[make_response(body) for body in (TOKEN_BODY, VALIDATE_BODY, SESSION_BODY, ACCOUNT_BODY)])

        with self.assertLogs("tmdb_login", level="DEBUG") as logs:
            result = self.sequencer.run()

        self.assertTrue(result.success)
        output = "\n".join(logs.output)
        self.assertNotIn("xyz", output)
        self.assertNotIn("request_token=abc", output)


if __name__ == '__main__':
    unittest.main()
