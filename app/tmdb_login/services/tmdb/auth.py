"""TheMovieDB authentication handshake

Steps for authentication
(https://developer.themoviedb.org/docs/authentication-user):

    1. Create a request token
    2. Validate the token with the user's username and password
    3. Create a session ID from the validated token
    4. Get the user's account id for that session

Each step issues one request and only runs after the previous step has fully
resolved. The first failure ends the handshake.
"""
import logging
from typing import Any, Callable, Dict, Optional

from tmdb_login.config.constants import (STEP_CREATE_SESSION, STEP_REQUEST_TOKEN,
                              STEP_USER_ID, STEP_VALIDATE_LOGIN,
                              TMDBParameterKeys, TMDBResponseKeys)
from tmdb_login.core.api.api_response import decode_response, service_status
from tmdb_login.core.api.base_client import ApiResult, BaseAPIClient
from tmdb_login.core.error.exceptions import (CancelledError, DecodeError,
                                   HandshakeStateError, HttpStatusError,
                                   MissingFieldError, ServiceError)
from tmdb_login.core.error.handler import ErrorHandler

from .config import TMDBEndpoints
from .types import (CancellationToken, Credentials, HandshakeFailure,
                    HandshakeResult, HandshakeState, HandshakeSuccess,
                    SessionState)

logger = logging.getLogger(__name__)


def check_status(result: ApiResult) -> None:
    """Raise HttpStatusError for a non-2xx result

    The service usually explains an error status in the body, so its
    status_message is folded into the reason when the body decodes.
    """
    if result.ok:
        return

    body = None
    try:
        body = decode_response(result.body)
    except DecodeError:
        logger.debug("Error response body is not a JSON object")

    reason = f"Your request returned a status code other than 2xx: {result.status_code}"
    if body and body.get(TMDBResponseKeys.STATUS_MESSAGE):
        reason = f"{reason} ({body[TMDBResponseKeys.STATUS_MESSAGE]})"
    raise HttpStatusError(reason, result.status_code, body)


def raise_for_service_error(data: Dict[str, Any]) -> None:
    """Raise ServiceError when the body reports success:false"""
    if data.get(TMDBResponseKeys.SUCCESS) is not False:
        return

    status = service_status(data)
    reason = f"TheMovieDB returned an error: {status['status_message'] or 'success is false'}"
    if status["status_code"] is not None:
        reason = f"{reason} (status_code {status['status_code']})"
    raise ServiceError(reason, **status)


def require_field(data: Dict[str, Any], key: str, expected_type: type) -> Any:
    """Return data[key] if present with the expected type

    A missing field in a body that carries a service status is reported as a
    service error, otherwise as a missing field.
    """
    value = data.get(key)
    if isinstance(value, expected_type) and not (expected_type is int and isinstance(value, bool)):
        return value

    status = service_status(data)
    if status["status_code"] is not None or status["status_message"]:
        raise ServiceError(
            f"TheMovieDB returned an error: {status['status_message']} "
            f"(status_code {status['status_code']})",
            **status
        )
    raise MissingFieldError(f"There was no {key} in the response data", key)


class AuthenticationSequencer:
    """Runs the four-step handshake for one set of credentials

    One instance performs one handshake. The request token and session id it
    collects are owned by the instance and only leave it inside a
    HandshakeSuccess.
    """

    STEPS = {
        HandshakeState.AWAITING_TOKEN: STEP_REQUEST_TOKEN,
        HandshakeState.AWAITING_VALIDATION: STEP_VALIDATE_LOGIN,
        HandshakeState.AWAITING_SESSION: STEP_CREATE_SESSION,
        HandshakeState.AWAITING_USER_ID: STEP_USER_ID,
    }

    def __init__(
        self,
        client: BaseAPIClient,
        credentials: Credentials,
        cancellation: Optional[CancellationToken] = None
    ):
        self.client = client
        self.credentials = credentials
        self.cancellation = cancellation
        self.session = SessionState()
        self.state = HandshakeState.IDLE
        self.result: Optional[HandshakeResult] = None

    def start(self) -> None:
        """Leave IDLE; the first step may now run"""
        self._expect(HandshakeState.IDLE)
        logger.info(f"Starting login for {self.credentials.username}")
        self.state = HandshakeState.AWAITING_TOKEN

    def run(self) -> HandshakeResult:
        """Run every step in order and return the terminal result"""
        self.start()
        while not self.state.is_terminal:
            self.advance()
        return self.result

    def advance(self) -> HandshakeState:
        """Run the step for the current state and return the new state"""
        steps: Dict[HandshakeState, Callable[[], None]] = {
            HandshakeState.AWAITING_TOKEN: self.get_request_token,
            HandshakeState.AWAITING_VALIDATION: self.login_with_token,
            HandshakeState.AWAITING_SESSION: self.get_session_id,
            HandshakeState.AWAITING_USER_ID: self.get_user_id,
        }
        if self.state not in steps:
            raise HandshakeStateError(f"No step to run in state {self.state.value}")
        steps[self.state]()
        return self.state

    # Steps

    def get_request_token(self) -> None:
        """Step 1: create a request token"""
        self._run_step(HandshakeState.AWAITING_TOKEN, self._get_request_token)

    def login_with_token(self) -> None:
        """Step 2: validate the request token with the user's credentials"""
        self._run_step(HandshakeState.AWAITING_VALIDATION, self._login_with_token)

    def get_session_id(self) -> None:
        """Step 3: exchange the validated token for a session id"""
        self._run_step(HandshakeState.AWAITING_SESSION, self._get_session_id)

    def get_user_id(self) -> None:
        """Step 4: resolve the account id tied to the session"""
        self._run_step(HandshakeState.AWAITING_USER_ID, self._get_user_id)

    def _get_request_token(self) -> None:
        data = self._request('authentication', 'new_token', {})
        self.session.request_token = require_field(data, TMDBResponseKeys.REQUEST_TOKEN, str)
        self.state = HandshakeState.AWAITING_VALIDATION

    def _login_with_token(self) -> None:
        # The service does not issue a new token here; the same token is
        # exchanged for the session in the next step.
        data = self._request('authentication', 'validate_with_login', {
            TMDBParameterKeys.REQUEST_TOKEN: self.session.request_token,
            TMDBParameterKeys.USERNAME: self.credentials.username,
            TMDBParameterKeys.PASSWORD: self.credentials.password,
        })
        require_field(data, TMDBResponseKeys.SUCCESS, bool)
        self.state = HandshakeState.AWAITING_SESSION

    def _get_session_id(self) -> None:
        data = self._request('authentication', 'new_session', {
            TMDBParameterKeys.REQUEST_TOKEN: self.session.request_token,
        })
        self.session.session_id = require_field(data, TMDBResponseKeys.SESSION_ID, str)
        self.state = HandshakeState.AWAITING_USER_ID

    def _get_user_id(self) -> None:
        data = self._request('account', 'details', {
            TMDBParameterKeys.SESSION_ID: self.session.session_id,
        })
        self.session.user_id = require_field(data, TMDBResponseKeys.USER_ID, int)
        self._complete()

    # Internals

    def _run_step(self, state: HandshakeState, body: Callable[[], None]) -> None:
        """Run one step, converting anything it raises into a failure"""
        self._expect(state)
        step = self.STEPS[state]
        try:
            if self.cancellation is not None and self.cancellation.cancelled:
                raise CancelledError(f"Login was cancelled before {step}")
            logger.info(f"Running handshake step: {step}")
            body()
        except Exception as e:
            self._fail(HandshakeFailure.from_error(ErrorHandler.handle_step_error(step, e)))

    def _request(self, group: str, action: str, params: Dict[str, Any]) -> Dict[str, Any]:
        """Issue one request and return its decoded, error-checked body"""
        result = self.client.get(TMDBEndpoints.get_path(group, action), params)
        check_status(result)
        data = decode_response(result.body)
        raise_for_service_error(data)
        return data

    def _expect(self, state: HandshakeState) -> None:
        if self.state is not state:
            raise HandshakeStateError(
                f"Expected state {state.value}, sequencer is {self.state.value}"
            )

    def _complete(self) -> None:
        self.state = HandshakeState.DONE
        self.result = HandshakeSuccess(
            session_id=self.session.session_id,
            user_id=self.session.user_id
        )
        # Credentials are not kept past the handshake
        self.credentials = None
        logger.info(f"Login successful for user id {self.session.user_id}")

    def _fail(self, failure: HandshakeFailure) -> None:
        self.state = HandshakeState.FAILED
        self.result = failure
        self.credentials = None
