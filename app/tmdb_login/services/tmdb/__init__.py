"""TheMovieDB Service Package

This package authenticates a user against TheMovieDB API: request token,
credential validation, session creation and account id resolution.
"""

from tmdb_login.core.error.exceptions import (APIException, CancelledError,
                                   ConfigurationException, DecodeError,
                                   HandshakeStateError, HttpStatusError,
                                   MissingFieldError, ServiceError,
                                   TransportError)
from .types import (CancellationToken, Credentials, HandshakeFailure,
                    HandshakeResult, HandshakeState, HandshakeSuccess,
                    SessionState)
from .config import TMDBConfig, TMDBEndpoints
from .auth import AuthenticationSequencer
from .service import TMDBAuthService, get_tmdb_service, login

__all__ = [
    # Entry points
    'login',
    'get_tmdb_service',
    'TMDBAuthService',
    'AuthenticationSequencer',

    # Data model
    'CancellationToken',
    'Credentials',
    'HandshakeFailure',
    'HandshakeResult',
    'HandshakeState',
    'HandshakeSuccess',
    'SessionState',

    # Configuration
    'TMDBConfig',
    'TMDBEndpoints',

    # Exceptions
    'APIException',
    'ConfigurationException',
    'CancelledError',
    'DecodeError',
    'HandshakeStateError',
    'HttpStatusError',
    'MissingFieldError',
    'ServiceError',
    'TransportError',
]
