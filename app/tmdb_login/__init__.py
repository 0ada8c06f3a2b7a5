"""TheMovieDB login handshake

Packages:
- config: settings, logging and TheMovieDB constants
- core: HTTP client, response decoding and error handling
- services.tmdb: the authentication handshake and its entry points
"""
