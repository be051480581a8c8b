"""
Support for authenticating requests to the Nextcloud file store.

Every request issued by this package is decorated by a single :py:class:`Authenticator`
instance that is shared by all components; it both attaches credentials to an outgoing request
and supplies the user identity used to build user-scoped remote paths.  The only scheme used
against the WebDAV and sharing APIs is HTTP Basic authentication
(:py:class:`BasicAuthenticator`).
"""
import logging
from collections.abc import Mapping

import requests
from requests.auth import AuthBase, HTTPBasicAuth

from mobihub.base.config import ConfigurationException

class Authenticator(AuthBase):
    """
    a decorator of outgoing requests that attaches credentials to them.  Instances are callable
    so that they can be handed directly to ``requests`` via its ``auth`` parameter.
    """

    def attach(self, request: requests.PreparedRequest) -> requests.PreparedRequest:
        """
        return the given request with credentials embedded into it
        """
        raise NotImplementedError()

    def identity(self) -> str:
        """
        return the name of the user that requests are authenticated as.  This is used to build
        the user-scoped paths into the remote file store.
        """
        raise NotImplementedError()

    def __call__(self, request):
        return self.attach(request)


class BasicAuthenticator(Authenticator):
    """
    an :py:class:`Authenticator` that adds an HTTP Basic ``Authorization`` header built from a
    username and password.  Neither value is checked locally; if they are wrong, the remote
    server will reject the requests.
    """

    def __init__(self, user: str, password: str):
        self._basic = HTTPBasicAuth(user, password)

    def attach(self, request):
        return self._basic(request)

    def identity(self):
        return self._basic.username

    def __eq__(self, other):
        return isinstance(other, BasicAuthenticator) and self._basic == other._basic

    def __repr__(self):
        return f"BasicAuthenticator({self._basic.username!r}, ****)"


def authenticator_from_config(authcfg: Mapping, log: logging.Logger=None) -> Authenticator:
    """
    create an :py:class:`Authenticator` from an ``authentication`` configuration object.  The
    object must contain the following parameters:

    ``user``
        _str_.  the user name of the identity to authenticate as
    ``pass``
        _str_.  the password to authenticate with

    :param dict authcfg:  the authentication configuration
    :raises ConfigurationException:  if either parameter is missing
    """
    if not authcfg:
        authcfg = {}
    for param in ('user', 'pass'):
        if not authcfg.get(param):
            raise ConfigurationException("Missing required config parameter: authentication." +
                                         param)

    if log:
        log.debug("Authenticating to the file store as %s", authcfg['user'])
    return BasicAuthenticator(authcfg['user'], authcfg['pass'])
