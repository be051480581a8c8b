"""
Common plumbing for the components that talk to a Nextcloud instance:  building the URLs for
the WebDAV file and upload spaces and issuing authenticated requests whose response status is
checked against an operation-specific set of acceptable codes.
"""
import logging
from urllib.parse import quote

import requests

from .auth import Authenticator
from .exceptions import *

RESPONSE_SUCCESSFUL = range(200, 300)
DEF_DAV_PATH = "remote.php/dav"

DESTINATION_HEADER = "Destination"
TOTAL_LENGTH_HEADER = "OC-Total-Length"

def strip_path(path: str) -> str:
    """
    normalize a remote path by removing leading and trailing slashes
    """
    return (path or '').strip('/')

class NextcloudComponent:
    """
    a base class for components that issue requests to a Nextcloud instance.  All components
    built for the same instance share the same HTTP session and :py:class:`~mobihub.filestore.auth.Authenticator`.

    :param str            base_url:  the base URL of the Nextcloud instance
    :param Authenticator      auth:  the authenticator that decorates all requests
    :param requests.Session session: the HTTP session to send requests through
    :param Logger              log:  the Logger to send messages to; if not provided, a logger
                                     named after the component will be used.
    :param str            dav_path:  the path to the WebDAV root relative to ``base_url``
    :param float           timeout:  the time in seconds to wait on the server before giving up
                                     (None means wait forever)
    """
    _logname = "filestore"

    def __init__(self, base_url: str, auth: Authenticator, session: requests.Session,
                 log: logging.Logger=None, dav_path: str=DEF_DAV_PATH, timeout: float=None):
        if not log:
            log = logging.getLogger(self._logname)
        self.log = log
        self.base_url = base_url.rstrip('/')
        self.auth = auth
        self.session = session
        self.timeout = timeout
        self.dav_url = self.base_url
        if strip_path(dav_path):
            self.dav_url += '/' + strip_path(dav_path)

    def file_url(self, path: str) -> str:
        """
        return the WebDAV URL for the given path within the authenticated user's file space
        """
        return "%s/files/%s/%s" % (self.dav_url, quote(self.auth.identity()),
                                   quote(strip_path(path)))

    def upload_url(self, session_id: str, name: str=None) -> str:
        """
        return the WebDAV URL for a chunked upload session or, if ``name`` is given, for an
        item within it
        """
        out = "%s/uploads/%s/%s" % (self.dav_url, quote(self.auth.identity()), quote(session_id))
        if name:
            out += '/' + quote(name)
        return out

    def _request(self, method: str, url: str, errmsg: str, accept=(), **kwargs) -> requests.Response:
        """
        send an authenticated request and return the response if its status is successful
        (2xx) or otherwise listed in ``accept``.

        :param str method:  the HTTP method
        :param str    url:  the full URL to send the request to
        :param str errmsg:  a description of the failure to use if the status is not acceptable
        :param accept:      additional status codes that are considered successful
        :param kwargs:      other arguments to pass to :py:meth:`requests.Session.request`
        :raises UnexpectedRemoteResponse:  if the response status is not acceptable
        :raises FileStoreCommError:  if the request could not be sent or the response not received
        """
        if self.timeout is not None:
            kwargs.setdefault('timeout', self.timeout)

        self.log.debug("%s %s", method, url)
        try:
            resp = self.session.request(method, url, auth=self.auth, **kwargs)
        except requests.RequestException as ex:
            self.log.error("%s: %s %s failed: %s", errmsg, method, url, str(ex))
            raise FileStoreCommError(f"{errmsg}: {str(ex)}", url) from ex

        if resp.status_code not in RESPONSE_SUCCESSFUL and resp.status_code not in accept:
            self.log.error("%s (%s): %s\nResponse body:\n%s", errmsg, resp.status_code, url, resp.text)
            raise UnexpectedRemoteResponse(resp.status_code, url, resp.text,
                                           "%s (%s): %s" % (errmsg, resp.status_code, url))

        return resp
