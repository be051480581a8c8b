"""
a client for moving MobiHub artifacts (dataset archives, images, profile pictures) to and from
a Nextcloud file store and for publishing them via public share links.

This package includes the following components:

:py:mod:`client`
    :py:class:`FileStorageClient`, the facade the rest of the application uses
:py:mod:`upload`
    single-request and chunked uploaders
:py:mod:`download`
    creation of public share links and direct downloads
:py:mod:`remove`
    deletion of remote files
:py:mod:`dirs`
    idempotent creation of the remote directories files are uploaded into
:py:mod:`auth`
    authentication of requests to the file store
:py:mod:`paths`
    the layout of MobiHub artifacts within the file store
:py:mod:`cli`
    a command-line interface to the client

Nextcloud APIs Used
===================

Files are read and written via Nextcloud's WebDAV interface (rooted at
``{base}/remote.php/dav``):  a user's files live under ``files/{user}/`` and chunked upload
sessions under ``uploads/{user}/``.  Share links are created with the OCS sharing API
(``{base}/ocs/v2.php/apps/files_sharing/api/v1/shares``), and a share is downloaded publicly
from ``{base}/s/{token}/download/{filename}``.

None of the components retry failed requests; errors (see :py:mod:`exceptions`) are raised
to the caller immediately.
"""
from .exceptions import *
from .auth import Authenticator, BasicAuthenticator
from .share import ShareLink
from .client import FileStorageClient
