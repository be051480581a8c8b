"""
This module provides :py:class:`FileStorageClient`, the single entry point that the rest of the
MobiHub application uses to move artifacts to and from the Nextcloud file store.  It composes
the uploaders, the downloader, and the remover, all sharing one HTTP session and one
:py:class:`~mobihub.filestore.auth.Authenticator`.
"""
import os, logging
from collections.abc import Mapping

import requests

from mobihub.base.config import ConfigurationException
from .auth import Authenticator, authenticator_from_config
from .base import DEF_DAV_PATH
from .upload import SimpleUploader, ChunkedUploader, DEF_CHUNK_SIZE, SIMPLE_UPLOAD_LIMIT
from .download import Downloader, DEF_OCS_SHARE_PATH
from .remove import Remover
from .share import ShareLink

CHUNKED_THRESHOLD = 10000000

class FileStorageClient:
    """
    a client for storing and retrieving files in a Nextcloud file store.  Files larger than
    ``chunked_threshold`` bytes are uploaded in chunks; smaller ones in a single request.

    A client is usually created from a configuration via :py:meth:`from_config`, which supports
    the following parameters:

    ``service_endpoint``
        (str) _required_.  the base URL of the Nextcloud instance.
    ``authentication``
        (dict) _required_.  the data required for authenticating to the service; see
        :py:func:`~mobihub.filestore.auth.authenticator_from_config` for its sub-parameters.
    ``ca_bundle``
        (str) _optional_.  the path to a CA certificate bundle that should be used to validate
        the remote server's site certificate.  If not provided, the CAs installed into the OS
        will be used.
    ``site_cert_verify``
        (bool) _optional_.  if False, the server's site certificate will not be verified
        (default: True).
    ``timeout``
        (float) _optional_.  the number of seconds to wait on the server before giving up on a
        request; by default, requests wait indefinitely.
    ``chunk_size``
        (int) _optional_.  the size in bytes of the chunks used for chunked uploads (default:
        10000000).  It must be between 5 MB and 5 GB.
    ``chunked_threshold``
        (int) _optional_.  files larger than this size in bytes are uploaded in chunks
        (default: 10000000).
    ``simple_upload_limit``
        (int) _optional_.  the largest file size in bytes the single-request uploader will
        accept (default: 10000000).  It may not be smaller than ``chunked_threshold``.
    ``download_dir``
        (str) _optional_.  the local directory to write downloaded files into (default: the
        system temporary directory).
    ``dav_path``
        (str) _optional_.  the path to the WebDAV root relative to ``service_endpoint``
        (default: "remote.php/dav").
    ``ocs_share_path``
        (str) _optional_.  the path to the OCS shares endpoint relative to ``service_endpoint``
        (default: "ocs/v2.php/apps/files_sharing/api/v1/shares").
    """

    def __init__(self, base_url: str, auth: Authenticator, session: requests.Session=None,
                 log: logging.Logger=None, chunk_size: int=DEF_CHUNK_SIZE,
                 chunked_threshold: int=CHUNKED_THRESHOLD, simple_upload_limit: int=SIMPLE_UPLOAD_LIMIT,
                 download_dir: str=None, dav_path: str=DEF_DAV_PATH,
                 ocs_share_path: str=DEF_OCS_SHARE_PATH, timeout: float=None):
        if simple_upload_limit < chunked_threshold:
            # files between the two sizes could not be uploaded at all
            raise ValueError("simple_upload_limit (%d) is smaller than chunked_threshold (%d)" %
                             (simple_upload_limit, chunked_threshold))
        if not log:
            log = logging.getLogger("filestore.client")
        self.log = log
        self.base_url = base_url.rstrip('/')
        self._owns_session = session is None
        if session is None:
            session = requests.Session()
        self.session = session
        self.chunked_threshold = chunked_threshold

        self.simple_uploader = SimpleUploader(base_url, auth, session, log.getChild("upload"),
                                              dav_path, timeout, max_size=simple_upload_limit)
        self.chunked_uploader = ChunkedUploader(base_url, auth, session, log.getChild("upload"),
                                                dav_path, timeout, chunk_size=chunk_size)
        self.downloader = Downloader(base_url, auth, session, log.getChild("download"), dav_path,
                                     timeout, ocs_share_path, download_dir)
        self.remover = Remover(base_url, auth, session, log.getChild("remove"), dav_path, timeout)

    @classmethod
    def from_config(cls, config: Mapping, log: logging.Logger=None):
        """
        create a client from the given configuration; see the class documentation for the
        supported parameters.
        :raises ConfigurationException:  if required parameters are missing or values are invalid
        """
        base_url = config.get("service_endpoint")
        if not base_url:
            raise ConfigurationException("FileStorageClient: Missing required config parameter: "+
                                         "service_endpoint")

        auth = authenticator_from_config(config.get("authentication"), log)

        kw = {}
        for param in "chunk_size chunked_threshold simple_upload_limit".split():
            if config.get(param) is not None:
                try:
                    kw[param] = int(config[param])
                except (TypeError, ValueError) as ex:
                    raise ConfigurationException(f"FileStorageClient: {param}: not an integer: " +
                                                 str(config[param]), ex) from ex
        if config.get("timeout") is not None:
            try:
                kw['timeout'] = float(config["timeout"])
            except (TypeError, ValueError) as ex:
                raise ConfigurationException("FileStorageClient: timeout: not a number: " +
                                             str(config["timeout"]), ex) from ex
        for param in "download_dir dav_path ocs_share_path".split():
            if config.get(param):
                kw[param] = config[param]

        session = requests.Session()
        if not config.get('site_cert_verify', True):
            session.verify = False
        elif config.get("ca_bundle"):
            session.verify = config['ca_bundle']

        try:
            out = cls(base_url, auth, session, log, **kw)
        except ValueError as ex:
            session.close()
            raise ConfigurationException("FileStorageClient: "+str(ex), ex) from ex
        out._owns_session = True
        return out

    def upload(self, filepath: str, target_path: str):
        """
        upload a local file to the given remote path, choosing the upload strategy by the
        file's size.
        :param str    filepath:  the path to the local file to upload
        :param str target_path:  the path, relative to the user's file space, to upload to
        :raises InvalidLocalFile:  if the local file does not exist, is empty, or is too large
        :raises UnexpectedRemoteResponse:  if the server responds to a request with an error
        """
        size = os.path.getsize(filepath) if os.path.isfile(filepath) else 0
        if size > self.chunked_threshold:
            self.log.debug("Uploading %s (%d bytes) in chunks", filepath, size)
            self.chunked_uploader.upload(filepath, target_path)
        else:
            self.simple_uploader.upload(filepath, target_path)

    def remove(self, target_path: str):
        """
        delete the remote file at the given path; it is not an error if it does not exist.
        """
        self.remover.remove(target_path)

    def get_download_reference(self, target_path: str, should_expire: bool=False) -> ShareLink:
        """
        create a public share link for the remote file at the given path.
        :param bool should_expire:  if True, the share will expire two days from today
        """
        return self.downloader.get_download_reference(target_path, should_expire)

    def download(self, target_path: str) -> str:
        """
        download the remote file at the given path, returning the path to the local copy
        """
        return self.downloader.download_file(target_path)

    def share_url(self, link: ShareLink) -> str:
        """
        return the public download URL for the given share link on this client's file store
        """
        return link.url(self.base_url)

    def close(self):
        """
        release the HTTP session if this client created it
        """
        if self._owns_session:
            self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, tb):
        self.close()
        return False
