"""
Retrieval of files from the file store, either directly (as a download to a local file) or
indirectly by creating a public share link that others can download from.

Share links are created via Nextcloud's OCS sharing API, which responds with an XML document
describing the new share.
"""
import os, json, logging, tempfile
from contextlib import closing
from datetime import date, timedelta

import requests
from lxml import etree

from .base import NextcloudComponent, strip_path, DEF_DAV_PATH
from .auth import Authenticator
from .share import ShareLink
from .exceptions import *

DEF_OCS_SHARE_PATH = "ocs/v2.php/apps/files_sharing/api/v1/shares"
SHARE_TYPE_PUBLIC_LINK = 3
PERMISSION_READ = 1
EXPIRATION_DAYS = 2
DATE_FORMAT = "%Y-%m-%d"
DOWNLOAD_BUFFER_SIZE = 1024 * 1024

OCS_HEADERS = {
    "Content-Type": "application/json",
    "OCS-APIRequest": "true"
}

def expiration_date(days: int=EXPIRATION_DAYS, today: date=None) -> str:
    """
    return the date that is the given number of days after today, formatted as YYYY-MM-DD
    """
    if not today:
        today = date.today()
    return (today + timedelta(days=days)).strftime(DATE_FORMAT)

def parse_share_response(content, ep: str=None) -> ShareLink:
    """
    extract the share description from the XML document returned by the OCS sharing API.
    The ``path``, ``token``, and ``expiration`` elements must all be present (though the
    expiration may be empty when the share does not expire).

    :param content:  the XML response body (as bytes or str)
    :param str  ep:  the endpoint the response came from (for error messages)
    :raises MalformedRemoteResponse:  if the content is not XML or is missing a required element
    """
    if isinstance(content, str):
        content = content.encode('utf-8')
    content = content or b''
    try:
        root = etree.fromstring(content.strip())
    except (etree.XMLSyntaxError, ValueError) as ex:
        raise MalformedRemoteResponse("Could not parse XML response: "+str(ex), ep,
                                      content.decode('utf-8', 'replace')) from ex

    vals = {}
    for prop in ("path", "token", "expiration"):
        found = root.xpath("//"+prop)
        if not found:
            raise MalformedRemoteResponse(f"Could not parse XML response: missing {prop}", ep,
                                          content.decode('utf-8', 'replace'))
        vals[prop] = (found[0].text or '').strip()

    if not vals['token'] or not vals['path']:
        raise MalformedRemoteResponse("Could not parse XML response: empty token or path", ep,
                                      content.decode('utf-8', 'replace'))

    return ShareLink(vals['token'], vals['path'], vals['expiration'] or None)


class Downloader(NextcloudComponent):
    """
    a component for creating public share links to remote files and for downloading them.

    :param str ocs_share_path:  the path, relative to the base URL, of the OCS shares endpoint
    :param str   download_dir:  the local directory to write downloaded files into; if not
                                provided, the system's temporary directory is used.
    """
    _logname = "filestore.download"

    def __init__(self, base_url: str, auth: Authenticator, session: requests.Session,
                 log: logging.Logger=None, dav_path: str=DEF_DAV_PATH, timeout: float=None,
                 ocs_share_path: str=DEF_OCS_SHARE_PATH, download_dir: str=None):
        super(Downloader, self).__init__(base_url, auth, session, log, dav_path, timeout)
        self.share_url = self.base_url + '/' + strip_path(ocs_share_path)
        self.download_dir = download_dir

    def get_download_reference(self, target_path: str, should_expire: bool=False) -> ShareLink:
        """
        create a read-only public link share for the remote file at the given path.
        :param str   target_path:  the path of the file, relative to the user's file space
        :param bool should_expire: if True, the share will expire two days from today
        :raises UnexpectedRemoteResponse:  if the server does not create the share
        :raises MalformedRemoteResponse:   if the server's response cannot be parsed
        """
        body = {
            "path": "/" + strip_path(target_path),
            "shareType": SHARE_TYPE_PUBLIC_LINK,
            "permissions": PERMISSION_READ
        }
        if should_expire:
            body["expireDate"] = expiration_date()

        resp = self._request("POST", self.share_url, "Could not get download reference",
                             data=json.dumps(body), headers=dict(OCS_HEADERS))
        try:
            out = parse_share_response(resp.content, self.share_url)
        except MalformedRemoteResponse as ex:
            self.log.error("%s: %s", target_path, str(ex))
            raise

        self.log.info("Got download reference for file %s", target_path)
        return out

    def download_file(self, target_path: str) -> str:
        """
        download the remote file at the given path to a newly created local file.  The
        caller is responsible for removing the local file when it is no longer needed.
        :param str target_path:  the path of the file, relative to the user's file space
        :return:  the path to the local copy of the file
        :rtype: str
        :raises UnexpectedRemoteResponse:  if the server does not return the file
        :raises FileStoreException:  if the local copy cannot be created or written
        """
        url = self.file_url(target_path)
        resp = self._request("GET", url, "Could not download file", stream=True)

        ext = os.path.splitext(strip_path(target_path))[1]
        with closing(resp):
            try:
                fd, filepath = tempfile.mkstemp(suffix=ext, prefix="file-", dir=self.download_dir)
            except OSError as ex:
                self.log.error("Could not create download file in %s: %s",
                               self.download_dir or tempfile.gettempdir(), str(ex))
                raise FileStoreException("Could not create local file for download: " +
                                         str(ex)) from ex

            try:
                with os.fdopen(fd, 'wb') as outf:
                    for data in resp.iter_content(chunk_size=DOWNLOAD_BUFFER_SIZE):
                        outf.write(data)
            except requests.RequestException as ex:
                os.remove(filepath)
                self.log.error("Could not download file %s: %s", target_path, str(ex))
                raise FileStoreCommError("Could not download file: "+str(ex), url) from ex
            except OSError as ex:
                os.remove(filepath)
                self.log.error("Could not write downloaded file %s: %s", filepath, str(ex))
                raise FileStoreException("Could not write downloaded file: "+str(ex)) from ex

        self.log.info("Downloaded file %s", target_path)
        return filepath
