"""
Uploaders that put local files into the Nextcloud file store.

Two strategies are provided:

:py:class:`SimpleUploader`
    sends the whole file in a single PUT request; suitable for small files (up to 10 MB).
:py:class:`ChunkedUploader`
    uses Nextcloud's chunked upload protocol (v2):  an upload session is created as a collection
    under the user's ``uploads`` space, the file is PUT into it as a sequence of numbered chunks,
    and finally the chunks are assembled into the destination file by MOVE-ing the session's
    special ``.file`` item.  Every request names the final destination, and the chunk and
    assembly requests state the total length of the file so that the server can check the
    assembly.

Both create the directories leading to the destination before uploading.  An unassembled
session left behind by a failed chunked upload is not cleaned up here; the server removes
such sessions after 24 hours.
"""
import os, uuid, logging
from contextlib import closing
from typing import Iterator

import requests

from .base import NextcloudComponent, DESTINATION_HEADER, TOTAL_LENGTH_HEADER, DEF_DAV_PATH
from .auth import Authenticator
from .dirs import DirectoryCreator
from .exceptions import *

SIMPLE_UPLOAD_LIMIT = 10000000      # 10 MB
DEF_CHUNK_SIZE = 10000000           # 10 MB
MIN_CHUNK_SIZE = 5000000            # 5 MB
MAX_CHUNK_SIZE = 5000000000         # 5 GB
MAX_CHUNK_COUNT = 10000

ASSEMBLY_ITEM = ".file"

def split_file(filepath: str, chunk_size: int) -> Iterator[bytes]:
    """
    lazily read a file as a sequence of byte chunks, each ``chunk_size`` bytes long except
    possibly the last.  The file is opened when the first chunk is requested and closed once
    the sequence is exhausted or the generator is closed.
    """
    with open(filepath, 'rb') as fd:
        while True:
            chunk = fd.read(chunk_size)
            if not chunk:
                break
            yield chunk

class Uploader(NextcloudComponent):
    """
    a base class for uploading a local file to a location in the remote file store
    """
    _logname = "filestore.upload"

    def __init__(self, base_url: str, auth: Authenticator, session: requests.Session,
                 log: logging.Logger=None, dav_path: str=DEF_DAV_PATH, timeout: float=None):
        super(Uploader, self).__init__(base_url, auth, session, log, dav_path, timeout)
        self.dirs = DirectoryCreator(base_url, auth, session, self.log.getChild("dirs"),
                                     dav_path, timeout)

    def upload(self, filepath: str, target_path: str):
        """
        upload the given file to the given remote path, creating any missing parent directories.
        :param str    filepath:  the path to the local file to upload
        :param str target_path:  the path, relative to the user's file space, to upload to
        :raises InvalidLocalFile:  if the local file does not exist, is empty, or is too large
                                   for this uploader
        :raises UnexpectedRemoteResponse:  if the server responds to a request with an error
        """
        raise NotImplementedError()

    def _check_file(self, filepath: str) -> int:
        # return the file's size, ensuring it exists and is not empty
        if not os.path.isfile(filepath) or os.path.getsize(filepath) == 0:
            msg = f"The file with the path {filepath} does not exist or is empty"
            self.log.error(msg)
            raise InvalidLocalFile(filepath, msg)
        return os.path.getsize(filepath)


class SimpleUploader(Uploader):
    """
    an uploader that sends a file's full contents in a single request.  Files larger than
    ``max_size`` (default: 10 MB) are rejected.
    """

    def __init__(self, base_url: str, auth: Authenticator, session: requests.Session,
                 log: logging.Logger=None, dav_path: str=DEF_DAV_PATH, timeout: float=None,
                 max_size: int=SIMPLE_UPLOAD_LIMIT):
        super(SimpleUploader, self).__init__(base_url, auth, session, log, dav_path, timeout)
        self.max_size = max_size

    def upload(self, filepath: str, target_path: str):
        size = self._check_file(filepath)
        if size > self.max_size:
            msg = f"The file with the path {filepath} is too large ({size} bytes)"
            self.log.error(msg)
            raise InvalidLocalFile(filepath, msg)

        self.dirs.ensure_directories(target_path)

        with open(filepath, 'rb') as fd:
            data = fd.read()
        self._request("PUT", self.file_url(target_path), "Could not upload file", data=data)
        self.log.info("Uploaded file %s", target_path)


class ChunkedUploader(Uploader):
    """
    an uploader that sends a file in chunks of ``chunk_size`` bytes using Nextcloud's chunked
    upload protocol.  This is suitable for large files.  The chunk size must be between 5 MB
    and 5 GB, and a file may be split into at most 10000 chunks.

    Chunks are sent strictly in order, one at a time; the first failure aborts the upload.
    """

    def __init__(self, base_url: str, auth: Authenticator, session: requests.Session,
                 log: logging.Logger=None, dav_path: str=DEF_DAV_PATH, timeout: float=None,
                 chunk_size: int=DEF_CHUNK_SIZE):
        super(ChunkedUploader, self).__init__(base_url, auth, session, log, dav_path, timeout)
        if chunk_size < MIN_CHUNK_SIZE or chunk_size > MAX_CHUNK_SIZE:
            self.log.error("Chunk size must be between 5MB and 5GB")
            raise ValueError("Chunk size must be between 5MB and 5GB: "+str(chunk_size))
        self.chunk_size = chunk_size

    def upload(self, filepath: str, target_path: str):
        size = self._check_file(filepath)
        if size > self.chunk_size * MAX_CHUNK_COUNT:
            msg = "The file with the path %s is too large for the chunk size (%sMB)" % \
                  (filepath, self.chunk_size / 1e6)
            self.log.error(msg)
            raise InvalidLocalFile(filepath, msg)

        self.dirs.ensure_directories(target_path)

        session_id = str(uuid.uuid4())
        destination = self.file_url(target_path)
        self.create_session(session_id, destination)

        with closing(split_file(filepath, self.chunk_size)) as chunks:
            for num, chunk in enumerate(chunks, 1):
                self.upload_chunk(session_id, num, chunk, size, destination)

        self.assemble(session_id, size, destination)
        self.log.info("Assembled file %s", target_path)

    def create_session(self, session_id: str, destination: str):
        """
        open an upload session on the server
        :param str  session_id:  a unique name for the session
        :param str destination:  the full URL of the file that will be assembled
        """
        self._request("MKCOL", self.upload_url(session_id), "Could not create upload session",
                      headers={DESTINATION_HEADER: destination})
        self.log.info("Created upload session with ID: %s", session_id)

    def upload_chunk(self, session_id: str, num: int, chunk: bytes, total: int, destination: str):
        """
        upload one chunk into an open upload session
        :param str  session_id:  the name of the session
        :param int         num:  the chunk's 1-based sequence number
        :param bytes     chunk:  the chunk's contents
        :param int       total:  the length of the complete file (not of this chunk)
        :param str destination:  the full URL of the file that will be assembled
        """
        self._request("PUT", self.upload_url(session_id, "%04d" % num), "Could not upload chunk",
                      data=chunk, headers={DESTINATION_HEADER: destination,
                                           TOTAL_LENGTH_HEADER: str(total)})
        self.log.info("Uploaded chunk %04d of size %.02fMB", num, len(chunk) / 1e6)

    def assemble(self, session_id: str, total: int, destination: str):
        """
        assemble the chunks uploaded to a session into the destination file
        """
        self._request("MOVE", self.upload_url(session_id, ASSEMBLY_ITEM), "Could not assemble file",
                      headers={DESTINATION_HEADER: destination, TOTAL_LENGTH_HEADER: str(total)})
