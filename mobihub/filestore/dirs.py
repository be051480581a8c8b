"""
Provisioning of the remote directories (WebDAV collections) that files are uploaded into.
"""
from .base import NextcloudComponent
from .paths import parent_dirs

METHOD_NOT_ALLOWED = 405

class DirectoryCreator(NextcloudComponent):
    """
    a component that ensures that all of the ancestor directories of a remote file path exist.
    Directories are created parents first because the server will not create a collection
    inside one that does not exist.  Creation is idempotent: the server answers 405 (Method
    Not Allowed) for a collection that already exists, and that is treated as success.
    """
    _logname = "filestore.dirs"

    def ensure_directories(self, target_path: str):
        """
        create each of the directories that contain the file at the given remote path
        :param str target_path:  the remote path of a file (not a directory)
        :raises UnexpectedRemoteResponse:  if the server fails to create one of the directories
        """
        for dirpath in parent_dirs(target_path):
            self.create_directory(dirpath)
        self.log.info("Ensured directories for file: %s", target_path)

    def create_directory(self, path: str):
        """
        create a single directory whose parent is assumed to exist.  No error is raised if the
        directory already exists.
        """
        self._request("MKCOL", self.file_url(path), "Could not create directory",
                      accept=(METHOD_NOT_ALLOWED,))
        self.log.debug("Created directory: %s", path)
