"""
Deletion of files and directories from the file store
"""
from .base import NextcloudComponent

NOT_FOUND = 404

class Remover(NextcloudComponent):
    """
    a component that deletes remote files.  Deleting a resource that does not exist (404) is
    not an error, so removal can safely be repeated.
    """
    _logname = "filestore.remove"

    def remove(self, target_path: str):
        """
        delete the file or directory at the given path
        :param str target_path:  the path of the resource, relative to the user's file space
        :raises UnexpectedRemoteResponse:  if the server fails to delete an existing resource
        """
        self.log.info("Start removing file at %s", target_path)
        resp = self._request("DELETE", self.file_url(target_path), "Could not remove file",
                             accept=(NOT_FOUND,))
        if resp.status_code == NOT_FOUND:
            self.log.info("Nothing to remove at %s", target_path)
        else:
            self.log.info("Successfully removed file at %s", target_path)
