"""
The description of a public share of a file in the file store
"""
from collections import namedtuple

LINK_FORMAT = "{0}/s/{1}/download/{2}"

class ShareLink(namedtuple('ShareLink', "token path expiration")):
    """
    a reference to a public ("link") share of a remote file that allows it to be downloaded
    without further authentication.

    :ivar str token:       the share token issued by the server
    :ivar str path:        the remote path of the shared file as resolved by the server
    :ivar str expiration:  the expiration time reported by the server, or None if the share
                           does not expire
    """
    __slots__ = ()

    def __new__(cls, token: str, path: str, expiration: str=None):
        return super(ShareLink, cls).__new__(cls, token, path, expiration)

    @property
    def file_name(self) -> str:
        """
        the name of the shared file (the last segment of its path)
        """
        return self.path.rstrip('/').rsplit('/', 1)[-1]

    def url(self, base_url: str) -> str:
        """
        return the public download URL for the shared file
        :param str base_url:  the base URL of the Nextcloud instance
        """
        return LINK_FORMAT.format(base_url.rstrip('/'), self.token, self.file_name)
