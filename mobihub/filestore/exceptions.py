"""
Customized exceptions that allow code to handle error conditions
"""

class FileStoreException(Exception):
    """
    an exception indicating a problem moving files to or from the remote file store.

    This class serves as a base class for all exceptions raised in this package
    """

    def __init__(self, message: str=None):
        if not message:
            message = "Unspecified problem accessing the remote file store"
        super(FileStoreException, self).__init__(message)


class InvalidLocalFile(FileStoreException):
    """
    an exception indicating that a local file given as input cannot be sent to the file store:
    it does not exist, it is empty, or it is too large for the selected upload strategy.  This
    is always detected before any request is made to the remote service.
    """

    def __init__(self, filepath: str=None, message: str=None):
        """
        create the exception

        :param str filepath:  the path to the offending local file
        :param str  message:  an explanation of the problem
        """
        if not message:
            message = "Invalid local file"
            if filepath:
                message += f": {filepath}"
        super(InvalidLocalFile, self).__init__(message)
        self.filepath = filepath


class FileStoreServiceError(FileStoreException):
    """
    an exception indicating an error occurred while accessing a file store service endpoint.

    This class serves as a base class for more specific service access errors.
    """

    def __init__(self, message: str=None, ep: str=None, code: int=0, resptext: str=None):
        """
        create the exception

        :param str message:  an explanation of the cause of the error
        :param str ep:       the service endpoint that was being accessed
        :param int code:     the HTTP response code that was returned (if service responded)
        :param str resptext: the erroroneous response body that was returned, as text (if service responded)
        """
        if not message:
            message = "Error accessing the file store"
            if ep:
                message += f" at {ep}"
            if code:
                message += f" ({str(code)})"
            if resptext:
                message += f"; unhandlable response:\n{resptext}"
        super(FileStoreServiceError, self).__init__(message)
        self.ep = ep
        self.code = code or 0
        self.response = resptext


class UnexpectedRemoteResponse(FileStoreServiceError):
    """
    an error indicating that the remote service responded with a status code outside of the
    set accepted for the operation (after allowing for per-operation tolerances like "already
    exists" or "not found").
    """

    def __init__(self, code: int=0, ep: str=None, resptext: str=None, message: str=None):
        """
        create the exception
        :param int code:     the HTTP response code that was returned
        :param str ep:       the service endpoint that was being accessed
        :param str resptext: the response body that was returned, as text
        :param str message:  an explanation of the cause of the error
        """
        if not message:
            message = "Unexpected response from file store"
            if ep:
                message += f" while accessing {ep}"
            if code:
                message += f": HTTP code: {str(code)}"
            if resptext:
                message += f"\nResponse body:\n{resptext}"
        super(UnexpectedRemoteResponse, self).__init__(message, ep, code, resptext)


class MalformedRemoteResponse(FileStoreServiceError):
    """
    an error that indicates that the remote service responded with content that cannot be
    processed.  The code may reflect a successful operation, but the returned content could
    not be parsed into the fields required (e.g. due to format errors).
    """

    def __init__(self, message: str=None, ep: str=None, resptext: str=None, code: int=0):
        """
        create the exception
        :param str message:  an explanation of the cause of the error
        :param str ep:       the service endpoint that was being accessed
        :param str resptext: the erroroneous response body that was returned, as text
        :param int code:     the HTTP response code that was returned
        """
        if not message:
            message = "Unparseable content returned from file store"
            if ep:
                message += f" while accessing {ep}"
            if resptext:
                message += f"; unhandlable response:\n{resptext}"
        super(MalformedRemoteResponse, self).__init__(message, ep, code, resptext)


class FileStoreCommError(FileStoreServiceError):
    """
    an error indicating a failure communicating with the remote file store.  This error
    typically covers network related errors, like failures to connect, dropped connection, DNS
    errors, etc.  Typically, the remote service did not get a chance to respond directly to the
    request.
    """
    def __init__(self, message: str=None, ep: str=None):
        """
        create the exception

        :param str message:  an explanation of the cause of the error
        :param str ep:       the service endpoint that was being accessed
        """
        if not message:
            message = "File store communication failure"
            if ep:
                message += f" while accessing {ep}"
        super(FileStoreCommError, self).__init__(message, ep)
