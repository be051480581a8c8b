"""
Utilities for obtaining a configuration for mobihub services and for setting up logging
according to that configuration.

A configuration is a plain dictionary.  It can be read from a YAML or JSON file via
:py:func:`load_from_file`, or, for the file storage client, assembled from environment
variables via :py:func:`config_from_env`.
"""
import os, sys, json, logging
from collections.abc import Mapping

import yaml

LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s: %(message)s"
DEF_LOG_LEVEL = logging.INFO

ENV_BASE_URL = "NEXTCLOUD_BASE_URL"
ENV_USER = "NEXTCLOUD_USER"
ENV_PASSWORD = "NEXTCLOUD_PASSWORD"
ENV_CHUNK_SIZE = "NEXTCLOUD_CHUNK_SIZE"

class ConfigurationException(Exception):
    """
    an exception indicating a missing or inconsistent configuration parameter
    """

    def __init__(self, message: str=None, cause: Exception=None):
        if not message:
            message = "Configuration error"
            if cause:
                message += ": " + str(cause)
        super(ConfigurationException, self).__init__(message)
        self.cause = cause

def load_from_file(configfile: str) -> Mapping:
    """
    read the configuration from the given file and return it as a dictionary.  The file
    format is determined by its extension: ``.yml`` and ``.yaml`` files are read as YAML;
    all others are read as JSON.

    :param str configfile:  the path to the configuration file
    :raises ConfigurationException:  if the contents cannot be parsed or does not contain
                            a dictionary
    :raises OSError:        if the file cannot be opened or read
    """
    with open(configfile) as fd:
        try:
            if configfile.endswith('.yml') or configfile.endswith('.yaml'):
                out = yaml.safe_load(fd)
            else:
                out = json.load(fd)
        except (ValueError, yaml.YAMLError) as ex:
            raise ConfigurationException(f"{configfile}: config parsing error: {str(ex)}", ex) from ex

    if out is None:
        out = {}
    if not isinstance(out, Mapping):
        raise ConfigurationException(f"{configfile}: config file does not contain a dictionary")
    return out

def config_from_env(environ: Mapping=None) -> Mapping:
    """
    build a file storage client configuration from environment variables.  The following
    variables are consulted:

    ``NEXTCLOUD_BASE_URL``
        (required) the base URL of the Nextcloud instance (becomes ``service_endpoint``)
    ``NEXTCLOUD_USER``
        the user to authenticate as (becomes ``authentication.user``)
    ``NEXTCLOUD_PASSWORD``
        the user's password (becomes ``authentication.pass``)
    ``NEXTCLOUD_CHUNK_SIZE``
        the chunk size, in bytes, to use for chunked uploads (becomes ``chunk_size``)

    :param dict environ:  the environment to read from; if not provided, ``os.environ`` is used.
    :raises ConfigurationException:  if ``NEXTCLOUD_BASE_URL`` is not set or if
                            ``NEXTCLOUD_CHUNK_SIZE`` is not an integer
    """
    if environ is None:
        environ = os.environ

    if not environ.get(ENV_BASE_URL):
        raise ConfigurationException(f"Missing required environment variable: {ENV_BASE_URL}")

    out = {
        "service_endpoint": environ[ENV_BASE_URL],
        "authentication": {}
    }
    if environ.get(ENV_USER):
        out['authentication']['user'] = environ[ENV_USER]
    if environ.get(ENV_PASSWORD):
        out['authentication']['pass'] = environ[ENV_PASSWORD]

    if environ.get(ENV_CHUNK_SIZE):
        try:
            out['chunk_size'] = int(environ[ENV_CHUNK_SIZE])
        except ValueError as ex:
            raise ConfigurationException(f"{ENV_CHUNK_SIZE}: not an integer: "+
                                         environ[ENV_CHUNK_SIZE], ex) from ex

    return out

def configure_log(logfile: str=None, level: int=None, format: str=None, config: Mapping=None):
    """
    set up logging for an application by attaching a handler to the root logger.  Values
    given explicitly as arguments take precedence over values found in the ``logging``
    section of ``config`` (which may contain ``logfile``, ``loglevel``, and ``format``).
    If no log file is determined, messages are written to standard error.

    :param str logfile:   the path of a file to write messages to
    :param int level:     the logging level to set on the root logger
    :param str format:    the format string for log messages
    :param dict config:   a configuration dictionary that may contain a ``logging`` section
    :return:  the handler that was attached to the root logger
    """
    if not config:
        config = {}
    logcfg = config.get('logging', {})

    if not logfile:
        logfile = logcfg.get('logfile')
    if level is None:
        level = logcfg.get('loglevel', DEF_LOG_LEVEL)
        if isinstance(level, str):
            level = logging.getLevelName(level.upper())
    if not format:
        format = logcfg.get('format', LOG_FORMAT)

    if logfile:
        logdir = os.path.dirname(logfile)
        if logdir and not os.path.exists(logdir):
            os.makedirs(logdir)
        hdlr = logging.FileHandler(logfile)
    else:
        hdlr = logging.StreamHandler(sys.stderr)
    hdlr.setFormatter(logging.Formatter(format))

    rootlog = logging.getLogger()
    rootlog.addHandler(hdlr)
    rootlog.setLevel(level)
    return hdlr
