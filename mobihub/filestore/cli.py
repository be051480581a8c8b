"""
a command-line interface to the file storage client.  The :py:func:`main` function provides
the implementation.
"""
import os, sys, re, shutil, logging
from argparse import ArgumentParser
from collections.abc import Mapping

import yaml

from mobihub.base import config
from mobihub.base.config import ConfigurationException
from .client import FileStorageClient
from .exceptions import FileStoreException, InvalidLocalFile

prog = re.sub(r'\.py$', '', os.path.basename(sys.argv[0]))

class Failure(Exception):
    """
    an exception indicating that the command failed and the program should exit with the
    given exit code
    """
    def __init__(self, message: str, exitcode: int=1, cause: Exception=None):
        super(Failure, self).__init__(message)
        self.exitcode = exitcode
        self.cause = cause

def define_options(progname):
    """
    return an ArgumentParser instance that is configured with options
    for the command-line interface.
    """
    description = "Upload, download, share, or remove files in the MobiHub Nextcloud file store"
    epilog = "If -c is not given, the file store is configured from the NEXTCLOUD_BASE_URL, " \
             "NEXTCLOUD_USER, and NEXTCLOUD_PASSWORD environment variables."

    parser = ArgumentParser(progname, None, description, epilog)

    parser.add_argument('-c', '--config-file', type=str, dest='cfgfile', metavar='FILE',
                        help="a file (YAML or JSON) containing the file store configuration")
    parser.add_argument('-l', '--logfile', action='store', dest='logfile', type=str, metavar='FILE',
                        help="write messages that normally go to standard error to FILE as well.  "+
                             "If -q is also specified, the messages will only go to the logfile")
    parser.add_argument('-v', '--verbose', action='store_true', dest='verbose',
                        help="print more (debug) messages to standard error and/or the log file")
    parser.add_argument('-q', '--quiet', action='store_true', dest='quiet',
                        help="suppress all error and warning messages to standard error")

    subparsers = parser.add_subparsers(title="commands", dest="cmd", metavar="CMD")
    subparsers.required = True

    p = subparsers.add_parser("upload", help="upload a local file to the file store")
    p.add_argument("local", metavar="FILE", type=str, help="the local file to upload")
    p.add_argument("remote", metavar="PATH", type=str, help="the remote path to upload to")

    p = subparsers.add_parser("download", help="download a file from the file store")
    p.add_argument("remote", metavar="PATH", type=str, help="the remote path of the file")
    p.add_argument("-o", "--output", type=str, dest="dest", metavar="FILE",
                   help="save the file as FILE (default: a new temporary file)")

    p = subparsers.add_parser("share", help="create a public download link to a remote file")
    p.add_argument("remote", metavar="PATH", type=str, help="the remote path of the file")
    p.add_argument("-e", "--expire", action="store_true", dest="expire",
                   help="make the link expire two days from today")

    p = subparsers.add_parser("rm", help="remove a file from the file store")
    p.add_argument("remote", metavar="PATH", type=str, help="the remote path of the file")

    return parser

def read_config(filepath):
    """
    read the configuration from a file having the given filepath

    :except Failure:  if the contents contains syntax or format errors
    :except IOError:  if a failure occurs while opening or reading the file
    """
    try:
        return config.load_from_file(filepath)
    except (ConfigurationException, yaml.YAMLError) as ex:
        raise Failure("Config parsing error: "+str(ex), 3, ex)

def main(progname, args):
    """
    execute the requested file store operation
    """
    parser = define_options(progname)
    opts = parser.parse_args(args)

    level = (opts.verbose and logging.DEBUG) or logging.INFO
    if opts.logfile:
        # write messages to a log file
        config.configure_log(logfile=opts.logfile, level=level,
                             format="%(asctime)s " + progname + ".%(name)s %(levelname)s: %(message)s")

    # configure a default log handler
    if not opts.quiet:
        config.configure_log(level=level, format=progname + ": %(levelname)s: %(message)s")
    elif not logging.getLogger().handlers:
        logging.getLogger().addHandler(logging.NullHandler())

    # look for a provided configuration file
    if opts.cfgfile:
        try:
            cfg = read_config(opts.cfgfile)
        except EnvironmentError as ex:
            raise Failure("problem reading config file, {0}: {1}"
                          .format(opts.cfgfile, ex.strerror)) from ex
    else:
        try:
            cfg = config.config_from_env()
        except ConfigurationException as ex:
            raise Failure("Unable to locate configuration; set NEXTCLOUD_BASE_URL or use -c", 2) from ex

    services = cfg.get('services')
    if services is not None:
        if not isinstance(services, Mapping):
            raise Failure("Config format error: services: not a dictionary", 3)
        if services.get('filestore') is not None:
            if not isinstance(services['filestore'], Mapping):
                raise Failure("Config format error: services.filestore: not a dictionary", 3)
            cfg = services['filestore']

    try:
        with FileStorageClient.from_config(cfg, logging.getLogger(progname)) as cli:
            if opts.cmd == "upload":
                cli.upload(opts.local, opts.remote)

            elif opts.cmd == "download":
                filepath = cli.download(opts.remote)
                if opts.dest:
                    shutil.move(filepath, opts.dest)
                    filepath = opts.dest
                print(filepath)

            elif opts.cmd == "share":
                link = cli.get_download_reference(opts.remote, opts.expire)
                print(cli.share_url(link))

            elif opts.cmd == "rm":
                cli.remove(opts.remote)

    except ConfigurationException as ex:
        raise Failure(str(ex), 2) from ex
    except InvalidLocalFile as ex:
        raise Failure(str(ex), 3) from ex
    except FileStoreException as ex:
        raise Failure(f"File store {opts.cmd} failed: {str(ex)}", 4) from ex
