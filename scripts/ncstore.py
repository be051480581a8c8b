#! /usr/bin/env python3
"""
Upload, download, share, or remove files in the MobiHub Nextcloud file store.

Execute this script with the -h option to display the list of options.
"""
# ncstore [-h] [-c CONFFILE] [-l LOGFILE] [-v] [-q] {upload,download,share,rm} ...
import sys, os, logging, traceback as tb
from mobihub.filestore import cli

prog = os.path.basename(sys.argv[0])
if prog.endswith('.py'):
    prog = prog[:-(len('.py'))]

def err(msg):
    rootlog = logging.getLogger()
    if rootlog.handlers:
        rootlog.error(msg)
    else:
        if prog:
            sys.stderr.write(prog)
            sys.stderr.write(": ")
        sys.stderr.write(msg)
        sys.stderr.write("\n")

try:

    cli.main(prog, sys.argv[1:])

except cli.Failure as ex:
    err(str(ex))
    sys.exit(ex.exitcode)

except Exception as ex:
    # unexpected failure
    tb.print_exc()
    err(str(ex))
    sys.exit(1)
