import os
from setuptools import setup, find_namespace_packages
from setuptools.command.build_py import build_py as _build

CLASSIFIERS = [
    'Operating System :: POSIX',
    'Operating System :: MacOS :: MacOS X',
    'Intended Audience :: Developers',
    'Programming Language :: Python',
    'Programming Language :: Python :: 3',
    'Topic :: Internet :: WWW/HTTP',
    'Topic :: System :: Archiving'
]

def get_version():
    out = "dev"
    pkgdir = os.environ.get('PACKAGE_DIR', os.path.dirname(os.path.abspath(__file__)))
    versfile = os.path.join(pkgdir, 'VERSION')
    if os.path.exists(versfile):
        with open(versfile) as fd:
            parts = fd.readline().split()
        if len(parts) > 0:
            out = parts[-1]
    return out

def write_version_mod(version):
    mobihubdir = 'mobihub'
    for pkg in [f for f in os.listdir(mobihubdir) \
                  if not f.startswith('_') and not f.startswith('.')
                     and os.path.isdir(os.path.join(mobihubdir, f))]:
        print("setting version for mobihub."+pkg)
        versmodf = os.path.join(mobihubdir, pkg, "version.py")
        with open(versmodf, 'w') as fd:
            fd.write('"""')
            fd.write("""
An identification of the subsystem version.  Note that this module file gets
(over-) written by the build process.
""")
            fd.write('"""\n\n')
            fd.write('__version__ = "')
            fd.write(version)
            fd.write('"\n')

class build(_build):

    def run(self):
        write_version_mod(get_version())
        _build.run(self)

setup(name='mobihub.filestore',
      version=get_version(),
      description="mobihub.filestore: a client for storing MobiHub artifacts in a Nextcloud file store",
      url='https://github.com/mobihub/mobihub-filestore',
      scripts=[ 'scripts/ncstore.py' ],
      packages=find_namespace_packages(include=['mobihub.*']),
      python_requires='>=3.8',
      install_requires=[
          'requests',
          'lxml',
          'PyYAML'
      ],
      extras_require={
          'test': [ 'pytest' ]
      },
      cmdclass={'build_py': build},
      classifiers=CLASSIFIERS,
      zip_safe=False
)
