"""
libhtdigest setup script
"""
#=============================================================================
# init script env -- ensure cwd = root of source dir
#=============================================================================
import os
root_dir = os.path.abspath(os.path.join(__file__, ".."))
os.chdir(root_dir)

#=============================================================================
# imports
#=============================================================================
import re

from setuptools import setup, find_packages

#=============================================================================
# version string
#=============================================================================

# read version string without importing libhtdigest
with open(os.path.join(root_dir, "libhtdigest", "__init__.py")) as fh:
    version = re.search(r'^__version__ = "([^"]+)"', fh.read(), re.M).group(1)

#=============================================================================
# static text
#=============================================================================
SUMMARY = "create and update Apache htdigest password files"

DESCRIPTION = """\
libhtdigest maintains Apache-style digest password files, mapping
(username, realm) pairs to the MD5 digest of ``user:realm:password``.

It provides a small library for parsing & rendering records and for
rewriting password files in place, plus an ``htdigest`` command mirroring
the classic ``htdigest [-c] passwordfile realm username`` tool.
Updates are written to a temporary file next to the target and renamed
into place, so a failed run never leaves a half written file behind.
"""

KEYWORDS = """\
password digest htdigest apache md5 realm
"""

CLASSIFIERS = """\
Intended Audience :: System Administrators
License :: OSI Approved :: BSD License
Natural Language :: English
Operating System :: OS Independent
Programming Language :: Python :: 3
Programming Language :: Python :: Implementation :: CPython
Programming Language :: Python :: Implementation :: PyPy
Topic :: System :: Systems Administration :: Authentication/Directory
Topic :: Software Development :: Libraries
""".splitlines()

if '.dev' in version:
    CLASSIFIERS.append("Development Status :: 3 - Alpha")
elif '.post' in version:
    CLASSIFIERS.append("Development Status :: 4 - Beta")
else:
    CLASSIFIERS.append("Development Status :: 5 - Production/Stable")

#=============================================================================
# run setup
#=============================================================================
setup(
    # package info
    packages=find_packages(root_dir, include=["libhtdigest", "libhtdigest.*"]),
    zip_safe=True,

    # metadata
    name="libhtdigest",
    version=version,
    license="BSD",

    description=SUMMARY,
    long_description=DESCRIPTION,
    keywords=KEYWORDS,
    classifiers=CLASSIFIERS,

    python_requires=">=3.9",
    extras_require={
        # only imported under TYPE_CHECKING, for the `Self` annotation
        "typing": [
            "typing_extensions>=4.0",
        ],
        "test": [
            "pytest>=7.0",
            "pytest-archon>=0.0.6",
        ],
    },

    entry_points={
        "console_scripts": [
            "htdigest = libhtdigest.cli:run",
        ],
    },
)

#=============================================================================
# eof
#=============================================================================
