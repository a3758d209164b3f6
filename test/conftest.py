import textwrap

import pytest

from pacmeta._repo import detect_os_id


@pytest.fixture(autouse=True)
def os_id_cache():
    # The detected OS identifier is cached process-wide; keep tests independent.
    detect_os_id.cache_clear()
    yield
    detect_os_id.cache_clear()


@pytest.fixture
def srcinfo():
    def _srcinfo(text):
        return textwrap.dedent(text).strip("\n") + "\n"

    return _srcinfo


@pytest.fixture
def two_package_srcinfo(srcinfo):
    return srcinfo(
        """
        pkgbase = python-foo
        \tpkgdesc = The foo library
        \tpkgver = 1.2.3
        \tpkgrel = 2
        \turl = https://example.com/foo
        \tarch = x86_64
        \tarch = aarch64
        \tlicense = MIT
        \tlicense = Apache
        \tgroups = foo-group
        \tgroups = python-libs
        \tmakedepends = python-build
        \tmakedepends = python
        \tcheckdepends = python-pytest
        \tdepends = python>=3.8
        \tvalidpgpkeys = 0123456789ABCDEF

        pkgname = python-foo
        \tdepends = python>=3.8
        \tdepends = glibc
        \tprovides = foo=1.2.3

        pkgname = python-foo-docs
        \tpkgdesc = Documentation for foo
        \tarch = any
        \tgroups = docs
        """
    )
