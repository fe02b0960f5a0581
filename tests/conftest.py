r"""
Shared fixtures: a fake mount tree under tmp_path

    <tmp>/mnt/c/...   → C:\...
    <tmp>/mnt/d/...   → D:\...
    <tmp>/home/...    → \\wsl.localhost\Ubuntu\<tmp>\home\...
"""
import os
import stat

import pytest

from winbridge.config import BridgeConfig
from winbridge.path_translator import PathTranslator

DISTRO = 'Ubuntu'


@pytest.fixture
def mount_root(tmp_path):
    root = tmp_path / 'mnt'
    (root / 'c').mkdir(parents=True)
    (root / 'd').mkdir()
    return root


@pytest.fixture
def linux_home(tmp_path):
    home = tmp_path / 'home' / 'dev'
    home.mkdir(parents=True)
    return home


@pytest.fixture
def config(mount_root):
    return BridgeConfig(mount_root=str(mount_root), distro_name=DISTRO)


@pytest.fixture
def translator(config):
    return PathTranslator(config)


@pytest.fixture
def make_file():
    """Create a file (executable by default) and its parents"""
    def _make(path, content='', executable=True):
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        if executable:
            path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return path
    return _make


def unc(linux_path) -> str:
    """Expected built-in UNC form of a Linux path"""
    real = os.path.realpath(str(linux_path))
    return f"\\\\wsl.localhost\\{DISTRO}\\" + real.strip('/').replace('/', '\\')


@pytest.fixture
def expected_unc():
    return unc
