"""
CommandResolver tests - PATH lookup and suffix probing
"""
import pytest

from winbridge.command_resolver import CommandResolver
from winbridge.config import BridgeConfig
from winbridge.errors import PathResolutionError, UnsupportedTargetError
from winbridge.launch_plan import PathOrigin
from winbridge.path_translator import PathTranslator


@pytest.fixture
def resolver(translator, config):
    return CommandResolver(translator, config)


@pytest.fixture
def tools_dir(mount_root):
    path = mount_root / 'c' / 'tools'
    path.mkdir()
    return path


def test_bare_name_with_suffix(resolver, tools_dir, make_file, mount_root):
    make_file(tools_dir / 'foo.exe')

    target = resolver.resolve('foo.exe', str(mount_root / 'c'), {'PATH': str(tools_dir)})

    assert target.native_path == 'C:\\tools\\foo.exe'
    assert target.origin is PathOrigin.MOUNTED_DRIVE


def test_probing_order_prefers_native(resolver, tools_dir, make_file, mount_root):
    make_file(tools_dir / 'build.bat')
    make_file(tools_dir / 'build.cmd')
    make_file(tools_dir / 'build.exe')

    target = resolver.resolve('build', str(mount_root / 'c'), {'PATH': str(tools_dir)})

    assert target.native_path == 'C:\\tools\\build.exe'


def test_probing_finds_batch_script(resolver, tools_dir, make_file, mount_root):
    make_file(tools_dir / 'setup.cmd')

    target = resolver.resolve('setup', str(mount_root / 'c'), {'PATH': str(tools_dir)})

    assert target.native_path == 'C:\\tools\\setup.cmd'


def test_path_entries_searched_in_order(resolver, make_file, mount_root):
    first = mount_root / 'c' / 'first'
    second = mount_root / 'd' / 'second'
    make_file(first / 'tool.exe')
    make_file(second / 'tool.exe')

    target = resolver.resolve('tool', '/', {'PATH': f"{second}:{first}"})

    assert target.native_path == 'D:\\second\\tool.exe'


def test_extra_batch_suffix_is_probed(mount_root, tools_dir, make_file):
    config = BridgeConfig(mount_root=str(mount_root), distro_name='Ubuntu',
                          extra_batch_suffixes=('.btm',))
    resolver = CommandResolver(PathTranslator(config), config)
    make_file(tools_dir / 'legacy.btm')

    target = resolver.resolve('legacy', str(mount_root / 'c'), {'PATH': str(tools_dir)})

    assert target.native_path == 'C:\\tools\\legacy.btm'


def test_unc_cwd_skips_batch_candidates(resolver, tools_dir, make_file, linux_home):
    make_file(tools_dir / 'build.bat')
    other = tools_dir.parent / 'other'
    make_file(other / 'build.exe')

    target = resolver.resolve('build', str(linux_home), {'PATH': f"{tools_dir}:{other}"})

    assert target.native_path == 'C:\\other\\build.exe'


def test_unc_cwd_with_only_batch_candidates(resolver, tools_dir, make_file, linux_home):
    make_file(tools_dir / 'setup.bat')

    with pytest.raises(UnsupportedTargetError) as info:
        resolver.resolve('setup', str(linux_home), {'PATH': str(tools_dir)})
    assert 'UNC' in str(info.value)
    assert info.value.path.endswith('setup.bat')


def test_explicit_batch_name_from_unc_cwd_is_resolved(resolver, tools_dir, make_file, linux_home):
    make_file(tools_dir / 'setup.bat')

    target = resolver.resolve('setup.bat', str(linux_home), {'PATH': str(tools_dir)})

    assert target.native_path == 'C:\\tools\\setup.bat'


def test_absolute_linux_path(resolver, tools_dir, make_file):
    exe = make_file(tools_dir / 'foo.exe')

    target = resolver.resolve(str(exe), '/', {})

    assert target.linux_path == str(exe)


def test_relative_path_uses_cwd(resolver, tools_dir, make_file, mount_root):
    make_file(tools_dir / 'foo.exe')

    target = resolver.resolve('./tools/foo.exe', str(mount_root / 'c'), {'PATH': ''})

    assert target.native_path == 'C:\\tools\\foo.exe'


def test_native_path_token(resolver, tools_dir, make_file):
    exe = make_file(tools_dir / 'foo.exe')

    target = resolver.resolve('C:\\tools\\foo.exe', '/', {})

    assert target.linux_path == str(exe)


def test_path_lookup_ignores_non_executable(resolver, tools_dir, make_file, mount_root):
    make_file(tools_dir / 'foo.exe', executable=False)

    with pytest.raises(PathResolutionError):
        resolver.resolve('foo.exe', str(mount_root / 'c'), {'PATH': str(tools_dir)})


def test_relative_path_entry(resolver, tools_dir, make_file, mount_root, monkeypatch):
    make_file(tools_dir / 'foo.exe')
    monkeypatch.chdir(mount_root / 'c')

    target = resolver.resolve('foo', str(mount_root / 'c'), {'PATH': 'tools'})

    assert target.native_path == 'C:\\tools\\foo.exe'


@pytest.mark.parametrize('command', ['missing', 'missing.exe', './missing.exe', 'C:\\missing.exe'])
def test_missing_command(resolver, tools_dir, mount_root, command):
    with pytest.raises(PathResolutionError):
        resolver.resolve(command, str(mount_root / 'c'), {'PATH': str(tools_dir)})


def test_empty_command(resolver):
    with pytest.raises(PathResolutionError):
        resolver.resolve('', '/', {})


def test_missing_path_variable(resolver):
    with pytest.raises(PathResolutionError):
        resolver.resolve('foo', '/', {})
