"""
EnvironmentBridge tests

TESTS:
- Path-valued variables become native, everything else passes unchanged
- Search-path lists are translated element by element
- WSLENV lists the translated variables without /p or /l flags
- Untranslatable values never abort: verbatim + warning
- Working directory fallback to the target's directory
"""
import pytest

from winbridge.config import BridgeConfig
from winbridge.environment_bridge import EnvironmentBridge
from winbridge.errors import EnvironmentTranslationWarning
from winbridge.launch_plan import LaunchKind, PathOrigin, ResolvedTarget
from winbridge.path_translator import PathTranslator


@pytest.fixture
def env_bridge(translator, config):
    return EnvironmentBridge(translator, config)


@pytest.fixture
def exe_target(mount_root, make_file):
    exe = make_file(mount_root / 'c' / 'tools' / 'foo.exe')
    return ResolvedTarget('C:\\tools\\foo.exe', str(exe), PathOrigin.MOUNTED_DRIVE)


@pytest.fixture
def bat_target(mount_root, make_file):
    bat = make_file(mount_root / 'c' / 'tools' / 'setup.bat')
    return ResolvedTarget('C:\\tools\\setup.bat', str(bat), PathOrigin.MOUNTED_DRIVE)


# ========== VARIABLES ==========

def test_mounted_path_value(env_bridge, mount_root):
    value, warning = env_bridge.translate_value('HOME', f"{mount_root}/c/Users/dev")

    assert value == 'C:\\Users\\dev'
    assert warning is None


def test_mounted_path_need_not_exist(env_bridge, mount_root):
    value, _ = env_bridge.translate_value('OUT', f"{mount_root}/d/not/created/yet")

    assert value == 'D:\\not\\created\\yet'


def test_linux_only_existing_path_becomes_unc(env_bridge, linux_home, expected_unc):
    value, warning = env_bridge.translate_value('PROJECT', str(linux_home))

    assert value == expected_unc(linux_home)
    assert warning is None


def test_linux_only_missing_path_unchanged(env_bridge, linux_home):
    missing = str(linux_home / 'nowhere')

    assert env_bridge.translate_value('X', missing) == (missing, None)


@pytest.mark.parametrize('value', [
    'C:\\Windows',
    'C:\\a;D:\\b',
    'https://example.com/path',
    'en_US.UTF-8',
    '--verbose',
    'xterm-256color',
    '',
    'relative/path',
    '1',
])
def test_non_path_values_unchanged(env_bridge, value):
    assert env_bridge.translate_value('VAR', value) == (value, None)


def test_search_path_list(env_bridge, mount_root):
    value, warning = env_bridge.translate_value(
        'TOOLS', f"{mount_root}/c/bin:{mount_root}/d/bin"
    )

    assert value == 'C:\\bin;D:\\bin'
    assert warning is None


def test_search_path_list_with_unc_element(env_bridge, mount_root, linux_home, expected_unc):
    value, _ = env_bridge.translate_value('TOOLS', f"{mount_root}/c/bin:{linux_home}")

    assert value == f"C:\\bin;{expected_unc(linux_home)}"


def test_list_with_non_path_element_unchanged(env_bridge):
    assert env_bridge.translate_value('DB', '/var/run/db:5432') == ('/var/run/db:5432', None)


def test_untranslatable_value_passed_verbatim_with_warning(mount_root, linux_home):
    config = BridgeConfig(mount_root=str(mount_root), distro_name=None)
    env_bridge = EnvironmentBridge(PathTranslator(config), config)

    value, warning = env_bridge.translate_value('PROJECT', str(linux_home))

    assert value == str(linux_home)
    assert isinstance(warning, EnvironmentTranslationWarning)
    assert warning.name == 'PROJECT'
    assert warning.value == str(linux_home)


def test_list_with_untranslatable_element_passed_verbatim(mount_root, linux_home):
    config = BridgeConfig(mount_root=str(mount_root), distro_name=None)
    env_bridge = EnvironmentBridge(PathTranslator(config), config)
    original = f"{mount_root}/c/bin:{linux_home}"

    value, warning = env_bridge.translate_value('TOOLS', original)

    assert value == original
    assert warning is not None


# ========== WHOLE ENVIRONMENT ==========

def test_bridge_keeps_every_variable(env_bridge, exe_target, mount_root):
    env = {
        'HOME': f"{mount_root}/c/Users/dev",
        'LANG': 'C.UTF-8',
        'TERM': 'xterm',
        'EMPTY': '',
    }

    bridged = env_bridge.bridge(env, str(mount_root / 'c'), exe_target, LaunchKind.DIRECT_NATIVE)

    assert set(bridged.env) == set(env) | {'WSLENV'}
    assert bridged.env['HOME'] == 'C:\\Users\\dev'
    assert bridged.env['LANG'] == 'C.UTF-8'
    assert bridged.env['EMPTY'] == ''
    assert bridged.translated == ('HOME',)
    assert bridged.warnings == ()


def test_path_variable_is_not_translated(env_bridge, exe_target, mount_root):
    search_path = f"{mount_root}/c/tools:/usr/bin"

    bridged = env_bridge.bridge({'PATH': search_path}, str(mount_root / 'c'),
                                exe_target, LaunchKind.DIRECT_NATIVE)

    assert bridged.env == {'PATH': search_path}
    assert bridged.translated == ()


def test_wslenv_lists_translated_variables(env_bridge, exe_target, mount_root):
    env = {
        'HOME': f"{mount_root}/c/Users/dev",
        'TOOLS': f"{mount_root}/c/bin:{mount_root}/d/bin",
        'WSLENV': 'USERPROFILE/p:TOOLS/l:GOPATH/up:HOME/pu',
    }

    bridged = env_bridge.bridge(env, str(mount_root / 'c'), exe_target, LaunchKind.DIRECT_NATIVE)

    assert bridged.env['WSLENV'] == 'USERPROFILE/p:TOOLS:GOPATH/up:HOME/u'


def test_no_translation_leaves_wslenv_alone(env_bridge, exe_target, mount_root):
    env = {'LANG': 'C', 'WSLENV': 'FOO/p'}

    bridged = env_bridge.bridge(env, str(mount_root / 'c'), exe_target, LaunchKind.DIRECT_NATIVE)

    assert bridged.env['WSLENV'] == 'FOO/p'


def test_wslenv_export_disabled(mount_root, exe_target):
    config = BridgeConfig(mount_root=str(mount_root), distro_name='Ubuntu', export_wslenv=False)
    env_bridge = EnvironmentBridge(PathTranslator(config), config)

    bridged = env_bridge.bridge({'HOME': f"{mount_root}/c/Users/dev"}, str(mount_root / 'c'),
                                exe_target, LaunchKind.DIRECT_NATIVE)

    assert 'WSLENV' not in bridged.env
    assert bridged.env['HOME'] == 'C:\\Users\\dev'


def test_extend_wslenv():
    assert EnvironmentBridge.extend_wslenv('', ['A', 'B']) == 'A:B'
    assert EnvironmentBridge.extend_wslenv('A/p', ['A']) == 'A'
    assert EnvironmentBridge.extend_wslenv('A/pl:B/w', ['B', 'C']) == 'A/pl:B/w:C'
    assert EnvironmentBridge.extend_wslenv('::A::', ['WSLENV']) == 'A'


# ========== WORKING DIRECTORY ==========

def test_mounted_cwd(env_bridge, exe_target, mount_root):
    cwd = mount_root / 'd'

    bridged = env_bridge.bridge({}, str(cwd), exe_target, LaunchKind.DIRECT_NATIVE)

    assert bridged.cwd == 'D:\\'
    assert bridged.linux_cwd == str(cwd)


def test_unc_cwd_kept_for_native_executable(env_bridge, exe_target, linux_home, expected_unc):
    bridged = env_bridge.bridge({}, str(linux_home), exe_target, LaunchKind.DIRECT_NATIVE)

    assert bridged.cwd == expected_unc(linux_home)
    assert bridged.linux_cwd == str(linux_home)
    assert bridged.warnings == ()


def test_unc_cwd_with_batch_script_falls_back(env_bridge, bat_target, linux_home):
    bridged = env_bridge.bridge({}, str(linux_home), bat_target, LaunchKind.INTERPRETER_WRAPPED)

    assert bridged.cwd == 'C:\\tools'
    assert bridged.linux_cwd == str(bat_target.linux_path).rsplit('/', 1)[0]
    assert [w.name for w in bridged.warnings] == ['cwd']


def test_untranslatable_cwd_falls_back(mount_root, linux_home, exe_target):
    config = BridgeConfig(mount_root=str(mount_root), distro_name=None)
    env_bridge = EnvironmentBridge(PathTranslator(config), config)

    bridged = env_bridge.bridge({}, str(linux_home), exe_target, LaunchKind.DIRECT_NATIVE)

    assert bridged.cwd == 'C:\\tools'
    assert bridged.warnings[0].name == 'cwd'
    assert bridged.warnings[0].value == str(linux_home)
