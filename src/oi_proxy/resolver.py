import importlib
import os
import sys
from pathlib import Path
from types import MappingProxyType
import platform as platform_module

BINARY_PATH_ENV = "OI_PROXY_BINARY_PATH"
EXPORT_FUNCTION = "get_binary_path"
EXPORT_ATTRIBUTE = "BINARY_PATH"

PLATFORM_PACKAGES = MappingProxyType({
  "darwin": MappingProxyType({
    "arm64": "oi_proxy_darwin_arm64",
    "x64": "oi_proxy_darwin_amd64",
  }),
  "linux": MappingProxyType({
    "x64": "oi_proxy_linux_amd64",
  }),
  "win32": MappingProxyType({
    "x64": "oi_proxy_win32_amd64",
  }),
})


class ResolutionError(RuntimeError):
  def __init__(self, message, platform=None, arch=None, package=None, path=None):
    super().__init__(message)
    self.platform = platform
    self.arch = arch
    self.package = package
    self.path = path


class UnsupportedPlatformError(ResolutionError):
  pass


class UnsupportedArchitectureError(ResolutionError):
  pass


class DependencyLookupError(ResolutionError):
  pass


class InvalidExportError(ResolutionError):
  pass


class BinaryNotFoundError(ResolutionError):
  pass


def platform_name(value=None):
  value = sys.platform if value is None else value
  if value.startswith("linux"):
    return "linux"
  return value


def normalize_arch(arch):
  mapping = {
    "x86_64": "x64",
    "amd64": "x64",
    "i386": "ia32",
    "i686": "ia32",
    "x86": "ia32",
    "arm64": "arm64",
    "aarch64": "arm64",
    "armv6l": "arm",
    "armv7l": "arm",
    "arm": "arm",
  }
  lowered = arch.lower()
  return mapping.get(lowered, lowered)


def current_platform():
  return platform_name(), normalize_arch(platform_module.machine())


def load_platform_package(package):
  """Import a platform package and return the binary path it exports.

  Platform packages expose either a ``get_binary_path()`` function or a
  ``BINARY_PATH`` attribute.
  """
  module = importlib.import_module(package)
  getter = getattr(module, EXPORT_FUNCTION, None)
  if callable(getter):
    return getter()
  return getattr(module, EXPORT_ATTRIBUTE, None)


def _check_exists(binary_path, **context):
  if not os.path.exists(binary_path):
    raise BinaryNotFoundError(
      f'Binary not found at "{binary_path}". Try reinstalling the package.',
      path=binary_path,
      **context,
    )
  return binary_path


def resolve_binary_path(
  platform_key=None,
  arch=None,
  packages=PLATFORM_PACKAGES,
  lookup=load_platform_package,
  env=None,
):
  """Resolve the native binary for this host.

  Every call repeats the full lookup and existence check. OI_PROXY_BINARY_PATH
  stands in for the package lookup on a supported platform only. Failures
  raise a ResolutionError subclass whose message names the platform,
  architecture, package or path involved.
  """
  if platform_key is None or arch is None:
    detected_platform, detected_arch = current_platform()
    platform_key = detected_platform if platform_key is None else platform_key
    arch = detected_arch if arch is None else arch

  platform_targets = packages.get(platform_key)
  if not platform_targets:
    raise UnsupportedPlatformError(
      f"Unsupported platform: {platform_key}",
      platform=platform_key,
      arch=arch,
    )

  package = platform_targets.get(arch)
  if not package:
    raise UnsupportedArchitectureError(
      f"Unsupported architecture: {platform_key}/{arch}",
      platform=platform_key,
      arch=arch,
    )

  env = os.environ if env is None else env
  explicit = env.get(BINARY_PATH_ENV)
  if explicit:
    return _check_exists(
      str(Path(explicit).expanduser()),
      platform=platform_key,
      arch=arch,
      package=package,
    )

  try:
    binary_path = lookup(package)
  except Exception as exc:
    raise DependencyLookupError(
      f'Failed to load optional dependency "{package}". '
      f'Run "pip install oi-proxy" again or publish the platform package. '
      f"Original error: {exc}",
      platform=platform_key,
      arch=arch,
      package=package,
    ) from exc

  if not isinstance(binary_path, str):
    raise InvalidExportError(
      f'Package "{package}" did not export a binary path',
      platform=platform_key,
      arch=arch,
      package=package,
    )

  return _check_exists(
    binary_path, platform=platform_key, arch=arch, package=package
  )
