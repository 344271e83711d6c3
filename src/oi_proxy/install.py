import sys

from .cli import PREFIX
from .resolver import ResolutionError, resolve_binary_path


def main(**resolve_options):
  """Check that this host resolves to an installed binary, without running it."""
  try:
    binary = resolve_binary_path(**resolve_options)
  except ResolutionError as exc:
    print(f"{PREFIX} {exc}", file=sys.stderr)
    return 1
  print(f"{PREFIX} Using binary: {binary}")
  return 0


if __name__ == "__main__":
  raise SystemExit(main())
