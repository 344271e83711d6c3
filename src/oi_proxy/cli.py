import os
import signal
import subprocess
import sys

from .resolver import ResolutionError, resolve_binary_path

PREFIX = "[oi-proxy]"
FORWARDED_SIGNALS = ("SIGTERM", "SIGHUP")
IGNORED_SIGNALS = ("SIGINT",)


def _install_handlers(proc):
  previous = {}

  def forward(signum, _frame=None):
    if proc.poll() is None:
      proc.send_signal(signum)

  for name in FORWARDED_SIGNALS + IGNORED_SIGNALS:
    signum = getattr(signal, name, None)
    if signum is None:
      continue
    handler = forward if name in FORWARDED_SIGNALS else signal.SIG_IGN
    previous[signum] = signal.signal(signum, handler)
  return previous


def _restore_handlers(previous):
  for signum, handler in previous.items():
    signal.signal(signum, handler)


def _reraise_signal(signum):
  # The launcher should die the way the child did.
  try:
    signal.signal(signum, signal.SIG_DFL)
  except (OSError, ValueError):
    # SIGKILL and SIGSTOP keep their default disposition.
    pass
  os.kill(os.getpid(), signum)
  return 128 + signum


def wait_for_child(proc):
  """Wait for proc and return its exit status.

  A child killed by a signal makes the launcher kill itself with the same
  signal; the return value is only reached if that does not terminate us.
  """
  previous = _install_handlers(proc)
  try:
    returncode = proc.wait()
  finally:
    _restore_handlers(previous)

  if returncode < 0:
    return _reraise_signal(-returncode)
  return returncode


def run_binary(binary, args):
  return wait_for_child(subprocess.Popen([binary, *args]))


def main(argv=None, **resolve_options):
  args = sys.argv[1:] if argv is None else list(argv)
  try:
    binary = resolve_binary_path(**resolve_options)
  except ResolutionError as exc:
    print(f"{PREFIX} {exc}", file=sys.stderr)
    return 1

  try:
    proc = subprocess.Popen([binary, *args])
  except OSError as exc:
    print(f'{PREFIX} Failed to start "{binary}": {exc}', file=sys.stderr)
    return 1
  return wait_for_child(proc)


if __name__ == "__main__":
  raise SystemExit(main())
