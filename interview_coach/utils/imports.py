"""
Helpers for loading device libraries that are noisy on stderr.
"""
import contextlib
import functools
import importlib
import os
import warnings

# PortAudio probes JACK and gRPC logs at INFO unless told otherwise
os.environ.setdefault("JACK_NO_START_SERVER", "1")
os.environ.setdefault("GRPC_VERBOSITY", "ERROR")
os.environ.setdefault("GLOG_minloglevel", "2")


def import_device_library(module_name: str):
    """
    Import ``module_name`` with Python-level stderr and warnings silenced.

    Raises ImportError when the library is not installed.
    """
    with open(os.devnull, "w") as devnull, warnings.catch_warnings():
        warnings.simplefilter("ignore")
        with contextlib.redirect_stderr(devnull):
            return importlib.import_module(module_name)


@contextlib.contextmanager
def native_stderr_silenced():
    """
    Point file descriptor 2 at /dev/null for the duration of the block.

    ALSA and PortAudio write straight to the descriptor, so redirecting
    ``sys.stderr`` is not enough for them.
    """
    try:
        saved_fd = os.dup(2)
        null_fd = os.open(os.devnull, os.O_WRONLY)
        os.dup2(null_fd, 2)
        os.close(null_fd)
    except OSError:
        saved_fd = None

    try:
        yield
    finally:
        if saved_fd is not None:
            with contextlib.suppress(OSError):
                os.dup2(saved_fd, 2)
                os.close(saved_fd)


def with_suppressed_audio_warnings(func):
    """Decorator form of ``native_stderr_silenced``."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        with native_stderr_silenced():
            return func(*args, **kwargs)
    return wrapper
