"""Helpers for turning command errors into readable text."""

import git


def describe_git_error(error: Exception) -> str:
    """Return the captured stderr of a failed command, or the error text if there is none.

    GitPython stores stderr as ``"\\n  stderr: '<text>'"``; only ``<text>`` is kept.
    Errors from ``subprocess`` keep stderr as str or bytes.
    """
    stderr = getattr(error, "stderr", None) or ""
    if isinstance(stderr, bytes):
        stderr = stderr.decode("utf-8", errors="replace")
    stderr = str(stderr).strip()

    if isinstance(error, git.exc.CommandError):
        if stderr.startswith("stderr:"):
            stderr = stderr[len("stderr:"):].strip()
        if len(stderr) >= 2 and stderr[0] == stderr[-1] == "'":
            stderr = stderr[1:-1].strip()

    return stderr or str(error).strip()
