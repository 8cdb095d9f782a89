"""Move the user into a worktree directory."""

import subprocess
from pathlib import Path
from typing import Optional

from rich.console import Console

from sprout.constants import DEFAULT_SHELL, DIR_FILE_ENV
from sprout.logging_config import get_logger

console = Console()
logger = get_logger(__name__)

BASH_ZSH_WRAPPER = f'''sprout() {{
  local dir_file dest rc
  dir_file="$(mktemp)" || return $?
  {DIR_FILE_ENV}="$dir_file" command sprout "$@"
  rc=$?
  dest="$(cat "$dir_file" 2>/dev/null)"
  rm -f "$dir_file"
  if [ -n "$dest" ] && [ -d "$dest" ]; then
    cd "$dest" || return $?
  fi
  return $rc
}}
'''

FISH_WRAPPER = f'''function sprout
  set -l dir_file (mktemp)
  or return 1
  env {DIR_FILE_ENV}=$dir_file command sprout $argv
  set -l rc $status
  set -l dest (cat $dir_file 2>/dev/null)
  rm -f $dir_file
  if test -n "$dest"; and test -d "$dest"
    cd "$dest"
  end
  return $rc
end
'''


def shell_init_script(shell: str = "bash") -> str:
    """Shell function that lets sprout change the caller's directory.

    Meant to be evaluated from an rc file, e.g. ``eval "$(sprout shell-init zsh)"``.
    """
    if shell == "fish":
        return FISH_WRAPPER
    return BASH_ZSH_WRAPPER


class SessionSwitcher:
    """Routes the user into a directory.

    With a handoff file configured the path is written there for the shell
    wrapper to ``cd`` into; otherwise an interactive subshell is started in
    the directory and sprout waits for it to exit.
    """

    def __init__(self, dir_file: Optional[str] = None, shell: str = DEFAULT_SHELL):
        self.dir_file = dir_file
        self.shell = shell or DEFAULT_SHELL

    def enter(self, path: str) -> None:
        if self.dir_file:
            Path(self.dir_file).write_text(path, encoding="utf-8")
            logger.debug(f"Wrote {path} to handoff file {self.dir_file}")
            console.print(f"Switching to [bold]{path}[/bold]")
            return

        console.print(f"Launching shell in [bold]{path}[/bold]")
        console.print("[dim]Exit the shell to return[/dim]")
        logger.debug(f"Spawning {self.shell} in {path}")
        # stdin/stdout/stderr are inherited from the terminal
        result = subprocess.run([self.shell], cwd=path)
        logger.debug(f"Subshell exited with {result.returncode}")
