"""Single collaborator for running external commands (systemctl, journalctl, tar)."""

import subprocess

from hypanel.core.errors import IOFailure


class CommandRunner:
    """Run argv-style commands with a timeout and uniform failure mapping."""

    def __init__(self, timeout_seconds=30.0, use_sudo=False):
        self.timeout_seconds = timeout_seconds
        self.use_sudo = use_sudo

    def _argv(self, cmd, privileged):
        argv = [str(part) for part in cmd]
        if privileged and self.use_sudo:
            # -n: fail instead of prompting when no passwordless rule exists.
            return ["sudo", "-n"] + argv
        return argv

    def run(self, cmd, *, privileged=False, timeout=None, check=True):
        """Run ``cmd`` and return the ``CompletedProcess``.

        Raises ``IOFailure`` when the command cannot be started, times out, or
        (with ``check``) exits non-zero.
        """
        argv = self._argv(cmd, privileged)
        limit = self.timeout_seconds if timeout is None else timeout
        label = str(cmd[0]) if cmd else "command"
        try:
            result = subprocess.run(argv, capture_output=True, text=True, timeout=limit)
        except subprocess.TimeoutExpired as exc:
            raise IOFailure(f"{label} timed out after {int(limit)}s.") from exc
        except OSError as exc:
            raise IOFailure(f"{label} could not be started.") from exc
        if check and result.returncode != 0:
            raise IOFailure(
                f"{label} exited with status {result.returncode}.",
                detail=command_failure_detail(result),
            )
        return result


def command_failure_detail(result):
    """Condense a failed command's stderr/stdout for the action log.

    Command output names absolute paths, so it is never sent to the client.
    """
    return ((result.stderr or "") + "\n" + (result.stdout or "")).strip()[:400]
