from typing import Tuple, List, Optional
import subprocess


def run_cmd(cmd: List[str], timeout: Optional[float] = None) -> Tuple[int, str, str]:
    """Run a command. Returns (returncode, stdout, stderr).

    A missing executable or an expired timeout is reported as a non-zero
    return code with the reason in stderr, so callers only inspect the tuple.
    """
    try:
        completed = subprocess.run(
            cmd,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            timeout=timeout
        )
        return completed.returncode, completed.stdout, completed.stderr
    except FileNotFoundError:
        return 127, '', f'FileNotFound: {cmd[0]}'
    except subprocess.TimeoutExpired:
        return 124, '', f'Timeout after {timeout}s: {" ".join(cmd)}'
