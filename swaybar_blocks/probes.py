"""System probes for the firewall and killswitch blocks.

Each probe answers a yes/no question about ufw. Any failure to answer
(missing file, permission denied, missing systemctl, timeout, garbage
output) is raised as ProbeError so the calling block decides how to show it.
"""

import logging
import os
import subprocess
from pathlib import Path
from typing import Union

from .errors import ErrorCode, ProbeError

logger = logging.getLogger(__name__)

UFW_CONF = Path("/etc/ufw/ufw.conf")
UFW_DEFAULTS = Path("/etc/default/ufw")

UFW_ENABLED_LINE = "ENABLED=yes"
KILLSWITCH_POLICY_LINE = 'DEFAULT_OUTPUT_POLICY="DROP"'
SERVICE_ACTIVE_MARKER = "Active: active "

SYSTEMCTL_TIMEOUT = 2.0


def file_has_line(path: Union[str, Path], expected: str) -> bool:
    """
    Check whether a text file contains a line exactly equal to ``expected``.

    Args:
        path: File to scan
        expected: Line to look for (without line terminator)

    Returns:
        True if some line matches

    Raises:
        ProbeError: If the file cannot be read or decoded
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            for line in f:
                if line.rstrip("\r\n") == expected:
                    return True
    except OSError as e:
        raise ProbeError.from_os_error(str(path), e)
    except UnicodeDecodeError as e:
        raise ProbeError(
            code=ErrorCode.UNEXPECTED_OUTPUT,
            message=f"{path} is not valid UTF-8: {e}",
            context={"path": str(path)}
        )
    return False


def ufw_enabled_flag(path: Union[str, Path] = UFW_CONF) -> bool:
    """Check the persisted ENABLED=yes flag in ufw.conf."""
    return file_has_line(path, UFW_ENABLED_LINE)


def ufw_service_active(unit: str = "ufw", timeout: float = SYSTEMCTL_TIMEOUT) -> bool:
    """
    Query systemd for the unit's active state.

    ``systemctl status`` exits non-zero for inactive units, so only the
    output is inspected.

    Args:
        unit: systemd unit name
        timeout: Seconds to wait for systemctl

    Returns:
        True if systemctl reports the unit as active

    Raises:
        ProbeError: If systemctl is missing, times out or prints non-UTF-8
    """
    cmd = ["systemctl", "status", unit]
    env = dict(os.environ, LC_ALL="C")

    try:
        result = subprocess.run(
            cmd,
            env=env,
            capture_output=True,
            timeout=timeout,
            check=False
        )
    except subprocess.TimeoutExpired:
        raise ProbeError(
            code=ErrorCode.COMMAND_TIMEOUT,
            message=f"systemctl status {unit} timed out after {timeout}s",
            context={"command": cmd}
        )
    except FileNotFoundError:
        raise ProbeError(
            code=ErrorCode.COMMAND_NOT_FOUND,
            message="systemctl not found",
            suggestion="The firewall block requires systemd",
            context={"command": cmd}
        )
    except OSError as e:
        raise ProbeError(
            code=ErrorCode.COMMAND_FAILED,
            message=f"Failed to run systemctl: {e}",
            context={"command": cmd}
        )

    try:
        output = result.stdout.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ProbeError(
            code=ErrorCode.UNEXPECTED_OUTPUT,
            message=f"systemctl printed non-UTF-8 output: {e}",
            context={"command": cmd}
        )

    return any(SERVICE_ACTIVE_MARKER in line for line in output.splitlines())


def is_ufw_active(conf_path: Union[str, Path] = UFW_CONF, unit: str = "ufw") -> bool:
    """Firewall is up only if enabled in ufw.conf and the ufw service is active."""
    if not ufw_enabled_flag(conf_path):
        logger.debug(f"ufw not enabled in {conf_path}")
        return False
    return ufw_service_active(unit)


def is_killswitch_active(path: Union[str, Path] = UFW_DEFAULTS) -> bool:
    """Killswitch is on when ufw's default outgoing policy is DROP."""
    return file_has_line(path, KILLSWITCH_POLICY_LINE)
