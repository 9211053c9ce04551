# STATUS: done
"""
System commands used to toggle the tunnel interface and the dhcpd service.
"""

import logging
import subprocess
from typing import List

from ..common.constants import DEFAULT_SERVICE_NAME, DEFAULT_SERVICE_TOOL
from ..common.errors import ExternalCommandFailed

logger = logging.getLogger(__name__)


class SystemCommands:
    """Interface toggling and service control used by the DaemonController."""

    def interface_up(self, ifname: str) -> None:
        raise NotImplementedError

    def interface_down(self, ifname: str) -> None:
        raise NotImplementedError

    def restart_service(self) -> None:
        raise NotImplementedError

    def stop_service(self) -> None:
        raise NotImplementedError


class ShellCommands(SystemCommands):
    """Runs `ip` and the service manager as blocking subprocesses."""

    def __init__(self, service_name: str = DEFAULT_SERVICE_NAME,
                 service_tool: str = DEFAULT_SERVICE_TOOL):
        self.service_name = service_name
        self.service_tool = service_tool

    def _run(self, cmd: List[str]) -> None:
        """
        Run a command and wait for it to finish.

        Raises:
            ExternalCommandFailed: If the command is missing or exits non-zero
        """
        logger.debug(f"Running: {' '.join(cmd)}")
        try:
            subprocess.run(cmd, check=True, capture_output=True)
        except subprocess.CalledProcessError as e:
            stderr = e.stderr.decode(errors='replace').strip() if e.stderr else ""
            raise ExternalCommandFailed(
                f"'{' '.join(cmd)}' exited with status {e.returncode}: {stderr}") from e
        except OSError as e:
            raise ExternalCommandFailed(f"Cannot run '{cmd[0]}': {e}") from e

    def _service_cmd(self, verb: str) -> List[str]:
        # systemctl takes the verb first, rc-service and service take it last
        if self.service_tool == "systemctl":
            return [self.service_tool, verb, self.service_name]
        return [self.service_tool, self.service_name, verb]

    def interface_up(self, ifname: str) -> None:
        self._run(["ip", "link", "set", "dev", ifname, "up"])

    def interface_down(self, ifname: str) -> None:
        self._run(["ip", "link", "set", "dev", ifname, "down"])

    def restart_service(self) -> None:
        self._run(self._service_cmd("restart"))

    def stop_service(self) -> None:
        self._run(self._service_cmd("stop"))
