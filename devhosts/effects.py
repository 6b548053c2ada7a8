"""
系统副作用: hosts 文件与 pf 防火墙规则
"""

import logging
import subprocess
from typing import List, Optional, Protocol

from devhosts.config import Config
from devhosts.errors import SystemCommandError
from devhosts.hosts_manager import HostsFileManager


class SystemEffects(Protocol):
    """激活引擎依赖的系统操作"""

    def write_hosts(self, content: str) -> None:
        ...

    def flush_rules(self) -> None:
        ...

    def load_rules(self, rules: str) -> None:
        ...


def run_command(argv: List[str], stdin: Optional[str] = None) -> subprocess.CompletedProcess:
    """执行命令并捕获输出，不检查退出码"""
    return subprocess.run(
        argv,
        input=stdin,
        capture_output=True,
        text=True,
        check=False
    )


class PfSystemEffects:
    """
    基于 pfctl 的系统副作用实现

    - 刷新规则: pfctl -F all -f <pf.conf>
    - 加载规则: pfctl -Ef -，规则通过 stdin 一次性加载
    """

    def __init__(self, config: Config, logger: logging.Logger, runner=run_command):
        """
        参数:
            config: 应用配置
            logger: 日志记录器实例
            runner: 执行外部命令的函数，签名为 (argv, stdin)
        """
        self.config = config
        self.logger = logger
        self.runner = runner
        self.hosts_manager = HostsFileManager(
            config.hosts_file_path,
            logger,
            runner,
            use_sudo=config.use_sudo
        )

    def _pfctl(self, *args: str) -> List[str]:
        command = [self.config.pfctl, *args]
        if self.config.use_sudo:
            command.insert(0, "sudo")
        return command

    def _run(self, step: str, command: List[str], stdin: Optional[str] = None) -> None:
        self.logger.debug(f"执行: {' '.join(command)}")
        try:
            result = self.runner(command, stdin)
        except OSError as e:
            self.logger.error(f"执行 {command[0]} 失败: {e}")
            raise SystemCommandError(step, str(e), command=command) from e

        if result.returncode != 0:
            self.logger.error(
                f"命令失败 (退出码 {result.returncode}): {' '.join(command)}"
            )
            raise SystemCommandError(
                step,
                f"{' '.join(command)} exited with {result.returncode}",
                command=command,
                returncode=result.returncode,
                stderr=result.stderr or ""
            )

    def write_hosts(self, content: str) -> None:
        self.hosts_manager.write(content)

    def flush_rules(self) -> None:
        self._run("flush", self._pfctl("-F", "all", "-f", self.config.pf_conf_path))

    def load_rules(self, rules: str) -> None:
        self._run("load", self._pfctl("-Ef", "-"), stdin=rules)
