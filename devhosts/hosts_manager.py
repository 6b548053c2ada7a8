"""
Hosts 文件管理模块，支持原子性替换
"""

import logging
import os
import subprocess
import tempfile
from pathlib import Path
from typing import Callable, List, Optional

from devhosts.errors import SystemCommandError

CommandRunner = Callable[[List[str], Optional[str]], subprocess.CompletedProcess]


class HostsFileManager:
    """
    整体替换 hosts 文件内容

    进程有写权限时使用临时文件 + 重命名原子性替换，
    否则通过 sudo tee 写入。
    """

    STEP = "hosts"
    FILE_MODE = 0o644

    def __init__(
        self,
        hosts_path: str,
        logger: logging.Logger,
        runner: CommandRunner,
        use_sudo: bool = True
    ):
        """
        初始化 hosts 文件管理器

        参数:
            hosts_path: hosts 文件路径
            logger: 日志记录器实例
            runner: 执行外部命令的函数
            use_sudo: 无写权限时是否通过 sudo 写入
        """
        self.hosts_path = Path(hosts_path)
        self.logger = logger
        self.runner = runner
        self.use_sudo = use_sudo

    def is_writable(self) -> bool:
        if not os.access(self.hosts_path.parent, os.W_OK):
            return False
        return not self.hosts_path.exists() or os.access(self.hosts_path, os.W_OK)

    def write(self, content: str) -> None:
        """
        用给定内容替换 hosts 文件

        参数:
            content: 完整的 hosts 文件内容

        异常:
            SystemCommandError: 写入失败
        """
        if self.is_writable():
            self._replace_atomic(content)
        elif self.use_sudo:
            self._write_privileged(content)
        else:
            self.logger.error(f"写入 hosts 文件权限被拒绝: {self.hosts_path}")
            raise SystemCommandError(
                self.STEP, f"permission denied writing {self.hosts_path}"
            )

        self.logger.info(f"已更新 hosts 文件: {self.hosts_path}")

    def _replace_atomic(self, content: str) -> None:
        try:
            # 写入临时文件（同一目录）
            temp_fd, temp_path = tempfile.mkstemp(
                dir=self.hosts_path.parent,
                prefix='.hosts.tmp.',
                text=True
            )
        except OSError as e:
            self.logger.error(f"创建临时文件失败: {e}")
            raise SystemCommandError(self.STEP, str(e)) from e

        try:
            with os.fdopen(temp_fd, 'w') as f:
                f.write(content)
            os.chmod(temp_path, self.FILE_MODE)

            # 原子性替换（同一文件系统内有效）
            os.replace(temp_path, self.hosts_path)

        except OSError as e:
            # 出错时清理临时文件
            if os.path.exists(temp_path):
                os.unlink(temp_path)
            self.logger.error(f"更新 hosts 文件失败: {e}")
            raise SystemCommandError(self.STEP, str(e)) from e

    def _write_privileged(self, content: str) -> None:
        command = ["sudo", "tee", str(self.hosts_path)]
        self.logger.debug(f"通过 sudo 写入 hosts 文件: {' '.join(command)}")

        try:
            result = self.runner(command, content)
        except OSError as e:
            self.logger.error(f"执行 {command[0]} 失败: {e}")
            raise SystemCommandError(self.STEP, str(e), command=command) from e

        if result.returncode != 0:
            self.logger.error(f"写入 hosts 文件失败 (退出码 {result.returncode})")
            raise SystemCommandError(
                self.STEP,
                f"{' '.join(command)} exited with {result.returncode}",
                command=command,
                returncode=result.returncode,
                stderr=result.stderr or ""
            )
