"""
devhosts 异常类型
"""

from typing import Optional, Sequence


class DevHostsError(Exception):
    """所有 devhosts 错误的基类"""


class ValidationError(DevHostsError):
    """
    映射、token 或配置行格式错误

    属性:
        text: 出错的原始文本
    """

    def __init__(self, message: str, text: str = ""):
        self.message = message
        self.text = text
        super().__init__(f"{message}: {text!r}" if text else message)


class NotFoundError(DevHostsError):
    """配置或文件不存在"""


class SystemCommandError(DevHostsError):
    """
    修改 hosts 文件或防火墙规则失败

    属性:
        step: 失败的激活步骤 (hosts / flush / load)
        command: 执行的命令
        returncode: 命令退出码
        stderr: 命令错误输出
    """

    def __init__(
        self,
        step: str,
        message: str,
        command: Optional[Sequence[str]] = None,
        returncode: Optional[int] = None,
        stderr: str = ""
    ):
        self.step = step
        self.command = list(command) if command else []
        self.returncode = returncode
        self.stderr = stderr
        detail = f"[{step}] {message}"
        if stderr:
            detail += f": {stderr.strip()}"
        super().__init__(detail)
