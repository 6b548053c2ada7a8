"""
配置管理模块，支持环境变量
"""

import os
from dataclasses import dataclass


@dataclass
class Config:
    """应用配置类，从环境变量加载配置"""

    config_dir: str = "~/.config/devhosts"
    hosts_file_path: str = "/etc/hosts"
    pf_conf_path: str = "/etc/pf.conf"
    pfctl: str = "pfctl"
    use_sudo: bool = True
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls) -> "Config":
        """
        从环境变量加载配置

        环境变量说明:
            DEVHOSTS_CONFIG_DIR: 配置根目录 (默认: ~/.config/devhosts)
            HOSTS_FILE: 系统 hosts 文件路径 (默认: /etc/hosts)
            PF_CONF: 刷新规则时重新加载的 pf 配置 (默认: /etc/pf.conf)
            PFCTL: pfctl 可执行文件 (默认: pfctl)
            USE_SUDO: 是否通过 sudo 执行特权操作 (默认: true)
            LOG_LEVEL: 日志级别 (默认: WARNING)
        """
        return cls(
            config_dir=os.getenv("DEVHOSTS_CONFIG_DIR", "~/.config/devhosts"),
            hosts_file_path=os.getenv("HOSTS_FILE", "/etc/hosts"),
            pf_conf_path=os.getenv("PF_CONF", "/etc/pf.conf"),
            pfctl=os.getenv("PFCTL", "pfctl"),
            use_sudo=os.getenv("USE_SUDO", "true").lower() == "true",
            log_level=os.getenv("LOG_LEVEL", "WARNING").upper()
        )

    def validate(self) -> None:
        """验证配置是否有效"""
        valid_log_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if self.log_level not in valid_log_levels:
            raise ValueError(
                f"无效的 LOG_LEVEL: {self.log_level}. "
                f"必须是以下之一: {', '.join(sorted(valid_log_levels))}"
            )
