"""
配置（profile）存储模块

目录结构:
    <root>/profiles/<name>     每个配置一个文件
    <root>/current-profile     当前配置名
    <root>/default-hosts       每次渲染前置的原始 hosts 文本
    <root>/default-mappings    每个配置之前应用的默认映射
"""

import logging
from pathlib import Path
from typing import List, Optional, Set

from devhosts.errors import DevHostsError, NotFoundError, ValidationError
from devhosts.models import LOOPBACK, HostsMapping, Mapping
from devhosts.parser import parse_mapping, parse_profile


class ProfileStore:
    """
    读写配置文件并记录当前配置

    配置文件只追加，不修改已有内容。
    """

    PROFILES_DIR = "profiles"
    CURRENT_FILE = "current-profile"
    DEFAULT_HOSTS_FILE = "default-hosts"
    DEFAULT_MAPPINGS_FILE = "default-mappings"

    def __init__(self, root: str, logger: logging.Logger):
        """
        初始化配置存储

        参数:
            root: 配置根目录
            logger: 日志记录器实例
        """
        self.root = Path(root).expanduser()
        self.logger = logger

    @property
    def profiles_dir(self) -> Path:
        return self.root / self.PROFILES_DIR

    @property
    def current_file(self) -> Path:
        return self.root / self.CURRENT_FILE

    @property
    def default_hosts_file(self) -> Path:
        return self.root / self.DEFAULT_HOSTS_FILE

    @property
    def default_mappings_file(self) -> Path:
        return self.root / self.DEFAULT_MAPPINGS_FILE

    def is_initialized(self) -> bool:
        return self.profiles_dir.is_dir()

    def initialize(self) -> None:
        """
        创建配置目录

        异常:
            DevHostsError: 配置已初始化
        """
        if self.profiles_dir.exists():
            raise DevHostsError(
                f"Configuration already exists. Delete {self.root} to reset your profiles."
            )
        self.profiles_dir.mkdir(parents=True, exist_ok=True)
        self.logger.info(f"已创建配置目录: {self.root}")

    def profile_path(self, name: str) -> Path:
        """
        返回配置文件路径

        异常:
            ValidationError: 配置名不是单个路径组件
        """
        if not name or name in ('.', '..') or '/' in name or '\\' in name:
            raise ValidationError("invalid profile name", name)
        return self.profiles_dir / name

    def exists(self, name: str) -> bool:
        return self.profile_path(name).is_file()

    def list_profiles(self) -> Set[str]:
        if not self.profiles_dir.is_dir():
            return set()
        return {p.name for p in self.profiles_dir.iterdir() if p.is_file()}

    def create_profile(self, name: str) -> Path:
        """
        创建空配置

        参数:
            name: 配置名

        返回:
            新配置文件路径

        异常:
            DevHostsError: 配置已存在
        """
        path = self.profile_path(name)
        if path.exists():
            raise DevHostsError(f"Profile '{name}' already exists")
        self.profiles_dir.mkdir(parents=True, exist_ok=True)
        path.write_text("")
        self.logger.info(f"已创建配置: {name}")
        return path

    def load_profile_lines(self, name: str) -> List[str]:
        """
        读取配置的原始行

        异常:
            NotFoundError: 配置不存在
        """
        path = self.profile_path(name)
        try:
            return path.read_text(encoding="utf-8").splitlines()
        except FileNotFoundError:
            raise NotFoundError(f"No profile called '{name}'") from None
        except OSError as e:
            self.logger.error(f"读取配置 {name} 时出错: {e}")
            raise

    def load_profile(self, name: str) -> List[Mapping]:
        return parse_profile(self.load_profile_lines(name))

    def append_mapping(self, name: str, from_token: str, to_token: str) -> Mapping:
        """
        校验映射并追加到配置末尾

        校验失败时不写入任何内容。

        参数:
            name: 配置名
            from_token: 主机名一侧
            to_token: 目标一侧

        返回:
            解析后的映射

        异常:
            ValidationError: 映射不合法
            NotFoundError: 配置不存在
        """
        mapping = parse_mapping(from_token, to_token)
        path = self.profile_path(name)
        if not path.is_file():
            raise NotFoundError(f"No profile called '{name}'")

        # 行格式中空目标无法表示，写为等价的 127.0.0.1
        line = f"{from_token} {to_token or LOOPBACK}"

        existing = path.read_text(encoding="utf-8")
        prefix = "" if not existing or existing.endswith("\n") else "\n"
        with open(path, "a", encoding="utf-8") as f:
            f.write(f"{prefix}{line}\n")

        self.logger.debug(f"已追加映射到 {name}: {mapping}")
        return mapping

    def get_current(self) -> Optional[str]:
        try:
            name = self.current_file.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return None
        return name or None

    def set_current(self, name: str) -> None:
        """
        设置当前配置

        异常:
            NotFoundError: 配置不存在
        """
        if not self.exists(name):
            raise NotFoundError(f"No profile called '{name}'")
        self.current_file.write_text(name, encoding="utf-8")
        self.logger.debug(f"当前配置: {name}")

    def clear_current(self) -> None:
        if self.current_file.exists():
            self.current_file.unlink()

    def get_default_hosts(self) -> str:
        """读取默认 hosts 文本，文件不存在时返回空字符串"""
        try:
            return self.default_hosts_file.read_text(encoding="utf-8")
        except FileNotFoundError:
            return ""

    def load_default_mappings(self) -> List[HostsMapping]:
        """
        读取默认映射

        默认映射只允许主机名映射，不允许端口转发。

        异常:
            ValidationError: 存在不合法的行或端口转发
        """
        try:
            lines = self.default_mappings_file.read_text(encoding="utf-8").splitlines()
        except FileNotFoundError:
            return []

        mappings = parse_profile(lines)
        for mapping in mappings:
            if not isinstance(mapping, HostsMapping):
                raise ValidationError(
                    "port forwards are not allowed in default mappings", str(mapping)
                )
        return mappings
