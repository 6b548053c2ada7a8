"""
devhosts 主应用模块
"""

import logging
import sys
from typing import Callable, List, Optional, Set

from devhosts.activation import ActivationEngine
from devhosts.config import Config
from devhosts.effects import PfSystemEffects, SystemEffects
from devhosts.errors import DevHostsError
from devhosts.models import Mapping, ResolvedState
from devhosts.profiles import ProfileStore
from devhosts.resolver import resolve

# (提示信息, 已有配置列表) -> 选中的配置名
ProfileChooser = Callable[[str, List[str]], str]


def _no_chooser(message: str, profiles: List[str]) -> str:
    raise DevHostsError(message)


class DevHosts:
    """
    主应用控制器，协调所有组件

    配置存储 -> 映射解析 -> 映射归并 -> 激活引擎
    """

    def __init__(
        self,
        config: Config,
        effects: Optional[SystemEffects] = None,
        chooser: Optional[ProfileChooser] = None
    ):
        """
        初始化 devhosts 应用

        参数:
            config: 应用配置
            effects: 系统副作用实现，默认使用 pfctl
            chooser: 需要用户选择配置时调用的函数

        异常:
            ValueError: 如果配置无效
        """
        self.config = config
        self.config.validate()

        self.logger = self._setup_logging()

        self.store = ProfileStore(config.config_dir, self.logger)
        self.effects = effects or PfSystemEffects(config, self.logger)
        self.chooser = chooser or _no_chooser
        self.engine = ActivationEngine(
            self.effects,
            self.store.get_default_hosts,
            self.logger
        )

    def _setup_logging(self) -> logging.Logger:
        """
        配置日志系统

        返回:
            配置好的日志记录器实例
        """
        logger = logging.getLogger('devhosts')
        logger.setLevel(self.config.log_level)

        # 避免重复的处理器
        if logger.handlers:
            return logger

        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(self.config.log_level)

        # 格式: 时间戳 - 名称 - 级别 - 消息
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        handler.setFormatter(formatter)

        logger.addHandler(handler)
        return logger

    def list_profiles(self) -> Set[str]:
        return self.store.list_profiles()

    def current_profile(self) -> Optional[str]:
        return self.store.get_current()

    def create_profile(self, name: str) -> None:
        self.store.create_profile(name)

    def _choose_profile(self, message: str) -> str:
        choice = self.chooser(message, sorted(self.store.list_profiles()))
        if not self.store.exists(choice):
            self.store.create_profile(choice)
        return choice

    def resolve_profile(self, name: Optional[str]) -> ResolvedState:
        """
        计算配置的激活状态

        参数:
            name: 配置名，None 表示只使用默认映射
        """
        mappings: List[Mapping] = self.store.load_profile(name) if name else []
        return resolve(self.store.load_default_mappings(), mappings)

    def activate_mappings(self, name: Optional[str]) -> ResolvedState:
        state = self.resolve_profile(name)

        self.logger.info(f"正在激活配置: {name or '(默认)'}")
        for hostname, ip in state.hosts_table.items():
            self.logger.debug(f"  • {hostname} -> {ip}")
        for forward in state.port_forwards:
            self.logger.debug(f"  • {forward}")

        self.engine.activate(state)
        return state

    def activate_profile(self, name: str) -> str:
        """
        设置并激活配置

        配置不存在时由 chooser 选择。

        返回:
            实际激活的配置名
        """
        if not self.store.exists(name):
            name = self._choose_profile(
                f"No profile called {name}. Choose a profile to activate:"
            )

        # 先解析，避免当前配置指向无效映射
        state = self.resolve_profile(name)
        self.store.set_current(name)
        self.engine.activate(state)
        self.logger.info(f"已激活配置: {name}")
        return name

    def activate_current(self) -> Optional[str]:
        """
        重新激活当前配置，没有当前配置时只应用默认映射

        返回:
            当前配置名
        """
        name = self.store.get_current()
        if name and not self.store.exists(name):
            self.logger.warning(f"当前配置 {name} 不存在，只应用默认映射")
            name = None
        self.activate_mappings(name)
        return name

    def add_mapping(
        self,
        from_token: str,
        to_token: str,
        profile: Optional[str] = None
    ) -> str:
        """
        向配置追加映射

        目标配置依次为: 显式指定的配置、当前配置、chooser 选择的配置。
        目标为当前配置时重新激活。

        返回:
            追加到的配置名
        """
        current = self.store.get_current()
        target = profile or current
        if target is None:
            target = self._choose_profile(
                "No active profile. Which would you like to add this to?"
            )

        mapping = self.store.append_mapping(target, from_token, to_token)
        self.logger.info(f"已添加映射 {mapping} 到配置 {target}")

        if target == current:
            self.activate_mappings(target)

        return target
