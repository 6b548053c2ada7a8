"""
激活引擎: 渲染 hosts 文件和 pf 规则并按顺序应用
"""

import logging
from typing import Callable

from devhosts.effects import SystemEffects
from devhosts.errors import SystemCommandError
from devhosts.models import PortForward, ResolvedState


def render_hosts(default_hosts: str, state: ResolvedState) -> str:
    """
    渲染 hosts 文件内容

    参数:
        default_hosts: 原样前置的默认 hosts 文本
        state: 激活状态

    返回:
        完整的 hosts 文件内容
    """
    content = default_hosts
    if content and not content.endswith("\n"):
        content += "\n"
    for line in state.to_hosts_lines():
        content += line + "\n"
    return content


def render_rules(state: ResolvedState) -> str:
    """渲染 pf 重定向规则，每个端口转发一行"""
    lines = []
    for forward in state.port_forwards:
        if not isinstance(forward, PortForward):
            raise TypeError(f"未知的端口转发类型: {forward!r}")
        lines.append(forward.to_pf_rule())
    return "\n".join(lines) + "\n" if lines else ""


class ActivationEngine:
    """
    将激活状态应用到系统

    步骤严格按顺序执行:
    1. 替换 hosts 文件
    2. 刷新所有 pf 规则
    3. 存在端口转发时一次性加载新规则集

    任一步骤失败都会中止后续步骤，不做回滚。
    """

    def __init__(
        self,
        effects: SystemEffects,
        default_hosts_source: Callable[[], str],
        logger: logging.Logger
    ):
        """
        参数:
            effects: 系统副作用实现
            default_hosts_source: 返回默认 hosts 文本的函数
            logger: 日志记录器实例
        """
        self.effects = effects
        self.default_hosts_source = default_hosts_source
        self.logger = logger

    def activate(self, state: ResolvedState) -> None:
        """
        应用激活状态

        异常:
            SystemCommandError: 任一步骤失败，step 属性标明失败的步骤
        """
        hosts_content = render_hosts(self.default_hosts_source() or "", state)
        rules = render_rules(state)

        self._apply("hosts", self.effects.write_hosts, hosts_content)
        self.logger.info(f"已写入 {len(state.hosts_table)} 条 host 记录")

        self._apply("flush", self.effects.flush_rules)
        self.logger.info("已刷新 pf 规则")

        if state.port_forwards:
            self._apply("load", self.effects.load_rules, rules)
            self.logger.info(f"已加载 {len(state.port_forwards)} 条端口转发规则")

    def _apply(self, step: str, operation: Callable, *args) -> None:
        try:
            operation(*args)
        except SystemCommandError:
            self.logger.error(f"激活步骤 {step} 失败，后续步骤已中止")
            raise
        except OSError as e:
            self.logger.error(f"激活步骤 {step} 失败: {e}")
            raise SystemCommandError(step, str(e)) from e
