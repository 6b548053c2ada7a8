"""
devhosts 数据模型
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, Union

LOOPBACK = "127.0.0.1"


@dataclass(frozen=True)
class HostsMapping:
    """
    主机名到地址的映射

    属性:
        hostname: 要映射的主机名
        ip_address: 目标 IP 地址，空字符串表示本机
    """

    hostname: str
    ip_address: str

    @property
    def target(self) -> str:
        return self.ip_address or LOOPBACK

    def __str__(self) -> str:
        return f"{self.hostname} -> {self.ip_address or '(local)'}"


@dataclass(frozen=True)
class PortForward:
    """
    端口转发规则

    发往 hostname:host_port 的 TCP 流量被重定向到 127.0.0.1:local_port。

    属性:
        hostname: 要映射的主机名
        host_port: 主机名一侧的端口
        local_port: 本机端口，None 表示与 host_port 相同
    """

    hostname: str
    host_port: int
    local_port: Optional[int] = None

    @property
    def target_port(self) -> int:
        return self.host_port if self.local_port is None else self.local_port

    def to_pf_rule(self) -> str:
        """
        转换为 pf 重定向规则

        返回:
            rdr 规则行
        """
        return (
            f"rdr pass inet proto tcp from any to {self.hostname} "
            f"port {self.host_port} -> {LOOPBACK} port {self.target_port}"
        )

    def __str__(self) -> str:
        return f"{self.hostname}:{self.host_port} -> {LOOPBACK}:{self.target_port}"


Mapping = Union[HostsMapping, PortForward]


@dataclass(frozen=True)
class ResolvedState:
    """
    一次激活所需的完整状态

    属性:
        hosts_table: 主机名 -> IP，按首次出现的顺序
        port_forwards: 按出现顺序排列的端口转发，不去重
    """

    hosts_table: Dict[str, str] = field(default_factory=dict)
    port_forwards: Tuple[PortForward, ...] = ()

    def to_hosts_lines(self) -> List[str]:
        return [f"{ip} {hostname}" for hostname, ip in self.hosts_table.items()]
