"""
将映射序列归并为激活状态
"""

from typing import Dict, Iterable, List

from devhosts.models import LOOPBACK, HostsMapping, Mapping, PortForward, ResolvedState


def resolve(
    default_mappings: Iterable[HostsMapping],
    profile_mappings: Iterable[Mapping]
) -> ResolvedState:
    """
    依次应用默认映射和配置映射

    主机名映射后写覆盖先写，插入顺序保持首次出现的顺序。
    端口转发在主机名不存在时隐式映射到本机，并按顺序全部保留。

    参数:
        default_mappings: 默认主机名映射
        profile_mappings: 配置中的映射

    返回:
        ResolvedState
    """
    hosts_table: Dict[str, str] = {}
    port_forwards: List[PortForward] = []

    for mapping in [*default_mappings, *profile_mappings]:
        if isinstance(mapping, HostsMapping):
            hosts_table[mapping.hostname] = mapping.target
        elif isinstance(mapping, PortForward):
            hosts_table.setdefault(mapping.hostname, LOOPBACK)
            port_forwards.append(mapping)
        else:
            raise TypeError(f"未知的映射类型: {mapping!r}")

    return ResolvedState(hosts_table=hosts_table, port_forwards=tuple(port_forwards))
