"""
devhosts - 管理本地开发用的 hosts 映射与端口转发配置
"""

__version__ = "1.0.0"
__author__ = "devhosts Project"

from devhosts.app import DevHosts
from devhosts.config import Config
from devhosts.models import HostsMapping, PortForward, ResolvedState

__all__ = ["DevHosts", "Config", "HostsMapping", "PortForward", "ResolvedState"]
