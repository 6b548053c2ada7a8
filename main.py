#!/usr/bin/env python3
"""
devhosts - 主入口点

按配置改写 /etc/hosts 并安装 pf 端口转发规则。
"""

import sys
from pathlib import Path

# 将当前目录添加到路径以导入 devhosts 模块
sys.path.insert(0, str(Path(__file__).parent))

from devhosts.cli import main


if __name__ == '__main__':
    main()
