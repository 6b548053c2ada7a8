"""
映射解析与校验模块

每一行配置由两个 token 组成: <hostname>[:<port>] <target>[:<port>]
"""

import ipaddress
import re
from typing import Iterable, List, Optional, Tuple

from devhosts.errors import ValidationError
from devhosts.models import LOOPBACK, HostsMapping, Mapping, PortForward

TOKEN_PATTERN = re.compile(r"([^\s:]*)(:([0-9]+))?")
BRACKETED_PATTERN = re.compile(r"\[([^\]\s]+)\](:([0-9]+))?")
LABEL_PATTERN = re.compile(r"[A-Za-z0-9]([A-Za-z0-9-]*[A-Za-z0-9])?")
WHITESPACE = re.compile(r"\s")

MAX_LABEL_LENGTH = 63
MAX_PORT = 65535


def split_token(token: str) -> Tuple[str, Optional[int]]:
    """
    将 token 拆分为名称和端口

    参数:
        token: 形如 name[:port] 的字符串

    返回:
        (名称, 端口) 元组，未指定端口时端口为 None

    异常:
        ValidationError: token 格式不合法或端口超出范围
    """
    match = TOKEN_PATTERN.fullmatch(token)
    if match is None:
        raise ValidationError("invalid token", token)
    return match.group(1), _to_port(match.group(3), token)


def _split_target(token: str) -> Tuple[str, Optional[int]]:
    # IPv6 地址本身包含冒号: 允许裸地址或 [addr]:port 形式
    match = BRACKETED_PATTERN.fullmatch(token)
    if match is not None:
        return match.group(1), _to_port(match.group(3), token)
    if token.count(":") > 1 and not WHITESPACE.search(token) and is_ipv6(token):
        return token, None
    return split_token(token)


def _to_port(value: Optional[str], token: str) -> Optional[int]:
    if value is None:
        return None
    port = int(value)
    if port > MAX_PORT:
        raise ValidationError("port out of range", token)
    return port


def is_hostname(name: str) -> bool:
    """检查是否符合 RFC-1123 主机名语法"""
    if not name:
        return False
    for label in name.split('.'):
        if len(label) > MAX_LABEL_LENGTH or not LABEL_PATTERN.fullmatch(label):
            return False
    return True


def is_ipv4(address: str) -> bool:
    try:
        ipaddress.IPv4Address(address)
    except ValueError:
        return False
    return True


def is_ipv6(address: str) -> bool:
    try:
        ipaddress.IPv6Address(address)
    except ValueError:
        return False
    return True


def parse_mapping(from_token: str, to_token: str) -> Mapping:
    """
    解析一条映射

    参数:
        from_token: 主机名一侧，hostname[:port]
        to_token: 目标一侧，[address][:port]，地址为空表示本机

    返回:
        HostsMapping 或 PortForward

    异常:
        ValidationError: 任一 token 不合法
    """
    hostname, host_port = split_token(from_token)
    address, target_port = _split_target(to_token)

    if not is_hostname(hostname):
        raise ValidationError("expected hostname", from_token)

    if address and not (is_ipv4(address) or is_ipv6(address)):
        raise ValidationError("expected IPv4/IPv6 or empty", to_token)

    is_local = address in ("", LOOPBACK)

    if target_port is not None and not is_local:
        raise ValidationError("ports only valid for local targets", to_token)

    if host_port is None and target_port is not None:
        raise ValidationError(
            "port required on hostname side when target port given",
            f"{from_token} {to_token}"
        )

    if host_port is not None:
        return PortForward(hostname, host_port, target_port)

    return HostsMapping(hostname, address)


def strip_comment(line: str) -> str:
    return line.split('#', 1)[0].strip()


def parse_line(line: str) -> Optional[Mapping]:
    """
    解析配置文件中的一行

    参数:
        line: 原始行

    返回:
        解析得到的映射，空行或纯注释行返回 None

    异常:
        ValidationError: 行格式错误或映射不合法
    """
    content = strip_comment(line)
    if not content:
        return None

    tokens = content.split()
    if len(tokens) != 2:
        raise ValidationError("malformed line", line.rstrip('\n'))

    return parse_mapping(tokens[0], tokens[1])


def parse_profile(lines: Iterable[str]) -> List[Mapping]:
    """
    按顺序解析配置的所有行

    异常:
        ValidationError: 任意一行不合法，消息中带有行号
    """
    mappings: List[Mapping] = []
    for number, line in enumerate(lines, start=1):
        try:
            mapping = parse_line(line)
        except ValidationError as e:
            raise ValidationError(f"line {number}: {e.message}", e.text) from e
        if mapping is not None:
            mappings.append(mapping)
    return mappings
