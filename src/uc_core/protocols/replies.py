# File: src/uc_core/protocols/replies.py
"""
UC 协议响应解析器 (Reply Parser)

负责将服务器发来的文本帧解析为结构化的 Reply 对象。
本模块是无状态的 (Stateless)。
"""

import logging
from dataclasses import dataclass
from enum import Enum, auto

from ..exceptions import ProtocolError
from . import constants

logger = logging.getLogger(__name__)


class ReplyKind(Enum):
    """服务器响应种类。"""

    PLAYER_ID = auto()
    PLAYER_NOT_FOUND = auto()
    SERVER_SHUTDOWN = auto()
    SERVER_FULL = auto()
    INVALID_COMMAND = auto()
    UNKNOWN = auto()


# 单标签 (无参数) 响应
_SINGLE_TOKEN_REPLIES = {
    constants.Reply.PLAYER_NOT_FOUND: ReplyKind.PLAYER_NOT_FOUND,
    constants.Reply.SERVER_SHUTDOWN: ReplyKind.SERVER_SHUTDOWN,
    constants.Reply.SERVER_FULL: ReplyKind.SERVER_FULL,
    constants.Reply.INVALID_COMMAND: ReplyKind.INVALID_COMMAND,
}


@dataclass(frozen=True)
class Reply:
    """一条已解码的服务器响应。

    Attributes:
        kind: 响应种类。
        player_id: 仅 PLAYER_ID 响应携带的玩家编号。
        raw: 去掉结束符后的原始帧内容。
    """

    kind: ReplyKind
    player_id: int | None = None
    raw: str = ""


def parse_reply(data: bytes) -> Reply:
    """解析一帧服务器响应。

    解析规则 (各分支互斥，每帧只产生一个 Reply):
    1. 单字段: 匹配四个无参标签之一，否则为 UNKNOWN。
    2. 双字段且首字段为 PLAYER_ID: 第二字段必须是非负整数。
    3. 其他字段数: UNKNOWN。

    Args:
        data: 接收到的一帧数据，可带或不带 <EOC> 结束符。

    Returns:
        Reply: 解析结果。

    Raises:
        ProtocolError: 帧不是 ASCII，或 PLAYER_ID 的编号无法解析为非负整数。
    """
    try:
        text = data.decode(constants.ENCODING)
    except UnicodeDecodeError as e:
        raise ProtocolError(f"响应帧不是 ASCII 文本: {data!r}") from e

    if text.endswith(constants.TERMINATOR):
        text = text[: -len(constants.TERMINATOR)]
    body = text.strip()
    tokens = body.split(constants.SEPARATOR)

    if len(tokens) == 1:
        kind = _SINGLE_TOKEN_REPLIES.get(tokens[0], ReplyKind.UNKNOWN)
        reply = Reply(kind=kind, raw=body)
    elif len(tokens) == 2 and tokens[0] == constants.Reply.PLAYER_ID:
        try:
            player_id = int(tokens[1])
        except ValueError:
            raise ProtocolError(f"玩家编号无效: {body!r}") from None
        # 服务器只分配非负编号，-1 是本地"未注册"哨兵值
        if player_id < 0:
            raise ProtocolError(f"玩家编号无效: {body!r}")
        reply = Reply(kind=ReplyKind.PLAYER_ID, player_id=player_id, raw=body)
    else:
        reply = Reply(kind=ReplyKind.UNKNOWN, raw=body)

    logger.debug("parse_reply: %s (raw=%r)", reply.kind.name, body)
    return reply
