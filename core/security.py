"""安全工具模块：密码哈希、Basic认证解析"""

import base64
import binascii
from typing import Optional

import bcrypt


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """验证密码是否正确

    Args:
        plain_password: 明文密码
        hashed_password: 哈希后的密码

    Returns:
        bool: 密码是否匹配
    """
    # bcrypt 限制密码最大长度为 72 字节，需要与哈希时保持一致
    password_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(password_bytes, hashed_password.encode("utf-8"))
    except (ValueError, TypeError):
        # 兼容历史异常哈希数据，统一按密码不匹配处理，避免抛 500
        return False


def get_password_hash(password: str) -> str:
    """生成密码哈希

    Args:
        password: 明文密码

    Returns:
        str: 哈希后的密码
    """
    # bcrypt 限制密码最大长度为 72 字节，超过需要截断
    password_bytes = password.encode("utf-8")[:72]
    return bcrypt.hashpw(password_bytes, bcrypt.gensalt()).decode("utf-8")


def decode_basic_auth(header: Optional[str]) -> Optional[tuple[str, str]]:
    """解析 `Authorization: Basic xxx` 头，返回 (email, password)

    Returns:
        Optional[tuple]: 解析失败返回 None
    """
    if not header or not header.startswith("Basic "):
        return None

    try:
        decoded = base64.b64decode(header[len("Basic ") :].strip()).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return None

    email, sep, password = decoded.partition(":")
    if not sep:
        return None
    return email, password
