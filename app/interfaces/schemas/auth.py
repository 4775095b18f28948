"""认证相关 Schema"""

from pydantic import BaseModel


class ConnectResponse(BaseModel):
    """登录响应"""

    token: str
