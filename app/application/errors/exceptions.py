from typing import Any


class AppException(RuntimeError):
    """基础应用异常类，继承RuntimeError"""

    def __init__(
        self,
        status_code: int = 400,
        msg: str = "Application error",
        data: Any = None,
    ):
        """构造函数，完成错误数据初始化"""
        self.status_code = status_code
        self.msg = msg
        self.data = data
        super().__init__(msg)


class ValidationError(AppException):
    """请求参数缺失或不合法"""

    def __init__(self, msg: str = "Bad request", data: Any = None):
        super().__init__(status_code=400, msg=msg, data=data)


class UnauthorizedError(AppException):
    """未提供会话或会话无效"""

    def __init__(self, msg: str = "Unauthorized"):
        super().__init__(status_code=401, msg=msg)


class NotFoundError(AppException):
    """资源未找到异常，访问被拒绝与内容缺失同样按未找到处理"""

    def __init__(self, msg: str = "Not found"):
        super().__init__(status_code=404, msg=msg)


class InvalidOperationError(AppException):
    """语义上不合法的操作，例如读取文件夹内容"""

    def __init__(self, msg: str = "Invalid operation"):
        super().__init__(status_code=400, msg=msg)


class StorageError(AppException):
    """文件内容写入失败"""

    def __init__(self, msg: str = "Cannot store file"):
        super().__init__(status_code=500, msg=msg)


class StoreTimeoutError(AppException):
    """后端存储在限定时间内没有响应"""

    def __init__(self, msg: str = "Storage timeout"):
        super().__init__(status_code=500, msg=msg)


class InternalError(AppException):
    """未预期的服务器内部错误"""

    def __init__(self, msg: str = "Internal server error"):
        super().__init__(status_code=500, msg=msg)
