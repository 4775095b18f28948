import logging

from app.application.errors.exceptions import AppException, InternalError
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

logger = logging.getLogger(__name__)


def _error_response(status_code: int, msg: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": msg})


def register_exception_handlers(app: FastAPI) -> None:
    """统一处理项目中的异常，涵盖：自定义业务异常、请求校验异常、HTTP异常、通用异常"""

    @app.exception_handler(AppException)
    async def app_exception_handler(
        request: Request, exc: AppException
    ) -> JSONResponse:
        """自定义应用异常处理器，捕获AppException并返回{"error": msg}"""
        if exc.status_code >= 500:
            logger.error(f"App exception: {exc.msg}")
        else:
            logger.info(f"App exception: {exc.status_code} {exc.msg}")
        return _error_response(exc.status_code, exc.msg)

    @app.exception_handler(RequestValidationError)
    async def request_validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """请求体或参数格式不合法，统一返回400"""
        errors = exc.errors()
        msg = errors[0].get("msg", "Bad request") if errors else "Bad request"
        logger.info(f"Request validation error: {msg}")
        return _error_response(400, msg)

    @app.exception_handler(HTTPException)
    async def http_exception_handler(
        request: Request, exc: HTTPException
    ) -> JSONResponse:
        """HTTP异常处理器，例如404路由不存在、405方法不允许"""
        logger.info(f"HTTP exception: {exc.status_code} {exc.detail}")
        return _error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """通用异常处理器，捕获所有未处理的异常，状态码500"""
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        error = InternalError()
        return _error_response(error.status_code, error.msg)
