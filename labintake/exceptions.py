"""
统一异常体系。

所有业务异常继承 BaseAppException，包含：
- type:           错误类型标识（validation_error / auth_error / block / error）
- code:           业务错误码（MALFORMED_PAYLOAD / UNAUTHORIZED / SCHEMA_INVALID / ...）
- message:        写进 webhook_logs 的详细描述
- public_message: 返回给调用方的简短描述（不泄露内部细节）
- detail:         可选的附加信息（dict / list / None）
- http_status:    HTTP 状态码

View 层只需 raise，ExceptionHandlerMixin 统一捕获并格式化响应：
    {"success": false, "error": <public_message>, "code": <code>}
"""


class BaseAppException(Exception):
    """所有业务异常的基类。"""

    type = 'error'
    code = 'UNKNOWN_ERROR'
    http_status = 500
    default_public_message = 'Internal server error'

    def __init__(self, message, code=None, detail=None, http_status=None, public_message=None):
        self.message = message
        if code is not None:
            self.code = code
        if http_status is not None:
            self.http_status = http_status
        self.detail = detail
        self.public_message = public_message or self.default_public_message
        super().__init__(message)


class ValidationError(BaseAppException):
    """输入验证失败，400。"""

    type = 'validation_error'
    code = 'VALIDATION_ERROR'
    http_status = 400
    default_public_message = 'Invalid form data'


class MalformedPayload(ValidationError):
    """请求体既不是合法 JSON 也不是合法表单编码。"""

    code = 'MALFORMED_PAYLOAD'
    default_public_message = 'Invalid payload'


class SchemaInvalid(ValidationError):
    """payload 能解码，但结构不符合 webhook schema（或 source 未注册）。"""

    code = 'SCHEMA_INVALID'


class Unauthorized(BaseAppException):
    """webhook secret 不匹配，401。不做任何后续处理。"""

    type = 'auth_error'
    code = 'UNAUTHORIZED'
    http_status = 401
    default_public_message = 'Unauthorized'


class BlockError(BaseAppException):
    """业务规则阻止操作，409（not found 时覆盖为 404）。"""

    type = 'block'
    code = 'BUSINESS_BLOCK'
    http_status = 409
    default_public_message = 'Request blocked'


class UnhandledFailure(BaseAppException):
    """
    匹配或事务阶段的任何意外异常，500。

    事务回滚保证不会留下半个订单；原始异常信息只进 webhook_logs。
    """

    code = 'UNHANDLED_FAILURE'
