import logging

from django.conf import settings
from django.core.exceptions import RequestDataTooBig, TooManyFieldsSent
from django.db import DatabaseError
from django.http import JsonResponse
from django.http.multipartparser import MultiPartParserError
from django.utils import timezone
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt

from .exceptions import BaseAppException, MalformedPayload, UnhandledFailure
from .intake import find_secret, normalize_payload
from .serializers import error, serialize_webhook_result, success
from .services import handle_webhook, mark_webhook_failed, record_webhook_received

logger = logging.getLogger(__name__)


class ExceptionHandlerMixin:
    """把 BaseAppException 转成统一的错误响应；其他异常照常冒泡。"""

    def dispatch(self, request, *args, **kwargs):
        try:
            return super().dispatch(request, *args, **kwargs)
        except BaseAppException as exc:
            return JsonResponse(error(exc.public_message, exc.code), status=exc.http_status)


def _undecodable_payload(raw_body, content_type):
    if isinstance(raw_body, bytes):
        raw_body = raw_body.decode('utf-8', errors='replace')
    # jsonb 存不了 NUL
    return {'raw_body': (raw_body or '').replace('\x00', '\ufffd'), 'content_type': content_type}


def _record_received(payload, source):
    """写 received 行；存储失败时仍然返回统一的 500 响应。"""
    try:
        return record_webhook_received(payload, source)
    except DatabaseError as exc:
        logger.exception("Could not write webhook log for source=%s", source)
        raise UnhandledFailure(f"Webhook log write failed: {exc}") from exc


def _audit_rejection(raw_body, content_type, source, exc):
    """解码前就失败的请求：照样写一行 webhook_logs 并标记 failed，返回异常由调用方 raise。"""
    log = _record_received(_undecodable_payload(raw_body, content_type), source)
    mark_webhook_failed(log, exc.message)
    return exc


@method_decorator(csrf_exempt, name='dispatch')
class WebhookView(ExceptionHandlerMixin, View):
    """POST /webhook/<source> - 接收表单提交，创建（或刷新）订单"""

    http_method_names = ['post']

    def post(self, request, source):
        content_type = request.META.get('CONTENT_TYPE', '')

        try:
            raw_body = request.body
        except RequestDataTooBig:
            raise _audit_rejection(b'', content_type, source, MalformedPayload(
                f"Request body exceeds {settings.DATA_UPLOAD_MAX_MEMORY_SIZE} bytes",
                code='PAYLOAD_TOO_LARGE',
                http_status=413,
            ))

        form = None
        if request.content_type == 'multipart/form-data':
            try:
                form = request.POST
            except (MultiPartParserError, TooManyFieldsSent, RequestDataTooBig) as exc:
                raise _audit_rejection(raw_body, content_type, source, MalformedPayload(
                    f"Unreadable multipart body: {exc}",
                ))

        try:
            payload = normalize_payload(raw_body, content_type, form=form)
        except MalformedPayload as exc:
            raise _audit_rejection(raw_body, content_type, source, exc)

        log = _record_received(payload, source)

        # header > query param > payload 字段
        provided_secret = (
            request.headers.get(settings.WEBHOOK_SECRET_HEADER)
            or request.GET.get(settings.WEBHOOK_SECRET_PARAM)
            or find_secret(payload, settings.WEBHOOK_SECRET_PARAM)
        )

        result = handle_webhook(log, source, payload, provided_secret=provided_secret)
        return JsonResponse(serialize_webhook_result(result), status=201)


class WebhookHealthView(View):
    """GET /webhook/health"""

    http_method_names = ['get']

    def get(self, request):
        return JsonResponse(success({'status': 'ok', 'timestamp': timezone.now().isoformat()}))
