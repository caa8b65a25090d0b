"""
Webhook payload 的结构校验（DRF Serializer，只校验不入库）。

只约束协议自身的顶层字段；其他字段原样透传（passthrough），
因为表单字段名由发送方决定。
"""

from rest_framework import serializers

from ..exceptions import SchemaInvalid


class StringOrNumberField(serializers.Field):
    """form_id / entry_id：字符串或数字都行，bool 不行。"""

    default_error_messages = {
        'invalid': 'Must be a string or a number.',
    }

    def to_internal_value(self, data):
        if isinstance(data, bool) or not isinstance(data, (str, int, float)):
            self.fail('invalid')
        return data

    def to_representation(self, value):
        return value


class WebhookPayloadSerializer(serializers.Serializer):
    entries = serializers.DictField(required=False)
    form_id = StringOrNumberField(required=False)
    form_name = serializers.CharField(required=False, allow_blank=True)
    entry_id = StringOrNumberField(required=False)
    webhook_secret = serializers.CharField(required=False, allow_blank=True)
    file_uploads = serializers.JSONField(required=False)


def _flatten_errors(errors, prefix=''):
    for field_name, messages in errors.items():
        path = f"{prefix}{field_name}"
        if isinstance(messages, dict):
            yield from _flatten_errors(messages, prefix=f"{path}.")
        else:
            for message in messages:
                yield f"{path}: {message}"


def validate_payload(payload: dict) -> dict:
    """
    Returns:
        校验通过的顶层字段（validated_data）

    Raises:
        SchemaInvalid: message 是可读的校验信息，写进 webhook_logs
    """
    serializer = WebhookPayloadSerializer(data=payload)
    if not serializer.is_valid():
        raise SchemaInvalid(
            '; '.join(_flatten_errors(serializer.errors)),
            detail=serializer.errors,
        )
    return serializer.validated_data
