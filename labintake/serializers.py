"""
Response serializers — 结果对象 → JSON-able dict。

只负责「输出格式化」，不做任何解析或校验。
输入解析和校验在 labintake/intake/ adapter 系统里。

统一响应格式：
  成功 {"success": true,  "data": {...}}
  失败 {"success": false, "error": "<message>", "code": "<CODE>"}
"""


def success(data):
    return {'success': True, 'data': data}


def error(message, code=None):
    body = {'success': False, 'error': message}
    if code:
        body['code'] = code
    return body


def serialize_webhook_result(result):
    """Serialize IngestionResult for the 201 response."""
    return success({
        'id': result.order.id,
        'orderNumber': result.order.order_number,
        'testsMatched': result.tests_matched,
        'testsSubmitted': result.tests_submitted,
        'totalAmount': result.total_amount,
        'message': result.message,
        'unmatchedTests': [w['test_name'] for w in result.unmatched],
    })
