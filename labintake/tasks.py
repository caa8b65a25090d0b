import logging
from celery import shared_task

logger = logging.getLogger(__name__)


@shared_task(
    bind=True,
    max_retries=3,
    default_retry_delay=10,   # 初始重试延迟（秒），指数退避会乘以 2^retry_count
    acks_late=True,           # 任务执行完才 ack，防止 worker 崩溃时任务丢失
    reject_on_worker_lost=True,
)
def replay_webhook_log(self, log_id: int):
    """
    用 webhook_logs 里保存的原始 payload 重新跑一遍流水线。

    - 不校验 secret（原始请求已经进过库，replay 由运维触发）
    - 每次尝试写一条新的 webhook_logs，replay_of 指向原始记录
    - 订单按 external_id upsert，重复 replay 不会产生重复订单

    重试策略（只针对意外异常；校验失败不重试）：
      - 最多重试 3 次
      - 指数退避：10s → 20s → 40s
    """
    from labintake.exceptions import BaseAppException, UnhandledFailure
    from labintake.models import WebhookLog
    from labintake.services import handle_webhook, record_webhook_received

    logger.info("Replaying webhook log_id=%s (attempt %d/%d)",
                log_id, self.request.retries + 1, self.max_retries + 1)

    try:
        original = WebhookLog.objects.get(id=log_id)
    except WebhookLog.DoesNotExist:
        logger.error("Webhook log %s does not exist, skipping replay", log_id)
        return None  # 不重试，直接结束

    payload = original.payload
    if not isinstance(payload, dict) or set(payload) == {'raw_body', 'content_type'}:
        logger.error("Webhook log %s holds an undecodable body, nothing to replay", log_id)
        return {'log_id': None, 'status': 'skipped'}

    log = record_webhook_received(payload, source=original.source, replay_of=original)

    try:
        result = handle_webhook(log, original.source, payload, check_secret=False)

    except UnhandledFailure as exc:
        if self.request.retries < self.max_retries:
            countdown = self.default_retry_delay * (2 ** self.request.retries)
            logger.info("Replay of log %s failed, retrying in %ds", log_id, countdown)
            raise self.retry(exc=exc, countdown=countdown)
        logger.error("Replay of log %s failed after %d retries", log_id, self.max_retries)
        return {'log_id': log.id, 'status': 'failed', 'error': exc.message}

    except BaseAppException as exc:
        logger.warning("Replay of log %s rejected: %s", log_id, exc.message)
        return {'log_id': log.id, 'status': 'failed', 'error': exc.message}

    return {
        'log_id': log.id,
        'status': 'processed',
        'order_number': result.order.order_number,
        'created': result.created,
    }
