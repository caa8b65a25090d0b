import datetime
import hmac
import logging
import secrets
import string
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from .exceptions import BaseAppException, BlockError, UnhandledFailure, Unauthorized, ValidationError
from .intake import get_adapter
from .matching import TestResolver
from .models import Category, Order, OrderItem, StatusHistory, WebhookLog

logger = logging.getLogger(__name__)

UNKNOWN_PATIENT = 'Unknown Patient'
ORDER_NUMBER_ALPHABET = string.digits + string.ascii_uppercase
CENTS = Decimal('0.01')

# 重复投递时只刷新这些字段；订单金额和检测项目保持第一次成功提交时的样子
UPSERT_UPDATE_FIELDS = [
    'patient_name',
    'patient_phone',
    'patient_secondary_phone',
    'patient_address',
    'raw_payload',
    'updated_at',
]


@dataclass
class IngestionResult:
    order: Order
    created: bool
    tests_submitted: int
    tests_matched: int
    total_amount: str
    unmatched: list = field(default_factory=list)

    @property
    def message(self):
        if self.created:
            return 'Order received successfully'
        return 'Order already received, contact details updated; tests and total unchanged'


# ── Order number / totals ──────────────────────────────────────────────────

def generate_order_number(now=None):
    """
    ORD-YYYYMMDD-XXXXX（UTC 日期 + 5 位大写 base-36 随机串）。
    唯一性由 orders.order_number 的唯一约束兜底。
    """
    now = now or timezone.now()
    if timezone.is_aware(now):
        now = now.astimezone(datetime.timezone.utc)
    suffix = ''.join(secrets.choice(ORDER_NUMBER_ALPHABET) for _ in range(5))
    return f"ORD-{now.strftime('%Y%m%d')}-{suffix}"


def compute_total(prices):
    total = sum((Decimal(str(p)) for p in prices), Decimal('0'))
    return total.quantize(CENTS, rounding=ROUND_HALF_UP)


def format_amount(amount):
    return f"{Decimal(str(amount)).quantize(CENTS, rounding=ROUND_HALF_UP):.2f}"


# ── Audit log ──────────────────────────────────────────────────────────────

def record_webhook_received(payload, source='', replay_of=None):
    """无条件写入，在任何校验之前。"""
    log = WebhookLog.objects.create(
        source=source,
        payload=payload,
        status='received',
        replay_of=replay_of,
    )
    logger.info("Webhook received: log_id=%s source=%s", log.id, source)
    return log


def _finish_webhook_log(log, status, error_message=None):
    # 只允许从 received 更新一次
    processed_at = timezone.now()
    updated = WebhookLog.objects.filter(pk=log.pk, status='received').update(
        status=status,
        error_message=error_message,
        processed_at=processed_at,
    )
    if updated:
        log.status = status
        log.error_message = error_message
        log.processed_at = processed_at
    else:
        logger.warning("Webhook log %s already finalized, skipping %s update", log.pk, status)
    return log


def mark_webhook_processed(log):
    return _finish_webhook_log(log, 'processed')


def mark_webhook_failed(log, error_message):
    logger.warning("Webhook log %s failed: %s", log.pk, error_message)
    return _finish_webhook_log(log, 'failed', error_message)


def get_webhook_log(log_id):
    try:
        return WebhookLog.objects.get(id=log_id)
    except WebhookLog.DoesNotExist:
        raise BlockError(
            message='Webhook log not found',
            code='WEBHOOK_LOG_NOT_FOUND',
            detail={'log_id': log_id},
            http_status=404,
            public_message='Webhook log not found',
        )


# ── Auth ───────────────────────────────────────────────────────────────────

def verify_webhook_secret(provided):
    """
    未配置 WEBHOOK_SECRET 时跳过（本地开发）。

    Raises:
        Unauthorized
    """
    expected = settings.WEBHOOK_SECRET
    if not expected:
        return
    if not provided or not hmac.compare_digest(str(provided).encode('utf-8'), expected.encode('utf-8')):
        raise Unauthorized('Invalid webhook secret')


# ── Ingestion ──────────────────────────────────────────────────────────────

def ingest_submission(submission, matches):
    """
    按 external_id 做 upsert，并在同一个事务里写入 order_items。

    - external_id 不存在 → 新建 order + items + 第一条 status_history
    - external_id 已存在 → 只刷新 UPSERT_UPDATE_FIELDS，items 不动

    upsert 是一条 INSERT ... ON CONFLICT (external_id) DO UPDATE，
    并发的重复投递由数据库串行化。插入后通过 order_number 判断这次是否是新建。
    """
    fields = submission.fields
    matched = [m for m in matches if m.matched]
    total = compute_total(m.entry.price for m in matched)
    order_number = generate_order_number()

    candidate = Order(
        external_id=submission.external_id,
        order_number=order_number,
        patient_name=fields.patient_name or UNKNOWN_PATIENT,
        patient_dob=fields.patient_dob,
        patient_phone=fields.patient_phone,
        patient_secondary_phone=fields.patient_secondary_phone,
        patient_address=fields.patient_address,
        physician_name=fields.physician_name,
        clinic_address=fields.clinic_address,
        schedule_date=fields.schedule_date,
        schedule_time=fields.schedule_time,
        date_of_order=fields.date_of_order or timezone.now().date(),
        form_slug=submission.form_slug,
        form_name=submission.form_name,
        total_amount=total,
        status='pending',
        raw_payload=submission.raw_payload,
    )

    with transaction.atomic():
        Order.objects.bulk_create(
            [candidate],
            update_conflicts=True,
            unique_fields=['external_id'],
            update_fields=UPSERT_UPDATE_FIELDS,
        )
        order = Order.objects.get(external_id=submission.external_id)
        created = order.order_number == order_number

        if created:
            OrderItem.objects.bulk_create([
                OrderItem(
                    order=order,
                    test=m.entry,
                    test_name=m.entry.test_name,
                    category=m.entry.category,
                    price_at_order=m.entry.price,
                )
                for m in matched
            ])
            StatusHistory.objects.create(
                order=order,
                old_status=None,
                new_status=order.status,
                comment=f'Received via {submission.source or "webhook"}',
            )

    if created:
        logger.info(
            "Order created: %s | %s | %d/%d tests | $%s",
            order.order_number, order.patient_name, len(matched), len(matches), format_amount(total),
        )
    else:
        logger.info(
            "Order %s already exists for external_id=%s, contact fields refreshed",
            order.order_number, submission.external_id,
        )

    # 重复投递：testsMatched / totalAmount 描述已存在的订单，testsSubmitted / unmatched 描述本次投递
    return IngestionResult(
        order=order,
        created=created,
        tests_submitted=len(matches),
        tests_matched=len(matched) if created else order.items.count(),
        total_amount=format_amount(order.total_amount),
        unmatched=[m.as_warning() for m in matches if not m.matched],
    )


def process_submission(submission, resolver=None):
    """resolve 每个检测名 → ingest。unmatched 只记录，不让整个提交失败。"""
    resolver = resolver or TestResolver.from_database()
    category = Category.from_hint(submission.fields.category_hint)
    matches = resolver.resolve_all(submission.fields.test_names, category=category)
    return ingest_submission(submission, matches)


def handle_webhook(log, source, payload, provided_secret=None, check_secret=True):
    """
    secret 校验 → source 查找 → schema 校验 → 字段抽取 → 匹配 → 事务写入。

    调用前 log 必须已经以 received 状态写入。这里保证 log 恰好有一次终态更新：
    成功 → processed；任何失败 → failed + 错误信息，然后继续往上抛。
    """
    try:
        if check_secret:
            verify_webhook_secret(provided_secret)
        adapter = get_adapter(source, payload)
        adapter.validate()
        submission = adapter.transform()
        result = process_submission(submission)
    except BaseAppException as exc:
        mark_webhook_failed(log, exc.message)
        raise
    except Exception as exc:
        logger.exception("Webhook processing failed: log_id=%s", log.pk)
        mark_webhook_failed(log, str(exc) or exc.__class__.__name__)
        raise UnhandledFailure(str(exc) or exc.__class__.__name__) from exc

    mark_webhook_processed(log)
    return result


# ── Status history ─────────────────────────────────────────────────────────

def change_order_status(order, new_status, actor=None, comment=None):
    """
    修改订单状态；只有状态真的变化时才追加一条 status_history。

    Raises:
        ValidationError: 未知状态
    """
    valid_statuses = [value for value, _ in Order.STATUS_CHOICES]
    if new_status not in valid_statuses:
        raise ValidationError(
            message=f"Unknown order status: {new_status!r}",
            code='INVALID_STATUS',
            detail={'allowed': valid_statuses},
        )

    with transaction.atomic():
        current = Order.objects.select_for_update().get(pk=order.pk)
        if current.status == new_status:
            return current

        old_status = current.status
        current.status = new_status
        current.save(update_fields=['status', 'updated_at'])
        StatusHistory.objects.create(
            order=current,
            old_status=old_status,
            new_status=new_status,
            changed_by=actor,
            comment=comment,
        )

    logger.info("Order %s status %s → %s", current.order_number, old_status, new_status)
    return current
