from django.db import models

from .matching import canonical_key


# 20 分钟一个 slot：09:00, 09:20, ... 16:40（共 24 个）
TIME_SLOTS = tuple(
    f'{hour:02d}:{minute:02d}'
    for hour in range(9, 17)
    for minute in (0, 20, 40)
)


class Category(models.TextChoices):
    MEDICAL_TESTING_AND_PANELS = 'medical_testing_and_panels', 'Medical Testing & Panels'
    STD_TESTING = 'std_testing', 'STD Testing'
    DRUG_TESTING = 'drug_testing', 'Drug Testing'
    RESPIRATORY_TESTING = 'respiratory_testing', 'Respiratory Testing'
    UTI_TESTING = 'uti_testing', 'UTI Testing'
    WOUND_TESTING = 'wound_testing', 'Wound Testing'
    GASTROINTESTINAL_TESTING = 'gastrointestinal_testing', 'Gastrointestinal Testing'

    @classmethod
    def from_hint(cls, hint):
        """
        把表单里的分类提示转成 Category。
        接受 key（drug_testing）、slug（drug-testing）或展示名（Drug Testing）。
        无法识别时返回 None。
        """
        if not hint:
            return None
        lookup = canonical_key(hint).replace(' ', '_')
        for value, label in cls.choices:
            if lookup in (value, canonical_key(label).replace(' ', '_')):
                return cls(value)
        return None


class Staff(models.Model):
    ROLE_CHOICES = [
        ('admin', 'Admin'),
        ('staff', 'Staff'),
    ]

    name = models.CharField(max_length=255)
    email = models.EmailField(max_length=255, unique=True)
    role = models.CharField(max_length=10, choices=ROLE_CHOICES, default='staff')
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'staff'


class CatalogEntry(models.Model):
    """
    可下单的检测项目。

    search_name 由 test_name 推导（canonical_key），每次 save() 重新计算，
    webhook 匹配只比较 search_name。
    """

    test_name = models.CharField(max_length=255)
    search_name = models.CharField(max_length=255, db_index=True, editable=False)
    category = models.CharField(max_length=50, choices=Category.choices, db_index=True)
    price = models.DecimalField(max_digits=10, decimal_places=2)
    description = models.TextField(blank=True, null=True)
    is_active = models.BooleanField(default=True, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'test_catalog'

    def save(self, *args, **kwargs):
        self.search_name = canonical_key(self.test_name)
        update_fields = kwargs.get('update_fields')
        if update_fields is not None and 'test_name' in update_fields:
            kwargs['update_fields'] = set(update_fields) | {'search_name'}
        super().save(*args, **kwargs)

    def __str__(self):
        return f'{self.test_name} (${self.price})'


class Order(models.Model):
    STATUS_CHOICES = [
        ('pending', 'Pending'),
        ('completed', 'Completed'),
        ('cancelled', 'Cancelled'),
    ]

    external_id = models.CharField(max_length=100, unique=True, blank=True, null=True)
    order_number = models.CharField(max_length=50, unique=True)

    # Patient
    patient_name = models.CharField(max_length=255)
    patient_dob = models.DateField(blank=True, null=True)
    patient_phone = models.CharField(max_length=50, blank=True, null=True)
    patient_secondary_phone = models.CharField(max_length=50, blank=True, null=True)
    patient_address = models.TextField(blank=True, null=True)

    # Physician / clinic
    physician_name = models.CharField(max_length=255, blank=True, null=True)
    clinic_address = models.TextField(blank=True, null=True)

    # Scheduling（schedule_time 必须是 TIME_SLOTS 之一）
    schedule_date = models.DateField(blank=True, null=True, db_index=True)
    schedule_time = models.CharField(max_length=10, blank=True, null=True)

    # Order metadata
    date_of_order = models.DateField()
    form_slug = models.CharField(max_length=150, db_index=True)
    form_name = models.CharField(max_length=255, blank=True, null=True)

    total_amount = models.DecimalField(max_digits=10, decimal_places=2, default=0)

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='pending', db_index=True)
    assigned_to = models.ForeignKey(
        Staff, on_delete=models.SET_NULL, blank=True, null=True, related_name='assigned_orders',
    )
    notes = models.TextField(blank=True, null=True)

    # 原始 webhook payload，原样保存用于排查 / replay
    raw_payload = models.JSONField(blank=True, null=True)

    submitted_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'orders'


class OrderItem(models.Model):
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name='items')
    test = models.ForeignKey(CatalogEntry, on_delete=models.PROTECT, related_name='order_items')
    test_name = models.CharField(max_length=255)
    category = models.CharField(max_length=50)
    price_at_order = models.DecimalField(max_digits=10, decimal_places=2)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'order_items'


class StatusHistory(models.Model):
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name='status_history')
    old_status = models.CharField(max_length=30, blank=True, null=True)
    new_status = models.CharField(max_length=30)
    changed_by = models.ForeignKey(
        Staff, on_delete=models.SET_NULL, blank=True, null=True, related_name='status_changes',
    )
    comment = models.TextField(blank=True, null=True)
    changed_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'status_history'
        ordering = ['changed_at', 'id']


class WebhookLog(models.Model):
    STATUS_CHOICES = [
        ('received', 'Received'),
        ('processed', 'Processed'),
        ('failed', 'Failed'),
    ]

    source = models.CharField(max_length=50, blank=True, default='')
    payload = models.JSONField()
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='received')
    error_message = models.TextField(blank=True, null=True)
    replay_of = models.ForeignKey(
        'self', on_delete=models.SET_NULL, blank=True, null=True, related_name='replays',
    )
    received_at = models.DateTimeField(auto_now_add=True)
    processed_at = models.DateTimeField(blank=True, null=True)

    class Meta:
        db_table = 'webhook_logs'
