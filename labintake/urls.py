from django.urls import path
from .views import WebhookHealthView, WebhookView

urlpatterns = [
    path('health', WebhookHealthView.as_view(), name='webhook-health'),
    path('<slug:source>', WebhookView.as_view(), name='webhook-receive'),
]
