"""
URL configuration for the payments app.

Routes:
    - /records/...  - PaymentRecord lifecycle (see payments.views)
    - POST /webhook/ - Gateway webhook endpoint

All routes are prefixed with /api/v1/payments/ when included in the main URLconf.
"""

from django.urls import path
from rest_framework.routers import DefaultRouter

from payments.views import PaymentRecordViewSet
from payments.webhooks.views import cashfree_webhook

app_name = "payments"

router = DefaultRouter()
router.register(r"records", PaymentRecordViewSet, basename="payment-record")

urlpatterns = [
    # Webhook endpoints
    path("webhook/", cashfree_webhook, name="cashfree_webhook"),
    *router.urls,
]
