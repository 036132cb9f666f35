"""
State enums and pure transition functions for payment models.
"""

from payments.state_machines.states import (
    GatewayOutcome,
    OverallStatus,
    PaymentMethod,
    ReleaseStatus,
    StageStatus,
    WebhookEventStatus,
)

__all__ = [
    "GatewayOutcome",
    "OverallStatus",
    "PaymentMethod",
    "ReleaseStatus",
    "StageStatus",
    "WebhookEventStatus",
]
