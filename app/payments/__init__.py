"""
Payments app for project escrow payments.

This app handles:
- Fee math (client service charge, platform commission, admin-management fee)
- PaymentRecord lifecycle: collection, release to the freelancer, refund
- Cashfree order creation, verification and signed webhooks
- Manual UPI collection confirmed by an admin
- Background reconciliation of orders the webhook never settled

Related apps:
    - projects: Each project has one main payment record
    - notifications: Payment event notifications

Usage:
    from payments.services import PaymentRecordService

    record = PaymentRecordService.create_record(project.id, actor=client)
    PaymentRecordService.release(record.id, actor=admin)
"""
