"""Course enrollment module.

Provides:
- Enrollment and payment confirmation entities
- Wire schemas for the learning API
- Idempotent enrollment store
"""

from .models import Enrollment, PaymentConfirmation


__all__ = ["Enrollment", "PaymentConfirmation"]
