from txn_history.models.payment import RazorpayPayment
from txn_history.models.order import RazorpayOrder
from txn_history.models.refund import RazorpayRefund

__all__ = ["RazorpayPayment", "RazorpayOrder", "RazorpayRefund"]
