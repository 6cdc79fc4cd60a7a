"""
Payment methods offered at checkout

Payments are settled outside the system (manual bank transfer or e-wallet);
checkout only records which method the customer picked and returns the
instructions to show them.
"""
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class BankAccount(BaseModel):
    name: str
    number: str
    holder: str


class PaymentInstructions(BaseModel):
    """What the customer needs to complete the payment"""
    type: str = Field(..., description="rekening (bank accounts) or phone (e-wallet)")
    banks: List[BankAccount] = Field(default_factory=list)
    number: Optional[str] = None
    name: Optional[str] = None


class PaymentMethod(BaseModel):
    id: str
    name: str
    description: str
    info: PaymentInstructions


ACCOUNT_HOLDER = "PT DAZMerch Indonesia"

PAYMENT_METHODS: Dict[str, PaymentMethod] = {
    "transfer": PaymentMethod(
        id="transfer",
        name="Transfer Bank",
        description="BCA, Mandiri, BNI, BRI",
        info=PaymentInstructions(
            type="rekening",
            banks=[
                BankAccount(name="BCA", number="1234567890", holder=ACCOUNT_HOLDER),
                BankAccount(name="Mandiri", number="0987654321", holder=ACCOUNT_HOLDER),
                BankAccount(name="BNI", number="1122334455", holder=ACCOUNT_HOLDER),
                BankAccount(name="BRI", number="5566778899", holder=ACCOUNT_HOLDER),
            ],
        ),
    ),
    "ewallet": PaymentMethod(
        id="ewallet",
        name="E-Wallet",
        description="GoPay, OVO, DANA, ShopeePay",
        info=PaymentInstructions(
            type="phone",
            number="081234567890",
            name="DAZMerch Store",
        ),
    ),
}


def list_payment_methods() -> List[PaymentMethod]:
    return list(PAYMENT_METHODS.values())


def get_payment_method(method_id: str) -> Optional[PaymentMethod]:
    return PAYMENT_METHODS.get(method_id)


def payment_method_label(method_id: str) -> str:
    """Display name, falling back to the stored id for unknown methods"""
    method = PAYMENT_METHODS.get(method_id)
    return method.name if method else method_id
