"""Client models for loan servicing."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class Address:
    """Brazilian postal address.

    - neighborhood: bairro
    - state: two-letter UF abbreviation
    - postal_code: CEP in ``00000-000`` format
    """

    street: str
    number: str
    neighborhood: str
    city: str
    state: str
    postal_code: str
    complement: str = ""


@dataclass
class BankDetails:
    """Where the client receives disbursements."""

    pix_key: str | None = None
    bank: str | None = None
    branch: str | None = None
    account: str | None = None


@dataclass
class Client:
    """Borrower registered with the lender."""

    client_id: str
    full_name: str
    document: str  # CPF or CNPJ
    phone: str
    email: str
    address: Address
    created_at: datetime
    updated_at: datetime | None = None
    rg: str | None = None
    bank_details: BankDetails | None = None
    profile_photo: str | None = None
    documents: list[str] = field(default_factory=list)  # storage URLs

    @property
    def first_name(self) -> str:
        """First word of the full name, as shown on report charts."""
        return self.full_name.split(" ")[0]
