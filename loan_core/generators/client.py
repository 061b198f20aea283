"""Client generator for seed data."""

from __future__ import annotations

import random
from datetime import datetime, timedelta
from typing import Iterator

from loan_core.generators.base import BaseGenerator
from loan_core.models.financial import Address, BankDetails, Client


class ClientGenerator(BaseGenerator):
    """Generate synthetic borrowers with Brazilian documents and addresses."""

    BANKS = ["Banco do Brasil", "Caixa", "Itaú", "Bradesco", "Santander", "Nubank", "Inter"]

    def generate(self) -> Client:
        """Generate a single client.

        Returns
        -------
        Client
            Generated client.
        """
        created_at = datetime.now() - timedelta(days=random.randint(0, 2 * 365))

        return Client(
            client_id=self.fake.uuid4(),
            full_name=self.fake.name(),
            document=self.fake.cpf(),
            phone=self.fake.cellphone_number(),
            email=self.fake.email(),
            address=self._generate_address(),
            created_at=created_at,
            bank_details=self._generate_bank_details(),
        )

    def generate_batch(self, count: int) -> Iterator[Client]:
        """Generate multiple clients.

        Parameters
        ----------
        count : int
            Number of clients to generate.

        Yields
        ------
        Client
            Generated clients.
        """
        for _ in range(count):
            yield self.generate()

    def _generate_address(self) -> Address:
        return Address(
            street=self.fake.street_name(),
            number=self.fake.building_number(),
            neighborhood=self.fake.bairro(),
            city=self.fake.city(),
            state=self.fake.estado_sigla(),
            postal_code=self.fake.postcode(),
            complement=random.choice(["", "", f"Apto {random.randint(1, 300)}"]),
        )

    def _generate_bank_details(self) -> BankDetails | None:
        if random.random() < 0.3:
            return None
        return BankDetails(
            pix_key=self.fake.email(),
            bank=random.choice(self.BANKS),
            branch=f"{random.randint(1, 9999):04d}",
            account=f"{random.randint(10000, 99999)}-{random.randint(0, 9)}",
        )
