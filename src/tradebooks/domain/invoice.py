"""Invoice number generation."""

import logging
from datetime import date
from typing import Optional

from tradebooks.database.base import Database
from tradebooks.domain.errors import ValidationError

logger = logging.getLogger(__name__)


class InvoiceNumberService:
    """Per-prefix daily invoice sequences."""

    def __init__(self, db: Database):
        self.db = db

    def next_invoice_number(self, prefix: str, today: Optional[date] = None) -> str:
        """Generate the next invoice number for a prefix.

        Numbers look like PUR-20240115-0001. The sequence is monotonic per
        (prefix, day) and restarts at 1 on the first call of a new day.

        Args:
            prefix: Document prefix such as "PUR" or "SALE"
            today: Override for the current date

        Raises:
            ValidationError: If the prefix is empty
        """
        prefix = (prefix or "").strip().upper()
        if not prefix:
            raise ValidationError("Invoice prefix is required", field="prefix")
        today = today or date.today()

        with self.db.transaction():
            number = self.db.next_invoice_sequence(prefix, today)

        invoice_no = f"{prefix}-{today:%Y%m%d}-{number:04d}"
        logger.debug("Issued invoice number %s", invoice_no)
        return invoice_no
