"""
Tax Invoice Generator

Builds the structured GST invoice attached to an order.
"""

from typing import Optional

from .models import (
    Address,
    BusinessSection,
    ComplianceSection,
    ExemptionDecision,
    InvoiceSection,
    TaxCalculationResult,
    TaxInvoice,
    TransactionType,
)
from .rate_table import RateTable

GST_TYPE_LABELS = {
    TransactionType.INTERSTATE: "IGST",
    TransactionType.INTRASTATE: "CGST + SGST",
}


class TaxInvoiceGenerator:
    """Invoice data for a completed tax calculation"""

    def __init__(self, rate_table: RateTable, seller_gstin: str, seller_address: str):
        self.rate_table = rate_table
        self.seller_gstin = seller_gstin
        self.seller_address = seller_address

    @classmethod
    def from_config(cls, rate_table: RateTable, config) -> "TaxInvoiceGenerator":
        return cls(rate_table, seller_gstin=config.seller_gstin, seller_address=config.seller_address)

    def generate(
        self,
        calculation: TaxCalculationResult,
        billing_address: Address,
        category: Optional[str] = None,
        exemption: Optional[ExemptionDecision] = None,
    ) -> TaxInvoice:
        """
        Generate invoice data

        Args:
            calculation: Result of calculate_gst or calculate_tax_for_items
            billing_address: Customer billing address (place of supply)
            category: Category for the HSN code; None uses the default code
            exemption: Exemption decision to print, if any

        Returns:
            TaxInvoice with invoice, compliance and business sections
        """
        # derived from the address so the invoice matches the place of supply
        transaction_type = (
            TransactionType.INTERSTATE
            if billing_address.state != self.rate_table.seller_home_state
            else TransactionType.INTRASTATE
        )

        return TaxInvoice(
            invoice=InvoiceSection(
                type=transaction_type,
                gst_type=GST_TYPE_LABELS[transaction_type],
                tax_breakdown=calculation.tax_breakdown,
                subtotal=calculation.subtotal,
                tax_total=calculation.tax_total,
                grand_total=calculation.grand_total,
            ),
            compliance=ComplianceSection(
                hsn_code=self.rate_table.hsn_code_for(category),
                place_of_supply=billing_address.state,
                tax_rate=calculation.tax_rate_percent,
                is_reverse_charge=False,
                exemption_reason=exemption.reason if exemption is not None and exemption.exempt else None,
            ),
            business=BusinessSection(
                gstin=self.seller_gstin,
                state=self.rate_table.seller_home_state,
                address=self.seller_address,
            ),
        )
