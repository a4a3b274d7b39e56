"""
Unit Tests for Tax Invoice Generation
"""

import pytest
from decimal import Decimal

from microservices.pricing_service.invoice import TaxInvoiceGenerator
from microservices.pricing_service.models import ExemptionDecision, OrderLineItem, TransactionType
from microservices.pricing_service.rate_table import RateTable
from tests.contracts.pricing.data_contract import SELLER_ADDRESS, SELLER_GSTIN, SELLER_STATE

pytestmark = [pytest.mark.unit]


@pytest.fixture
def generator(rate_table):
    return TaxInvoiceGenerator(rate_table, seller_gstin=SELLER_GSTIN, seller_address=SELLER_ADDRESS)


class TestGenerate:

    def test_intrastate_invoice(self, generator, tax_calculator, intrastate):
        calculation = tax_calculator.calculate_gst(Decimal("1000"), intrastate, "gifts")
        invoice = generator.generate(calculation, intrastate, "gifts")

        assert invoice.invoice.type == TransactionType.INTRASTATE
        assert invoice.invoice.gst_type == "CGST + SGST"
        assert invoice.invoice.tax_breakdown == calculation.tax_breakdown
        assert invoice.invoice.subtotal == Decimal("1000.00")
        assert invoice.invoice.tax_total == Decimal("180.00")
        assert invoice.invoice.grand_total == Decimal("1180.00")

        assert invoice.compliance.hsn_code == "9505"
        assert invoice.compliance.place_of_supply == "Maharashtra"
        assert invoice.compliance.tax_rate == Decimal("18")
        assert invoice.compliance.is_reverse_charge is False
        assert invoice.compliance.exemption_reason is None

        assert invoice.business.gstin == SELLER_GSTIN
        assert invoice.business.state == SELLER_STATE
        assert invoice.business.address == SELLER_ADDRESS

    def test_interstate_invoice(self, generator, tax_calculator, interstate):
        calculation = tax_calculator.calculate_gst(Decimal("1000"), interstate, "gifts")
        invoice = generator.generate(calculation, interstate)

        assert invoice.invoice.type == TransactionType.INTERSTATE
        assert invoice.invoice.gst_type == "IGST"
        assert invoice.compliance.place_of_supply == "Karnataka"
        assert invoice.business.state == SELLER_STATE

    def test_mixed_rate_invoice(self, generator, tax_calculator, interstate):
        items = [OrderLineItem(amount=Decimal("100"), category="gifts"),
                 OrderLineItem(amount=Decimal("100"), category="clothing")]
        calculation = tax_calculator.calculate_tax_for_items(items, interstate)
        invoice = generator.generate(calculation, interstate)

        assert invoice.compliance.tax_rate == 0
        assert invoice.invoice.tax_total == Decimal("30.00")

    def test_exemption_reason_printed(self, generator, tax_calculator, intrastate):
        calculation = tax_calculator.calculate_gst(Decimal("400"), intrastate, "books")
        exemption = ExemptionDecision(exempt=True, reason="Educational material exemption")
        invoice = generator.generate(calculation, intrastate, "books", exemption)
        assert invoice.compliance.exemption_reason == "Educational material exemption"

    def test_non_exempt_decision_has_no_reason(self, generator, tax_calculator, intrastate):
        calculation = tax_calculator.calculate_gst(Decimal("1000"), intrastate)
        invoice = generator.generate(calculation, intrastate, exemption=ExemptionDecision(exempt=False))
        assert invoice.compliance.exemption_reason is None

    def test_category_hsn_code(self, tax_calculator, intrastate):
        table = RateTable(seller_home_state=SELLER_STATE, hsn_codes={"books": "4901"})
        generator = TaxInvoiceGenerator(table, SELLER_GSTIN, SELLER_ADDRESS)
        calculation = tax_calculator.calculate_gst(Decimal("1000"), intrastate, "books")

        assert generator.generate(calculation, intrastate, "books").compliance.hsn_code == "4901"
        assert generator.generate(calculation, intrastate).compliance.hsn_code == "9505"

    def test_from_config(self, rate_table, pricing_config):
        generator = TaxInvoiceGenerator.from_config(rate_table, pricing_config)
        assert generator.seller_gstin == SELLER_GSTIN
        assert generator.seller_address == SELLER_ADDRESS
