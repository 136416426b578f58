"""Sales history source (ATTOM sales history API)."""

import logging

from property_command.address import AddressParts
from property_command.domain.models import Category, Sale
from property_command.sources.base import (
    HttpSource,
    SourceNoDataError,
    parse_date,
    to_float,
    to_str,
)
from property_command.sources.tax import ATTOM_BASE_URL

logger = logging.getLogger(__name__)


def parse_attom_sale(record: dict) -> Sale:
    amount = record.get("amount") or {}
    calculation = record.get("calculation") or {}
    return Sale(
        sale_date=parse_date(record.get("saleTransDate") or amount.get("salerecdate")),
        sale_price=to_float(amount.get("saleamt")),
        price_per_sqft=to_float(calculation.get("pricepersizeunit")),
        deed_type=to_str(amount.get("saledisclosuretype") or amount.get("saletranstype")),
        buyer=to_str(record.get("buyerName")),
        seller=to_str(record.get("sellerName")),
    )


class AttomSalesSource(HttpSource):
    """Recorded sales for an address, most recent first."""

    source_id = "attom_sales"
    category = Category.SALES

    async def fetch(self, address: AddressParts) -> list[Sale]:
        api_key = self.require_api_key("ATTOM_API_KEY")
        data = await self.get_json(
            f"{ATTOM_BASE_URL}/saleshistory/detail",
            params={"address1": address.street, "address2": address.city_state},
            headers={"apikey": api_key},
        )

        properties = data.get("property") if isinstance(data, dict) else None
        history = []
        if isinstance(properties, list) and properties and isinstance(properties[0], dict):
            history = properties[0].get("saleHistory") or []

        sales = [parse_attom_sale(record) for record in history if isinstance(record, dict)]
        sales = [s for s in sales if s.sale_price is not None or s.sale_date is not None]
        if not sales:
            raise SourceNoDataError(self.source_id, "no recorded sales for address")

        sales.sort(key=lambda s: s.sale_date.toordinal() if s.sale_date else 0, reverse=True)
        return sales
