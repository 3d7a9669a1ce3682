"""Summary and aggregation domain service."""

from datetime import date, timedelta, tzinfo
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional, Sequence

from resaletrack.domain.currency import CENTS, to_sale_currency
from resaletrack.domain.entities import Person, SellerProfit, Transaction, WeeklySummary
from resaletrack.domain.week import local_date


class AggregationEngine:
    """Service for building weekly totals and per-person breakdowns.

    Inputs are already week-partitioned and filtered by the caller.
    """

    def weekly_summary(
        self, transactions: Iterable[Transaction], rate: Decimal
    ) -> WeeklySummary:
        """Total a week of transactions.

        The purchase total converts each purchase price at ``rate`` (the
        live rate), while the profit total adds up the profits stored when
        each record was written. The two can disagree after a rate change.

        Args:
            transactions: Pre-filtered transactions
            rate: Exchange rate read once by the caller

        Returns:
            WeeklySummary with CZK totals and the record count
        """
        purchase_total = Decimal("0")
        sale_total = Decimal("0")
        profit_total = Decimal("0")
        count = 0
        for txn in transactions:
            purchase_total += to_sale_currency(txn.purchase_price_pln, rate)
            sale_total += txn.selling_price_czk
            profit_total += txn.net_profit_czk
            count += 1
        return WeeklySummary(
            purchase_total=purchase_total.quantize(CENTS, rounding=ROUND_HALF_UP),
            sale_total=sale_total.quantize(CENTS, rounding=ROUND_HALF_UP),
            profit_total=profit_total.quantize(CENTS, rounding=ROUND_HALF_UP),
            count=count,
        )

    def per_seller_profit(
        self, transactions: Iterable[Transaction], sellers: Sequence[Person]
    ) -> list[SellerProfit]:
        """Sum stored profit per known seller, in seller order.

        Sellers without transactions appear with zero profit. Transactions
        naming an unknown seller are not counted.
        """
        totals: dict[str, Decimal] = {}
        for txn in transactions:
            totals[txn.seller] = totals.get(txn.seller, Decimal("0")) + txn.net_profit_czk
        return [
            SellerProfit(
                seller_name=seller.name,
                profit=totals.get(seller.name, Decimal("0")).quantize(CENTS, rounding=ROUND_HALF_UP),
            )
            for seller in sellers
        ]

    def delivery_schedule(
        self,
        transactions: Iterable[Transaction],
        driver: str,
        week_start: date,
        tz: Optional[tzinfo] = None,
    ) -> list[Transaction]:
        """A driver's deliveries created during the week starting at ``week_start``.

        Only records with a destination count as deliveries. The week is
        judged by creation time, not sale date, taken as a calendar date in
        ``tz`` (the local zone by default).
        """
        week_end = week_start + timedelta(days=7)
        deliveries = [
            txn
            for txn in transactions
            if txn.driver == driver
            and txn.destination
            and txn.created_at is not None
            and week_start <= local_date(txn.created_at, tz) < week_end
        ]
        return sorted(deliveries, key=lambda txn: txn.created_at)
