from __future__ import annotations

from decimal import Decimal

from .models import Property


ZERO = Decimal("0.00")


class PropertyService:
    @staticmethod
    def create(**values) -> Property:
        values.setdefault("amount_paid", ZERO)
        return Property.objects.create(**values)

    @staticmethod
    def overview(properties) -> dict:
        """Investment is what buys cost, revenue is what sells brought in."""
        total = buy = sell = 0
        investment = revenue = pending = area = ZERO
        for item in properties:
            total += 1
            if item.property_type == Property.Type.BUY:
                buy += 1
                investment += item.total_cost
            else:
                sell += 1
                revenue += item.amount_paid
            pending += item.amount_pending
            area += item.area

        return {
            "total_properties": total,
            "buy_properties": buy,
            "sell_properties": sell,
            "total_investment": investment,
            "total_revenue": revenue,
            "total_pending": pending,
            "total_area": area,
            "total_profit": revenue - investment,
        }
