"""Balance Service - chart rows for the group balance bar chart."""
from typing import Any, Dict, List

from splitboard.splitwise.schemas import Group


class BalanceService:
    """Turns a group snapshot into one signed amount per member."""

    @classmethod
    def chart_rows(cls, group: Group, currency: str) -> List[Dict[str, Any]]:
        """
        Args:
            group: Group snapshot from Splitwise
            currency: Currency code to chart; other currencies are ignored

        Returns:
            [{"id", "name", "amount"}] in member order. Positive amounts are
            owed to the member, negative amounts are owed by them.
        """
        rows = []
        for member in group.members:
            balance = member.balance_in(currency)
            rows.append({
                "id": member.id,
                "name": member.first_name,
                "amount": float(balance.amount) if balance else 0.0,
            })
        return rows

    @classmethod
    def summary(cls, group: Group, currency: str) -> Dict[str, Any]:
        return {
            "group_id": group.id,
            "name": group.name,
            "currency": currency,
            "members": cls.chart_rows(group, currency),
        }
