"""Script to verify the Splitwise API key and list the groups it can see."""
import sys

from dotenv import load_dotenv

load_dotenv()

from splitboard.errors import SplitboardError
from splitboard.splitwise.client import SplitwiseService


def check_groups():
    """Fetch groups with the configured key and print their balances."""
    service = SplitwiseService()

    print("=" * 50)
    print("Testing Splitwise API - get_groups")
    print("=" * 50)
    print(f"URL: {service.base_url}/get_groups")
    print("-" * 50)

    try:
        groups = service.fetch_groups()
    except SplitboardError as e:
        print(f"[ERROR] {e!r}")
        return None

    for group in groups:
        print(f"[{group.id}] {group.name}")
        for member in group.members:
            balances = ", ".join(f"{b.amount} {b.currency_code}" for b in member.balance) or "settled"
            print(f"    {member.full_name}: {balances}")
    return groups


if __name__ == "__main__":
    result = check_groups()
    if result is None:
        sys.exit(1)
    print("\n" + "=" * 50)
    print(f"Splitwise API is working: {len(result)} group(s)")
    print("=" * 50)
