"""Default categorization and sign-inference rules."""

from typing import Any

from momo_press.models import NameRule, NormalizationRules

# TransactionType (lowercase) -> (display category, icon)
DEFAULT_CATEGORIES: dict[str, tuple[str, str]] = {
    "deposit": ("Income", "hand-holding-dollar"),
    "payment": ("Merchant", "store"),
    "transfer": ("Transfers", "arrow-right-arrow-left"),
    "other": ("Others", "circle-question"),
    "utilities": ("Utilities", "bolt"),
    "subscriptions": ("Subscriptions", "file-invoice-dollar"),
    "loans": ("Loans", "money-bill-wave"),
    "credit card": ("Credit Card", "credit-card"),
    "insurance": ("Insurance", "shield-alt"),
    "donations": ("Donations", "hand-holding-heart"),
    "taxes": ("Taxes", "receipt"),
    "memberships": ("Memberships", "users"),
    "gym": ("Gym", "dumbbell"),
}

# Categories treated as debits when the message text gives no signal
DEFAULT_OUTGOING_CATEGORIES: frozenset[str] = frozenset({
    "bills",
    "bundles",
    "unknown",
    "other",
    "utilities",
    "subscriptions",
    "loans",
    "credit card",
    "insurance",
    "donations",
    "taxes",
    "memberships",
    "gym",
    "merchant",
})

DEFAULT_NAME_RULES: tuple[NameRule, ...] = (
    NameRule(
        pattern="linda",
        effect="outgoing",
        note="Carried over from the app's export data; origin unknown.",
    ),
)

# Message prefixes/substrings, checked against lowercase MessageText
INCOMING_PREFIXES = ("you have received",)
INCOMING_SUBSTRINGS = ("deposit",)
OUTGOING_PREFIXES = ("your payment of", "transferred to")

STATUS_CONFIRMED = "confirmed"
STATUS_COMPLETED_LABEL = "Completed"
STATUS_ICON_OK = "circle-check"
STATUS_ICON_FAILED = "circle-xmark"


def default_rules() -> NormalizationRules:
    """Return the built-in rule set."""
    return NormalizationRules(
        categories=dict(DEFAULT_CATEGORIES),
        outgoing_categories=DEFAULT_OUTGOING_CATEGORIES,
        name_rules=DEFAULT_NAME_RULES,
    )


def map_category(transaction_type: str, rules: NormalizationRules | None = None) -> tuple[str, str]:
    """Map a raw TransactionType to (category, icon)."""
    if rules is None:
        rules = default_rules()
    return rules.category_for(transaction_type)


def rules_from_dict(data: dict[str, Any] | None) -> NormalizationRules:
    """
    Build rules from the ``rules`` section of the config.

    Each key present replaces the matching default; absent keys keep
    the built-in values.

    Args:
        data: Mapping with optional ``categories``, ``outgoing_categories``
            and ``name_rules`` keys

    Returns:
        NormalizationRules

    Raises:
        ValueError: If a category entry or name rule is malformed
    """
    rules = default_rules()
    if not data:
        return rules

    categories = rules.categories
    if "categories" in data:
        categories = {}
        for key, value in data["categories"].items():
            if len(value) != 2:
                raise ValueError(f"Category {key!r} must be [category, icon], got {value!r}")
            categories[key.lower()] = (str(value[0]), str(value[1]))

    outgoing = rules.outgoing_categories
    if "outgoing_categories" in data:
        outgoing = frozenset(str(c).lower() for c in data["outgoing_categories"])

    name_rules = rules.name_rules
    if "name_rules" in data:
        name_rules = tuple(
            NameRule(
                pattern=r["pattern"],
                effect=r.get("effect", "outgoing"),
                note=r.get("note", ""),
            )
            for r in data["name_rules"]
        )

    return NormalizationRules(
        categories=categories,
        outgoing_categories=outgoing,
        name_rules=name_rules,
    )
