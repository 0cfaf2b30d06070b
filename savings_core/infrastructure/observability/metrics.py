"""Prometheus metrics for charge settlement, deposit limits and account numbering"""

from prometheus_client import Counter, Histogram

# Charge metrics
charge_settled_counter = Counter(
    "savings_charge_settled_total",
    "Charges settled on transactions",
    ["vat"],  # applied | not_applied
)

unmatched_slab_counter = Counter(
    "savings_unmatched_slab_total",
    "Fee lookups with no slab covering the amount",
)

# Limit metrics
limit_breach_counter = Counter(
    "savings_limit_breach_total",
    "Deposits exceeding a classification limit",
    ["limit"],
)

# Account numbering metrics
account_number_counter = Counter(
    "savings_account_number_generated_total",
    "Account numbers generated",
    ["product_type"],
)

sequence_allocation_failures_counter = Counter(
    "savings_sequence_allocation_failures_total",
    "Failed account sequence allocations",
)

sequence_allocation_latency_histogram = Histogram(
    "savings_sequence_allocation_seconds",
    "Account sequence upsert latency",
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 1.0, 5.0],
)


def record_charge(vat_applied: bool) -> None:
    """Record a settled charge by VAT outcome"""
    charge_settled_counter.labels(vat="applied" if vat_applied else "not_applied").inc()
