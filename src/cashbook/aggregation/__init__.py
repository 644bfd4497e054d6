from cashbook.aggregation.engine import AggregationRow, aggregate, count_orphans

__all__ = ["AggregationRow", "aggregate", "count_orphans"]
