"""Run the stats pipeline on a small in-memory collection and print each stage.

    python examples/example_stats.py
"""

from entitystats import StatsState, format_stats_summary_to_str, get_grouping, run_stats
from entitystats.utils.logging import configure_logging

configure_logging(level="DEBUG")

records = [
    {"provider": "acme", "version": "2.0", "categories": ["cloud"], "paths": 12, "tags": 3,
     "definitions": 20, "methods": {"get": 10, "post": 4}, "summaries": 8, "summariesLength": 240,
     "descriptions": 6, "descriptionsLength": 900},
    {"provider": "acme", "version": "3.0", "categories": ["cloud", "storage"], "paths": 4, "tags": 1,
     "definitions": 6, "methods": {"get": 4}, "summaries": 0, "summariesLength": 0,
     "descriptions": 2, "descriptionsLength": 150},
    {"provider": "globex", "version": "2.0", "categories": ["email"], "paths": 7, "tags": 2,
     "definitions": 11, "methods": {"get": 5, "delete": 2}, "summaries": 5, "summariesLength": 110,
     "descriptions": 0, "descriptionsLength": 0},
    {"provider": "initech", "version": "3.0", "categories": ["analytics"], "paths": 30, "tags": 9,
     "definitions": 55, "methods": {"get": 20, "post": 9, "put": 3}, "summaries": 25,
     "summariesLength": 800, "descriptions": 19, "descriptionsLength": 2400},
]

state = StatsState(pick_top=2)
result = run_stats(records, state)
print(format_stats_summary_to_str(result, state))

print()
state.set_counting(get_grouping("method"))
result = run_stats(records, state)
print("--- Counting by method (no histogram: not numeric) ---")
for bucket in result.counted:
    print(bucket.title, bucket.total, bucket.counts)
