# sholat/metrics.py

from prometheus_client import Counter, Histogram

# Cache Metrics
CACHE_HITS = Counter('sholat_cache_hits_total', 'Total schedule cache hits', ['store'])
CACHE_MISSES = Counter('sholat_cache_misses_total', 'Total schedule cache misses', ['store', 'reason'])
CACHE_ERRORS = Counter('sholat_cache_errors_total', 'Schedule cache store failures', ['store', 'operation'])

# Calculation Metrics
SCHEDULE_COMPUTATIONS_TOTAL = Counter(
    'sholat_schedule_computations_total', 'Prayer schedule computations', ['outcome']
)
SCHEDULE_COMPUTATION_DURATION_SECONDS = Histogram(
    'sholat_schedule_computation_duration_seconds', 'Prayer schedule computation duration in seconds'
)
