"""
Constants for property_command package.

Centralizes thresholds, confidence values and configuration defaults.
"""

# Address recognition
MIN_ADDRESS_LENGTH = 3  # Inputs shorter than this are never addresses
ADDRESS_ROUTING_THRESHOLD = 0.6  # Recognized addresses must score above this
MAX_ADDRESS_CONFIDENCE = 0.99
COMMON_SUFFIX_BOOST = 0.05
SHORT_STREET_PENALTY = 0.10
SHORT_STREET_LENGTH = 4  # Street names shorter than this are penalized
HEURISTIC_ADDRESS_CONFIDENCE = 0.7  # Leading digits + street suffix anywhere

# Command classification thresholds (a stage must score strictly above these)
CONTEXT_RULE_THRESHOLD = 0.7
GENERAL_RULE_THRESHOLD = 0.6

# Command classification confidences
NAVIGATION_CONFIDENCE = 0.9
HELP_CONFIDENCE = 0.8
CREATE_CONFIDENCE = 0.7
SEARCH_CONFIDENCE = 0.5

# Aggregation
MAX_FALLBACK_DEPTH = 1  # Primary source + at most one fallback per category

# HTTP defaults
DEFAULT_HTTP_TIMEOUT = 15.0  # seconds per source request
USER_AGENT = "property_command/0.1 (public property data lookup)"

# Cache TTL (Time To Live) in hours
# Third-party property data changes often, so keep this short
CACHE_TTL_PROPERTY_DATA = 6
CACHE_NAMESPACE_PROPERTY_DATA = "property_data"

# Parallel processing defaults
DEFAULT_LOOKUP_CONCURRENCY = 4  # Addresses aggregated at once by the batch script
