"""Centralized constants for RiskWatch."""


# ===== AUDIT =====
class AuditConstants:
    QUEUE_SIZE = 10000
    FLUSH_TIMEOUT_SECONDS = 5.0
    RETRY_ATTEMPTS = 3
    RETRY_MIN_WAIT_SECONDS = 0.5
    RETRY_MAX_WAIT_SECONDS = 8.0
    HASH_ALGORITHM = "sha256"
    SYSTEM_ACTOR = None


# ===== RISK SCORING =====
class ScoringConstants:
    # Inclusive upper bounds of the Low/Medium/High bands; anything above
    # HIGH_MAX is Critical.
    LOW_MAX = 5
    MEDIUM_MAX = 12
    HIGH_MAX = 20

    # Impact x likelihood matrix
    RANK_MIN = 1
    RANK_MAX = 5
    MATRIX_MIN = RANK_MIN * RANK_MIN
    MATRIX_MAX = RANK_MAX * RANK_MAX


# ===== BASE-SCORE ESTIMATOR =====
class EstimatorConstants:
    DEFAULT_TIMEOUT_SECONDS = 10.0

    # Conservative score used when the estimator is unavailable
    DEFAULT_OVERALL = 25
    DEFAULT_COMPONENTS = {
        "physical_security": 20,
        "cyber_security": 30,
        "access_control": 15,
        "environmental_risk": 25,
        "personnel_risk": 20,
    }
    DEFAULT_CONFIDENCE = 85
    DEFAULT_NEXT_WEEK = 26
    DEFAULT_NEXT_MONTH = 24

    # Prediction drift by trend: (next week, next month)
    PREDICTION_DRIFT = {
        "improving": (-0.05, -0.10),
        "stable": (0.0, 0.0),
        "deteriorating": (0.05, 0.10),
    }


# ===== ASSET DEFAULTS =====
class AssetConstants:
    NEXT_AUDIT_DAYS = 90
    DEFAULT_COMPLIANCE_SCORE = 90
    DEFAULT_LAST_INCIDENT = "None"


# ===== QUERY =====
class QueryConstants:
    FILTER_ALL = "all"
    DEFAULT_RISK_SORT = "risk_score"
    DEFAULT_ASSET_SORT = "overall_score"
    LOAD_ERROR_MESSAGE = "Failed to load risk data"
    ASSET_LOAD_ERROR_MESSAGE = "Failed to load asset data"
