from services.credential_service import CredentialService
from utilities.validation_util import MAX_PASSWORD_STRENGTH, ValidationUtility
from domain.credential import DEFAULT_STATUS, utcnow
from collections import Counter
from datetime import datetime
import logging

logger = logging.getLogger(__name__)

STRONG_PASSWORD_LEVEL = 4
RECENT_UPDATE_DAYS = 180
AGE_BUCKETS = (
    (30, "< 30 days"),
    (90, "30-90 days"),
    (180, "90-180 days"),
    (365, "180-365 days"),
)
OLDEST_BUCKET = "> 365 days"


def _percent(part: int, total: int) -> int:
    return round(part / total * 100) if total else 0


def age_bucket(age_days: int) -> str:
    for upper_bound, label in AGE_BUCKETS:
        if age_days <= upper_bound:
            return label
    return OLDEST_BUCKET


class HealthService:
    """Aggregate health figures for the dashboard charts."""

    def __init__(self, credential_service: CredentialService):
        self.credential_service = credential_service

    def summarize(self, user_id: int, now: datetime | None = None) -> dict:
        now = now or utcnow()
        credentials = self.credential_service.search_credentials(user_id, "")
        total = len(credentials)

        strength_levels = [0] * (MAX_PASSWORD_STRENGTH + 1)
        age_counts = Counter()
        update_history = Counter()
        strong = recent = active = 0

        for credential in credentials:
            strength = ValidationUtility.password_strength(credential.password)
            strength_levels[strength] += 1
            if strength >= STRONG_PASSWORD_LEVEL:
                strong += 1

            last_changed = credential.last_changed or now
            age_days = (now - last_changed).days
            age_counts[age_bucket(age_days)] += 1
            if age_days <= RECENT_UPDATE_DAYS:
                recent += 1
            update_history[last_changed.strftime('%Y-%m-%d')] += 1

            if credential.status == DEFAULT_STATUS:
                active += 1

        overall = round((strong * 0.4 + recent * 0.3 + active * 0.3) / total * 100) if total else 0

        logger.info(f"HEALTH_SERVICE: Summary for user_id {user_id}: {total} credentials, overall {overall}%.")
        return {
            "total": total,
            "passwordStrength": [
                {"strength": f"Level {level}", "count": count} for level, count in enumerate(strength_levels)
            ],
            "accountTypes": dict(Counter(c.account_type for c in credentials)),
            "statuses": dict(Counter(c.status for c in credentials)),
            "ages": dict(age_counts),
            "strongPasswords": strong,
            "recentlyUpdated": recent,
            "activeStatus": active,
            "securityScores": {
                "passwordStrength": _percent(strong, total),
                "updateFrequency": _percent(recent, total),
                "accountStatus": _percent(active, total),
            },
            "overallHealth": overall,
            "updateHistory": [
                {"date": date, "count": count} for date, count in sorted(update_history.items())
            ],
        }
