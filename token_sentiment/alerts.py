"""
Alert Detector - Flags strong directional sentiment on current signals.

An alert fires when |score| and confidence both clear their thresholds.
Severity grows with |score|.
"""

import logging
from typing import Iterable, Optional

from .config import AlertThresholds
from .models import (
    AlertSeverity,
    AlertType,
    SentimentAlert,
    TokenSignal,
)


logger = logging.getLogger(__name__)


class AlertDetector:
    """Builds SentimentAlert records from token signals."""

    def __init__(self, thresholds: Optional[AlertThresholds] = None) -> None:
        self.thresholds = thresholds or AlertThresholds()

    def detect(
        self,
        signals: Iterable[TokenSignal],
        severity: Optional[AlertSeverity] = None,
    ) -> list[SentimentAlert]:
        """
        Alerts for the given signals, most severe first.

        Args:
            signals: Current signals to inspect
            severity: Keep only alerts of this severity

        Returns:
            Alerts sorted by severity, then by |score|
        """
        alerts = [a for a in map(self.evaluate, signals) if a is not None]

        if severity is not None:
            alerts = [a for a in alerts if a.severity == severity]

        alerts.sort(key=lambda a: (a.severity.rank, abs(a.score)), reverse=True)
        return alerts

    def evaluate(self, signal: TokenSignal) -> Optional[SentimentAlert]:
        t = self.thresholds
        magnitude = abs(signal.score)
        if magnitude <= t.min_abs_score or signal.confidence <= t.min_confidence:
            return None

        if magnitude > t.high_abs_score:
            severity = AlertSeverity.HIGH
        elif magnitude > t.medium_abs_score:
            severity = AlertSeverity.MEDIUM
        else:
            severity = AlertSeverity.LOW

        if signal.score > 0:
            alert_type = AlertType.BULLISH_SURGE
            message = f"Strong bullish sentiment for {signal.token} (+{signal.score})"
        else:
            alert_type = AlertType.BEARISH_DUMP
            message = f"Strong bearish sentiment for {signal.token} ({signal.score})"

        return SentimentAlert(
            token=signal.token,
            alert_type=alert_type,
            severity=severity,
            score=signal.score,
            confidence=signal.confidence,
            volume=signal.volume,
            message=message,
            timestamp=signal.timestamp,
        )
